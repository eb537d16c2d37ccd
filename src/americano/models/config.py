"""Schedule configuration."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List

from .rules import PLAYERS_PER_COURT


class GenerationMode(str, Enum):
    """How a schedule is generated."""
    GREEDY = "greedy"  # Single deterministic run
    MONTE_CARLO = "montecarlo"  # Best of many randomized runs


def effective_courts(player_count: int, courts: int) -> int:
    """Courts that can actually be filled with a roster of player_count."""
    return max(0, min(courts, player_count // PLAYERS_PER_COURT))


@dataclass
class ScheduleConfig:
    """Input to schedule generation."""

    player_ids: List[str] = field(default_factory=list)  # Roster; order may carry randomization
    courts: int = 1  # Requested courts
    total_rounds: int = 1

    @property
    def effective_courts(self) -> int:
        return effective_courts(len(self.player_ids), self.courts)

    @property
    def active_players(self) -> int:
        """Players on court each round."""
        return self.effective_courts * PLAYERS_PER_COURT

    @property
    def paused_per_round(self) -> int:
        return len(self.player_ids) - self.active_players

    def with_players(self, player_ids: List[str]) -> "ScheduleConfig":
        """Copy of this config with a different roster order."""
        return ScheduleConfig(
            player_ids=list(player_ids),
            courts=self.courts,
            total_rounds=self.total_rounds,
        )

    def to_dict(self) -> Dict:
        """Serialize to dictionary."""
        return {
            "playerIds": list(self.player_ids),
            "courts": self.courts,
            "totalRounds": self.total_rounds,
        }

    @classmethod
    def from_dict(cls, d: Dict) -> "ScheduleConfig":
        """Create from dictionary."""
        return cls(
            player_ids=list(d.get("playerIds", [])),
            courts=int(d.get("courts", 1)),
            total_rounds=int(d.get("totalRounds", 1)),
        )
