"""
Pydantic Validated Models
=========================
Validation layer for schedule configuration at setup boundaries (CLI,
callers building a roster from user input). The engine itself trusts
ScheduleConfig.

Usage:
    from americano.models.validated import ValidatedScheduleConfig

    config = ValidatedScheduleConfig(player_ids=names, courts=2, total_rounds=10)
    schedule = generate_schedule(config.to_dataclass())
"""
from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .config import ScheduleConfig
from .rules import MONTE_CARLO_DEFAULT_ITERATIONS, RULES


class ValidatedScheduleConfig(BaseModel):
    """
    Pydantic-validated schedule configuration.

    Can be converted to/from the dataclass ScheduleConfig.
    """
    model_config = ConfigDict(validate_assignment=True)

    player_ids: List[str] = Field(
        min_length=RULES.min_players,
        max_length=RULES.max_players,
        description="Roster of unique player identifiers",
    )
    courts: int = Field(default=RULES.default_courts, ge=RULES.min_courts, le=RULES.max_courts)
    total_rounds: int = Field(default=RULES.default_rounds, ge=RULES.min_rounds, le=RULES.max_rounds)
    iterations: int = Field(
        default=MONTE_CARLO_DEFAULT_ITERATIONS,
        ge=RULES.min_iterations,
        le=RULES.max_iterations,
        description="Monte Carlo candidates to evaluate",
    )

    @field_validator("player_ids")
    @classmethod
    def validate_player_ids(cls, v: List[str]) -> List[str]:
        """Strip identifiers and reject blanks and duplicates."""
        cleaned = [str(p).strip() for p in v]
        if any(not p for p in cleaned):
            raise ValueError("player ids must not be blank")
        seen = set()
        dupes = set()
        for p in cleaned:
            if p in seen:
                dupes.add(p)
            seen.add(p)
        if dupes:
            raise ValueError(f"duplicate player ids: {', '.join(sorted(dupes))}")
        return cleaned

    @property
    def effective_courts(self) -> int:
        """Requested courts above what the roster fills are left idle."""
        return self.to_dataclass().effective_courts

    def to_dataclass(self) -> ScheduleConfig:
        """Convert to dataclass ScheduleConfig for the engine."""
        return ScheduleConfig(
            player_ids=list(self.player_ids),
            courts=self.courts,
            total_rounds=self.total_rounds,
        )

    @classmethod
    def from_dataclass(cls, config: ScheduleConfig) -> "ValidatedScheduleConfig":
        """Create from dataclass ScheduleConfig."""
        return cls(
            player_ids=list(config.player_ids),
            courts=config.courts,
            total_rounds=config.total_rounds,
        )
