"""Schedule, round and match models."""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd

Team = Tuple[str, str]


def _as_team(players, label: str) -> Team:
    team = tuple(players)
    if len(team) != 2:
        raise ValueError(f"{label} must have exactly 2 players, got {len(team)}")
    return team


@dataclass
class MatchAssignment:
    """Two partner pairs facing each other on one court."""
    court_index: int  # 0-based
    team1: Team
    team2: Team

    # Filled in later by score entry; the engine never reads them
    score1: Optional[int] = None
    score2: Optional[int] = None
    winner: Optional[int] = None  # 1 or 2

    def __post_init__(self):
        self.team1 = _as_team(self.team1, "team1")
        self.team2 = _as_team(self.team2, "team2")

    @property
    def players(self) -> List[str]:
        return [*self.team1, *self.team2]

    def team_of(self, player_id: str) -> Optional[int]:
        """1 or 2 if the player is on court, else None."""
        if player_id in self.team1:
            return 1
        if player_id in self.team2:
            return 2
        return None

    def partner_of(self, player_id: str) -> Optional[str]:
        side = self.team_of(player_id)
        if side is None:
            return None
        team = self.team1 if side == 1 else self.team2
        return team[1] if team[0] == player_id else team[0]

    def opponents_of(self, player_id: str) -> Optional[Team]:
        side = self.team_of(player_id)
        if side is None:
            return None
        return self.team2 if side == 1 else self.team1

    def __repr__(self):
        return f"Court {self.court_index + 1}: {self.team1[0]} & {self.team1[1]} vs {self.team2[0]} & {self.team2[1]}"

    def to_dict(self) -> Dict[str, Any]:
        d = {
            "courtIndex": self.court_index,
            "team1": list(self.team1),
            "team2": list(self.team2),
        }
        if self.score1 is not None:
            d["score1"] = self.score1
        if self.score2 is not None:
            d["score2"] = self.score2
        if self.winner is not None:
            d["winner"] = self.winner
        return d

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "MatchAssignment":
        return cls(
            court_index=int(d["courtIndex"]),
            team1=d["team1"],
            team2=d["team2"],
            score1=d.get("score1"),
            score2=d.get("score2"),
            winner=d.get("winner"),
        )


@dataclass
class GeneratedRound:
    """One round: a match per active court plus the players sitting out."""
    round_number: int  # 1-based
    matches: List[MatchAssignment] = field(default_factory=list)
    paused_player_ids: List[str] = field(default_factory=list)

    @property
    def active_player_ids(self) -> List[str]:
        return [p for m in self.matches for p in m.players]

    def match_for(self, player_id: str) -> Optional[MatchAssignment]:
        """The match a player is in this round, if any."""
        for m in self.matches:
            if m.team_of(player_id) is not None:
                return m
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "roundNumber": self.round_number,
            "matches": [m.to_dict() for m in self.matches],
            "pausedPlayerIds": list(self.paused_player_ids),
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "GeneratedRound":
        return cls(
            round_number=int(d["roundNumber"]),
            matches=[MatchAssignment.from_dict(m) for m in d.get("matches", [])],
            paused_player_ids=list(d.get("pausedPlayerIds", [])),
        )


@dataclass
class GenerationInfo:
    """Telemetry describing how a schedule was generated."""
    method: str  # "greedy" or "montecarlo"
    iterations: int
    use_optimal: bool
    optimal_disabled_reason: Optional[str]
    budget_exhausted_count: int
    total_backtrack_calls: int
    elapsed_ms: int
    stopped_early: bool = False  # Time limit or stop callback ended the search

    def to_dict(self) -> Dict[str, Any]:
        return {
            "method": self.method,
            "iterations": self.iterations,
            "useOptimal": self.use_optimal,
            "optimalDisabledReason": self.optimal_disabled_reason,
            "budgetExhaustedCount": self.budget_exhausted_count,
            "totalBacktrackCalls": self.total_backtrack_calls,
            "elapsedMs": self.elapsed_ms,
            "stoppedEarly": self.stopped_early,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "GenerationInfo":
        return cls(
            method=str(d.get("method", "greedy")),
            iterations=int(d.get("iterations", 1)),
            use_optimal=bool(d.get("useOptimal", False)),
            optimal_disabled_reason=d.get("optimalDisabledReason"),
            budget_exhausted_count=int(d.get("budgetExhaustedCount", 0)),
            total_backtrack_calls=int(d.get("totalBacktrackCalls", 0)),
            elapsed_ms=int(d.get("elapsedMs", 0)),
            stopped_early=bool(d.get("stoppedEarly", False)),
        )


@dataclass
class GeneratedSchedule:
    """Complete generated schedule."""

    rounds: List[GeneratedRound] = field(default_factory=list)
    info: Optional[GenerationInfo] = None

    @property
    def total_rounds(self) -> int:
        return len(self.rounds)

    def get_round(self, round_number: int) -> Optional[GeneratedRound]:
        for r in self.rounds:
            if r.round_number == round_number:
                return r
        return None

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"rounds": [r.to_dict() for r in self.rounds]}
        if self.info is not None:
            d["info"] = self.info.to_dict()
        return d

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "GeneratedSchedule":
        info = d.get("info")
        return cls(
            rounds=[GeneratedRound.from_dict(r) for r in d.get("rounds", [])],
            info=GenerationInfo.from_dict(info) if info else None,
        )

    def to_dataframe(self) -> pd.DataFrame:
        """Long-form table: one row per player per round."""
        columns = ["round", "player", "status", "court", "team", "partner", "opponents"]
        rows = []
        for r in self.rounds:
            for m in r.matches:
                for pid in m.players:
                    rows.append({
                        "round": r.round_number,
                        "player": pid,
                        "status": "play",
                        "court": m.court_index,
                        "team": m.team_of(pid),
                        "partner": m.partner_of(pid),
                        "opponents": " & ".join(m.opponents_of(pid)),
                    })
            for pid in r.paused_player_ids:
                rows.append({
                    "round": r.round_number,
                    "player": pid,
                    "status": "pause",
                    "court": None,
                    "team": None,
                    "partner": None,
                    "opponents": None,
                })
        if not rows:
            return pd.DataFrame(columns=columns)
        return pd.DataFrame(rows, columns=columns)
