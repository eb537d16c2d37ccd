"""
Player Statistics
=================
Single source of truth for per-player statistics and the leaderboard.
Used by the CLI, DataFrame exports and score-entry consumers.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Sequence, Set

import pandas as pd

from americano.models.schedule import GeneratedRound
from americano.utils.logging_setup import get_logger

logger = get_logger("americano.solver.stats")


class ScoringMode(str, Enum):
    POINTS = "points"    # Both scores entered per match
    WINLOSS = "winloss"  # Only the winning team entered


@dataclass
class PlayerStats:
    """Statistics for a single player."""
    player_id: str
    games_played: int = 0
    games_paused: int = 0
    points: int = 0
    wins: int = 0
    losses: int = 0
    point_differential: int = 0

    partners: Set[str] = field(default_factory=set)
    opponents: Set[str] = field(default_factory=set)

    @property
    def distinct_partners(self) -> int:
        return len(self.partners)

    @property
    def distinct_opponents(self) -> int:
        return len(self.opponents)


@dataclass
class LeaderboardEntry:
    rank: int
    name: str
    stats: PlayerStats


def calculate_player_stats(
    rounds: Sequence[GeneratedRound],
    player_ids: Sequence[str],
    scoring_mode: ScoringMode = ScoringMode.POINTS,
) -> List[PlayerStats]:
    """
    Calculate statistics for every player, in roster order.

    Matches without entered results still count as games played.

    Args:
        rounds: Rounds played so far
        player_ids: Roster
        scoring_mode: How match results are read

    Returns:
        List of PlayerStats, one per player
    """
    stats = {pid: PlayerStats(player_id=pid) for pid in player_ids}

    for r in rounds:
        for pid in r.paused_player_ids:
            stats[pid].games_paused += 1

        for m in r.matches:
            for pid in m.players:
                s = stats[pid]
                side = m.team_of(pid)
                s.games_played += 1
                s.partners.add(m.partner_of(pid))
                s.opponents.update(m.opponents_of(pid))

                if scoring_mode == ScoringMode.POINTS:
                    if m.score1 is None or m.score2 is None:
                        continue
                    mine, theirs = (m.score1, m.score2) if side == 1 else (m.score2, m.score1)
                    s.points += mine
                    s.point_differential += mine - theirs
                    if mine > theirs:
                        s.wins += 1
                    elif mine < theirs:
                        s.losses += 1
                elif m.winner is not None:
                    if m.winner == side:
                        s.wins += 1
                        s.points += 1
                    else:
                        s.losses += 1

    logger.debug(f"Calculated stats for {len(stats)} players over {len(rounds)} rounds")
    return [stats[pid] for pid in player_ids]


def leaderboard(
    stats: Sequence[PlayerStats],
    names: Optional[Dict[str, str]] = None,
) -> List[LeaderboardEntry]:
    """
    Rank players: points, wins, point differential (all descending), then name.

    Args:
        stats: Per-player statistics
        names: Display names by player id (defaults to the id)
    """
    names = names or {}

    def display(s: PlayerStats) -> str:
        return names.get(s.player_id, s.player_id)

    ordered = sorted(
        stats,
        key=lambda s: (-s.points, -s.wins, -s.point_differential, display(s).casefold()),
    )
    return [LeaderboardEntry(rank=i + 1, name=display(s), stats=s) for i, s in enumerate(ordered)]


def stats_to_frame(stats: Sequence[PlayerStats]) -> pd.DataFrame:
    """Convert stats to a DataFrame, one row per player."""
    return pd.DataFrame(
        [
            {
                "player": s.player_id,
                "games_played": s.games_played,
                "games_paused": s.games_paused,
                "distinct_partners": s.distinct_partners,
                "distinct_opponents": s.distinct_opponents,
                "points": s.points,
                "wins": s.wins,
                "losses": s.losses,
                "point_differential": s.point_differential,
            }
            for s in stats
        ],
        columns=[
            "player", "games_played", "games_paused", "distinct_partners", "distinct_opponents",
            "points", "wins", "losses", "point_differential",
        ],
    )
