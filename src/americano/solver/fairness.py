"""
Fairness Analysis
=================
Schedule-level fairness metrics, partner/opponent frequency matrices and
good/warn/bad classification for reporting.
"""
from dataclasses import dataclass
from enum import Enum
from itertools import combinations
from statistics import pstdev
from typing import Dict, List, Sequence, Tuple

import pandas as pd

from americano.models.schedule import GeneratedSchedule
from americano.solver.history import history_from_rounds
from americano.utils.logging_setup import get_logger

logger = get_logger("americano.solver.fairness")

Matrix = List[List[int]]


@dataclass
class FairnessMetrics:
    """Fairness of one schedule over its roster."""
    games_played_std_dev: float = 0.0
    pause_count_std_dev: float = 0.0
    max_games_gap: int = 0       # max - min games played
    max_pause_gap: int = 0       # max - min pauses
    partner_variety_index: float = 0.0   # 1.0 = new partner every game
    opponent_variety_index: float = 0.0  # 1.0 = new opponents every game
    max_partner_gap: int = 0     # max - min partnership count over roster pairs
    max_opponent_gap: int = 0    # max - min encounter count over roster pairs

    def as_dict(self) -> Dict[str, float]:
        return {
            "gamesPlayedStdDev": self.games_played_std_dev,
            "pauseCountStdDev": self.pause_count_std_dev,
            "maxGamesGap": self.max_games_gap,
            "maxPauseGap": self.max_pause_gap,
            "partnerVarietyIndex": self.partner_variety_index,
            "opponentVarietyIndex": self.opponent_variety_index,
            "maxPartnerGap": self.max_partner_gap,
            "maxOpponentGap": self.max_opponent_gap,
        }


class FairnessLevel(str, Enum):
    GOOD = "good"
    WARN = "warn"
    BAD = "bad"


def _gap(values: Sequence[int]) -> int:
    return max(values) - min(values) if values else 0


def _variety(distinct: Dict[str, set], possible: Dict[str, int]) -> float:
    ratios = [len(distinct[pid]) / possible[pid] for pid in possible if possible[pid] > 0]
    return sum(ratios) / len(ratios) if ratios else 0.0


def compute_fairness_metrics(schedule: GeneratedSchedule, player_ids: Sequence[str]) -> FairnessMetrics:
    """
    Compute fairness metrics for a schedule.

    Variety indices average, over players with at least one game, the
    number of distinct partners (opponents) divided by the most that were
    possible: min(games, n-1) partners, min(2*games, n-1) opponents.

    Args:
        schedule: Generated schedule
        player_ids: Roster the schedule was generated for

    Returns:
        FairnessMetrics
    """
    n = len(player_ids)
    games = {pid: 0 for pid in player_ids}
    pauses = {pid: 0 for pid in player_ids}
    partners: Dict[str, set] = {pid: set() for pid in player_ids}
    opponents: Dict[str, set] = {pid: set() for pid in player_ids}

    for r in schedule.rounds:
        for pid in r.paused_player_ids:
            pauses[pid] += 1
        for m in r.matches:
            for pid in m.players:
                games[pid] += 1
                partners[pid].add(m.partner_of(pid))
                opponents[pid].update(m.opponents_of(pid))

    history = history_from_rounds(player_ids, schedule.rounds)
    pair_partner_counts = [history.partner_count(a, b) for a, b in combinations(player_ids, 2)]
    pair_opponent_counts = [history.opponent_count(a, b) for a, b in combinations(player_ids, 2)]

    game_values = list(games.values())
    pause_values = list(pauses.values())

    metrics = FairnessMetrics(
        games_played_std_dev=pstdev(game_values) if n > 0 else 0.0,
        pause_count_std_dev=pstdev(pause_values) if n > 0 else 0.0,
        max_games_gap=_gap(game_values),
        max_pause_gap=_gap(pause_values),
        partner_variety_index=_variety(partners, {pid: min(games[pid], n - 1) for pid in player_ids}),
        opponent_variety_index=_variety(opponents, {pid: min(2 * games[pid], n - 1) for pid in player_ids}),
        max_partner_gap=_gap(pair_partner_counts),
        max_opponent_gap=_gap(pair_opponent_counts),
    )
    logger.debug(f"Fairness: {metrics.as_dict()}")
    return metrics


def build_matrices(schedule: GeneratedSchedule, player_ids: Sequence[str]) -> Tuple[Matrix, Matrix]:
    """
    Symmetric partner and opponent frequency matrices in roster order.

    Returns:
        (partner_matrix, opponent_matrix), diagonal 0
    """
    index = {pid: i for i, pid in enumerate(player_ids)}
    n = len(player_ids)
    partner_matrix = [[0] * n for _ in range(n)]
    opponent_matrix = [[0] * n for _ in range(n)]

    for r in schedule.rounds:
        for m in r.matches:
            for a, b in (m.team1, m.team2):
                i, j = index[a], index[b]
                partner_matrix[i][j] += 1
                partner_matrix[j][i] += 1
            for a in m.team1:
                for b in m.team2:
                    i, j = index[a], index[b]
                    opponent_matrix[i][j] += 1
                    opponent_matrix[j][i] += 1

    return partner_matrix, opponent_matrix


def matrix_frame(matrix: Matrix, labels: Sequence[str]) -> pd.DataFrame:
    """Labelled DataFrame view of a frequency matrix."""
    return pd.DataFrame(matrix, index=list(labels), columns=list(labels))


def _level_at_most(value: float, good: float, warn: float) -> FairnessLevel:
    if value <= good:
        return FairnessLevel.GOOD
    if value <= warn:
        return FairnessLevel.WARN
    return FairnessLevel.BAD


def _level_at_least(value: float, good: float, warn: float) -> FairnessLevel:
    if value >= good:
        return FairnessLevel.GOOD
    if value >= warn:
        return FairnessLevel.WARN
    return FairnessLevel.BAD


def metric_levels(metrics: FairnessMetrics) -> Dict[str, FairnessLevel]:
    """Classify each metric, keyed like FairnessMetrics.as_dict()."""
    return {
        "gamesPlayedStdDev": _level_at_most(metrics.games_played_std_dev, 0.5, 1),
        "pauseCountStdDev": _level_at_most(metrics.pause_count_std_dev, 0.5, 1),
        "maxGamesGap": _level_at_most(metrics.max_games_gap, 1, 2),
        "maxPauseGap": _level_at_most(metrics.max_pause_gap, 1, 2),
        "partnerVarietyIndex": _level_at_least(metrics.partner_variety_index, 0.8, 0.6),
        "opponentVarietyIndex": _level_at_least(metrics.opponent_variety_index, 0.8, 0.6),
        "maxPartnerGap": _level_at_most(metrics.max_partner_gap, 1, 2),
        "maxOpponentGap": _level_at_most(metrics.max_opponent_gap, 1, 3),
    }
