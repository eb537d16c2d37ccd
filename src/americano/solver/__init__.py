# americano/solver - Americano doubles scheduling engine
from .fairness import (
    FairnessLevel,
    FairnessMetrics,
    build_matrices,
    compute_fairness_metrics,
    matrix_frame,
    metric_levels,
)
from .generator import (
    GenStats,
    extend_open_ended,
    generate_additional_rounds,
    generate_schedule,
    generate_schedule_greedy,
    needs_extension,
    rebuild_state,
)
from .history import MatchHistory, create_empty_history, update_history
from .montecarlo import generate_additional_rounds_monte_carlo, generate_schedule_monte_carlo
from .opponents import assign_opponents
from .partners import PairingResult, form_partner_pairs, form_partner_pairs_optimal
from .pauses import PauseState, initial_pause_state, select_paused_players, update_pause_state
from .scoring import score_arrangement, total_extension_cost, total_schedule_cost
from .simulator import SimulatorResult, run_simulation
from .stats import PlayerStats, ScoringMode, calculate_player_stats, leaderboard, stats_to_frame

__all__ = [
    "generate_schedule",
    "generate_schedule_greedy",
    "generate_schedule_monte_carlo",
    "generate_additional_rounds",
    "generate_additional_rounds_monte_carlo",
    "needs_extension",
    "extend_open_ended",
    "rebuild_state",
    "GenStats",
    "MatchHistory",
    "create_empty_history",
    "update_history",
    "PauseState",
    "initial_pause_state",
    "select_paused_players",
    "update_pause_state",
    "form_partner_pairs",
    "form_partner_pairs_optimal",
    "PairingResult",
    "assign_opponents",
    "score_arrangement",
    "total_schedule_cost",
    "total_extension_cost",
    "compute_fairness_metrics",
    "build_matrices",
    "matrix_frame",
    "metric_levels",
    "FairnessMetrics",
    "FairnessLevel",
    "calculate_player_stats",
    "leaderboard",
    "stats_to_frame",
    "PlayerStats",
    "ScoringMode",
    "run_simulation",
    "SimulatorResult",
]
