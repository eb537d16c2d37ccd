"""
Business Rules and Constants
============================
Central source of truth for court size, repeat penalties, search limits and
setup bounds.
"""
from dataclasses import dataclass

PLAYERS_PER_COURT = 4

# Cost weights: partner repeats hurt perceived fairness more than opponent repeats
PARTNER_REPEAT_PENALTY = 10
OPPONENT_REPEAT_PENALTY = 3

# Optimal (backtracking) partner matching only runs up to this many active players.
# 12 active players = 3 courts, ~10k branches. 16 = ~2M branches.
OPTIMAL_ACTIVE_PLAYERS_THRESHOLD = 12

# Max node expansions for one backtracking partner search. With the lower-bound
# pruning a 12-player round rarely needs more than a few hundred.
BACKTRACK_NODE_BUDGET = 2_000

MONTE_CARLO_DEFAULT_ITERATIONS = 200

# Open-ended tournaments: extend by a batch when fewer rounds than the threshold remain
OPEN_ENDED_BATCH_SIZE = 30
OPEN_ENDED_EXTEND_THRESHOLD = 5


@dataclass(frozen=True)
class RulesConfig:
    """Setup bounds enforced at the validation boundary."""

    min_players: int = 4
    max_players: int = 20
    min_courts: int = 1
    max_courts: int = 4
    min_rounds: int = 1
    max_rounds: int = 30
    min_iterations: int = 10
    max_iterations: int = 1000

    # Defaults
    default_courts: int = 2
    default_rounds: int = 10
    default_player_count: int = 8


RULES = RulesConfig()
