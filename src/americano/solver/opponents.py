"""
Opponent Assignment
===================
Greedy grouping of partner pairs into matches, one per court.
"""
import random
from typing import List, Optional, Sequence

from americano.models.schedule import MatchAssignment, Team
from americano.solver.history import MatchHistory
from americano.solver.scoring import cross_opponent_count
from americano.utils.logging_setup import get_logger

logger = get_logger("americano.solver.opponents")


def assign_opponents(
    pairs: Sequence[Team],
    history: MatchHistory,
    randomize: bool = False,
    rng: Optional[random.Random] = None,
) -> List[MatchAssignment]:
    """
    Match partner pairs against each other.

    For each unassigned pair (in pair order), picks the unassigned opposing
    pair with the fewest prior encounters summed over the four cross-team
    player pairs. Ties go to pair order, or random when randomizing. Courts
    are numbered 0, 1, 2... in assignment order.

    Args:
        pairs: Partner pairs for the round (even count)
        history: Counts before this round
        randomize: Break ties randomly
        rng: Random source used when randomizing

    Returns:
        Matches with sequential court indices
    """
    assert len(pairs) % 2 == 0, f"odd number of pairs ({len(pairs)}) cannot fill courts"
    rng = rng or random.Random()

    remaining = list(pairs)
    matches: List[MatchAssignment] = []
    while remaining:
        team1, rest = remaining[0], remaining[1:]
        if randomize:
            tiebreak = [rng.random() for _ in rest]
        else:
            tiebreak = list(range(len(rest)))
        best_idx = min(
            range(len(rest)),
            key=lambda i: (cross_opponent_count(team1, rest[i], history), tiebreak[i]),
        )
        team2 = rest[best_idx]
        matches.append(MatchAssignment(court_index=len(matches), team1=team1, team2=team2))
        remaining = rest[:best_idx] + rest[best_idx + 1:]

    logger.debug(f"Assigned {len(matches)} matches: {matches}")
    return matches
