"""
Cost Scoring
============
Fairness-violation cost of matches against a history snapshot (lower is better).

    cost(match) = PARTNER_REPEAT_PENALTY * (partner_count(team1) + partner_count(team2))
                + OPPONENT_REPEAT_PENALTY * sum(opponent_count over the 4 cross pairs)

Counts are read from the history as it stood before the round, so only
prior repeats are charged.
"""
from typing import Iterable, Optional, Sequence

from americano.models.rules import OPPONENT_REPEAT_PENALTY, PARTNER_REPEAT_PENALTY
from americano.models.schedule import GeneratedRound, GeneratedSchedule, MatchAssignment, Team
from americano.solver.history import MatchHistory, create_empty_history, history_from_rounds, update_history
from americano.utils.logging_setup import get_logger

logger = get_logger("americano.solver.scoring")


def partner_cost(team: Team, history: MatchHistory) -> int:
    """Penalty for pairing these two players again."""
    return PARTNER_REPEAT_PENALTY * history.partner_count(team[0], team[1])


def cross_opponent_count(team1: Team, team2: Team, history: MatchHistory) -> int:
    """Prior encounters summed over the four cross-team player pairs."""
    return sum(history.opponent_count(a, b) for a in team1 for b in team2)


def score_match(match: MatchAssignment, history: MatchHistory) -> int:
    return (
        partner_cost(match.team1, history)
        + partner_cost(match.team2, history)
        + OPPONENT_REPEAT_PENALTY * cross_opponent_count(match.team1, match.team2, history)
    )


def score_arrangement(matches: Iterable[MatchAssignment], history: MatchHistory) -> int:
    """Cost of one round of matches against the history before that round."""
    return sum(score_match(m, history) for m in matches)


def _roster_from_rounds(rounds: Iterable[GeneratedRound]) -> list:
    seen = {}
    for r in rounds:
        for pid in [*r.active_player_ids, *r.paused_player_ids]:
            seen.setdefault(pid, None)
    return list(seen)


def total_schedule_cost(
    schedule: GeneratedSchedule,
    player_ids: Optional[Sequence[str]] = None,
) -> int:
    """
    Replay a schedule from an empty history, summing round costs.

    Args:
        schedule: Schedule to evaluate
        player_ids: Roster (derived from the rounds when omitted)

    Returns:
        Total cost; used to compare whole candidate schedules
    """
    if player_ids is None:
        player_ids = _roster_from_rounds(schedule.rounds)

    history = create_empty_history(player_ids)
    cost = 0
    for r in schedule.rounds:
        cost += score_arrangement(r.matches, history)
        history = update_history(history, r.matches)

    logger.debug(f"Schedule cost: {cost} over {len(schedule.rounds)} rounds")
    return cost


def total_extension_cost(
    new_rounds: Sequence[GeneratedRound],
    player_ids: Sequence[str],
    existing_rounds: Sequence[GeneratedRound],
) -> int:
    """
    Cost of newly generated rounds only.

    History is primed with the existing rounds so their cost is not charged
    again, but repeats of existing pairings inside the new rounds are.
    """
    history = history_from_rounds(player_ids, existing_rounds)
    cost = 0
    for r in new_rounds:
        cost += score_arrangement(r.matches, history)
        history = update_history(history, r.matches)
    return cost
