"""
Match History
=============
Symmetric partner/opponent counters keyed by unordered player pair.

Updates never touch the input history: each call returns a new snapshot, so
a round can always be scored against the state from before it was played.
"""
from dataclasses import dataclass, field
from itertools import combinations
from typing import Dict, FrozenSet, Iterable, Sequence

from americano.models.schedule import MatchAssignment

PairKey = FrozenSet[str]


def pair_key(a: str, b: str) -> PairKey:
    """Unordered key for a pair of players."""
    return frozenset((a, b))


@dataclass(frozen=True)
class MatchHistory:
    """Partner and opponent counts for every unordered pair seen so far."""
    partners: Dict[PairKey, int] = field(default_factory=dict)
    opponents: Dict[PairKey, int] = field(default_factory=dict)

    def partner_count(self, a: str, b: str) -> int:
        return self.partners.get(pair_key(a, b), 0)

    def opponent_count(self, a: str, b: str) -> int:
        return self.opponents.get(pair_key(a, b), 0)

    def total_partnerships(self) -> int:
        return sum(self.partners.values())

    def total_encounters(self) -> int:
        return sum(self.opponents.values())


def create_empty_history(player_ids: Sequence[str]) -> MatchHistory:
    """Zero-initialized history for all unordered pairs of the roster."""
    zeros = {pair_key(a, b): 0 for a, b in combinations(player_ids, 2)}
    return MatchHistory(partners=dict(zeros), opponents=dict(zeros))


def update_history(history: MatchHistory, matches: Iterable[MatchAssignment]) -> MatchHistory:
    """
    Record one round of matches.

    Each team's pair gets one more partnership; each of the four
    cross-team pairs gets one more encounter.

    Args:
        history: Snapshot before the round (left untouched)
        matches: Matches played in the round

    Returns:
        New MatchHistory including the round
    """
    partners = dict(history.partners)
    opponents = dict(history.opponents)

    for m in matches:
        for team in (m.team1, m.team2):
            key = pair_key(*team)
            partners[key] = partners.get(key, 0) + 1
        for a in m.team1:
            for b in m.team2:
                key = pair_key(a, b)
                opponents[key] = opponents.get(key, 0) + 1

    return MatchHistory(partners=partners, opponents=opponents)


def history_from_rounds(player_ids: Sequence[str], rounds: Iterable) -> MatchHistory:
    """Replay rounds (anything with a `matches` list) from an empty history."""
    history = create_empty_history(player_ids)
    for r in rounds:
        history = update_history(history, r.matches)
    return history
