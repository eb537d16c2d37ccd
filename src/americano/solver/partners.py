"""
Partner Matching
================
Partitions the active players of a round into partner pairs, avoiding
partnerships that already happened.

Two strategies:
- form_partner_pairs: greedy, O(k^2) for k active players
- form_partner_pairs_optimal: depth-first branch-and-bound over all pairings,
  capped by a node budget

Branch counts grow combinatorially (~10k pairings for 12 players, ~2M for
16), so callers only use the optimal search up to
OPTIMAL_ACTIVE_PLAYERS_THRESHOLD active players. The search prunes with a
lower bound on the cost of pairing the players still unpaired, so rounds
where every pairing must repeat are proven optimal without a full sweep.
"""
import math
import random
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from americano.models.rules import BACKTRACK_NODE_BUDGET, PARTNER_REPEAT_PENALTY
from americano.models.schedule import Team
from americano.solver.history import MatchHistory
from americano.solver.scoring import partner_cost
from americano.utils.logging_setup import get_logger

logger = get_logger("americano.solver.partners")

Matrix = List[List[int]]


@dataclass
class PairingResult:
    """Outcome of an optimal partner search."""
    pairs: List[Team]
    iterations: int  # Search nodes expanded
    exhausted: bool  # Node budget ran out before the search space did
    cost: int = 0

    def __repr__(self):
        flag = " (budget exhausted)" if self.exhausted else ""
        return f"PairingResult({len(self.pairs)} pairs, cost={self.cost}, nodes={self.iterations}{flag})"


def pairing_cost(pairs: Sequence[Team], history: MatchHistory) -> int:
    """Partner-repeat cost of a full pairing."""
    return sum(partner_cost(p, history) for p in pairs)


def _check_even(active_ids: Sequence[str]) -> None:
    assert len(active_ids) % 2 == 0, f"odd active set ({len(active_ids)} players) cannot be paired"


def _candidate_order(
    candidates: Sequence,
    count_of: Callable[[object], int],
    randomize: bool,
    rng: random.Random,
) -> List:
    """Candidates by ascending partner count; ties random or in given order."""
    if randomize:
        tiebreak = {c: rng.random() for c in candidates}
    else:
        tiebreak = {c: i for i, c in enumerate(candidates)}
    return sorted(candidates, key=lambda c: (count_of(c), tiebreak[c]))


def _pairing_floor(players: Sequence[int], counts: Matrix) -> int:
    """
    Lower bound on the partner cost of pairing `players` among themselves.

    A pair costs at least the mean of its two players' lowest partner count
    within the group, so half the summed minima (rounded up) is admissible.
    """
    if not players:
        return 0
    total = sum(min(counts[p][q] for q in players if q != p) for p in players)
    return PARTNER_REPEAT_PENALTY * ((total + 1) // 2)


def _two_lowest(p: int, group: Sequence[int], counts: Matrix) -> Tuple[float, Optional[int], float]:
    """(lowest count, its partner, second lowest count) of p within group."""
    row = counts[p]
    low, arg, second = math.inf, None, math.inf
    for q in group:
        if q == p:
            continue
        c = row[q]
        if c < low:
            low, arg, second = c, q, low
        elif c < second:
            second = c
    return low, arg, second


def _floor_without(group: Sequence[int], taken: int, lows: Dict[int, Tuple[float, Optional[int], float]]) -> int:
    """_pairing_floor of group, using minima computed before `taken` left it."""
    total = 0
    for p in group:
        low, arg, second = lows[p]
        total += second if arg == taken else low
    return PARTNER_REPEAT_PENALTY * ((int(total) + 1) // 2)


def form_partner_pairs(
    active_ids: Sequence[str],
    history: MatchHistory,
    randomize: bool = False,
    rng: Optional[random.Random] = None,
) -> List[Team]:
    """
    Greedy pairing.

    Takes the next unpaired player (roster order, shuffled when randomizing)
    and pairs them with the unpaired candidate they have partnered least.

    Args:
        active_ids: Players on court this round (even count)
        history: Counts before this round
        randomize: Shuffle processing order and break ties randomly
        rng: Random source used when randomizing

    Returns:
        List of partner pairs covering every active player once
    """
    _check_even(active_ids)
    rng = rng or random.Random()

    unpaired = list(active_ids)
    if randomize:
        rng.shuffle(unpaired)

    pairs: List[Team] = []
    while unpaired:
        player, rest = unpaired[0], unpaired[1:]
        partner = _candidate_order(rest, lambda c: history.partner_count(player, c), randomize, rng)[0]
        pairs.append((player, partner))
        unpaired = [p for p in rest if p != partner]

    return pairs


def form_partner_pairs_optimal(
    active_ids: Sequence[str],
    history: MatchHistory,
    randomize: bool = False,
    rng: Optional[random.Random] = None,
    budget: int = BACKTRACK_NODE_BUDGET,
) -> PairingResult:
    """
    Minimum-cost pairing by depth-first branch and bound.

    Each node pairs the first unpaired player with one remaining candidate,
    cheapest candidates first. A branch is cut once its partial cost plus a
    lower bound for the still unpaired players can no longer beat the best
    complete pairing, and the search ends as soon as the best pairing meets
    the bound for the whole round. The search runs on an explicit stack and
    stops after `budget` node expansions; the best pairing found so far is
    then returned with exhausted=True. That is an expected outcome, not an
    error.

    Args:
        active_ids: Players on court this round (even count)
        history: Counts before this round
        randomize: Shuffle processing order and break ties randomly
        rng: Random source used when randomizing
        budget: Maximum node expansions

    Returns:
        PairingResult with pairs, nodes expanded and the exhausted flag
    """
    _check_even(active_ids)
    rng = rng or random.Random()

    order = list(active_ids)
    if randomize:
        rng.shuffle(order)
    if not order:
        return PairingResult(pairs=[], iterations=0, exhausted=False, cost=0)

    # Players are searched by index into `order`
    counts = [[history.partner_count(a, b) for b in order] for a in order]
    root = tuple(range(len(order)))
    root_floor = _pairing_floor(root, counts)

    best_pairs: Optional[Tuple[Tuple[int, int], ...]] = None
    best_cost = math.inf
    iterations = 0
    exhausted = False

    # Frame: (remaining players, pairs so far, partial cost, lower bound on total cost)
    stack = [(root, (), 0, root_floor)]
    while stack:
        if best_cost <= root_floor:
            break  # Nothing beats the bound for the whole round
        if iterations >= budget:
            exhausted = True
            break

        remaining, pairs, cost, floor = stack.pop()
        iterations += 1

        if floor >= best_cost:
            continue
        if not remaining:
            best_pairs, best_cost = pairs, cost
            continue

        player, rest = remaining[0], remaining[1:]
        row = counts[player]
        lows = {p: _two_lowest(p, rest, counts) for p in rest}
        children = []
        for partner in _candidate_order(rest, row.__getitem__, randomize, rng):
            child_rest = tuple(p for p in rest if p != partner)
            child_cost = cost + PARTNER_REPEAT_PENALTY * row[partner]
            child_floor = child_cost + _floor_without(child_rest, partner, lows)
            if child_floor >= best_cost:
                continue
            children.append((child_rest, pairs + ((player, partner),), child_cost, child_floor))
        # Cheapest candidate on top of the stack
        stack.extend(reversed(children))

    if best_pairs is None:
        logger.debug(f"Backtracking budget ({budget}) hit before a full pairing; using greedy pairing")
        pairs_out = form_partner_pairs(order, history, randomize=False)
        best_cost = pairing_cost(pairs_out, history)
    else:
        pairs_out = [(order[a], order[b]) for a, b in best_pairs]
        if exhausted:
            logger.debug(f"Backtracking budget ({budget}) hit; best cost so far {best_cost}")

    return PairingResult(
        pairs=pairs_out,
        iterations=iterations,
        exhausted=exhausted,
        cost=int(best_cost),
    )
