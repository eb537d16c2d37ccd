"""Tests for partner matching."""
import random

import pytest

from americano.solver.history import MatchHistory, create_empty_history, history_from_rounds, pair_key
from americano.solver.partners import (
    PairingResult,
    form_partner_pairs,
    form_partner_pairs_optimal,
    pairing_cost,
)


def _covers(pairs, players):
    flat = [p for pair in pairs for p in pair]
    return sorted(flat) == sorted(players)


@pytest.fixture
def trap_history():
    """History where the cheapest first pick forces an expensive last pair."""
    return MatchHistory(partners={
        pair_key("A", "B"): 0,
        pair_key("A", "C"): 1,
        pair_key("A", "D"): 1,
        pair_key("B", "C"): 1,
        pair_key("B", "D"): 1,
        pair_key("C", "D"): 5,
    })


class TestFormPartnerPairs:
    """Tests for greedy pairing."""

    def test_covers_every_player_once(self, eight_players):
        """Test every active player is paired exactly once."""
        pairs = form_partner_pairs(eight_players, create_empty_history(eight_players))

        assert len(pairs) == 4
        assert _covers(pairs, eight_players)

    def test_avoids_previous_partner(self, eight_players, first_round):
        """Test P1 is not paired with P2 again."""
        history = history_from_rounds(eight_players, [first_round])

        pairs = form_partner_pairs(eight_players, history)

        assert ("P1", "P2") not in pairs
        assert pairing_cost(pairs, history) == 0

    def test_randomized_still_covers(self, eight_players):
        """Test randomized pairing is still a partition."""
        rng = random.Random(11)
        history = create_empty_history(eight_players)

        for _ in range(10):
            pairs = form_partner_pairs(eight_players, history, randomize=True, rng=rng)
            assert _covers(pairs, eight_players)

    def test_odd_active_set_rejected(self):
        """Test an odd active set fails fast."""
        with pytest.raises(AssertionError):
            form_partner_pairs(["A", "B", "C"], MatchHistory())


class TestFormPartnerPairsOptimal:
    """Tests for backtracking pairing."""

    def test_empty(self):
        """Test no players gives no pairs and no search."""
        result = form_partner_pairs_optimal([], MatchHistory())

        assert result.pairs == []
        assert result.iterations == 0
        assert result.exhausted is False

    def test_beats_greedy_trap(self, trap_history):
        """Test the search finds the cheaper pairing greedy misses."""
        players = ["A", "B", "C", "D"]

        greedy = form_partner_pairs(players, trap_history)
        result = form_partner_pairs_optimal(players, trap_history)

        assert pairing_cost(greedy, trap_history) == 50
        assert result.cost == 20
        assert pairing_cost(result.pairs, trap_history) == 20
        assert result.exhausted is False

    def test_never_worse_than_greedy(self, eight_players, first_round):
        """Test optimal cost <= greedy cost for 8 active players."""
        rng = random.Random(5)
        history = history_from_rounds(eight_players, [first_round, first_round])

        for _ in range(10):
            roster = list(eight_players)
            rng.shuffle(roster)
            greedy = form_partner_pairs(roster, history)
            result = form_partner_pairs_optimal(roster, history)
            assert result.cost <= pairing_cost(greedy, history)
            assert _covers(result.pairs, roster)

    def test_stops_at_zero_cost(self, eight_players):
        """Test a repeat-free pairing ends the search early."""
        result = form_partner_pairs_optimal(eight_players, create_empty_history(eight_players))

        assert result.cost == 0
        assert result.exhausted is False
        assert result.iterations <= 5  # root plus one node per pair

    def test_budget_exhaustion_falls_back(self, trap_history):
        """Test a tiny budget still returns a full pairing, flagged exhausted."""
        players = ["A", "B", "C", "D"]

        result = form_partner_pairs_optimal(players, trap_history, budget=1)

        assert isinstance(result, PairingResult)
        assert result.exhausted is True
        assert result.iterations == 1
        assert _covers(result.pairs, players)
        assert result.cost == pairing_cost(result.pairs, trap_history)

    def test_budget_exhaustion_is_not_an_error(self, trap_history, caplog):
        """Test exhaustion is reported through the result and logs, not raised."""
        with caplog.at_level("DEBUG", logger="americano.solver.partners"):
            result = form_partner_pairs_optimal(["A", "B", "C", "D"], trap_history, budget=1)

        assert result.exhausted
        assert "budget" in caplog.text

    def test_all_repeats_proven_without_sweep(self):
        """Test a round where every pairing repeats ends on the first full pairing."""
        players = [f"P{i}" for i in range(1, 13)]
        history = MatchHistory(partners={pair_key(a, b): 1 for a in players for b in players if a < b})

        result = form_partner_pairs_optimal(players, history)

        assert result.cost == 60
        assert result.exhausted is False
        assert result.iterations <= 7  # root plus one node per pair
        assert _covers(result.pairs, players)

    def test_odd_groups_force_one_repeat(self):
        """Test two fresh triangles need exactly one repeat, proven within budget."""
        players = ["A", "B", "C", "D", "E", "F"]
        history = MatchHistory(partners={
            pair_key(a, b): 1 for a in "ABC" for b in "DEF"
        })

        result = form_partner_pairs_optimal(players, history, randomize=True, rng=random.Random(3))

        assert result.cost == 10
        assert result.exhausted is False
        assert _covers(result.pairs, players)
