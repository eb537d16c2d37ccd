"""
Property-Based Tests with Hypothesis
====================================
Invariants that must hold for any valid roster, court count and round count.
"""
from hypothesis import HealthCheck, given, settings, strategies as st

from americano.models.config import ScheduleConfig, effective_courts
from americano.models.schedule import MatchAssignment
from americano.solver.generator import generate_schedule
from americano.solver.history import create_empty_history, update_history
from americano.solver.montecarlo import generate_schedule_monte_carlo
from americano.solver.partners import form_partner_pairs, form_partner_pairs_optimal, pairing_cost
from americano.solver.scoring import score_arrangement, total_schedule_cost

configs = st.builds(
    lambda players, courts, rounds: ScheduleConfig(
        player_ids=[f"P{i}" for i in range(1, players + 1)],
        courts=courts,
        total_rounds=rounds,
    ),
    players=st.integers(min_value=4, max_value=20),
    courts=st.integers(min_value=1, max_value=4),
    rounds=st.integers(min_value=1, max_value=12),
)


class TestScheduleProperties:
    """Round invariants for arbitrary setups."""

    @given(config=configs)
    @settings(max_examples=40, deadline=None)
    def test_rounds_partition_roster(self, config):
        """Every round: paused + 4 * matches == roster, each player once."""
        schedule = generate_schedule(config)

        assert schedule.total_rounds == config.total_rounds
        for r in schedule.rounds:
            assert len(r.matches) == effective_courts(len(config.player_ids), config.courts)
            assert len(r.paused_player_ids) + 4 * len(r.matches) == len(config.player_ids)
            everyone = r.active_player_ids + r.paused_player_ids
            assert sorted(everyone) == sorted(config.player_ids)

    @given(config=configs)
    @settings(max_examples=40, deadline=None)
    def test_pause_counts_within_one(self, config):
        """Pause totals never differ by more than one."""
        schedule = generate_schedule(config)
        pauses = {pid: 0 for pid in config.player_ids}
        for r in schedule.rounds:
            for pid in r.paused_player_ids:
                pauses[pid] += 1

        assert max(pauses.values()) - min(pauses.values()) <= 1

    @given(config=configs)
    @settings(max_examples=30, deadline=None)
    def test_first_round_costs_nothing(self, config):
        """Round 1 against an empty history scores 0."""
        schedule = generate_schedule(config)

        assert score_arrangement(schedule.rounds[0].matches, create_empty_history(config.player_ids)) == 0

    @given(config=configs, seed=st.integers(min_value=0, max_value=10_000))
    @settings(max_examples=15, deadline=None, suppress_health_check=[HealthCheck.too_slow])
    def test_monte_carlo_not_worse_than_greedy(self, config, seed):
        """Monte Carlo never returns a costlier schedule than greedy."""
        baseline = total_schedule_cost(generate_schedule(config), config.player_ids)

        schedule = generate_schedule_monte_carlo(config, iterations=4, seed=seed)

        assert total_schedule_cost(schedule, config.player_ids) <= baseline


class TestHistoryProperties:
    """update_history is additive."""

    @given(config=configs)
    @settings(max_examples=30, deadline=None)
    def test_partner_counts_match_shared_teams(self, config):
        """partner_count(a, b) == rounds where a and b shared a team."""
        schedule = generate_schedule(config)
        history = create_empty_history(config.player_ids)
        for r in schedule.rounds:
            history = update_history(history, r.matches)

        shared = {}
        for r in schedule.rounds:
            for m in r.matches:
                for team in (m.team1, m.team2):
                    key = frozenset(team)
                    shared[key] = shared.get(key, 0) + 1

        for key, count in history.partners.items():
            assert count == shared.get(key, 0)


class TestPartnerProperties:
    """Optimal pairing is never worse than greedy."""

    @given(
        rounds=st.lists(
            st.permutations([f"P{i}" for i in range(1, 9)]),
            min_size=1,
            max_size=6,
        ),
        order=st.permutations([f"P{i}" for i in range(1, 9)]),
    )
    @settings(max_examples=40, deadline=None)
    def test_optimal_le_greedy(self, rounds, order):
        """For 8 active players optimal cost <= greedy cost."""
        ids = [f"P{i}" for i in range(1, 9)]
        history = create_empty_history(ids)
        for perm in rounds:
            matches = [
                MatchAssignment(0, (perm[0], perm[1]), (perm[2], perm[3])),
                MatchAssignment(1, (perm[4], perm[5]), (perm[6], perm[7])),
            ]
            history = update_history(history, matches)

        greedy = form_partner_pairs(list(order), history)
        optimal = form_partner_pairs_optimal(list(order), history)

        assert optimal.cost <= pairing_cost(greedy, history)
