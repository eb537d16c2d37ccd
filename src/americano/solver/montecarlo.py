"""
Monte Carlo Search
==================
Runs the generator many times with a shuffled roster and random tie-breaks
and keeps the cheapest schedule.

Iteration 0 is always the deterministic greedy run, so the result is never
worse than the baseline. Optimal partner matching is enabled for the
randomized iterations only when the active-player count allows it.
"""
import random
import time
from typing import Callable, List, Optional, Sequence, Tuple

from americano.models.config import ScheduleConfig, effective_courts
from americano.models.rules import MONTE_CARLO_DEFAULT_ITERATIONS, PLAYERS_PER_COURT
from americano.models.schedule import GeneratedRound, GeneratedSchedule, GenerationInfo
from americano.solver.generator import (
    GenStats,
    extend_schedule_batch,
    generate_schedule_batch,
    optimal_matching_plan,
    rebuild_state,
)
from americano.solver.scoring import total_extension_cost, total_schedule_cost
from americano.utils.logging_setup import SolverLogger, get_logger

logger = get_logger("americano.solver.montecarlo")
slog = SolverLogger("americano.solver.montecarlo")


class _StopCondition:
    """Time limit and caller stop callback, checked between iterations."""

    def __init__(
        self,
        started: float,
        time_limit_seconds: Optional[float],
        should_stop: Optional[Callable[[], bool]],
    ):
        self.started = started
        self.time_limit_seconds = time_limit_seconds
        self.should_stop = should_stop

    def reached(self) -> bool:
        if self.should_stop is not None and self.should_stop():
            logger.info("Monte Carlo search stopped by caller")
            return True
        if self.time_limit_seconds is not None and time.perf_counter() - self.started >= self.time_limit_seconds:
            logger.info(f"Monte Carlo search hit time limit ({self.time_limit_seconds}s)")
            return True
        return False


def _build_info(
    iterations: int,
    use_optimal: bool,
    reason: Optional[str],
    stats: GenStats,
    started: float,
    stopped_early: bool,
) -> GenerationInfo:
    return GenerationInfo(
        method="montecarlo",
        iterations=iterations,
        use_optimal=use_optimal,
        optimal_disabled_reason=reason,
        budget_exhausted_count=stats.budget_exhausted_count,
        total_backtrack_calls=stats.total_backtrack_calls,
        elapsed_ms=round((time.perf_counter() - started) * 1000),
        stopped_early=stopped_early,
    )


def generate_schedule_monte_carlo(
    config: ScheduleConfig,
    iterations: int = MONTE_CARLO_DEFAULT_ITERATIONS,
    seed: Optional[int] = None,
    time_limit_seconds: Optional[float] = None,
    should_stop: Optional[Callable[[], bool]] = None,
) -> GeneratedSchedule:
    """
    Best of `iterations` generated schedules by total cost.

    Args:
        config: Roster, courts and rounds
        iterations: Candidates to evaluate (iteration 0 is the greedy baseline)
        seed: Seed for the random source (None = unseeded)
        time_limit_seconds: Stop starting new candidates after this long
        should_stop: Callback returning True to stop the search

    Returns:
        Lowest-cost schedule, with GenerationInfo attached
    """
    started = time.perf_counter()
    rng = random.Random(seed)
    stop = _StopCondition(started, time_limit_seconds, should_stop)

    active_players = effective_courts(len(config.player_ids), config.courts) * PLAYERS_PER_COURT
    use_optimal, reason = optimal_matching_plan(active_players)

    slog.phase(f"Monte Carlo Search ({iterations} iterations)")
    slog.detail("players", len(config.player_ids))
    slog.detail("active per round", active_players)
    if not use_optimal:
        slog.step(f"Optimal matching disabled: {reason}")

    baseline = generate_schedule_batch(config)
    stats = baseline.stats
    best = GeneratedSchedule(rounds=baseline.rounds)
    best_cost = total_schedule_cost(best, config.player_ids)
    slog.step(f"Baseline (greedy) cost: {best_cost}")

    completed = 1
    stopped_early = False
    for i in range(1, iterations):
        if stop.reached():
            stopped_early = True
            break

        roster = list(config.player_ids)
        rng.shuffle(roster)
        batch = generate_schedule_batch(config.with_players(roster), randomize=True, use_optimal=use_optimal, rng=rng)
        stats = stats.merge(batch.stats)
        completed += 1

        candidate = GeneratedSchedule(rounds=batch.rounds)
        cost = total_schedule_cost(candidate, config.player_ids)
        if cost < best_cost:
            slog.step(f"Iteration {i}: new best cost {cost} (was {best_cost})")
            best, best_cost = candidate, cost

    best.info = _build_info(completed, use_optimal, reason, stats, started, stopped_early)
    logger.info(
        f"Monte Carlo complete: cost={best_cost}, iterations={completed}, {best.info.elapsed_ms}ms, "
        f"backtrack nodes={stats.total_backtrack_calls}, budget hits={stats.budget_exhausted_count}"
    )
    return best


def generate_additional_rounds_monte_carlo(
    player_ids: Sequence[str],
    courts: int,
    existing_rounds: Sequence[GeneratedRound],
    count: int,
    iterations: int = MONTE_CARLO_DEFAULT_ITERATIONS,
    seed: Optional[int] = None,
    time_limit_seconds: Optional[float] = None,
    should_stop: Optional[Callable[[], bool]] = None,
) -> Tuple[List[GeneratedRound], GenerationInfo]:
    """
    Best of `iterations` candidate extensions of an existing schedule.

    Only the new rounds are scored; history is primed with the existing
    rounds so their cost is not charged again.

    Returns:
        (new rounds, GenerationInfo)
    """
    started = time.perf_counter()
    rng = random.Random(seed)
    stop = _StopCondition(started, time_limit_seconds, should_stop)

    active_players = effective_courts(len(player_ids), courts) * PLAYERS_PER_COURT
    use_optimal, reason = optimal_matching_plan(active_players)

    slog.phase(f"Monte Carlo Extension ({count} rounds, {iterations} iterations)")
    state = rebuild_state(player_ids, existing_rounds)

    baseline = extend_schedule_batch(player_ids, courts, existing_rounds, count, state=state)
    stats = baseline.stats
    best_rounds = baseline.rounds
    best_cost = total_extension_cost(best_rounds, player_ids, existing_rounds)
    slog.step(f"Baseline (greedy) cost: {best_cost}")

    completed = 1
    stopped_early = False
    for i in range(1, iterations):
        if stop.reached():
            stopped_early = True
            break

        roster = list(player_ids)
        rng.shuffle(roster)
        batch = extend_schedule_batch(
            roster, courts, existing_rounds, count,
            randomize=True, use_optimal=use_optimal, rng=rng, state=state,
        )
        stats = stats.merge(batch.stats)
        completed += 1

        cost = total_extension_cost(batch.rounds, player_ids, existing_rounds)
        if cost < best_cost:
            slog.step(f"Iteration {i}: new best cost {cost} (was {best_cost})")
            best_rounds, best_cost = batch.rounds, cost

    info = _build_info(completed, use_optimal, reason, stats, started, stopped_early)
    logger.info(
        f"Monte Carlo extension complete: cost={best_cost}, iterations={completed}, "
        f"backtrack nodes={stats.total_backtrack_calls}, budget hits={stats.budget_exhausted_count}"
    )
    return best_rounds, info
