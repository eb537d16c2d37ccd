"""
Simulator
=========
Generate a schedule for a synthetic roster and analyse its fairness.
"""
from dataclasses import dataclass
from typing import List, Optional

from americano.models.config import GenerationMode, ScheduleConfig
from americano.models.rules import MONTE_CARLO_DEFAULT_ITERATIONS
from americano.models.schedule import GeneratedSchedule
from americano.solver.fairness import FairnessMetrics, Matrix, build_matrices, compute_fairness_metrics
from americano.solver.generator import generate_schedule_greedy
from americano.solver.montecarlo import generate_schedule_monte_carlo
from americano.utils.logging_setup import get_logger

logger = get_logger("americano.solver.simulator")


@dataclass
class SimulatorResult:
    schedule: GeneratedSchedule
    metrics: FairnessMetrics
    partner_matrix: Matrix
    opponent_matrix: Matrix
    labels: List[str]


def synthetic_roster(player_count: int) -> List[str]:
    return [f"P{i}" for i in range(1, player_count + 1)]


def run_simulation(
    player_count: int,
    courts: int,
    rounds: int,
    mode: GenerationMode = GenerationMode.GREEDY,
    iterations: int = MONTE_CARLO_DEFAULT_ITERATIONS,
    seed: Optional[int] = None,
    player_ids: Optional[List[str]] = None,
) -> SimulatorResult:
    """
    Generate and analyse a schedule.

    Args:
        player_count: Roster size (ignored when player_ids is given)
        courts: Requested courts
        rounds: Rounds to generate
        mode: Greedy or Monte Carlo generation
        iterations: Monte Carlo iterations
        seed: Monte Carlo seed
        player_ids: Explicit roster instead of P1..Pn

    Returns:
        SimulatorResult
    """
    ids = list(player_ids) if player_ids else synthetic_roster(player_count)
    config = ScheduleConfig(player_ids=ids, courts=courts, total_rounds=rounds)
    logger.info(
        f"Simulating {len(ids)} players, {config.effective_courts}/{courts} courts, "
        f"{rounds} rounds ({GenerationMode(mode).value})"
    )

    if GenerationMode(mode) == GenerationMode.MONTE_CARLO:
        schedule = generate_schedule_monte_carlo(config, iterations=iterations, seed=seed)
    else:
        schedule = generate_schedule_greedy(config)

    partner_matrix, opponent_matrix = build_matrices(schedule, ids)
    return SimulatorResult(
        schedule=schedule,
        metrics=compute_fairness_metrics(schedule, ids),
        partner_matrix=partner_matrix,
        opponent_matrix=opponent_matrix,
        labels=ids,
    )
