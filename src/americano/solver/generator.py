"""
Schedule Generation
===================
Round-by-round state machine:

    pause selection -> partner matching -> opponent assignment
    -> append round -> advance PauseState and MatchHistory

PauseState and MatchHistory are rebuilt values each round; nothing is shared
between calls. Backtracking telemetry comes back as a GenStats value that
callers merge.
"""
import random
import time
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from americano.models.config import ScheduleConfig, effective_courts
from americano.models.rules import (
    OPEN_ENDED_BATCH_SIZE,
    OPEN_ENDED_EXTEND_THRESHOLD,
    OPTIMAL_ACTIVE_PLAYERS_THRESHOLD,
    PLAYERS_PER_COURT,
)
from americano.models.schedule import GeneratedRound, GeneratedSchedule, GenerationInfo
from americano.solver.history import MatchHistory, create_empty_history, update_history
from americano.solver.opponents import assign_opponents
from americano.solver.partners import PairingResult, form_partner_pairs, form_partner_pairs_optimal
from americano.solver.pauses import PauseState, initial_pause_state, select_paused_players, update_pause_state
from americano.utils.logging_setup import SolverLogger, get_logger, log_function_call

logger = get_logger("americano.solver.generator")
slog = SolverLogger("americano.solver.generator")


@dataclass(frozen=True)
class GenStats:
    """Backtracking telemetry for one or more generation runs."""
    budget_exhausted_count: int = 0  # Rounds where the node budget ran out
    total_backtrack_calls: int = 0  # Search nodes expanded

    def merge(self, other: "GenStats") -> "GenStats":
        return GenStats(
            budget_exhausted_count=self.budget_exhausted_count + other.budget_exhausted_count,
            total_backtrack_calls=self.total_backtrack_calls + other.total_backtrack_calls,
        )

    @classmethod
    def from_pairing(cls, result: PairingResult) -> "GenStats":
        return cls(
            budget_exhausted_count=1 if result.exhausted else 0,
            total_backtrack_calls=result.iterations,
        )


@dataclass
class RoundBatch:
    """Rounds produced by one run, with the state after the last of them."""
    rounds: List[GeneratedRound]
    pause_state: PauseState
    history: MatchHistory
    stats: GenStats = field(default_factory=GenStats)


def optimal_matching_plan(active_players: int) -> Tuple[bool, Optional[str]]:
    """Whether optimal matching is affordable, and why not if it is not."""
    if active_players <= OPTIMAL_ACTIVE_PLAYERS_THRESHOLD:
        return True, None
    return False, f"{active_players} active players > {OPTIMAL_ACTIVE_PLAYERS_THRESHOLD} threshold"


def generate_rounds(
    player_ids: Sequence[str],
    courts: int,
    start_round: int,
    count: int,
    pause_state: PauseState,
    history: MatchHistory,
    randomize: bool = False,
    use_optimal: bool = False,
    rng: Optional[random.Random] = None,
) -> RoundBatch:
    """
    Generate `count` rounds numbered from `start_round`.

    Args:
        player_ids: Roster in processing order
        courts: Requested courts (capped by roster size)
        start_round: Number of the first generated round
        count: Rounds to generate
        pause_state: Counters before the first generated round
        history: Partner/opponent counts before the first generated round
        randomize: Random tie-breaks in every stage
        use_optimal: Backtracking partner search when the active set is small enough
        rng: Random source used when randomizing

    Returns:
        RoundBatch with the new rounds, final state and backtracking stats
    """
    rng = rng or random.Random()
    eff_courts = effective_courts(len(player_ids), courts)
    active_target = eff_courts * PLAYERS_PER_COURT
    optimal = use_optimal and active_target <= OPTIMAL_ACTIVE_PLAYERS_THRESHOLD
    stats = GenStats()
    rounds: List[GeneratedRound] = []

    for r in range(start_round, start_round + count):
        slog.enter(f"Round {r}")
        paused = select_paused_players(player_ids, eff_courts, r, pause_state, randomize, rng)
        paused_set = set(paused)
        active = [pid for pid in player_ids if pid not in paused_set]
        assert len(active) == active_target, f"round {r}: {len(active)} active, expected {active_target}"
        slog.detail("paused", paused)

        if optimal:
            result = form_partner_pairs_optimal(active, history, randomize, rng)
            pairs = result.pairs
            stats = stats.merge(GenStats.from_pairing(result))
            slog.detail("pairing", result)
        else:
            pairs = form_partner_pairs(active, history, randomize, rng)
        logger.trace(f"Round {r} pairs: {pairs}")

        matches = assign_opponents(pairs, history, randomize, rng)
        generated = GeneratedRound(round_number=r, matches=matches, paused_player_ids=paused)

        on_court = generated.active_player_ids
        partitioned = (
            len(paused) + PLAYERS_PER_COURT * len(matches) == len(player_ids)
            and len(set(on_court) | paused_set) == len(player_ids)
        )
        slog.check(f"round {r} partitions roster", partitioned, f"{len(matches)} matches, {len(paused)} paused")
        assert partitioned, f"round {r} does not partition the roster"
        slog.exit(f"Round {r}: {len(matches)} matches")

        rounds.append(generated)
        pause_state = update_pause_state(pause_state, paused, active, r)
        history = update_history(history, matches)

    return RoundBatch(rounds=rounds, pause_state=pause_state, history=history, stats=stats)


def generate_schedule_batch(
    config: ScheduleConfig,
    randomize: bool = False,
    use_optimal: bool = False,
    rng: Optional[random.Random] = None,
) -> RoundBatch:
    """Full schedule from empty state, with backtracking stats."""
    return generate_rounds(
        config.player_ids,
        config.courts,
        start_round=1,
        count=config.total_rounds,
        pause_state=initial_pause_state(config.player_ids),
        history=create_empty_history(config.player_ids),
        randomize=randomize,
        use_optimal=use_optimal,
        rng=rng,
    )


def generate_schedule(
    config: ScheduleConfig,
    randomize: bool = False,
    use_optimal: bool = False,
    rng: Optional[random.Random] = None,
) -> GeneratedSchedule:
    """
    Pre-compute the whole tournament.

    Deterministic for a given roster order unless randomize is set.
    use_optimal switches partner matching to the backtracking search for
    rounds with at most OPTIMAL_ACTIVE_PLAYERS_THRESHOLD active players.
    """
    batch = generate_schedule_batch(config, randomize, use_optimal, rng)
    return GeneratedSchedule(rounds=batch.rounds)


def generate_schedule_greedy(config: ScheduleConfig) -> GeneratedSchedule:
    """Single deterministic greedy run, stamped with GenerationInfo."""
    start = time.perf_counter()
    schedule = generate_schedule(config)
    schedule.info = GenerationInfo(
        method="greedy",
        iterations=1,
        use_optimal=False,
        optimal_disabled_reason=None,
        budget_exhausted_count=0,
        total_backtrack_calls=0,
        elapsed_ms=round((time.perf_counter() - start) * 1000),
    )
    logger.info(f"Greedy schedule: {len(schedule.rounds)} rounds in {schedule.info.elapsed_ms}ms")
    return schedule


@log_function_call
def rebuild_state(
    player_ids: Sequence[str],
    existing_rounds: Sequence[GeneratedRound],
) -> Tuple[PauseState, MatchHistory]:
    """
    Replay existing rounds through the pause and history updates.

    Rounds are not regenerated; their pauses and matches are taken as played.
    """
    pause_state = initial_pause_state(player_ids)
    history = create_empty_history(player_ids)

    for r in existing_rounds:
        paused = set(r.paused_player_ids)
        active = [pid for pid in player_ids if pid not in paused]
        pause_state = update_pause_state(pause_state, r.paused_player_ids, active, r.round_number)
        history = update_history(history, r.matches)

    return pause_state, history


def next_round_number(existing_rounds: Sequence[GeneratedRound]) -> int:
    if not existing_rounds:
        return 1
    return max(r.round_number for r in existing_rounds) + 1


def extend_schedule_batch(
    player_ids: Sequence[str],
    courts: int,
    existing_rounds: Sequence[GeneratedRound],
    count: int,
    randomize: bool = False,
    use_optimal: bool = False,
    rng: Optional[random.Random] = None,
    state: Optional[Tuple[PauseState, MatchHistory]] = None,
) -> RoundBatch:
    """
    Continue a schedule after its existing rounds.

    Args:
        state: Pre-built (PauseState, MatchHistory) for existing_rounds;
            rebuilt from the rounds when omitted
    """
    pause_state, history = state if state is not None else rebuild_state(player_ids, existing_rounds)
    return generate_rounds(
        player_ids,
        courts,
        start_round=next_round_number(existing_rounds),
        count=count,
        pause_state=pause_state,
        history=history,
        randomize=randomize,
        use_optimal=use_optimal,
        rng=rng,
    )


def generate_additional_rounds(
    player_ids: Sequence[str],
    courts: int,
    existing_rounds: Sequence[GeneratedRound],
    count: int,
    randomize: bool = False,
    use_optimal: bool = False,
    rng: Optional[random.Random] = None,
) -> List[GeneratedRound]:
    """Generate `count` more rounds numbered after the last existing one."""
    batch = extend_schedule_batch(player_ids, courts, existing_rounds, count, randomize, use_optimal, rng)
    return batch.rounds


def needs_extension(
    total_rounds: int,
    current_round: int,
    threshold: int = OPEN_ENDED_EXTEND_THRESHOLD,
) -> bool:
    """Open-ended tournaments: time to generate another batch of rounds."""
    return total_rounds - current_round < threshold


def extend_open_ended(
    player_ids: Sequence[str],
    courts: int,
    existing_rounds: Sequence[GeneratedRound],
    current_round: int,
    batch_size: int = OPEN_ENDED_BATCH_SIZE,
) -> List[GeneratedRound]:
    """
    Next batch of rounds for an open-ended tournament, or [] if enough remain.

    Args:
        player_ids: Roster
        courts: Requested courts
        existing_rounds: Every round generated so far
        current_round: Round being played (1-based)
        batch_size: Rounds to add when extending
    """
    total = next_round_number(existing_rounds) - 1
    if not needs_extension(total, current_round):
        return []
    logger.info(f"Open-ended: {total - current_round} rounds left at round {current_round}, adding {batch_size}")
    return generate_additional_rounds(player_ids, courts, existing_rounds, batch_size)
