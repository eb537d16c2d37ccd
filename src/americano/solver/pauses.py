"""
Pause Rotation
==============
Decides who sits out each round and tracks per-player pause/play counters.

Ranking for pausing (first = pauses now):
    1. fewest pauses so far (equalizes totals over the tournament)
    2. oldest last pause (never paused counts as round 0)
    3. roster order, or a random tie-break when randomizing
"""
import random
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from americano.models.rules import PLAYERS_PER_COURT
from americano.utils.logging_setup import get_logger

logger = get_logger("americano.solver.pauses")


@dataclass(frozen=True)
class PauseState:
    """Per-player counters threaded round by round."""
    pause_count: Dict[str, int] = field(default_factory=dict)
    games_played: Dict[str, int] = field(default_factory=dict)
    last_paused_round: Dict[str, int] = field(default_factory=dict)  # 0 = never

    def rounds_processed(self, player_id: str) -> int:
        """pause_count + games_played for a player."""
        return self.pause_count.get(player_id, 0) + self.games_played.get(player_id, 0)


def initial_pause_state(player_ids: Sequence[str]) -> PauseState:
    """All counters at zero."""
    return PauseState(
        pause_count={pid: 0 for pid in player_ids},
        games_played={pid: 0 for pid in player_ids},
        last_paused_round={pid: 0 for pid in player_ids},
    )


def pauses_needed(roster_size: int, effective_courts: int) -> int:
    """Players that must sit out with this many courts in use."""
    return max(0, roster_size - PLAYERS_PER_COURT * effective_courts)


def select_paused_players(
    player_ids: Sequence[str],
    effective_courts: int,
    round_number: int,
    state: PauseState,
    randomize: bool = False,
    rng: Optional[random.Random] = None,
) -> List[str]:
    """
    Select exactly len(player_ids) - 4 * effective_courts players to pause.

    Args:
        player_ids: Roster in its current order
        effective_courts: Courts that can be filled this round
        round_number: 1-based round being generated
        state: Counters before this round
        randomize: Break remaining ties randomly instead of by roster order
        rng: Random source used when randomizing

    Returns:
        Paused player ids, in roster order
    """
    n_pause = pauses_needed(len(player_ids), effective_courts)
    if n_pause == 0:
        return []

    if randomize:
        rng = rng or random.Random()
        tiebreak = {pid: rng.random() for pid in player_ids}
    else:
        tiebreak = {pid: i for i, pid in enumerate(player_ids)}

    ranked = sorted(
        player_ids,
        key=lambda pid: (
            state.pause_count.get(pid, 0),
            state.last_paused_round.get(pid, 0),
            tiebreak[pid],
        ),
    )
    chosen = set(ranked[:n_pause])
    paused = [pid for pid in player_ids if pid in chosen]

    logger.debug(f"Round {round_number}: pausing {paused}")
    return paused


def update_pause_state(
    state: PauseState,
    paused_ids: Sequence[str],
    active_ids: Sequence[str],
    round_number: int,
) -> PauseState:
    """
    Advance counters by one round. The input state is not modified.

    Paused players: pause_count += 1, last_paused_round = round_number.
    Active players: games_played += 1.
    """
    pause_count = dict(state.pause_count)
    games_played = dict(state.games_played)
    last_paused = dict(state.last_paused_round)

    for pid in paused_ids:
        pause_count[pid] = pause_count.get(pid, 0) + 1
        last_paused[pid] = round_number
    for pid in active_ids:
        games_played[pid] = games_played.get(pid, 0) + 1

    return PauseState(
        pause_count=pause_count,
        games_played=games_played,
        last_paused_round=last_paused,
    )
