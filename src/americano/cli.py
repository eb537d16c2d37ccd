from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any, Dict, List

from pydantic import ValidationError

from americano.models.config import GenerationMode
from americano.models.rules import MONTE_CARLO_DEFAULT_ITERATIONS, RULES
from americano.models.schedule import GeneratedSchedule
from americano.models.validated import ValidatedScheduleConfig
from americano.solver.fairness import matrix_frame, metric_levels
from americano.solver.simulator import SimulatorResult, run_simulation, synthetic_roster
from americano.utils.logging_setup import setup_logging
from americano.utils.structured_logging import (
    bind_context,
    clear_context,
    configure_structlog,
    get_structured_logger,
)

events = get_structured_logger("americano.cli")


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="americano", description="Americano doubles schedule generator")
    p.add_argument("--players", type=int, default=RULES.default_player_count, help="Number of players (ignored with --names)")
    p.add_argument("--courts", type=int, default=RULES.default_courts, help="Courts available")
    p.add_argument("--rounds", type=int, default=RULES.default_rounds, help="Rounds to generate")
    p.add_argument("--mode", choices=[m.value for m in GenerationMode], default=GenerationMode.GREEDY.value)
    p.add_argument("--iterations", type=int, default=MONTE_CARLO_DEFAULT_ITERATIONS, help="Monte Carlo iterations")
    p.add_argument("--seed", type=int, default=None, help="Monte Carlo seed")
    p.add_argument("--names", default=None, help="Comma-separated player names")
    p.add_argument("--json", dest="json_out", action="store_true", help="JSON output")
    p.add_argument("--matrices", action="store_true", help="Print partner and opponent matrices")
    p.add_argument("-v", "--verbose", action="count", default=0)
    p.add_argument("--log-file", default=None, help="Also log to this file")
    return p


def _console_level(verbose: int) -> str:
    if verbose >= 2:
        return "TRACE"
    if verbose == 1:
        return "DEBUG"
    return "WARNING"


def _print_schedule(schedule: GeneratedSchedule) -> None:
    for r in schedule.rounds:
        print(f"Round {r.round_number}:")
        for m in r.matches:
            print(f"  {m!r}")
        if r.paused_player_ids:
            print(f"  Pause: {', '.join(r.paused_player_ids)}")


def _print_report(result: SimulatorResult, matrices: bool) -> None:
    _print_schedule(result.schedule)

    info = result.schedule.info
    if info is not None:
        print("\nGeneration:")
        for k, v in info.to_dict().items():
            print(f" - {k}: {v}")

    levels = metric_levels(result.metrics)
    print("\nFairness:")
    for k, v in result.metrics.as_dict().items():
        value = f"{v:.2f}" if isinstance(v, float) else v
        print(f" - {k}: {value} ({levels[k].value})")

    if matrices:
        print("\nPartner matrix:")
        print(matrix_frame(result.partner_matrix, result.labels).to_string())
        print("\nOpponent matrix:")
        print(matrix_frame(result.opponent_matrix, result.labels).to_string())


def _json_report(result: SimulatorResult, matrices: bool) -> Dict[str, Any]:
    doc: Dict[str, Any] = {
        "schedule": result.schedule.to_dict(),
        "metrics": result.metrics.as_dict(),
        "levels": {k: v.value for k, v in metric_levels(result.metrics).items()},
    }
    if matrices:
        doc["partnerMatrix"] = result.partner_matrix
        doc["opponentMatrix"] = result.opponent_matrix
        doc["labels"] = result.labels
    return doc


def main(argv: List[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)

    setup_logging(level="DEBUG", log_file=args.log_file, console_level=_console_level(args.verbose))
    configure_structlog(
        json_output=args.json_out,
        level=logging.INFO if args.verbose else logging.WARNING,
        stream=sys.stderr,
    )

    if args.names:
        ids = args.names.split(",")
    else:
        ids = synthetic_roster(args.players)

    try:
        validated = ValidatedScheduleConfig(
            player_ids=ids, courts=args.courts, total_rounds=args.rounds, iterations=args.iterations,
        )
    except ValidationError as e:
        print(f"Invalid configuration:\n{e}", file=sys.stderr)
        return 2

    config = validated.to_dataclass()
    bind_context(mode=args.mode, players=len(config.player_ids), courts=config.courts)
    try:
        result = run_simulation(
            len(config.player_ids),
            config.courts,
            config.total_rounds,
            mode=GenerationMode(args.mode),
            iterations=validated.iterations,
            seed=args.seed,
            player_ids=config.player_ids,
        )
        events.info("generation_complete", **result.schedule.info.to_dict())
    finally:
        clear_context()

    if args.json_out:
        print(json.dumps(_json_report(result, args.matrices), ensure_ascii=False, indent=2))
    else:
        _print_report(result, args.matrices)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
