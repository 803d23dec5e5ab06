"""Command line interface for gradmatch.

Commands:
- show-settings: print the resolved :class:`Settings`
- run: evolve an assignment from graduate/placement CSV files
- evaluate: summarise an existing assignment stored as JSON
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Iterable

from pydantic import ValidationError

from .config import (
    ConfigError,
    RunConfig,
    RunContextFilter,
    Settings,
    configure_logging,
    get_settings,
    load_config,
    run_context,
)
from .data import PreferenceFileError, load_preference_model, solution_table
from .matching.ga.population import solution_from_mapping
from .protocol import EvaluateRequest, RunRequest
from .session import MatchingSession

__all__ = ["build_parser", "main"]

logger = logging.getLogger(__name__)


def _add_input_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--graduates", required=True, help="CSV or .xlsx file with graduate rankings"
    )
    parser.add_argument(
        "--placements", required=True, help="CSV or .xlsx file with quotas and rankings"
    )
    parser.add_argument("--json", action="store_true", help="Print the result as JSON")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="gradmatch CLI")
    parser.add_argument(
        "--structured-logs",
        dest="structured_logs",
        action="store_true",
        help="emit JSON log records",
    )
    parser.add_argument(
        "--plain-logs",
        dest="structured_logs",
        action="store_false",
        help="emit plain-text log records",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="log debug messages")
    parser.set_defaults(structured_logs=None)

    subparsers = parser.add_subparsers(dest="command", required=True)

    show = subparsers.add_parser("show-settings", help="Show the resolved settings")
    show.add_argument("--json", action="store_true", help="JSON format")

    run = subparsers.add_parser("run", help="Search for a good assignment")
    _add_input_arguments(run)
    run.add_argument("--config", type=str, help="YAML run configuration")
    run.add_argument("--iterations", type=int, help="Generations to run")
    run.add_argument("--population-size", type=int, help="Chromosomes per generation")
    run.add_argument("--manager-weighting", type=int, help="Placement preference weight (0-100)")
    run.add_argument("--seed", type=int, help="Random seed")
    run.add_argument(
        "--rebalance-quotas",
        action="store_true",
        default=None,
        help="Repair quota overruns after crossover",
    )
    run.add_argument("--output", type=str, help="Write the result message to this JSON file")

    evaluate = subparsers.add_parser("evaluate", help="Summarise an assignment")
    _add_input_arguments(evaluate)
    evaluate.add_argument("--solution", required=True, help="JSON file mapping graduate -> placement")

    return parser


def _configure_logging(args: argparse.Namespace, settings: Settings) -> RunContextFilter:
    return configure_logging(
        settings=settings,
        structured=args.structured_logs,
        level=logging.DEBUG if args.verbose else logging.INFO,
        context={"command": args.command},
    )


def _print_payload(payload: dict[str, Any], *, as_json: bool) -> None:
    if as_json:
        print(json.dumps(payload, indent=2, sort_keys=True))
    else:
        for key, value in payload.items():
            print(f"{key}: {value}")


def _run_config(args: argparse.Namespace, settings: Settings) -> RunConfig:
    base = load_config(args.config, RunConfig, project_root=settings.project_root) if args.config else RunConfig()
    updates = {
        "iterations": args.iterations,
        "population_size": args.population_size,
        "manager_weighting": args.manager_weighting,
        "seed": args.seed if args.seed is not None else (base.seed if base.seed is not None else settings.random_seed),
        "rebalance_quotas": args.rebalance_quotas,
    }
    merged = base.model_dump()
    merged.update({key: value for key, value in updates.items() if value is not None})
    return RunConfig.model_validate(merged)


def _run(args: argparse.Namespace, settings: Settings, log_context: RunContextFilter) -> int:
    model = load_preference_model(args.graduates, args.placements)
    config = _run_config(args, settings)
    log_context.update(run_context(config))
    session = MatchingSession(model, config=config)

    def sink(message: dict[str, Any]) -> None:
        if message["type"] == "progress":
            logger.info("Progress %d%%", message["payload"])

    request = RunRequest(
        iterations=config.iterations,
        population_size=config.population_size,
        manager_weighting=config.manager_weighting,
        seed=config.seed,
    )
    result = session.run(request, sink)
    payload = result.model_dump(by_alias=True)

    if args.output:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        logger.info("Result written to %s", output_path)

    if args.json:
        _print_payload(payload, as_json=True)
    else:
        print(solution_table(result.payload.solution, model).to_string(index=False))
        print()
        print(f"fitness: {result.payload.fitness:.2f}")
        for line in result.payload.evaluation:
            print(line)
    return 0


def _evaluate(args: argparse.Namespace) -> int:
    model = load_preference_model(args.graduates, args.placements)
    raw = json.loads(Path(args.solution).read_text(encoding="utf-8"))
    # accept either a bare mapping or a saved result message
    if isinstance(raw, dict) and "payload" in raw:
        raw = raw["payload"]["solution"]
    request = EvaluateRequest(solution=solution_from_mapping(raw))
    message = MatchingSession(model).evaluate(request)
    if args.json:
        _print_payload(message.model_dump(by_alias=True), as_json=True)
    else:
        for line in message.payload:
            print(line)
    return 0


def main(argv: Iterable[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    settings = get_settings()
    log_context = _configure_logging(args, settings)

    try:
        if args.command == "show-settings":
            _print_payload(settings.to_dict(), as_json=args.json)
        elif args.command == "run":
            return _run(args, settings, log_context)
        elif args.command == "evaluate":
            return _evaluate(args)
        else:  # pragma: no cover - argparse rejects unknown commands
            parser.error(f"Unknown command: {args.command}")
    except (FileNotFoundError, ConfigError, PreferenceFileError, ValidationError) as exc:
        print(str(exc), file=sys.stderr)
        return 2

    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
