"""Command line entry point: run a command file and write the step statuses."""
from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional

from src.logging_setup import setup_logging
from src.simulation.commands import load_commands, run_commands, write_results
from src.simulation.core import SimulationConfig, check_log_level, load_config

log = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="junctionflow",
        description="Simulate a signalized four-way intersection from a JSON command file.",
    )
    parser.add_argument("input", type=Path, help="JSON file with a 'commands' list")
    parser.add_argument("output", type=Path, help="where to write the step statuses")
    parser.add_argument("--config", type=Path, default=None, help="JSON or YAML configuration file")
    parser.add_argument("--log-level", default=None, help="overrides the configured log level")
    parser.add_argument("--log-file", default=None, help="also log to this rotating file")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    config = SimulationConfig()
    errors: List[str] = []
    if args.config:
        try:
            config = load_config(args.config)
        except (OSError, ValueError) as exc:
            errors.append(f"Could not load configuration {args.config}: {exc}")

    level = logging.getLevelName(logging.INFO)
    try:
        level = check_log_level(args.log_level or config.log_level)
    except ValueError as exc:
        errors.append(str(exc))
    setup_logging(level, args.log_file)

    if errors:
        for message in errors:
            log.error(message)
        return 1

    if not args.input.is_file():
        log.error("Input file not found: %s", args.input)
        return 1

    try:
        commands = load_commands(args.input)
    except (OSError, ValueError) as exc:
        log.error("Error reading commands: %s", exc)
        return 1

    result = run_commands(commands, config=config)
    try:
        write_results(args.output, result)
    except OSError as exc:
        log.error("Could not write results to %s: %s", args.output, exc)
        return 1

    log.info("Wrote %d step statuses to %s", len(result.step_statuses), args.output)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
