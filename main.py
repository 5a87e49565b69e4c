"""CLI entrypoint for the portal maze solver and level generator."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict

from portalmaze.core.constants import DEFAULT_GRID_SIZE, DEFAULT_HOLE_PROBABILITY, DEFAULT_MAX_ATTEMPTS
from portalmaze.core.exceptions import MalformedGridError
from portalmaze.core.models import Level
from portalmaze.engine.generator import GeneratorConfig, MazeGenerator
from portalmaze.engine.grid import MazeGrid
from portalmaze.engine.levels import tutorial_level
from portalmaze.engine.solver import SolveResult, solve
from portalmaze.utils.logger import configure_logging
from portalmaze.utils.pretty import pretty_print_grid, print_level_stats


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate portal maze levels or solve existing ones",
    )
    parser.add_argument(
        "--break-budget",
        type=int,
        default=None,
        help="Walls that may be broken (default 1 when generating, the level's own budget when solving)",
    )
    parser.add_argument("--width", type=int, default=DEFAULT_GRID_SIZE, help="Grid width in cells")
    parser.add_argument("--height", type=int, default=DEFAULT_GRID_SIZE, help="Grid height in cells")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducibility")
    parser.add_argument(
        "--max-attempts",
        type=int,
        default=DEFAULT_MAX_ATTEMPTS,
        help="Carve attempts before falling back to the trivial corridor",
    )
    parser.add_argument(
        "--hole-probability",
        type=float,
        default=DEFAULT_HOLE_PROBABILITY,
        help="Chance that each interior wall is opened after carving",
    )
    parser.add_argument(
        "--cross-check",
        action="store_true",
        help="Confirm each generated optimum with the OR-Tools flow solver",
    )
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--solve",
        type=Path,
        metavar="FILE",
        help="Solve a level JSON (or a JSON list of grid rows) instead of generating",
    )
    mode.add_argument("--tutorial", action="store_true", help="Emit the built-in tutorial level")
    parser.add_argument("--output", type=Path, help="Optional path to JSON output")
    parser.add_argument("--pretty", action="store_true", help="Print the grid and stats to stderr")
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )
    return parser


def solve_payload(result: SolveResult) -> Dict[str, Any]:
    return {
        "status": result.status.value,
        "reachable": result.reachable,
        "minimum_actions": result.minimum_actions,
        "path": [[pos.x, pos.y] for pos in result.path],
        "actions": [action.value for action in result.actions],
    }


def run_solve(path: Path, break_budget: int | None, pretty: bool) -> Dict[str, Any]:
    raw = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(raw, dict):
        level = Level.from_jsonable(raw)
        grid = level.grid
        budget = level.max_breaks if break_budget is None else break_budget
    else:
        grid = MazeGrid.from_jsonable(raw)
        budget = 0 if break_budget is None else break_budget
    result = solve(grid, budget)
    if pretty:
        pretty_print_grid(grid, result, label=f"Budget {budget}: {result.status.value}", stream=sys.stderr)
    payload = solve_payload(result)
    payload["max_breaks"] = budget
    return payload


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    level = getattr(logging, args.log_level.upper(), logging.INFO)
    configure_logging(level)

    if args.break_budget is not None and args.break_budget < 0:
        parser.error("--break-budget must be non-negative")

    if args.solve:
        try:
            payload = run_solve(args.solve, args.break_budget, args.pretty)
        except (OSError, MalformedGridError, KeyError, ValueError) as exc:
            parser.error(f"cannot solve {args.solve}: {exc}")
    else:
        if args.tutorial:
            result = tutorial_level()
        else:
            try:
                config = GeneratorConfig(
                    width=args.width,
                    height=args.height,
                    max_attempts=args.max_attempts,
                    hole_probability=args.hole_probability,
                    seed=args.seed,
                    cross_check=args.cross_check,
                )
            except ValueError as exc:
                parser.error(str(exc))
            budget = 1 if args.break_budget is None else args.break_budget
            result = MazeGenerator(config).generate(budget)
        if args.pretty:
            print_level_stats(result, stream=sys.stderr)
        payload = result.to_jsonable()

    output_text = json.dumps(payload, ensure_ascii=False, indent=2)
    if args.output:
        args.output.write_text(output_text, encoding="utf-8")
    else:
        print(output_text)


if __name__ == "__main__":  # pragma: no cover
    main()
