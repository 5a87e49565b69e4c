"""Pretty-print helpers for maze grids and levels."""

from __future__ import annotations

import sys
from collections import Counter
from typing import TYPE_CHECKING, Optional

from ..core.constants import ActionKind, CellKind
from ..engine.grid import cell_symbol

if TYPE_CHECKING:
    from ..core.models import Level
    from ..engine.grid import MazeGrid
    from ..engine.solver import SolveResult


def format_grid(grid: MazeGrid, result: Optional[SolveResult] = None) -> str:
    """Render the grid with coordinate headers.

    With a solve result, ``*`` marks the path and ``x`` marks broken walls.
    """

    on_path = set(result.path[1:-1]) if result is not None else set()
    broken = (
        {pos for pos, action in zip(result.path[1:], result.actions) if action == ActionKind.BREAK}
        if result is not None
        else set()
    )
    width = grid.width
    header_cells = [f"{x:>2}" for x in range(width)]
    lines = ["    " + " ".join(header_cells)]
    lines.append("    " + "-" * (3 * width - 1))
    for y, row in enumerate(grid.rows):
        row_cells = [_path_symbol(cell, on_path, broken) for cell in row]
        row_render = " ".join(f"{symbol:>2}" for symbol in row_cells)
        lines.append(f"{y:>2} | {row_render}")
    return "\n".join(lines)


def _path_symbol(cell, on_path, broken) -> str:
    if cell.position in broken:
        return "x"
    if cell.position in on_path and cell.kind != CellKind.PORTAL:
        return "*"
    return cell_symbol(cell)


def pretty_print_grid(
    grid: MazeGrid,
    result: Optional[SolveResult] = None,
    *,
    label: str | None = None,
    stream=None,
) -> None:
    """Print the grid in a human-friendly format."""

    stream = stream or sys.stdout
    if label:
        print(label, file=stream)
    print(format_grid(grid, result), file=stream)


def _format_optimum(value: Optional[int]) -> str:
    return "unreachable" if value is None else f"{value} actions"


def print_level_stats(level: Level, *, stream=None) -> None:
    """Print grid + summary stats for a level."""

    stream = stream or sys.stdout
    print(f"{level.name} [{level.id}]", file=stream)
    print(format_grid(level.grid), file=stream)

    grid = level.grid
    total_cells = grid.width * grid.height
    kinds = Counter(cell.kind for cell in grid)
    portals = grid.portal_groups()

    print(file=stream)
    print("--- Grid ---", file=stream)
    print(f"  Size:          {grid.width} x {grid.height} ({total_cells} cells)", file=stream)
    print(f"  Walls:         {kinds[CellKind.WALL]} ({kinds[CellKind.WALL] / total_cells * 100:.0f}%)", file=stream)
    print(f"  Open:          {kinds[CellKind.EMPTY]}", file=stream)
    if portals:
        groups = " ".join(f"{color.value.lower()}:{len(members)}" for color, members in portals.items())
        print(f"  Portals:       {groups}", file=stream)

    print(file=stream)
    print("--- Optimal ---", file=stream)
    print(f"  No breaks:     {_format_optimum(level.optimal_no_break)}", file=stream)
    print(f"  {level.max_breaks} break(s):    {_format_optimum(level.optimal_with_break)}", file=stream)
