"""Built-in levels shipped with the engine."""

from __future__ import annotations

from ..core.models import Level
from .grid import MazeGrid
from .solver import solve

TUTORIAL_LAYOUT = """
S......b
.####...
....#...
.b..#...
....#.r.
.#..#...
.#r.#...
.......G
"""


def tutorial_level() -> Level:
    """The 8x8 "Tutorial Sector": two portal pairs and a budget of one break."""

    grid = MazeGrid.from_text(TUTORIAL_LAYOUT)
    max_breaks = 1
    return Level(
        id="demo-1",
        name="Tutorial Sector",
        grid=grid,
        max_breaks=max_breaks,
        optimal_no_break=solve(grid, 0).minimum_actions,
        optimal_with_break=solve(grid, max_breaks).minimum_actions,
    )
