"""Portal maze engine: minimum-action solver and validated level generator.

This package exposes the public API surface via:

- ``portalmaze.engine.solver.solve``: optimal action count for a grid and break budget.
- ``portalmaze.engine.generator.generate``: random level, always solvable.
- ``portalmaze.engine.validator.author_level``: checks for hand-built levels.
"""

from .core.models import Cell, Level, Position
from .engine.generator import GeneratorConfig, MazeGenerator, generate
from .engine.grid import GridBuilder, MazeGrid
from .engine.solver import SolveResult, solve
from .engine.validator import LevelValidator, author_level

__all__ = [
    "Cell",
    "Level",
    "Position",
    "GeneratorConfig",
    "MazeGenerator",
    "generate",
    "GridBuilder",
    "MazeGrid",
    "SolveResult",
    "solve",
    "LevelValidator",
    "author_level",
]

__version__ = "0.1.0"
