"""Shared constants and enumerations for the portal maze engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple


class CellKind(str, Enum):
    """All supported cell kinds in the grid."""

    EMPTY = "EMPTY"
    WALL = "WALL"
    START = "START"
    GOAL = "GOAL"
    PORTAL = "PORTAL"


class PortalColor(str, Enum):
    """Portal colours. Cells sharing a colour form one teleport group."""

    BLUE = "BLUE"
    RED = "RED"
    GREEN = "GREEN"
    YELLOW = "YELLOW"


class ActionKind(str, Enum):
    """Unit-cost player actions."""

    MOVE = "MOVE"
    BREAK = "BREAK"
    TELEPORT = "TELEPORT"


class SolveStatus(str, Enum):
    SOLVED = "SOLVED"
    UNREACHABLE = "UNREACHABLE"
    MALFORMED = "MALFORMED"


# (dx, dy) in up, right, down, left order; y grows downwards.
CARDINAL_STEPS: Tuple[Tuple[int, int], ...] = ((0, -1), (1, 0), (0, 1), (-1, 0))
CARVE_STEPS: Tuple[Tuple[int, int], ...] = ((0, -2), (0, 2), (-2, 0), (2, 0))

DEFAULT_GRID_SIZE = 10
MIN_GRID_SIZE = 5
DEFAULT_MAX_ATTEMPTS = 20
DEFAULT_HOLE_PROBABILITY = 0.1
CARVE_ORIGIN: Tuple[int, int] = (1, 1)
GENERATED_PORTAL_COLOR = PortalColor.BLUE


@dataclass(frozen=True)
class Bounds:
    """Simple rectangle bounds helper."""

    width: int
    height: int

    def contains(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def is_interior(self, x: int, y: int) -> bool:
        return 0 < x < self.width - 1 and 0 < y < self.height - 1
