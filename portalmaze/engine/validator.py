"""Structural and solvability checks for authored levels."""

from __future__ import annotations

import uuid
from collections import Counter
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from ..core.constants import CellKind
from ..core.exceptions import ValidationError
from ..core.models import Level
from ..utils.logger import get_logger
from .grid import MazeGrid
from .solver import solve


LOGGER = get_logger(__name__)


@dataclass
class ValidationResult:
    ok: bool
    messages: List[str] = field(default_factory=list)
    optimal_no_break: Optional[int] = None
    optimal_with_break: Optional[int] = None


class LevelValidator:
    """Runs the authoring checks over a grid before it becomes a level."""

    def __init__(self, strict_pairs: bool = False) -> None:
        self.strict_pairs = strict_pairs

    def validate(self, grid: MazeGrid, max_breaks: int) -> ValidationResult:
        try:
            self._check_unique(grid, CellKind.START, "START")
            self._check_unique(grid, CellKind.GOAL, "GOAL")
            self._check_portal_groups(grid)
            no_break, with_break = self._check_solvable(grid, max_breaks)
        except ValidationError as exc:
            LOGGER.info("Validation failed: %s", exc)
            return ValidationResult(ok=False, messages=[str(exc)])
        return ValidationResult(
            ok=True, optimal_no_break=no_break, optimal_with_break=with_break
        )

    def verify_level(self, level: Level) -> ValidationResult:
        """Re-solve a stored level and compare against its recorded optima."""

        result = self.validate(level.grid, level.max_breaks)
        if not result.ok:
            return result
        messages: List[str] = []
        if result.optimal_no_break != level.optimal_no_break:
            messages.append(
                f"Stored no-break optimum {level.optimal_no_break} "
                f"differs from solver result {result.optimal_no_break}"
            )
        if result.optimal_with_break != level.optimal_with_break:
            messages.append(
                f"Stored optimum with {level.max_breaks} breaks {level.optimal_with_break} "
                f"differs from solver result {result.optimal_with_break}"
            )
        if messages:
            LOGGER.warning("Level %s has stale optima: %s", level.id, messages)
        result.ok = not messages
        result.messages = messages
        return result

    @staticmethod
    def _check_unique(grid: MazeGrid, kind: CellKind, label: str) -> None:
        count = len(grid.positions_of(kind))
        if count == 0:
            raise ValidationError(f"Missing {label} point.")
        if count > 1:
            raise ValidationError(f"Multiple {label} points.")

    def _check_portal_groups(self, grid: MazeGrid) -> None:
        sizes = Counter(cell.portal_color for cell in grid if cell.is_portal())
        for color, count in sizes.items():
            if count < 2:
                raise ValidationError(f"{color.value} portal has no pair.")
            if self.strict_pairs and count != 2:
                raise ValidationError(f"{color.value} portals must be a pair, found {count}.")

    @staticmethod
    def _check_solvable(grid: MazeGrid, max_breaks: int) -> Tuple[Optional[int], Optional[int]]:
        no_break = solve(grid, 0)
        with_break = solve(grid, max_breaks)
        if not no_break.reachable and not with_break.reachable:
            raise ValidationError("Level is impossible to complete in either mode.")
        return no_break.minimum_actions, with_break.minimum_actions


def author_level(
    grid: MazeGrid,
    name: str,
    max_breaks: int,
    level_id: Optional[str] = None,
    strict_pairs: bool = False,
) -> Level:
    """Validate a hand-built grid and package it as a :class:`Level`."""

    result = LevelValidator(strict_pairs=strict_pairs).validate(grid, max_breaks)
    if not result.ok:
        raise ValidationError(result.messages[0])
    return Level(
        id=level_id or uuid.uuid4().hex[:8],
        name=name or "Untitled",
        grid=grid,
        max_breaks=max_breaks,
        optimal_no_break=result.optimal_no_break,
        optimal_with_break=result.optimal_with_break,
    )
