"""Random maze level generation.

Generate-and-validate approach:
  1. Carve: recursive backtracking on the odd-coordinate lattice, place the
     start at the carve origin, the goal at the farthest carved cell, one
     portal pair on random open cells, then punch random holes in walls.
  2. Validate: solve with no breaks and with the requested budget. Both
     must reach the goal or the attempt is discarded.
"""

from __future__ import annotations

import random
from collections import deque
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Deque, Dict, List, Optional, Tuple

from ..core.constants import (CARDINAL_STEPS, CARVE_ORIGIN, CARVE_STEPS, DEFAULT_GRID_SIZE,
                              DEFAULT_HOLE_PROBABILITY, DEFAULT_MAX_ATTEMPTS,
                              GENERATED_PORTAL_COLOR, MIN_GRID_SIZE, CellKind)
from ..core.models import Level, Position
from ..utils.logger import get_logger
from .flow_check import min_actions_by_flow
from .grid import GridBuilder, MazeGrid
from .solver import solve


LOGGER = get_logger(__name__)

FALLBACK_NAME = "Fallback Level"
FALLBACK_OPTIMAL_ACTIONS = 2


@dataclass
class GeneratorConfig:
    width: int = DEFAULT_GRID_SIZE
    height: int = DEFAULT_GRID_SIZE
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    hole_probability: float = DEFAULT_HOLE_PROBABILITY
    seed: Optional[int] = None
    cross_check: bool = False

    def __post_init__(self) -> None:
        if self.width < MIN_GRID_SIZE or self.height < MIN_GRID_SIZE:
            raise ValueError(
                f"Grid must be at least {MIN_GRID_SIZE}x{MIN_GRID_SIZE}, "
                f"got {self.width}x{self.height}"
            )
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if not 0.0 <= self.hole_probability <= 1.0:
            raise ValueError("hole_probability must lie in [0, 1]")


class MazeGenerator:
    """Carves random levels and keeps only those the solver accepts."""

    def __init__(self, config: Optional[GeneratorConfig] = None) -> None:
        self.config = config or GeneratorConfig()
        self.rng = random.Random(self.config.seed)

    # ------------------------------------------------------------------
    # Public entrypoint
    # ------------------------------------------------------------------
    def generate(self, break_budget: int) -> Level:
        """Return a level solvable with zero breaks and with ``break_budget``.

        Never fails: after ``max_attempts`` rejected carves a trivial
        corridor level is returned instead.
        """
        if break_budget < 0:
            raise ValueError(f"break_budget must be non-negative, got {break_budget}")

        for attempt in range(1, self.config.max_attempts + 1):
            LOGGER.debug("Generation attempt %s/%s", attempt, self.config.max_attempts)
            grid = self._carve_attempt()
            optima = self._validate(grid, break_budget)
            if optima is None:
                LOGGER.debug("Attempt %s rejected", attempt)
                continue
            no_break, with_break = optima
            level = Level(
                id=self._new_id(),
                name=f"Random Sector {self.rng.randint(100, 999)}",
                grid=grid,
                max_breaks=break_budget,
                optimal_no_break=no_break,
                optimal_with_break=with_break,
            )
            LOGGER.info(
                "Generated '%s' on attempt %s: %s actions without breaks, %s with %s",
                level.name, attempt, no_break, with_break, break_budget,
            )
            return level

        LOGGER.warning(
            "No valid maze after %s attempts; using fallback corridor",
            self.config.max_attempts,
        )
        return fallback_level(break_budget, level_id=self._new_id())

    # ------------------------------------------------------------------
    # Attempt construction
    # ------------------------------------------------------------------
    def _carve_attempt(self) -> MazeGrid:
        builder = GridBuilder(self.config.width, self.config.height, fill=CellKind.WALL)
        origin = Position(*CARVE_ORIGIN)
        self._carve_passages(builder, origin)
        builder.set(origin.x, origin.y, CellKind.START)
        goal = self._farthest_open_cell(builder, origin)
        builder.set(goal.x, goal.y, CellKind.GOAL)
        self._place_portal_pair(builder)
        self._punch_holes(builder)
        return builder.freeze()

    def _carve_passages(self, builder: GridBuilder, origin: Position) -> None:
        builder.set(origin.x, origin.y, CellKind.EMPTY)
        stack: List[Position] = [origin]
        visited = {origin}
        while stack:
            x, y = stack[-1]
            options: List[Tuple[Position, Position]] = []
            for dx, dy in CARVE_STEPS:
                target = Position(x + dx, y + dy)
                if builder.bounds.is_interior(*target) and target not in visited:
                    options.append((target, Position(x + dx // 2, y + dy // 2)))
            if not options:
                stack.pop()
                continue
            target, between = self.rng.choice(options)
            builder.set(between.x, between.y, CellKind.EMPTY)
            builder.set(target.x, target.y, CellKind.EMPTY)
            visited.add(target)
            stack.append(target)

    @staticmethod
    def _farthest_open_cell(builder: GridBuilder, start: Position) -> Position:
        """BFS over empty cells; the first cell found at the greatest distance wins."""

        distances: Dict[Position, int] = {start: 0}
        queue: Deque[Position] = deque([start])
        best, best_distance = start, 0
        while queue:
            current = queue.popleft()
            if distances[current] > best_distance:
                best, best_distance = current, distances[current]
            for dx, dy in CARDINAL_STEPS:
                nxt = Position(current.x + dx, current.y + dy)
                if not builder.bounds.contains(*nxt) or nxt in distances:
                    continue
                if builder.kind(*nxt) != CellKind.EMPTY:
                    continue
                distances[nxt] = distances[current] + 1
                queue.append(nxt)
        return best

    def _place_portal_pair(self, builder: GridBuilder) -> None:
        empties = builder.positions_of(CellKind.EMPTY)
        if len(empties) < 2:
            LOGGER.debug("Only %d open cells; skipping portals", len(empties))
            return
        self.rng.shuffle(empties)
        for pos in empties[:2]:
            builder.set(pos.x, pos.y, CellKind.PORTAL, GENERATED_PORTAL_COLOR)

    def _punch_holes(self, builder: GridBuilder) -> None:
        for y in range(1, builder.bounds.height - 1):
            for x in range(1, builder.bounds.width - 1):
                if builder.kind(x, y) == CellKind.WALL and self.rng.random() < self.config.hole_probability:
                    builder.set(x, y, CellKind.EMPTY)

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------
    def _validate(self, grid: MazeGrid, break_budget: int) -> Optional[Tuple[int, int]]:
        no_break = solve(grid, 0)
        with_break = solve(grid, break_budget)
        if not (no_break.reachable and with_break.reachable):
            return None
        optima = (no_break.minimum_actions, with_break.minimum_actions)
        if self.config.cross_check:
            expected = (min_actions_by_flow(grid, 0), min_actions_by_flow(grid, break_budget))
            if expected != optima:
                LOGGER.error(
                    "Solver/flow disagreement on %r: bfs=%s flow=%s",
                    grid, optima, expected,
                )
                return None
        return optima

    def _new_id(self) -> str:
        return f"{self.rng.getrandbits(32):08x}"


def fallback_level(break_budget: int, level_id: str = "fallback") -> Level:
    """A 3x1 corridor ``S.G`` that is solvable in two moves under any budget."""

    return Level(
        id=level_id,
        name=FALLBACK_NAME,
        grid=MazeGrid.from_text("S.G"),
        max_breaks=break_budget,
        optimal_no_break=FALLBACK_OPTIMAL_ACTIONS,
        optimal_with_break=FALLBACK_OPTIMAL_ACTIONS,
        created_at=datetime.now(timezone.utc),
    )


def generate(break_budget: int, config: Optional[GeneratorConfig] = None) -> Level:
    """Generate one validated level with a fresh :class:`MazeGenerator`."""

    return MazeGenerator(config).generate(break_budget)
