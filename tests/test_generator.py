import unittest
from collections import deque
from unittest.mock import patch

from portalmaze.core.constants import CellKind, PortalColor, SolveStatus
from portalmaze.engine.generator import (FALLBACK_NAME, GeneratorConfig, MazeGenerator,
                                         fallback_level, generate)
from portalmaze.engine.grid import MazeGrid
from portalmaze.engine.solver import SolveResult, solve


def open_distances(grid: MazeGrid, origin):
    distances = {origin: 0}
    queue = deque([origin])
    while queue:
        x, y = queue.popleft()
        for dx, dy in ((0, -1), (1, 0), (0, 1), (-1, 0)):
            nxt = (x + dx, y + dy)
            if grid.bounds.contains(*nxt) and nxt not in distances and not grid.cell(*nxt).is_wall():
                distances[nxt] = distances[(x, y)] + 1
                queue.append(nxt)
    return distances


class GeneratorValidityTests(unittest.TestCase):
    def test_levels_are_solvable_for_each_budget(self) -> None:
        for budget in range(6):
            for seed in range(5):
                with self.subTest(budget=budget, seed=seed):
                    level = MazeGenerator(GeneratorConfig(seed=seed * 31 + budget)).generate(budget)
                    grid = level.grid
                    self.assertEqual(len(grid.positions_of(CellKind.START)), 1)
                    self.assertEqual(len(grid.positions_of(CellKind.GOAL)), 1)
                    self.assertEqual(level.max_breaks, budget)
                    no_break = solve(grid, 0)
                    with_break = solve(grid, budget)
                    self.assertTrue(no_break.reachable)
                    self.assertTrue(with_break.reachable)
                    self.assertEqual(level.optimal_no_break, no_break.minimum_actions)
                    self.assertEqual(level.optimal_with_break, with_break.minimum_actions)
                    self.assertLessEqual(level.optimal_with_break, level.optimal_no_break)

    def test_border_stays_closed(self) -> None:
        level = MazeGenerator(GeneratorConfig(seed=11, hole_probability=0.5)).generate(2)
        grid = level.grid
        for cell in grid:
            if cell.x in (0, grid.width - 1) or cell.y in (0, grid.height - 1):
                self.assertEqual(cell.kind, CellKind.WALL, msg=f"open border at {cell.position}")

    def test_single_blue_pair(self) -> None:
        level = MazeGenerator(GeneratorConfig(seed=5)).generate(1)
        groups = level.grid.portal_groups()
        self.assertEqual(list(groups), [PortalColor.BLUE])
        self.assertEqual(len(groups[PortalColor.BLUE]), 2)

    def test_start_at_carve_origin(self) -> None:
        level = MazeGenerator(GeneratorConfig(seed=3)).generate(1)
        self.assertEqual(level.grid.endpoints()[0], (1, 1))

    def test_perfect_maze_without_holes(self) -> None:
        # 10x10: 16 lattice cells joined by 15 corridor cells
        level = MazeGenerator(GeneratorConfig(seed=8, hole_probability=0.0)).generate(1)
        open_cells = [cell for cell in level.grid if not cell.is_wall()]
        self.assertEqual(len(open_cells), 31)

    def test_goal_is_farthest_open_cell(self) -> None:
        for seed in range(4):
            level = MazeGenerator(GeneratorConfig(seed=seed, hole_probability=0.0)).generate(0)
            start, goal = level.grid.endpoints()
            distances = open_distances(level.grid, tuple(start))
            self.assertEqual(distances[tuple(goal)], max(distances.values()))

    def test_seed_reproduces_level(self) -> None:
        first = MazeGenerator(GeneratorConfig(seed=1234)).generate(2)
        second = MazeGenerator(GeneratorConfig(seed=1234)).generate(2)
        self.assertEqual(first.grid, second.grid)
        self.assertEqual(first.id, second.id)
        self.assertEqual(first.name, second.name)
        self.assertTrue(first.name.startswith("Random Sector "))

    def test_custom_size(self) -> None:
        level = generate(1, GeneratorConfig(width=7, height=9, seed=2))
        self.assertEqual((level.grid.width, level.grid.height), (7, 9))

    def test_cross_check_accepts_valid_levels(self) -> None:
        level = MazeGenerator(GeneratorConfig(seed=21, cross_check=True)).generate(2)
        self.assertNotEqual(level.name, FALLBACK_NAME)


class GeneratorFallbackTests(unittest.TestCase):
    def test_exhausted_attempts_return_corridor(self) -> None:
        unreachable = SolveResult(status=SolveStatus.UNREACHABLE)
        with patch("portalmaze.engine.generator.solve", return_value=unreachable) as fake_solve:
            level = MazeGenerator(GeneratorConfig(seed=1, max_attempts=3)).generate(2)
        self.assertEqual(fake_solve.call_count, 6)
        self.assertEqual(level.name, FALLBACK_NAME)
        self.assertEqual(level.grid.to_text(), "S.G")
        self.assertEqual(level.max_breaks, 2)
        self.assertEqual(level.optimal_no_break, solve(level.grid, 0).minimum_actions)
        self.assertEqual(level.optimal_with_break, solve(level.grid, 2).minimum_actions)

    def test_fallback_level_is_solvable(self) -> None:
        level = fallback_level(0)
        self.assertEqual(solve(level.grid, 0).minimum_actions, 2)


class GeneratorConfigTests(unittest.TestCase):
    def test_rejects_tiny_grid(self) -> None:
        with self.assertRaises(ValueError):
            GeneratorConfig(width=4)

    def test_rejects_bad_probability(self) -> None:
        with self.assertRaises(ValueError):
            GeneratorConfig(hole_probability=1.5)

    def test_rejects_zero_attempts(self) -> None:
        with self.assertRaises(ValueError):
            GeneratorConfig(max_attempts=0)

    def test_negative_budget_rejected(self) -> None:
        with self.assertRaises(ValueError):
            MazeGenerator().generate(-1)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
