import unittest
from datetime import datetime, timezone

from portalmaze.core.constants import CellKind, PortalColor
from portalmaze.core.exceptions import MalformedGridError
from portalmaze.core.models import Cell, Level, Position
from portalmaze.engine.grid import GridBuilder, MazeGrid


class MazeGridTests(unittest.TestCase):
    def test_text_parsing_assigns_kinds_and_colours(self) -> None:
        grid = MazeGrid.from_text(
            """
            S.#b
            r..G
            """
        )
        self.assertEqual((grid.width, grid.height), (4, 2))
        self.assertEqual(grid.cell(0, 0).kind, CellKind.START)
        self.assertEqual(grid.cell(2, 0).kind, CellKind.WALL)
        self.assertEqual(grid.cell(3, 0).portal_color, PortalColor.BLUE)
        self.assertEqual(grid.cell(0, 1).portal_color, PortalColor.RED)
        self.assertEqual(grid.endpoints(), (Position(0, 0), Position(3, 1)))
        self.assertEqual(grid.to_text(), "S.#b\nr..G")

    def test_ragged_rows_rejected(self) -> None:
        with self.assertRaises(MalformedGridError):
            MazeGrid.from_text(["S..", "..G."])

    def test_unknown_symbol_rejected(self) -> None:
        with self.assertRaises(MalformedGridError):
            MazeGrid.from_text("S?G")

    def test_empty_grid_rejected(self) -> None:
        with self.assertRaises(MalformedGridError):
            MazeGrid([])

    def test_portal_without_colour_rejected(self) -> None:
        with self.assertRaises(MalformedGridError):
            MazeGrid([[Cell(0, 0, CellKind.START), Cell(1, 0, CellKind.PORTAL), Cell(2, 0, CellKind.GOAL)]])

    def test_endpoints_none_when_duplicated(self) -> None:
        grid = MazeGrid.from_text("SSG")
        self.assertEqual(grid.endpoints(), (None, Position(2, 0)))

    def test_portal_groups_row_major(self) -> None:
        grid = MazeGrid.from_text(
            """
            b.y
            .b.
            y.b
            """
        )
        groups = grid.portal_groups()
        self.assertEqual(groups[PortalColor.BLUE], [Position(0, 0), Position(1, 1), Position(2, 2)])
        self.assertEqual(groups[PortalColor.YELLOW], [Position(2, 0), Position(0, 2)])

    def test_replace_returns_copy(self) -> None:
        grid = MazeGrid.from_text("S#G")
        opened = grid.replace(Cell(1, 0))
        self.assertEqual(grid.cell(1, 0).kind, CellKind.WALL)
        self.assertEqual(opened.cell(1, 0).kind, CellKind.EMPTY)
        self.assertNotEqual(grid, opened)

    def test_without_portals(self) -> None:
        grid = MazeGrid.from_text("Sb.bG")
        self.assertEqual(grid.without_portals().to_text(), "S...G")


class GridBuilderTests(unittest.TestCase):
    def test_freeze_produces_equal_grid(self) -> None:
        builder = GridBuilder(3, 2)
        builder.set(0, 0, CellKind.START)
        builder.set(2, 1, CellKind.GOAL)
        builder.set(1, 0, CellKind.PORTAL, PortalColor.GREEN)
        builder.set(1, 1, CellKind.PORTAL, PortalColor.GREEN)
        self.assertEqual(builder.freeze(), MazeGrid.from_text(["Sg#", "#gG"]))

    def test_portal_requires_colour(self) -> None:
        builder = GridBuilder(3, 3)
        with self.assertRaises(MalformedGridError):
            builder.set(1, 1, CellKind.PORTAL)

    def test_overwriting_portal_drops_colour(self) -> None:
        builder = GridBuilder(2, 1)
        builder.set(0, 0, CellKind.PORTAL, PortalColor.RED)
        builder.set(0, 0, CellKind.EMPTY)
        self.assertIsNone(builder.freeze().cell(0, 0).portal_color)


class LevelSerializationTests(unittest.TestCase):
    def test_level_json_round_trip(self) -> None:
        level = Level(
            id="abc123",
            name="Sample",
            grid=MazeGrid.from_text(["S#G", "b.b"]),
            max_breaks=1,
            optimal_no_break=4,
            optimal_with_break=2,
            created_at=datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
        )
        payload = level.to_jsonable()
        self.assertEqual(payload["grid"], ["S#G", "b.b"])
        self.assertEqual(payload["created_at"], "2024-01-02T03:04:05+00:00")
        self.assertEqual(Level.from_jsonable(payload), level)

    def test_unreachable_optimum_serialised_as_null(self) -> None:
        level = Level(
            id="x",
            name="Blocked",
            grid=MazeGrid.from_text("S#G"),
            max_breaks=1,
            optimal_no_break=None,
            optimal_with_break=2,
        )
        self.assertIsNone(level.to_jsonable()["optimal_no_break"])


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
