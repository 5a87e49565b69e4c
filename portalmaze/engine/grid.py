"""Grid representation and helper utilities."""

from __future__ import annotations

from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

from ..core.constants import Bounds, CellKind, PortalColor
from ..core.exceptions import MalformedGridError
from ..core.models import Cell, Position


KIND_SYMBOLS: Dict[CellKind, str] = {
    CellKind.EMPTY: ".",
    CellKind.WALL: "#",
    CellKind.START: "S",
    CellKind.GOAL: "G",
}
PORTAL_SYMBOLS: Dict[PortalColor, str] = {
    PortalColor.BLUE: "b",
    PortalColor.RED: "r",
    PortalColor.GREEN: "g",
    PortalColor.YELLOW: "y",
}
_SYMBOL_KINDS = {symbol: kind for kind, symbol in KIND_SYMBOLS.items()}
_SYMBOL_PORTALS = {symbol: color for color, symbol in PORTAL_SYMBOLS.items()}


def cell_symbol(cell: Cell) -> str:
    if cell.kind == CellKind.PORTAL and cell.portal_color is not None:
        return PORTAL_SYMBOLS[cell.portal_color]
    return KIND_SYMBOLS.get(cell.kind, "?")


def parse_symbol(symbol: str, x: int, y: int) -> Cell:
    if symbol in _SYMBOL_KINDS:
        return Cell(x=x, y=y, kind=_SYMBOL_KINDS[symbol])
    if symbol in _SYMBOL_PORTALS:
        return Cell(x=x, y=y, kind=CellKind.PORTAL, portal_color=_SYMBOL_PORTALS[symbol])
    raise MalformedGridError(f"Unknown cell symbol {symbol!r} at ({x},{y})")


class MazeGrid:
    """Immutable rectangular grid of cells, stored row-major.

    The solver only ever reads from a ``MazeGrid``; use :class:`GridBuilder`
    or :meth:`replace` to obtain a modified copy.
    """

    def __init__(self, rows: Sequence[Sequence[Cell]]) -> None:
        if not rows or not rows[0]:
            raise MalformedGridError("Grid must have at least one row and one column")
        width = len(rows[0])
        frozen: List[Tuple[Cell, ...]] = []
        for y, row in enumerate(rows):
            if len(row) != width:
                raise MalformedGridError(
                    f"Row {y} has width {len(row)}, expected {width}"
                )
            for x, cell in enumerate(row):
                if (cell.x, cell.y) != (x, y):
                    raise MalformedGridError(
                        f"Cell at ({x},{y}) reports coordinates ({cell.x},{cell.y})"
                    )
                if cell.kind == CellKind.PORTAL and cell.portal_color is None:
                    raise MalformedGridError(f"Portal at ({x},{y}) has no colour")
                if cell.kind != CellKind.PORTAL and cell.portal_color is not None:
                    raise MalformedGridError(f"Non-portal cell at ({x},{y}) carries a colour")
            frozen.append(tuple(row))
        self._rows: Tuple[Tuple[Cell, ...], ...] = tuple(frozen)
        self.bounds = Bounds(width=width, height=len(frozen))

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------
    @classmethod
    def from_text(cls, text: str | Iterable[str]) -> "MazeGrid":
        """Parse the one-character-per-cell text form (see ``KIND_SYMBOLS``)."""

        lines = text.splitlines() if isinstance(text, str) else list(text)
        lines = [line.strip() for line in lines if line.strip()]
        return cls(
            [[parse_symbol(symbol, x, y) for x, symbol in enumerate(line)] for y, line in enumerate(lines)]
        )

    @classmethod
    def from_jsonable(cls, payload: Sequence[str]) -> "MazeGrid":
        return cls.from_text(list(payload))

    def to_text(self) -> str:
        return "\n".join("".join(cell_symbol(cell) for cell in row) for row in self._rows)

    def to_jsonable(self) -> List[str]:
        return ["".join(cell_symbol(cell) for cell in row) for row in self._rows]

    def replace(self, *cells: Cell) -> "MazeGrid":
        """Return a copy with the given cells substituted at their coordinates."""

        rows = [list(row) for row in self._rows]
        for cell in cells:
            if not self.bounds.contains(cell.x, cell.y):
                raise MalformedGridError(f"Cell ({cell.x},{cell.y}) outside bounds")
            rows[cell.y][cell.x] = cell
        return MazeGrid(rows)

    def without_portals(self) -> "MazeGrid":
        return self.replace(
            *(Cell(x=cell.x, y=cell.y) for cell in self if cell.kind == CellKind.PORTAL)
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    @property
    def width(self) -> int:
        return self.bounds.width

    @property
    def height(self) -> int:
        return self.bounds.height

    @property
    def rows(self) -> Tuple[Tuple[Cell, ...], ...]:
        return self._rows

    def cell(self, x: int, y: int) -> Cell:
        return self._rows[y][x]

    def __iter__(self) -> Iterator[Cell]:
        for row in self._rows:
            yield from row

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MazeGrid):
            return NotImplemented
        return self._rows == other._rows

    def __hash__(self) -> int:
        return hash(self._rows)

    def __repr__(self) -> str:
        return f"MazeGrid({self.width}x{self.height})"

    def positions_of(self, kind: CellKind) -> List[Position]:
        return [cell.position for cell in self if cell.kind == kind]

    def endpoints(self) -> Tuple[Optional[Position], Optional[Position]]:
        """Return ``(start, goal)`` when each occurs exactly once, ``None`` otherwise."""

        starts = self.positions_of(CellKind.START)
        goals = self.positions_of(CellKind.GOAL)
        start = starts[0] if len(starts) == 1 else None
        goal = goals[0] if len(goals) == 1 else None
        return start, goal

    def portal_groups(self) -> Dict[PortalColor, List[Position]]:
        """Group portal positions by colour, members in row-major order."""

        groups: Dict[PortalColor, List[Position]] = {}
        for cell in self:
            if cell.is_portal():
                groups.setdefault(cell.portal_color, []).append(cell.position)
        return groups


class GridBuilder:
    """Mutable grid owned by the generator while a level is being carved."""

    def __init__(self, width: int, height: int, fill: CellKind = CellKind.WALL) -> None:
        self.bounds = Bounds(width=width, height=height)
        self._kinds: List[List[CellKind]] = [[fill for _ in range(width)] for _ in range(height)]
        self._colors: Dict[Tuple[int, int], PortalColor] = {}

    def kind(self, x: int, y: int) -> CellKind:
        return self._kinds[y][x]

    def set(self, x: int, y: int, kind: CellKind, color: Optional[PortalColor] = None) -> None:
        if kind == CellKind.PORTAL and color is None:
            raise MalformedGridError(f"Portal at ({x},{y}) needs a colour")
        self._kinds[y][x] = kind
        if kind == CellKind.PORTAL:
            self._colors[(x, y)] = color
        else:
            self._colors.pop((x, y), None)

    def positions_of(self, kind: CellKind) -> List[Position]:
        return [
            Position(x, y)
            for y in range(self.bounds.height)
            for x in range(self.bounds.width)
            if self._kinds[y][x] == kind
        ]

    def freeze(self) -> MazeGrid:
        return MazeGrid(
            [
                [
                    Cell(x=x, y=y, kind=self._kinds[y][x], portal_color=self._colors.get((x, y)))
                    for x in range(self.bounds.width)
                ]
                for y in range(self.bounds.height)
            ]
        )
