"""Data models supporting the solver and the generator."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Dict, NamedTuple, Optional

from .constants import CellKind, PortalColor

if TYPE_CHECKING:
    from ..engine.grid import MazeGrid


class Position(NamedTuple):
    x: int
    y: int


@dataclass(frozen=True)
class Cell:
    """A single grid cell. ``portal_color`` is set only for portal cells."""

    x: int
    y: int
    kind: CellKind = CellKind.EMPTY
    portal_color: Optional[PortalColor] = None

    @property
    def position(self) -> Position:
        return Position(self.x, self.y)

    def is_wall(self) -> bool:
        return self.kind == CellKind.WALL

    def is_portal(self) -> bool:
        return self.kind == CellKind.PORTAL and self.portal_color is not None


@dataclass(frozen=True)
class Level:
    """A playable level with its optimal action counts.

    ``optimal_no_break`` is the optimum with a break budget of zero and
    ``optimal_with_break`` the optimum with ``max_breaks``. ``None`` marks an
    unreachable goal under that ruleset. Both are computed once, when the
    level is created.
    """

    id: str
    name: str
    grid: "MazeGrid"
    max_breaks: int
    optimal_no_break: Optional[int]
    optimal_with_break: Optional[int]
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_jsonable(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "max_breaks": self.max_breaks,
            "optimal_no_break": self.optimal_no_break,
            "optimal_with_break": self.optimal_with_break,
            "created_at": self.created_at.isoformat(),
            "grid": self.grid.to_jsonable(),
        }

    @classmethod
    def from_jsonable(cls, payload: Dict[str, Any]) -> "Level":
        from ..engine.grid import MazeGrid

        created_raw = payload.get("created_at")
        created_at = (
            datetime.fromisoformat(created_raw) if created_raw else datetime.now(timezone.utc)
        )
        return cls(
            id=str(payload["id"]),
            name=str(payload.get("name", "Untitled")),
            grid=MazeGrid.from_jsonable(payload["grid"]),
            max_breaks=int(payload.get("max_breaks", 0)),
            optimal_no_break=payload.get("optimal_no_break"),
            optimal_with_break=payload.get("optimal_with_break"),
            created_at=created_at,
        )
