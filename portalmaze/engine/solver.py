"""Minimum-action search over (position, breaks used) states.

Every action costs one: a cardinal move onto an open cell, a cardinal move
into a wall (which breaks it and consumes budget), or a teleport between two
portals of the same colour. Breadth-first order therefore yields the optimal
action count the first time the goal is dequeued.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Deque, Dict, List, NamedTuple, Optional, Tuple

from ..core.constants import CARDINAL_STEPS, ActionKind, PortalColor, SolveStatus
from ..core.models import Position
from ..utils.logger import get_logger
from .grid import MazeGrid

LOGGER = get_logger(__name__)


class SearchState(NamedTuple):
    x: int
    y: int
    breaks_used: int

    @property
    def position(self) -> Position:
        return Position(self.x, self.y)


@dataclass(frozen=True)
class SolveResult:
    status: SolveStatus
    minimum_actions: Optional[int] = None
    path: Tuple[Position, ...] = ()
    actions: Tuple[ActionKind, ...] = ()

    @property
    def reachable(self) -> bool:
        return self.status == SolveStatus.SOLVED


# state -> (previous state, action that produced it)
_Parents = Dict[SearchState, Optional[Tuple[SearchState, ActionKind]]]


def solve(grid: MazeGrid, max_breaks: int) -> SolveResult:
    """Return the minimum number of actions from start to goal.

    Args:
        grid: Grid to search. It is never modified.
        max_breaks: Number of walls that may be broken on the way.

    Returns:
        ``SolveResult`` with status ``SOLVED`` and the action count, an
        example optimal path and its actions; ``UNREACHABLE`` when no
        sequence of actions within the budget reaches the goal; or
        ``MALFORMED`` when the grid lacks a unique start or goal.
    """
    if max_breaks < 0:
        raise ValueError(f"max_breaks must be non-negative, got {max_breaks}")

    start, goal = grid.endpoints()
    if start is None or goal is None:
        LOGGER.debug("Grid %r has no unique start/goal; not searching", grid)
        return SolveResult(status=SolveStatus.MALFORMED)

    portals = grid.portal_groups()
    origin = SearchState(start.x, start.y, 0)
    parents: _Parents = {origin: None}
    distance: Dict[SearchState, int] = {origin: 0}
    frontier: Deque[SearchState] = deque([origin])

    def push(state: SearchState, came_from: SearchState, action: ActionKind) -> None:
        if state in parents:
            return
        parents[state] = (came_from, action)
        distance[state] = distance[came_from] + 1
        frontier.append(state)

    while frontier:
        state = frontier.popleft()
        if state.position == goal:
            path, actions = _reconstruct(parents, state)
            LOGGER.debug(
                "Solved %r with budget %d: %d actions (%d states expanded)",
                grid, max_breaks, distance[state], len(parents),
            )
            return SolveResult(
                status=SolveStatus.SOLVED,
                minimum_actions=distance[state],
                path=path,
                actions=actions,
            )

        for target in _teleport_targets(grid, portals, state):
            push(target, state, ActionKind.TELEPORT)
        for target, action in _cardinal_targets(grid, state, max_breaks):
            push(target, state, action)

    LOGGER.debug(
        "Goal unreachable on %r with budget %d (%d states explored)",
        grid, max_breaks, len(parents),
    )
    return SolveResult(status=SolveStatus.UNREACHABLE)


def _teleport_targets(
    grid: MazeGrid,
    portals: Dict[PortalColor, List[Position]],
    state: SearchState,
) -> List[SearchState]:
    cell = grid.cell(state.x, state.y)
    if not cell.is_portal():
        return []
    return [
        SearchState(dest.x, dest.y, state.breaks_used)
        for dest in portals.get(cell.portal_color, [])
        if dest != state.position
    ]


def _cardinal_targets(
    grid: MazeGrid, state: SearchState, max_breaks: int
) -> List[Tuple[SearchState, ActionKind]]:
    targets: List[Tuple[SearchState, ActionKind]] = []
    for dx, dy in CARDINAL_STEPS:
        nx, ny = state.x + dx, state.y + dy
        if not grid.bounds.contains(nx, ny):
            continue
        if grid.cell(nx, ny).is_wall():
            # Breaking opens the wall for this path only; the grid stays untouched.
            if state.breaks_used + 1 > max_breaks:
                continue
            targets.append((SearchState(nx, ny, state.breaks_used + 1), ActionKind.BREAK))
        else:
            targets.append((SearchState(nx, ny, state.breaks_used), ActionKind.MOVE))
    return targets


def _reconstruct(
    parents: _Parents, end: SearchState
) -> Tuple[Tuple[Position, ...], Tuple[ActionKind, ...]]:
    positions: List[Position] = [end.position]
    actions: List[ActionKind] = []
    link = parents[end]
    while link is not None:
        previous, action = link
        positions.append(previous.position)
        actions.append(action)
        link = parents[previous]
    positions.reverse()
    actions.reverse()
    return tuple(positions), tuple(actions)
