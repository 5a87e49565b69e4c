"""Independent optimality check using OR-Tools min-cost flow.

The augmented state graph the solver walks is rebuilt as a flow network:
one node per ``(x, y, breaks_used)``, a unit-capacity unit-cost arc per
legal action, and zero-cost arcs from every goal state into a single sink.
Routing one unit of flow from the start state to the sink costs exactly the
minimum number of actions, so the result must agree with
:func:`portalmaze.engine.solver.solve`.
"""

from __future__ import annotations

from typing import Optional

from ortools.graph.python import min_cost_flow

from ..core.constants import CARDINAL_STEPS
from ..utils.logger import get_logger
from .grid import MazeGrid

LOGGER = get_logger(__name__)


def min_actions_by_flow(grid: MazeGrid, max_breaks: int) -> Optional[int]:
    """Return the optimal action count, or ``None`` if the goal is unreachable.

    Grids without a unique start and goal also yield ``None``.
    """
    if max_breaks < 0:
        raise ValueError(f"max_breaks must be non-negative, got {max_breaks}")

    start, goal = grid.endpoints()
    if start is None or goal is None:
        return None

    width, height = grid.width, grid.height
    layers = max_breaks + 1
    sink = width * height * layers

    def node(x: int, y: int, breaks: int) -> int:
        return (breaks * height + y) * width + x

    smcf = min_cost_flow.SimpleMinCostFlow()
    portals = grid.portal_groups()
    arc_count = 0
    for cell in grid:
        for breaks in range(layers):
            tail = node(cell.x, cell.y, breaks)
            if cell.is_portal():
                for dest in portals[cell.portal_color]:
                    if dest != cell.position:
                        smcf.add_arc_with_capacity_and_unit_cost(
                            tail, node(dest.x, dest.y, breaks), 1, 1
                        )
                        arc_count += 1
            for dx, dy in CARDINAL_STEPS:
                nx, ny = cell.x + dx, cell.y + dy
                if not grid.bounds.contains(nx, ny):
                    continue
                next_breaks = breaks + 1 if grid.cell(nx, ny).is_wall() else breaks
                if next_breaks > max_breaks:
                    continue
                smcf.add_arc_with_capacity_and_unit_cost(tail, node(nx, ny, next_breaks), 1, 1)
                arc_count += 1

    for breaks in range(layers):
        smcf.add_arc_with_capacity_and_unit_cost(node(goal.x, goal.y, breaks), sink, 1, 0)

    smcf.set_node_supply(node(start.x, start.y, 0), 1)
    smcf.set_node_supply(sink, -1)

    status = smcf.solve()
    if status != smcf.OPTIMAL:
        LOGGER.debug(
            "Flow check: no route on %r with budget %d (status=%s, %d arcs)",
            grid, max_breaks, status, arc_count,
        )
        return None
    return int(smcf.optimal_cost())
