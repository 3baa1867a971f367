"""Single-ray tracing through a mirror grid."""

from __future__ import annotations

from typing import Dict, Set, Tuple

from .types import BoundaryKey, Grid, LOOP_STEPS, Mirror, Position, Side, TraceResult

State = Tuple[int, int, int, int]

# Inward direction (dr, dc) per entry side.
_ENTRY_DIRECTIONS: Dict[Side, Tuple[int, int]] = {
    Side.TOP: (1, 0),
    Side.BOTTOM: (-1, 0),
    Side.LEFT: (0, 1),
    Side.RIGHT: (0, -1),
}


def entry_cell(size: int, entry: BoundaryKey) -> Position:
    """Return the first cell a ray entering at ``entry`` passes through."""

    side = Side(entry.side)
    if side is Side.TOP:
        return Position(0, entry.index)
    if side is Side.BOTTOM:
        return Position(size - 1, entry.index)
    if side is Side.LEFT:
        return Position(entry.index, 0)
    return Position(entry.index, size - 1)


def reflect(mirror: Mirror, dr: int, dc: int) -> Tuple[int, int]:
    if mirror is Mirror.FORWARD:
        return -dc, -dr
    if mirror is Mirror.BACKWARD:
        return dc, dr
    return dr, dc


def _exit_for(size: int, row: int, col: int) -> BoundaryKey:
    if row < 0:
        return BoundaryKey(Side.TOP, col)
    if row >= size:
        return BoundaryKey(Side.BOTTOM, col)
    if col < 0:
        return BoundaryKey(Side.LEFT, row)
    return BoundaryKey(Side.RIGHT, row)


def trace_ray(grid: Grid, entry: BoundaryKey) -> TraceResult:
    """Follow a ray entering at ``entry`` until it leaves the grid or repeats a state.

    The step count includes the entry cell. A ray that revisits a
    (row, col, direction) state is reported with ``LOOP_STEPS`` and no exit;
    the partial path is kept for diagnostics.
    """

    size = grid.size
    try:
        side = Side(entry.side)
    except ValueError as exc:
        raise ValueError(f"Invalid entry side: {entry.side!r}") from exc
    if not 0 <= entry.index < size:
        raise ValueError(f"Entry index {entry.index} out of range for size {size}")

    r, c = entry_cell(size, BoundaryKey(side, entry.index))
    dr, dc = _ENTRY_DIRECTIONS[side]

    visited: Set[State] = set()
    path = [Position(r, c)]
    steps = 1

    while True:
        state = (r, c, dr, dc)
        if state in visited:
            return TraceResult(steps=LOOP_STEPS, path=path)
        visited.add(state)

        dr, dc = reflect(grid.mirror_at(r, c), dr, dc)
        next_r, next_c = r + dr, c + dc
        if not grid.in_bounds(next_r, next_c):
            return TraceResult(steps=steps, path=path, exit=_exit_for(size, next_r, next_c))

        r, c = next_r, next_c
        path.append(Position(r, c))
        steps += 1


__all__ = ["trace_ray", "entry_cell", "reflect"]
