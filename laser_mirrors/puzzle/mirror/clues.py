"""Boundary clue calculation for laser mirror grids."""

from __future__ import annotations

from typing import Collection, Dict, List, Set, Tuple

from .trace import trace_ray
from .types import LOOP, SIDES, UNKNOWN, BoundaryKey, Clue, ClueTable, Grid, RayPath


def trace_boundary(grid: Grid) -> Tuple[ClueTable, List[RayPath]]:
    """Trace every boundary position and return the clue table plus terminating rays.

    A terminating ray fixes the clue at both of its ends. Looping rays only
    mark their own entry, and a finite value reaching a position through
    either end wins over a loop mark.
    """

    size = grid.size
    steps_by_key: Dict[BoundaryKey, int] = {}
    loops: Set[BoundaryKey] = set()
    paths: List[RayPath] = []

    for side in SIDES:
        for index in range(size):
            entry = BoundaryKey(side, index)
            result = trace_ray(grid, entry)
            if result.is_loop:
                loops.add(entry)
                continue
            steps_by_key[entry] = result.steps
            steps_by_key[result.exit] = result.steps
            paths.append(RayPath(entry=entry, exit=result.exit, path=result.path, steps=result.steps))

    sides: Dict[str, List[Clue]] = {}
    for side in SIDES:
        values: List[Clue] = []
        for index in range(size):
            key = BoundaryKey(side, index)
            if key in steps_by_key:
                values.append(Clue.finite(steps_by_key[key]))
            elif key in loops:
                values.append(LOOP)
            else:
                values.append(UNKNOWN)
        sides[side.value] = values
    return ClueTable(**sides), paths


def compute_clues(grid: Grid) -> ClueTable:
    clues, _ = trace_boundary(grid)
    return clues


def has_loop_clue(clues: ClueTable) -> bool:
    return any(clue.is_loop for _, clue in clues.items())


def mismatched_keys(
    current: ClueTable,
    target: ClueTable,
    hidden: Collection[BoundaryKey] = (),
) -> List[BoundaryKey]:
    """Boundary keys whose current clue differs from the target, skipping hidden ones."""

    if current.size != target.size:
        raise ValueError(f"Clue tables differ in size: {current.size} vs {target.size}")
    return [key for key, clue in target.items() if key not in hidden and current[key] != clue]


def clues_match(
    current: ClueTable,
    target: ClueTable,
    hidden: Collection[BoundaryKey] = (),
) -> bool:
    return not mismatched_keys(current, target, hidden)


__all__ = ["trace_boundary", "compute_clues", "has_loop_clue", "mismatched_keys", "clues_match"]
