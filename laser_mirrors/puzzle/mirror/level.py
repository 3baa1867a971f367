"""Random level generation with loop rejection."""

from __future__ import annotations

import logging
import random
from typing import Collection, Optional

from .clues import clues_match, compute_clues, has_loop_clue, trace_boundary
from .mirror_count import sample_mirror_count
from .types import BoundaryKey, Grid, LevelData, Mirror, Position

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 200
MAX_PLAYABLE_ATTEMPTS = 10


class GenerationExhaustedError(RuntimeError):
    """Raised in strict mode when no loop-free layout was found within the budget."""

    def __init__(self, size: int, mirror_count: int, attempts: int) -> None:
        super().__init__(
            f"No loop-free {size}x{size} layout with {mirror_count} mirrors after {attempts} attempts"
        )
        self.size = size
        self.mirror_count = mirror_count
        self.attempts = attempts


def place_random_mirrors(size: int, mirror_count: int, rng: Optional[random.Random] = None) -> Grid:
    """Scatter ``mirror_count`` mirrors with random orientations on an empty grid."""

    rng = rng or random
    grid = Grid.empty(size)
    positions = [Position(r, c) for r in range(size) for c in range(size)]
    rng.shuffle(positions)
    for r, c in positions[:mirror_count]:
        grid.place(r, c, Mirror.FORWARD if rng.random() < 0.5 else Mirror.BACKWARD)
    return grid


def generate_level(
    size: int,
    mirror_count: int,
    *,
    rng: Optional[random.Random] = None,
    max_attempts: int = MAX_ATTEMPTS,
    strict: bool = False,
) -> LevelData:
    """Generate a level whose boundary rays all terminate.

    Layouts containing a looping ray are rejected and redrawn. When the
    budget runs out the last layout is returned as-is, unless ``strict``
    is set, in which case :class:`GenerationExhaustedError` is raised.
    """

    if size < 1:
        raise ValueError("Grid size must be at least 1")
    if not 0 <= mirror_count <= size * size:
        raise ValueError(f"mirror_count must be within [0, {size * size}] for size {size}")
    if max_attempts < 1:
        raise ValueError("max_attempts must be positive")

    for attempt in range(1, max_attempts + 1):
        grid = place_random_mirrors(size, mirror_count, rng)
        clues, paths = trace_boundary(grid)
        if not has_loop_clue(clues):
            return LevelData(size=size, grid=grid, clues=clues, paths=paths)
        logger.debug("Attempt %d for %dx%d rejected: layout contains a loop", attempt, size, size)

    if strict:
        raise GenerationExhaustedError(size, mirror_count, max_attempts)
    logger.warning(
        "Returning a %dx%d layout with loops after %d attempts (%d mirrors)",
        size,
        size,
        max_attempts,
        mirror_count,
    )
    return LevelData(size=size, grid=grid, clues=clues, paths=paths)


def is_trivially_solved(level: LevelData, hidden: Collection[BoundaryKey] = ()) -> bool:
    """True when an empty grid already reproduces every visible clue of ``level``."""

    return clues_match(compute_clues(Grid.empty(level.size)), level.clues, hidden)


def generate_playable_level(
    size: int,
    *,
    mirror_count: Optional[int] = None,
    hidden: Collection[BoundaryKey] = (),
    rng: Optional[random.Random] = None,
    max_attempts: int = MAX_PLAYABLE_ATTEMPTS,
) -> LevelData:
    """Generate a level the player cannot solve by leaving the board empty.

    A fresh mirror count is sampled per attempt unless ``mirror_count`` is
    given. After ``max_attempts`` rejected levels one more is generated and
    returned without the check.
    """

    def draw() -> LevelData:
        count = mirror_count if mirror_count is not None else sample_mirror_count(size, rng)
        return generate_level(size, count, rng=rng)

    for attempt in range(1, max_attempts + 1):
        level = draw()
        if not is_trivially_solved(level, hidden):
            logger.debug("Playable %dx%d level found after %d attempts", size, size, attempt)
            return level
        logger.debug("Level %d for %dx%d rejected: empty board already solves it", attempt, size, size)

    logger.warning("No playable %dx%d level after %d attempts, using a fresh one", size, size, max_attempts)
    return draw()


__all__ = [
    "MAX_ATTEMPTS",
    "MAX_PLAYABLE_ATTEMPTS",
    "GenerationExhaustedError",
    "place_random_mirrors",
    "generate_level",
    "is_trivially_solved",
    "generate_playable_level",
]
