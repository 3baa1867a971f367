"""Gaussian mirror-count sampling used to pick level difficulty."""

from __future__ import annotations

import math
import random
from typing import Optional, Tuple


def _uniform_nonzero(rng: random.Random) -> float:
    value = 0.0
    while value == 0.0:
        value = rng.random()
    return value


def gaussian_random(mean: float, std_dev: float, rng: Optional[random.Random] = None) -> float:
    """Box-Muller draw from N(mean, std_dev**2)."""

    rng = rng or random
    u = _uniform_nonzero(rng)
    v = _uniform_nonzero(rng)
    z = math.sqrt(-2.0 * math.log(u)) * math.cos(2.0 * math.pi * v)
    return z * std_dev + mean


def gaussian_random_int(minimum: int, maximum: int, rng: Optional[random.Random] = None) -> int:
    """Integer in [minimum, maximum] centred on the midpoint with std (max - min) / 4."""

    if minimum > maximum:
        raise ValueError(f"Empty range [{minimum}, {maximum}]")
    if minimum == maximum:
        return minimum
    mean = (minimum + maximum) / 2
    std_dev = (maximum - minimum) / 4
    value = int(round(gaussian_random(mean, std_dev, rng)))
    return max(minimum, min(maximum, value))


def mirror_count_range(size: int) -> Tuple[int, int]:
    if size < 1:
        raise ValueError("Grid size must be at least 1")
    return size - 1, (size * size) // 2


def sample_mirror_count(size: int, rng: Optional[random.Random] = None) -> int:
    minimum, maximum = mirror_count_range(size)
    return gaussian_random_int(minimum, maximum, rng)


__all__ = ["gaussian_random", "gaussian_random_int", "mirror_count_range", "sample_mirror_count"]
