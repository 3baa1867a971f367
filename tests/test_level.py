import math
import random
import unittest
from unittest import mock

from laser_mirrors.puzzle.mirror import level as level_module
from laser_mirrors.puzzle.mirror.clues import has_loop_clue, trace_boundary
from laser_mirrors.puzzle.mirror.level import (
    GenerationExhaustedError,
    generate_level,
    generate_playable_level,
    is_trivially_solved,
    place_random_mirrors,
)
from laser_mirrors.puzzle.mirror.mirror_count import (
    gaussian_random,
    gaussian_random_int,
    mirror_count_range,
    sample_mirror_count,
)
from laser_mirrors.puzzle.mirror.types import Grid, LevelData


def level_from_rows(rows):
    grid = Grid.from_rows(rows)
    clues, paths = trace_boundary(grid)
    return LevelData(size=grid.size, grid=grid, clues=clues, paths=paths)


class GenerateLevelTests(unittest.TestCase):
    def test_level_has_requested_shape(self) -> None:
        level = generate_level(4, 3, rng=random.Random(0))
        self.assertEqual(level.size, 4)
        self.assertEqual(level.grid.size, 4)
        self.assertEqual(level.grid.mirror_count(), 3)
        for side in ("top", "bottom", "left", "right"):
            self.assertEqual(len(level.clues.side(side)), 4)
        self.assertFalse(has_loop_clue(level.clues))
        self.assertEqual(len(level.paths), 16)

    def test_mirror_count_extremes(self) -> None:
        rng = random.Random(5)
        self.assertEqual(generate_level(3, 0, rng=rng).grid.mirror_count(), 0)
        self.assertEqual(generate_level(3, 9, rng=rng).grid.mirror_count(), 9)

    def test_seeded_generation_is_reproducible(self) -> None:
        first = generate_level(6, 10, rng=random.Random(7))
        second = generate_level(6, 10, rng=random.Random(7))
        self.assertEqual(first.to_dict(), second.to_dict())

    def test_invalid_arguments(self) -> None:
        with self.assertRaises(ValueError):
            generate_level(4, 17)
        with self.assertRaises(ValueError):
            generate_level(4, -1)
        with self.assertRaises(ValueError):
            generate_level(0, 0)
        with self.assertRaises(ValueError):
            generate_level(3, 2, max_attempts=0)

    def test_layouts_with_loops_are_retried(self) -> None:
        with mock.patch.object(level_module, "has_loop_clue", side_effect=[True, True, False]) as judge:
            level = generate_level(4, 4, rng=random.Random(1))
        self.assertEqual(judge.call_count, 3)
        self.assertEqual(level.grid.mirror_count(), 4)

    def test_exhausted_budget_returns_last_layout(self) -> None:
        with mock.patch.object(level_module, "has_loop_clue", return_value=True) as judge:
            with self.assertLogs("laser_mirrors.puzzle.mirror.level", level="WARNING"):
                level = generate_level(3, 2, rng=random.Random(2), max_attempts=5)
        self.assertEqual(judge.call_count, 5)
        self.assertEqual(level.grid.mirror_count(), 2)

    def test_strict_mode_raises_when_exhausted(self) -> None:
        with mock.patch.object(level_module, "has_loop_clue", return_value=True):
            with self.assertRaises(GenerationExhaustedError) as ctx:
                generate_level(3, 2, rng=random.Random(3), max_attempts=4, strict=True)
        self.assertEqual(ctx.exception.attempts, 4)

    def test_level_serialization_round_trip(self) -> None:
        level = generate_level(5, 6, rng=random.Random(11))
        restored = LevelData.from_dict(level.to_dict())
        self.assertEqual(restored.grid, level.grid)
        self.assertEqual(restored.clues, level.clues)
        self.assertEqual(restored.paths, level.paths)


class PlayableLevelTests(unittest.TestCase):
    def test_trivial_levels_are_detected(self) -> None:
        self.assertTrue(is_trivially_solved(level_from_rows(["..", ".."])))
        self.assertFalse(is_trivially_solved(level_from_rows(["/.", ".."])))

    def test_trivial_levels_are_regenerated(self) -> None:
        with mock.patch.object(level_module, "is_trivially_solved", side_effect=[True, True, False]) as check:
            level = generate_playable_level(4, mirror_count=3, rng=random.Random(4))
        self.assertEqual(check.call_count, 3)
        self.assertEqual(level.grid.mirror_count(), 3)

    def test_sampled_mirror_count_stays_in_range(self) -> None:
        level = generate_playable_level(5, rng=random.Random(8))
        low, high = mirror_count_range(5)
        self.assertTrue(low <= level.grid.mirror_count() <= high)

    def test_placement_uses_distinct_cells(self) -> None:
        grid = place_random_mirrors(4, 10, random.Random(3))
        self.assertEqual(len(grid.mirrors()), 10)


class _ScriptedRandom:
    def __init__(self, values):
        self._values = list(values)

    def random(self) -> float:
        return self._values.pop(0)


class MirrorCountSamplerTests(unittest.TestCase):
    def test_bounds_for_all_game_sizes(self) -> None:
        rng = random.Random(2024)
        for size in range(1, 12):
            low, high = size - 1, (size * size) // 2
            for _ in range(200):
                count = sample_mirror_count(size, rng)
                self.assertIsInstance(count, int)
                self.assertTrue(low <= count <= high, (size, count))

    def test_size_five_range(self) -> None:
        rng = random.Random(0)
        counts = {sample_mirror_count(5, rng) for _ in range(500)}
        self.assertTrue(counts <= set(range(4, 13)))

    def test_degenerate_range_skips_sampling(self) -> None:
        self.assertEqual(sample_mirror_count(1, _ScriptedRandom([])), 0)
        self.assertEqual(gaussian_random_int(3, 3, _ScriptedRandom([])), 3)

    def test_distribution_is_centred(self) -> None:
        rng = random.Random(42)
        samples = [sample_mirror_count(7, rng) for _ in range(2000)]
        self.assertAlmostEqual(sum(samples) / len(samples), 15.0, delta=1.0)

    def test_zero_draws_are_redrawn(self) -> None:
        value = gaussian_random(0.0, 1.0, _ScriptedRandom([0.0, 0.25, 0.0, 0.5]))
        self.assertAlmostEqual(value, -math.sqrt(-2.0 * math.log(0.25)))

    def test_invalid_inputs(self) -> None:
        with self.assertRaises(ValueError):
            sample_mirror_count(0)
        with self.assertRaises(ValueError):
            gaussian_random_int(5, 4)


if __name__ == "__main__":
    unittest.main()
