import random
import unittest
from unittest import mock

from laser_mirrors.puzzle.mirror import clues as clues_module
from laser_mirrors.puzzle.mirror.clues import clues_match, compute_clues, has_loop_clue, mismatched_keys, trace_boundary
from laser_mirrors.puzzle.mirror.level import place_random_mirrors
from laser_mirrors.puzzle.mirror.trace import trace_ray
from laser_mirrors.puzzle.mirror.types import (
    LOOP,
    LOOP_STEPS,
    UNKNOWN,
    BoundaryKey,
    Clue,
    ClueTable,
    Grid,
    Position,
    Side,
    TraceResult,
)


def finite(*values: int):
    return [Clue.finite(value) for value in values]


class ComputeCluesTests(unittest.TestCase):
    def test_empty_grid_clues_equal_size(self) -> None:
        table = compute_clues(Grid.empty(3))
        for _, clue in table.items():
            self.assertEqual(clue, Clue.finite(3))

    def test_corner_mirror_clue_table(self) -> None:
        table = compute_clues(Grid.from_rows(["/.", ".."]))
        self.assertEqual(table.top, finite(1, 2))
        self.assertEqual(table.bottom, finite(3, 2))
        self.assertEqual(table.left, finite(1, 2))
        self.assertEqual(table.right, finite(3, 2))
        self.assertEqual(table.to_dict(), {"top": [1, 2], "bottom": [3, 2], "left": [1, 2], "right": [3, 2]})

    def test_reciprocity_on_random_layouts(self) -> None:
        rng = random.Random(1234)
        for size in (2, 3, 5, 8):
            for _ in range(10):
                grid = place_random_mirrors(size, rng.randint(0, size * size), rng)
                table, paths = trace_boundary(grid)
                self.assertEqual(len(paths), 4 * size)
                for ray in paths:
                    self.assertEqual(table[ray.entry], Clue.finite(ray.steps))
                    self.assertEqual(table[ray.exit], table[ray.entry])
                    self.assertEqual(len(ray.path), ray.steps)

    def test_boundary_rays_never_loop(self) -> None:
        rng = random.Random(99)
        for _ in range(50):
            grid = place_random_mirrors(6, rng.randint(5, 36), rng)
            self.assertFalse(has_loop_clue(compute_clues(grid)))

    def test_looping_rays_are_sentineled_and_left_out_of_paths(self) -> None:
        looping = {BoundaryKey(Side.TOP, 0), BoundaryKey(Side.BOTTOM, 0)}

        def fake_trace(grid, entry):
            if entry in looping:
                return TraceResult(steps=LOOP_STEPS, path=[Position(0, 0), Position(1, 0)])
            return trace_ray(grid, entry)

        with mock.patch.object(clues_module, "trace_ray", side_effect=fake_trace):
            table, paths = trace_boundary(Grid.empty(2))

        self.assertEqual(table.top, [LOOP, Clue.finite(2)])
        self.assertEqual(table.bottom, [LOOP, Clue.finite(2)])
        self.assertTrue(has_loop_clue(table))
        self.assertEqual(len(paths), 6)
        self.assertFalse(any(ray.entry in looping for ray in paths))
        self.assertEqual(table.to_dict()["top"], ["∞", 2])

    def test_finite_value_from_partner_wins_over_loop_mark(self) -> None:
        def fake_trace(grid, entry):
            if entry == BoundaryKey(Side.TOP, 1):
                return TraceResult(steps=LOOP_STEPS, path=[Position(0, 1)])
            return trace_ray(grid, entry)

        with mock.patch.object(clues_module, "trace_ray", side_effect=fake_trace):
            table = compute_clues(Grid.empty(2))

        self.assertEqual(table[BoundaryKey(Side.TOP, 1)], Clue.finite(2))


class ClueComparisonTests(unittest.TestCase):
    def setUp(self) -> None:
        self.answer = compute_clues(Grid.from_rows(["/.", ".."]))
        self.empty = compute_clues(Grid.empty(2))

    def test_mismatched_keys_lists_wrong_positions(self) -> None:
        self.assertEqual(
            mismatched_keys(self.empty, self.answer),
            [
                BoundaryKey(Side.TOP, 0),
                BoundaryKey(Side.BOTTOM, 0),
                BoundaryKey(Side.LEFT, 0),
                BoundaryKey(Side.RIGHT, 0),
            ],
        )
        self.assertFalse(clues_match(self.empty, self.answer))
        self.assertTrue(clues_match(self.answer, self.answer))

    def test_hidden_positions_are_not_checked(self) -> None:
        hidden = set(mismatched_keys(self.empty, self.answer))
        self.assertTrue(clues_match(self.empty, self.answer, hidden))

    def test_size_mismatch_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            mismatched_keys(compute_clues(Grid.empty(3)), self.answer)

    def test_json_round_trip_keeps_sentinels(self) -> None:
        table = ClueTable(top=[LOOP, UNKNOWN], bottom=finite(1, 2), left=finite(3, 4), right=finite(0, 5))
        payload = table.to_dict()
        self.assertEqual(payload["top"], ["∞", "?"])
        self.assertEqual(ClueTable.from_dict(payload), table)
        with self.assertRaises(ValueError):
            Clue.from_json(True)
        with self.assertRaises(ValueError):
            Clue.from_json("x")


if __name__ == "__main__":
    unittest.main()
