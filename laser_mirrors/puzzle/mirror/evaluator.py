"""Laser mirror evaluator comparing a candidate layout's clues with the answer's."""

from __future__ import annotations

import argparse
import json
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Union

from ..base import AbstractPuzzleEvaluator, PathLike
from .clues import compute_clues
from .types import BoundaryKey, ClueTable, Grid

Candidate = Union[Grid, Sequence[str], PathLike]


@dataclass
class ClueEvaluation:
    side: str
    index: int
    expected: Union[int, str]
    actual: Union[int, str]
    hidden: bool
    is_correct: bool

    def to_dict(self) -> dict:
        return {
            "side": self.side,
            "index": self.index,
            "expected": self.expected,
            "actual": self.actual,
            "hidden": self.hidden,
            "is_correct": self.is_correct,
        }


@dataclass
class LaserMirrorEvaluationResult:
    puzzle_id: str
    correct_clues: int
    total_clues: int
    accuracy: float
    is_solved: bool
    clue_breakdown: List[ClueEvaluation]

    def to_dict(self) -> dict:
        return {
            "puzzle_id": self.puzzle_id,
            "correct_clues": self.correct_clues,
            "total_clues": self.total_clues,
            "accuracy": self.accuracy,
            "is_solved": self.is_solved,
            "clue_breakdown": [clue.to_dict() for clue in self.clue_breakdown],
        }


def load_candidate_rows(path: Path) -> List[str]:
    """Read a layout from JSON (a list of rows or ``{"grid": rows}``) or plain text rows."""

    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() == ".json":
        payload = json.loads(text)
        if isinstance(payload, dict):
            payload = payload.get("grid")
        if not isinstance(payload, list) or not all(isinstance(row, str) for row in payload):
            raise ValueError(f"Candidate layout in {path} must be a list of row strings")
        return payload
    return [line.strip() for line in text.splitlines() if line.strip()]


class LaserMirrorEvaluator(AbstractPuzzleEvaluator):
    """Score candidate mirror layouts by how many visible edge clues they reproduce."""

    def _candidate_grid(self, candidate: Candidate) -> Grid:
        if isinstance(candidate, Grid):
            return candidate
        if isinstance(candidate, (str, Path)):
            candidate_path = Path(candidate)
            if not candidate_path.exists():
                candidate_path = self.resolve_path(candidate)
            if not candidate_path.exists():
                raise FileNotFoundError(f"Candidate layout not found: {candidate_path}")
            return Grid.from_rows(load_candidate_rows(candidate_path))
        return Grid.from_rows(list(candidate))

    def evaluate(self, puzzle_id: str, candidate: Candidate) -> LaserMirrorEvaluationResult:
        record = self.get_record(puzzle_id)
        expected = ClueTable.from_dict(record["clues"])
        hidden = {BoundaryKey.from_label(label) for label in record.get("hidden_clues", [])}

        grid = self._candidate_grid(candidate)
        if grid.size != expected.size:
            raise ValueError(f"Candidate is {grid.size}x{grid.size}, puzzle is {expected.size}x{expected.size}")
        actual = compute_clues(grid)

        breakdown: List[ClueEvaluation] = []
        correct = 0
        total = 0
        for key, expected_clue in expected.items():
            is_hidden = key in hidden
            is_correct = actual[key] == expected_clue
            if not is_hidden:
                total += 1
                correct += int(is_correct)
            breakdown.append(
                ClueEvaluation(
                    side=key.side.value,
                    index=key.index,
                    expected=expected_clue.to_json(),
                    actual=actual[key].to_json(),
                    hidden=is_hidden,
                    is_correct=is_correct,
                )
            )

        accuracy = correct / total if total else 0.0
        return LaserMirrorEvaluationResult(
            puzzle_id=puzzle_id,
            correct_clues=correct,
            total_clues=total,
            accuracy=accuracy,
            is_solved=correct == total,
            clue_breakdown=breakdown,
        )


__all__ = ["LaserMirrorEvaluator", "LaserMirrorEvaluationResult", "ClueEvaluation", "load_candidate_rows"]


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Evaluate laser mirror puzzles")
    parser.add_argument("metadata", type=Path)
    parser.add_argument("puzzle_id", type=str)
    parser.add_argument("candidate", type=Path, help="JSON or text file with one row of '.', '/', '\\' per line")
    parser.add_argument("--base-dir", type=Path, default=None)
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    args = _parse_args(argv)
    evaluator = LaserMirrorEvaluator(args.metadata, base_dir=args.base_dir)
    result = evaluator.evaluate(args.puzzle_id, args.candidate)
    print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()
