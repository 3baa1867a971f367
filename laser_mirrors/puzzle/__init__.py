"""Puzzle generation and evaluation toolkit."""

__all__ = [
    "AbstractPuzzleGenerator",
    "AbstractPuzzleEvaluator",
    "LaserMirrorGenerator",
    "LaserMirrorEvaluator",
    "LaserMirrorPuzzleRecord",
    "LaserMirrorEvaluationResult",
    "ClueEvaluation",
]

from .base import AbstractPuzzleEvaluator, AbstractPuzzleGenerator
from .mirror import (
    LaserMirrorGenerator,
    LaserMirrorEvaluator,
    LaserMirrorPuzzleRecord,
    LaserMirrorEvaluationResult,
    ClueEvaluation,
)
