"""Laser mirror puzzle package."""

__all__ = [
    "Mirror",
    "Side",
    "Position",
    "BoundaryKey",
    "Grid",
    "Clue",
    "ClueTable",
    "TraceResult",
    "RayPath",
    "LevelData",
    "trace_ray",
    "compute_clues",
    "clues_match",
    "has_loop_clue",
    "generate_level",
    "generate_playable_level",
    "GenerationExhaustedError",
    "sample_mirror_count",
    "CoinLedger",
    "MemoryCoinLedger",
    "JsonCoinLedger",
    "LaserMirrorGenerator",
    "LaserMirrorPuzzleRecord",
    "LaserMirrorEvaluator",
    "LaserMirrorEvaluationResult",
    "ClueEvaluation",
]

from .types import BoundaryKey, Clue, ClueTable, Grid, LevelData, Mirror, Position, RayPath, Side, TraceResult
from .trace import trace_ray
from .clues import clues_match, compute_clues, has_loop_clue
from .level import GenerationExhaustedError, generate_level, generate_playable_level
from .mirror_count import sample_mirror_count
from .ledger import CoinLedger, JsonCoinLedger, MemoryCoinLedger
from .generator import LaserMirrorGenerator, LaserMirrorPuzzleRecord
from .evaluator import ClueEvaluation, LaserMirrorEvaluationResult, LaserMirrorEvaluator
