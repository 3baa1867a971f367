"""Value types shared by the laser mirror tracer, clue calculator and generator."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, Iterator, List, Mapping, NamedTuple, Optional, Sequence, Tuple, Union


class Mirror(str, Enum):
    NONE = "."
    FORWARD = "/"
    BACKWARD = "\\"

    @classmethod
    def parse(cls, value: object) -> "Mirror":
        """Accept a Mirror, one of the row characters, or None/empty for no mirror."""

        if isinstance(value, Mirror):
            return value
        if value is None or value == "" or value == " ":
            return cls.NONE
        try:
            return cls(str(value))
        except ValueError as exc:
            raise ValueError(f"Unknown mirror symbol: {value!r}") from exc


class Side(str, Enum):
    TOP = "top"
    BOTTOM = "bottom"
    LEFT = "left"
    RIGHT = "right"


SIDES: Tuple[Side, ...] = (Side.TOP, Side.BOTTOM, Side.LEFT, Side.RIGHT)


class Position(NamedTuple):
    row: int
    col: int

    def to_dict(self) -> dict:
        return {"r": self.row, "c": self.col}


class BoundaryKey(NamedTuple):
    side: Side
    index: int

    @classmethod
    def of(cls, side: Union[Side, str], index: int) -> "BoundaryKey":
        return cls(Side(side), int(index))

    def label(self) -> str:
        return f"{self.side.value}-{self.index}"

    @classmethod
    def from_label(cls, label: str) -> "BoundaryKey":
        side, _, index = label.partition("-")
        return cls.of(side, int(index))

    def to_dict(self) -> dict:
        return {"side": self.side.value, "index": self.index}


EntryPoint = BoundaryKey
ExitPoint = BoundaryKey


@dataclass
class Cell:
    row: int
    col: int
    mirror: Mirror = Mirror.NONE


class Grid:
    """Square grid of cells, each optionally holding a mirror."""

    def __init__(self, cells: List[List[Cell]]) -> None:
        size = len(cells)
        for r, row in enumerate(cells):
            if len(row) != size:
                raise ValueError(f"Grid row {r} has {len(row)} cells, expected {size}")
            for c, cell in enumerate(row):
                if cell.row != r or cell.col != c:
                    raise ValueError(f"Cell at ({r}, {c}) reports position ({cell.row}, {cell.col})")
        self._cells = cells

    @classmethod
    def empty(cls, size: int) -> "Grid":
        if size < 1:
            raise ValueError("Grid size must be at least 1")
        return cls([[Cell(row=r, col=c) for c in range(size)] for r in range(size)])

    @classmethod
    def from_mirrors(cls, size: int, mirrors: Mapping[Tuple[int, int], object]) -> "Grid":
        grid = cls.empty(size)
        for (r, c), mirror in mirrors.items():
            grid.place(r, c, Mirror.parse(mirror))
        return grid

    @classmethod
    def from_rows(cls, rows: Sequence[str]) -> "Grid":
        size = len(rows)
        grid = cls.empty(size)
        for r, line in enumerate(rows):
            if len(line) != size:
                raise ValueError(f"Row {r} has length {len(line)}, expected {size}")
            for c, symbol in enumerate(line):
                grid.place(r, c, Mirror.parse(symbol))
        return grid

    @property
    def size(self) -> int:
        return len(self._cells)

    def __len__(self) -> int:
        return len(self._cells)

    def __iter__(self) -> Iterator[List[Cell]]:
        return iter(self._cells)

    def __getitem__(self, row: int) -> List[Cell]:
        return self._cells[row]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Grid):
            return NotImplemented
        return self.to_rows() == other.to_rows()

    def __repr__(self) -> str:
        return f"Grid({self.to_rows()!r})"

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.size and 0 <= col < self.size

    def mirror_at(self, row: int, col: int) -> Mirror:
        return self._cells[row][col].mirror

    def place(self, row: int, col: int, mirror: Mirror) -> None:
        if not self.in_bounds(row, col):
            raise ValueError(f"Position ({row}, {col}) is outside a {self.size}x{self.size} grid")
        self._cells[row][col].mirror = mirror

    def mirrors(self) -> Dict[Position, Mirror]:
        return {
            Position(cell.row, cell.col): cell.mirror
            for row in self._cells
            for cell in row
            if cell.mirror is not Mirror.NONE
        }

    def mirror_count(self) -> int:
        return len(self.mirrors())

    def to_rows(self) -> List[str]:
        return ["".join(cell.mirror.value for cell in row) for row in self._cells]


class ClueKind(str, Enum):
    FINITE = "finite"
    LOOP = "loop"
    UNKNOWN = "unknown"


LOOP_SYMBOL = "∞"
UNKNOWN_SYMBOL = "?"


@dataclass(frozen=True)
class Clue:
    kind: ClueKind
    steps: Optional[int] = None

    @classmethod
    def finite(cls, steps: int) -> "Clue":
        if steps < 0:
            raise ValueError("Finite clues must be non-negative")
        return cls(ClueKind.FINITE, int(steps))

    @property
    def is_finite(self) -> bool:
        return self.kind is ClueKind.FINITE

    @property
    def is_loop(self) -> bool:
        return self.kind is ClueKind.LOOP

    def to_json(self) -> Union[int, str]:
        if self.kind is ClueKind.FINITE:
            return int(self.steps)
        return LOOP_SYMBOL if self.kind is ClueKind.LOOP else UNKNOWN_SYMBOL

    @classmethod
    def from_json(cls, value: Union[int, str]) -> "Clue":
        if value == LOOP_SYMBOL:
            return LOOP
        if value == UNKNOWN_SYMBOL:
            return UNKNOWN
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"Unrecognised clue value: {value!r}")
        return cls.finite(value)

    def __str__(self) -> str:
        return str(self.to_json())


LOOP = Clue(ClueKind.LOOP)
UNKNOWN = Clue(ClueKind.UNKNOWN)


@dataclass
class ClueTable:
    top: List[Clue]
    bottom: List[Clue]
    left: List[Clue]
    right: List[Clue]

    @property
    def size(self) -> int:
        return len(self.top)

    def side(self, side: Union[Side, str]) -> List[Clue]:
        return getattr(self, Side(side).value)

    def __getitem__(self, key: BoundaryKey) -> Clue:
        return self.side(key.side)[key.index]

    def items(self) -> Iterator[Tuple[BoundaryKey, Clue]]:
        for side in SIDES:
            for index, clue in enumerate(self.side(side)):
                yield BoundaryKey(side, index), clue

    def to_dict(self) -> Dict[str, List[Union[int, str]]]:
        return {side.value: [clue.to_json() for clue in self.side(side)] for side in SIDES}

    @classmethod
    def from_dict(cls, payload: Mapping[str, Iterable[Union[int, str]]]) -> "ClueTable":
        sides = {side.value: [Clue.from_json(value) for value in payload[side.value]] for side in SIDES}
        lengths = {len(values) for values in sides.values()}
        if len(lengths) != 1:
            raise ValueError("All clue sides must have the same length")
        return cls(**sides)


LOOP_STEPS = -1


@dataclass
class TraceResult:
    steps: int
    path: List[Position] = field(default_factory=list)
    exit: Optional[BoundaryKey] = None

    @property
    def is_loop(self) -> bool:
        return self.steps == LOOP_STEPS


@dataclass
class RayPath:
    entry: BoundaryKey
    exit: BoundaryKey
    path: List[Position]
    steps: int

    def to_dict(self) -> dict:
        return {
            "entry": self.entry.to_dict(),
            "exit": self.exit.to_dict(),
            "path": [position.to_dict() for position in self.path],
            "steps": self.steps,
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "RayPath":
        entry = payload["entry"]
        exit_point = payload["exit"]
        return cls(
            entry=BoundaryKey.of(entry["side"], entry["index"]),
            exit=BoundaryKey.of(exit_point["side"], exit_point["index"]),
            path=[Position(int(step["r"]), int(step["c"])) for step in payload["path"]],
            steps=int(payload["steps"]),
        )


@dataclass
class LevelData:
    size: int
    grid: Grid
    clues: ClueTable
    paths: List[RayPath] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "size": self.size,
            "grid": self.grid.to_rows(),
            "clues": self.clues.to_dict(),
            "paths": [ray.to_dict() for ray in self.paths],
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "LevelData":
        grid = Grid.from_rows(payload["grid"])
        clues = ClueTable.from_dict(payload["clues"])
        size = int(payload.get("size", grid.size))
        if grid.size != size or clues.size != size:
            raise ValueError("Level grid, clues and size disagree")
        return cls(
            size=size,
            grid=grid,
            clues=clues,
            paths=[RayPath.from_dict(ray) for ray in payload.get("paths", [])],
        )


__all__ = [
    "Mirror",
    "Side",
    "SIDES",
    "Position",
    "BoundaryKey",
    "EntryPoint",
    "ExitPoint",
    "Cell",
    "Grid",
    "ClueKind",
    "Clue",
    "LOOP",
    "UNKNOWN",
    "LOOP_SYMBOL",
    "UNKNOWN_SYMBOL",
    "ClueTable",
    "LOOP_STEPS",
    "TraceResult",
    "RayPath",
    "LevelData",
]
