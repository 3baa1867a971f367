"""Player session state for an interactive laser mirror level.

The session is an immutable value: every operation returns a new
:class:`SessionState`. Coin movements go through a :class:`CoinLedger`
passed in by the caller.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field, replace
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional, Tuple

from .clues import compute_clues, mismatched_keys
from .ledger import CoinLedger
from .types import SIDES, BoundaryKey, ClueTable, Grid, LevelData, Mirror, Position

HARD_MODE_MIN_SIZE = 3

_NEXT_MIRROR: Dict[Mirror, Mirror] = {
    Mirror.NONE: Mirror.BACKWARD,
    Mirror.BACKWARD: Mirror.FORWARD,
    Mirror.FORWARD: Mirror.NONE,
}


class InsufficientCoinsError(ValueError):
    def __init__(self, cost: int, balance: int, action: str) -> None:
        super().__init__(f"{action} needs {cost} coins, only {balance} available")
        self.cost = cost
        self.balance = balance
        self.action = action


@dataclass(frozen=True)
class SessionState:
    level: LevelData
    mirrors: Mapping[Position, Mirror] = field(default_factory=dict)
    no_mirror_marks: FrozenSet[Position] = frozenset()
    hidden_clues: FrozenSet[BoundaryKey] = frozenset()
    current_clues: Optional[ClueTable] = None
    is_solved: bool = False
    has_earned_coins: bool = False
    show_answer: bool = False
    has_viewed_answer: bool = False
    hint_keys: Tuple[BoundaryKey, ...] = ()

    @property
    def size(self) -> int:
        return self.level.size

    @property
    def hint_count(self) -> int:
        return len(self.hint_keys)

    def current_grid(self) -> Grid:
        return Grid.from_mirrors(self.size, self.mirrors)

    def wrong_clues(self) -> List[BoundaryKey]:
        """Positions whose current clue differs from the answer, hidden ones included."""

        clues = self.current_clues or compute_clues(self.current_grid())
        return mismatched_keys(clues, self.level.clues)


def choose_hidden_clues(size: int, rng: Optional[random.Random] = None) -> FrozenSet[BoundaryKey]:
    """Hard-mode selection: hide a third of the 4N clues on grids of size 3 and up."""

    if size < HARD_MODE_MIN_SIZE:
        return frozenset()
    rng = rng or random
    keys = [BoundaryKey(side, index) for side in SIDES for index in range(size)]
    return frozenset(rng.sample(keys, len(keys) // 3))


def hint_cost(hint_count: int, size: int) -> int:
    """First hint is free, then N, 2N and 3N for every later hint."""

    return min(hint_count, 3) * size


def reveal_cost(size: int) -> int:
    return size * size


def _refresh(state: SessionState, ledger: Optional[CoinLedger]) -> SessionState:
    clues = compute_clues(state.current_grid())
    solved = not mismatched_keys(clues, state.level.clues, state.hidden_clues)
    updated = replace(state, current_clues=clues, is_solved=solved)
    if solved and not state.is_solved and not state.has_earned_coins and not state.has_viewed_answer:
        if ledger is not None:
            ledger.add(len(state.mirrors))
        updated = replace(updated, has_earned_coins=True)
    return updated


def start_session(
    level: LevelData,
    *,
    hidden: Iterable[BoundaryKey] = (),
    mirrors: Optional[Mapping[Tuple[int, int], Mirror]] = None,
) -> SessionState:
    placed = {Position(*position): Mirror.parse(mirror) for position, mirror in (mirrors or {}).items()}
    state = SessionState(
        level=level,
        mirrors={position: mirror for position, mirror in placed.items() if mirror is not Mirror.NONE},
        hidden_clues=frozenset(hidden),
    )
    clues = compute_clues(state.current_grid())
    return replace(
        state,
        current_clues=clues,
        is_solved=not mismatched_keys(clues, level.clues, state.hidden_clues),
    )


def _check_cell(state: SessionState, row: int, col: int) -> Position:
    if not (0 <= row < state.size and 0 <= col < state.size):
        raise ValueError(f"Cell ({row}, {col}) is outside a {state.size}x{state.size} level")
    return Position(row, col)


def toggle_mirror(
    state: SessionState,
    row: int,
    col: int,
    ledger: Optional[CoinLedger] = None,
) -> SessionState:
    """Cycle the mirror at a cell: none, then ``\\``, then ``/``, then none again."""

    position = _check_cell(state, row, col)
    mirrors = dict(state.mirrors)
    next_mirror = _NEXT_MIRROR[mirrors.get(position, Mirror.NONE)]
    if next_mirror is Mirror.NONE:
        mirrors.pop(position, None)
    else:
        mirrors[position] = next_mirror
    marks = state.no_mirror_marks - {position}
    return _refresh(replace(state, mirrors=mirrors, no_mirror_marks=marks), ledger)


def toggle_no_mirror_mark(state: SessionState, row: int, col: int) -> SessionState:
    position = _check_cell(state, row, col)
    if position in state.mirrors:
        return state
    if position in state.no_mirror_marks:
        return replace(state, no_mirror_marks=state.no_mirror_marks - {position})
    return replace(state, no_mirror_marks=state.no_mirror_marks | {position})


def request_hint(
    state: SessionState,
    ledger: CoinLedger,
    rng: Optional[random.Random] = None,
) -> Tuple[SessionState, Optional[BoundaryKey]]:
    """Reveal the answer ray for one wrong clue that has not been hinted yet.

    Returns the unchanged state and ``None`` without charging when every clue
    is already correct or every wrong clue has been hinted.
    """

    cost = hint_cost(state.hint_count, state.size)
    if cost > 0 and not ledger.has_enough(cost):
        raise InsufficientCoinsError(cost, ledger.balance, "Hint")

    candidates = [key for key in state.wrong_clues() if key not in state.hint_keys]
    if not candidates:
        return state, None

    rng = rng or random
    chosen = rng.choice(candidates)
    if cost > 0:
        result = ledger.deduct(cost)
        if not result.success:
            raise InsufficientCoinsError(cost, result.remaining, "Hint")
    return replace(state, hint_keys=state.hint_keys + (chosen,)), chosen


def reveal_answer(state: SessionState, ledger: CoinLedger) -> SessionState:
    """Show the answer mirrors for N*N coins; a level solved afterwards earns nothing.

    A solved board shows its answer for free.
    """

    if state.show_answer:
        return state
    if state.is_solved:
        return replace(state, show_answer=True)
    cost = reveal_cost(state.size)
    result = ledger.deduct(cost)
    if not result.success:
        raise InsufficientCoinsError(cost, result.remaining, "Revealing the answer")
    return replace(state, show_answer=True, has_viewed_answer=True)


def hide_answer(state: SessionState) -> SessionState:
    return replace(state, show_answer=False)


__all__ = [
    "HARD_MODE_MIN_SIZE",
    "InsufficientCoinsError",
    "SessionState",
    "choose_hidden_clues",
    "hint_cost",
    "reveal_cost",
    "start_session",
    "toggle_mirror",
    "toggle_no_mirror_mark",
    "request_hint",
    "reveal_answer",
    "hide_answer",
]
