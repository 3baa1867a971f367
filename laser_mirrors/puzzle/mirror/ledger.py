"""Mirror-coin balance kept between play sessions."""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

from ..base import PathLike

logger = logging.getLogger(__name__)

STORAGE_KEY = "mirror_coins"


@dataclass
class DeductResult:
    success: bool
    remaining: int


def _check_amount(amount: int) -> int:
    amount = int(amount)
    if amount < 0:
        raise ValueError("Coin amounts must be non-negative")
    return amount


class CoinLedger(ABC):
    """A non-negative coin counter with add and deduct-if-sufficient operations."""

    @property
    @abstractmethod
    def balance(self) -> int:
        """Current number of coins."""

    @abstractmethod
    def _store(self, balance: int) -> None:
        """Persist a new balance."""

    def add(self, amount: int) -> int:
        new_balance = self.balance + _check_amount(amount)
        self._store(new_balance)
        return new_balance

    def deduct(self, amount: int) -> DeductResult:
        amount = _check_amount(amount)
        current = self.balance
        if current < amount:
            return DeductResult(success=False, remaining=current)
        self._store(current - amount)
        return DeductResult(success=True, remaining=current - amount)

    def has_enough(self, amount: int) -> bool:
        return self.balance >= amount


class MemoryCoinLedger(CoinLedger):
    def __init__(self, balance: int = 0) -> None:
        self._balance = _check_amount(balance)

    @property
    def balance(self) -> int:
        return self._balance

    def _store(self, balance: int) -> None:
        self._balance = balance


class JsonCoinLedger(CoinLedger):
    """Ledger stored as ``{"mirror_coins": n}`` in a JSON file."""

    def __init__(self, path: PathLike) -> None:
        self.path = Path(path)

    @property
    def balance(self) -> int:
        if not self.path.exists():
            return 0
        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
            return max(0, int(payload.get(STORAGE_KEY, 0)))
        except (OSError, ValueError, AttributeError, TypeError) as exc:
            logger.error("Failed to read coin balance from %s: %s", self.path, exc)
            return 0

    def _store(self, balance: int) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps({STORAGE_KEY: balance}, indent=2), encoding="utf-8")


__all__ = ["CoinLedger", "MemoryCoinLedger", "JsonCoinLedger", "DeductResult", "STORAGE_KEY"]
