from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

import pytest

from app.core.errors import DataAccessError
from app.models.production import CountryProductionCount, StockPricePoint


# -----------------------------
# Fake database handle
# -----------------------------
@dataclass
class FakeDatabase:
    """
    Stands in for PostgresService.execute_query.
    `responder` maps (query, params) to rows; calls are recorded.
    """
    responder: Callable[[str, Dict[str, Any]], List[Dict[str, Any]]] = lambda q, p: []
    calls: List[Tuple[str, Dict[str, Any]]] = field(default_factory=list)
    error: Optional[Exception] = None

    def execute_query(self, query: str, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        params = params or {}
        self.calls.append((query, params))
        if self.error is not None:
            raise self.error
        return self.responder(query, params)


@pytest.fixture()
def fake_db() -> FakeDatabase:
    return FakeDatabase()


# -----------------------------
# Stub repository
# -----------------------------
class StubRepository:
    """
    Canned answers per material set / symbol. Any material listed in
    `fail_on` raises DataAccessError.
    """

    def __init__(
        self,
        producers: Optional[Dict[Tuple[str, ...], List[CountryProductionCount]]] = None,
        prices: Optional[Dict[str, List[StockPricePoint]]] = None,
        fail_on: Sequence[str] = (),
    ):
        self.producers = producers or {}
        self.prices = prices or {}
        self.fail_on = set(fail_on)
        self.material_calls: List[Tuple[str, ...]] = []
        self.symbol_calls: List[str] = []
        self._lock = threading.Lock()

    def top_producers_by_materials(self, materials: Sequence[str]) -> List[CountryProductionCount]:
        key = tuple(materials)
        with self._lock:
            self.material_calls.append(key)
        if self.fail_on & set(key):
            raise DataAccessError("connection refused")
        return list(self.producers.get(key, []))

    def stock_price_history(self, symbol: str) -> List[StockPricePoint]:
        with self._lock:
            self.symbol_calls.append(symbol)
        if symbol in self.fail_on:
            raise DataAccessError("connection refused")
        return list(self.prices.get(symbol, []))


def counts(*pairs: Tuple[str, int]) -> List[CountryProductionCount]:
    return [CountryProductionCount(country=c, count=n) for c, n in pairs]


def prices(*pairs: Tuple[str, str]) -> List[StockPricePoint]:
    return [StockPricePoint(date=date.fromisoformat(d), price=Decimal(p)) for d, p in pairs]


@pytest.fixture()
def stub_repository() -> StubRepository:
    return StubRepository(
        producers={
            ("Chromium",): counts(("South Africa", 12), ("Kazakhstan", 7), ("India", 4)),
            ("Nickel",): counts(("Indonesia", 9), ("Philippines", 6)),
            ("Iron",): counts(("Australia", 20), ("Brazil", 15), ("China", 11), ("India", 8), ("Russia", 5)),
            ("Quartz",): counts(("United States", 3)),
            ("Manganese",): counts(("South Africa", 10), ("Gabon", 4)),
            ("Potash", "Potassium"): counts(("Canada", 8), ("Belarus", 5)),
        },
        prices={
            "Manganese": prices(("2025-07-01", "4.55"), ("2025-08-01", "4.61")),
            "Zinc": prices(("2025-07-01", "2710.50")),
        },
    )
