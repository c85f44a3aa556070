# app/services/aggregation.py
"""
Aggregate queries over the mining star schema.

Tables (owned by the data load, not by this service):
  "FactMaterial"  (materialname, "siteID", "locationID")
  "DimSite"       ("siteID", status)
  "DimLocation"   ("locationID", country)
  "DimStockPrice" (material, date, price)

Countries tied on count come back in whatever order PostgreSQL produces;
there is no secondary sort key.
"""

from typing import Any, Dict, List, Optional, Protocol, Sequence, Type, TypeVar

import structlog
from pydantic import BaseModel, ValidationError

from app.core.errors import DataAccessError, RowShapeError
from app.models.production import CountryProductionCount, RecencyWindow, StockPricePoint

logger = structlog.get_logger()

T = TypeVar("T", bound=BaseModel)

INACTIVE_SITE_STATUS = "Past Producer"

TOP_PRODUCERS_QUERY = """
    SELECT l."country" AS country, COUNT(m."materialname") AS count
    FROM "FactMaterial" AS m
    INNER JOIN "DimLocation" AS l
        ON l."locationID" = m."locationID"
    INNER JOIN "DimSite" AS s
        ON s."siteID" = m."siteID"
    WHERE m."materialname" = ANY(%(materials)s)
      AND s."status" IS NOT NULL
      AND s."status" != %(inactive_status)s
    GROUP BY l."country"
    ORDER BY COUNT(m."materialname") DESC
    LIMIT %(limit)s
"""

STOCK_PRICE_QUERY = """
    SELECT p."date"::date AS date, p."price" AS price
    FROM "DimStockPrice" AS p
    WHERE p."material" = %(symbol)s
      AND EXTRACT(YEAR FROM p."date") = %(year)s
      AND EXTRACT(MONTH FROM p."date") > %(after_month)s
    ORDER BY p."date" ASC
"""


class QueryExecutor(Protocol):
    def execute_query(self, query: str, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]: ...


class AggregationRepository:
    """Read-only aggregates for the industry reports."""

    def __init__(self, db: QueryExecutor, window: RecencyWindow, limit: int = 5):
        if limit < 1:
            raise ValueError("limit must be >= 1")
        self.db = db
        self.window = window
        self.limit = limit

    def _decode(self, query_name: str, rows: List[Dict[str, Any]], model: Type[T]) -> List[T]:
        decoded: List[T] = []
        for row in rows:
            try:
                decoded.append(model.model_validate(row))
            except ValidationError as e:
                raise RowShapeError(query_name, row, f"{e.error_count()} validation error(s)") from e
        return decoded

    def _run(self, query_name: str, query: str, params: Dict[str, Any]) -> List[Dict[str, Any]]:
        try:
            return self.db.execute_query(query, params)
        except DataAccessError as e:
            logger.error("aggregate_query_failed", query=query_name, error=str(e))
            raise

    # ========================================
    # TOP PRODUCERS
    # ========================================

    def top_producers_by_materials(self, materials: Sequence[str]) -> List[CountryProductionCount]:
        """
        Top countries by active-site observations of any of `materials`.
        At most `limit` entries, ordered by count descending.
        """
        if isinstance(materials, str):
            materials = [materials]
        names = list(dict.fromkeys(materials))
        if not names:
            raise ValueError("at least one material name is required")

        rows = self._run(
            "top_producers",
            TOP_PRODUCERS_QUERY,
            {
                "materials": names,
                "inactive_status": INACTIVE_SITE_STATUS,
                "limit": self.limit,
            },
        )
        return self._decode("top_producers", rows, CountryProductionCount)

    def top_producers_by_material(self, material: str) -> List[CountryProductionCount]:
        return self.top_producers_by_materials([material])

    # ========================================
    # STOCK PRICES
    # ========================================

    def stock_price_history(self, symbol: str) -> List[StockPricePoint]:
        """Price points for `symbol` inside the recency window, oldest first."""
        rows = self._run(
            "stock_price_history",
            STOCK_PRICE_QUERY,
            {
                "symbol": symbol,
                "year": self.window.year,
                "after_month": self.window.after_month,
            },
        )
        return self._decode("stock_price_history", rows, StockPricePoint)
