# app/models/production.py
import datetime
from decimal import Decimal

from pydantic import BaseModel, Field, ConfigDict, field_serializer


class CountryProductionCount(BaseModel):
    """
    Number of active-site material observations in one country.
    Decoded from the top-producers aggregate query.
    """
    country: str = Field(..., min_length=1)
    count: int = Field(..., ge=0)

    model_config = ConfigDict(extra="forbid", frozen=True)


class StockPricePoint(BaseModel):
    """One row of DimStockPrice for a commodity symbol."""
    date: datetime.date
    price: Decimal

    model_config = ConfigDict(extra="forbid", frozen=True)

    @field_serializer("price")
    def serialize_price(self, value: Decimal) -> float:
        # charts plot numbers, not the numeric column's string form
        return float(value)


class RecencyWindow(BaseModel):
    """
    Date filter for stock price history: every month after `after_month`
    in `year`.
    """
    year: int = Field(..., ge=1900, le=2100)
    after_month: int = Field(default=6, ge=0, le=11)

    model_config = ConfigDict(frozen=True)

    def contains(self, day: datetime.date) -> bool:
        return day.year == self.year and day.month > self.after_month
