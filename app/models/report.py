# app/models/report.py
from typing import List

from pydantic import BaseModel, Field, ConfigDict

from app.models.production import CountryProductionCount, StockPricePoint

ProducerList = List[CountryProductionCount]
PriceHistory = List[StockPricePoint]


class IndustryReport(BaseModel):
    """
    Base for per-vertical reports. Subclasses declare one producer list per
    tracked material plus a `stockPrices` sub-model.
    """
    model_config = ConfigDict(extra="forbid")


# ---------------------------------------------
# Automotive (/carproduction)
# ---------------------------------------------
class CarProductionStockPrices(BaseModel):
    cobalt: PriceHistory = Field(default_factory=list)
    zinc: PriceHistory = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")


class CarProductionReport(IndustryReport):
    copper: ProducerList
    manganese: ProducerList
    lithium: ProducerList
    nickel: ProducerList
    graphite: ProducerList
    zinc: ProducerList
    cobalt: ProducerList
    stockPrices: CarProductionStockPrices


# ---------------------------------------------
# Aerospace (/aerospace)
# ---------------------------------------------
class AerospaceStockPrices(BaseModel):
    cobalt: PriceHistory = Field(default_factory=list)
    gallium: PriceHistory = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")


class AerospaceReport(IndustryReport):
    copper: ProducerList
    cobalt: ProducerList
    tungsten: ProducerList
    magnesite: ProducerList
    bauxite: ProducerList
    titanium: ProducerList
    gallium: ProducerList
    quartz: ProducerList
    stockPrices: AerospaceStockPrices


# ---------------------------------------------
# Fertilizer (/fertilizer)
# ---------------------------------------------
class FertilizerStockPrices(BaseModel):
    phosphorus: PriceHistory = Field(default_factory=list)
    zinc: PriceHistory = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")


class FertilizerReport(IndustryReport):
    phosphorite: ProducerList
    # Potash and Potassium observations counted together
    potashpotassium: ProducerList
    iron: ProducerList
    copper: ProducerList
    zinc: ProducerList
    stockPrices: FertilizerStockPrices


# ---------------------------------------------
# Stainless steel (/stainlesssteel)
# ---------------------------------------------
class StainlessSteelStockPrices(BaseModel):
    manganese: PriceHistory = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")


class StainlessSteelReport(IndustryReport):
    chromium: ProducerList
    nickel: ProducerList
    iron: ProducerList
    quartz: ProducerList
    manganese: ProducerList
    stockPrices: StainlessSteelStockPrices


class ErrorResponse(BaseModel):
    error: str = "Internal server error"
