from __future__ import annotations

import time
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Any, Callable, Dict, Generic, List, Tuple, Type, TypeVar

import structlog
from pydantic import ValidationError

from app.core.errors import ReportAssemblyError
from app.models.report import (
    AerospaceReport,
    CarProductionReport,
    FertilizerReport,
    IndustryReport,
    StainlessSteelReport,
)
from app.services.aggregation import AggregationRepository

logger = structlog.get_logger()

R = TypeVar("R", bound=IndustryReport)


@dataclass(frozen=True)
class VerticalConfig(Generic[R]):
    """
    One industry vertical: which materials go into the report under which
    key, and which stock symbols go under `stockPrices`.

    A material entry with more than one name is counted as a single
    combined category (e.g. Potash + Potassium).
    """
    name: str
    materials: Tuple[Tuple[str, Tuple[str, ...]], ...]
    stocks: Tuple[Tuple[str, str], ...]
    report_model: Type[R]


AUTOMOTIVE = VerticalConfig(
    name="automotive",
    materials=(
        ("copper", ("Copper",)),
        ("manganese", ("Manganese",)),
        ("lithium", ("Lithium",)),
        ("nickel", ("Nickel",)),
        ("graphite", ("Graphite",)),
        ("zinc", ("Zinc",)),
        ("cobalt", ("Cobalt",)),
    ),
    stocks=(("cobalt", "Cobalt"), ("zinc", "Zinc")),
    report_model=CarProductionReport,
)

AEROSPACE = VerticalConfig(
    name="aerospace",
    materials=(
        ("copper", ("Copper",)),
        ("cobalt", ("Cobalt",)),
        ("tungsten", ("Tungsten",)),
        ("magnesite", ("Magnesite",)),
        ("bauxite", ("Bauxite",)),
        ("titanium", ("Titanium",)),
        ("gallium", ("Gallium",)),
        ("quartz", ("Quartz",)),
    ),
    stocks=(("cobalt", "Cobalt"), ("gallium", "Gallium")),
    report_model=AerospaceReport,
)

FERTILIZER = VerticalConfig(
    name="fertilizer",
    materials=(
        ("phosphorite", ("Phosphorite",)),
        ("potashpotassium", ("Potash", "Potassium")),
        ("iron", ("Iron",)),
        ("copper", ("Copper",)),
        ("zinc", ("Zinc",)),
    ),
    stocks=(("phosphorus", "Phosphorus"), ("zinc", "Zinc")),
    report_model=FertilizerReport,
)

STAINLESS_STEEL = VerticalConfig(
    name="stainless_steel",
    materials=(
        ("chromium", ("Chromium",)),
        ("nickel", ("Nickel",)),
        ("iron", ("Iron",)),
        ("quartz", ("Quartz",)),
        ("manganese", ("Manganese",)),
    ),
    stocks=(("manganese", "Manganese"),),
    report_model=StainlessSteelReport,
)

VERTICALS: Dict[str, VerticalConfig] = {
    v.name: v for v in (AUTOMOTIVE, AEROSPACE, FERTILIZER, STAINLESS_STEEL)
}


class IndustryReportAssembler(Generic[R]):
    """
    Builds one vertical's report by fanning out independent repository
    reads on a thread pool. Any failed read fails the whole build.
    """

    def __init__(
        self,
        repository: AggregationRepository,
        config: VerticalConfig[R],
        max_workers: int = 4,
    ):
        if max_workers < 1:
            raise ValueError("max_workers must be >= 1")
        self.repository = repository
        self.config = config
        self.max_workers = max_workers

    def _tasks(self) -> List[Tuple[Tuple[str, str], Callable[[], List[Any]]]]:
        repo = self.repository
        tasks: List[Tuple[Tuple[str, str], Callable[[], List[Any]]]] = []
        for key, names in self.config.materials:
            tasks.append((("materials", key), lambda names=names: repo.top_producers_by_materials(names)))
        for key, symbol in self.config.stocks:
            tasks.append((("stockPrices", key), lambda symbol=symbol: repo.stock_price_history(symbol)))
        return tasks

    def build_report(self) -> R:
        started = time.perf_counter()
        tasks = self._tasks()
        results: Dict[Tuple[str, str], List[Any]] = {}

        logger.info("report_build_started", vertical=self.config.name, reads=len(tasks))

        workers = min(self.max_workers, len(tasks))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix=f"report-{self.config.name}") as executor:
            futures: Dict[Future, Tuple[str, str]] = {
                executor.submit(fn): slot for slot, fn in tasks
            }
            try:
                for future in as_completed(futures):
                    results[futures[future]] = future.result()
            except Exception as e:
                for pending in futures:
                    pending.cancel()
                logger.error(
                    "report_build_failed",
                    vertical=self.config.name,
                    read=".".join(futures[future]),
                    error=str(e),
                )
                raise ReportAssemblyError(self.config.name, e) from e

        payload: Dict[str, Any] = {
            key: results[("materials", key)] for key, _ in self.config.materials
        }
        payload["stockPrices"] = {
            key: results[("stockPrices", key)] for key, _ in self.config.stocks
        }
        try:
            report = self.config.report_model.model_validate(payload)
        except ValidationError as e:
            raise ReportAssemblyError(self.config.name, e) from e

        logger.info(
            "report_built",
            vertical=self.config.name,
            duration_ms=round((time.perf_counter() - started) * 1000, 1),
        )
        return report
