# app/core/deps.py
from functools import lru_cache

from fastapi import Depends

from app.config import settings
from app.models.production import RecencyWindow
from app.services.aggregation import AggregationRepository
from app.services.postgres import PostgresService
from app.services.reports import (
    AEROSPACE,
    AUTOMOTIVE,
    FERTILIZER,
    STAINLESS_STEEL,
    IndustryReportAssembler,
)


@lru_cache
def get_db() -> PostgresService:
    # one pool per process; closed by the app lifespan
    return PostgresService(
        settings.postgres_conninfo,
        min_connections=settings.POSTGRES_POOL_MIN,
        max_connections=settings.POSTGRES_POOL_MAX,
    )


def get_repository(db: PostgresService = Depends(get_db)) -> AggregationRepository:
    window = RecencyWindow(
        year=settings.STOCK_PRICE_YEAR,
        after_month=settings.STOCK_PRICE_AFTER_MONTH,
    )
    return AggregationRepository(db, window=window, limit=settings.TOP_PRODUCERS_LIMIT)


def get_car_production_assembler(
    repository: AggregationRepository = Depends(get_repository),
) -> IndustryReportAssembler:
    return IndustryReportAssembler(repository, AUTOMOTIVE, max_workers=settings.REPORT_MAX_WORKERS)


def get_aerospace_assembler(
    repository: AggregationRepository = Depends(get_repository),
) -> IndustryReportAssembler:
    return IndustryReportAssembler(repository, AEROSPACE, max_workers=settings.REPORT_MAX_WORKERS)


def get_fertilizer_assembler(
    repository: AggregationRepository = Depends(get_repository),
) -> IndustryReportAssembler:
    return IndustryReportAssembler(repository, FERTILIZER, max_workers=settings.REPORT_MAX_WORKERS)


def get_stainless_steel_assembler(
    repository: AggregationRepository = Depends(get_repository),
) -> IndustryReportAssembler:
    return IndustryReportAssembler(repository, STAINLESS_STEEL, max_workers=settings.REPORT_MAX_WORKERS)
