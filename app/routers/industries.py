# app/routers/industries.py
"""
Industry report endpoints.

Each endpoint builds one vertical's report. Any failure while building is
logged and answered with a fixed 500 body; error details never reach the
client.
"""

import structlog
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from app.core.deps import (
    get_aerospace_assembler,
    get_car_production_assembler,
    get_fertilizer_assembler,
    get_stainless_steel_assembler,
)
from app.models.report import (
    AerospaceReport,
    CarProductionReport,
    ErrorResponse,
    FertilizerReport,
    StainlessSteelReport,
)
from app.services.reports import IndustryReportAssembler

logger = structlog.get_logger()
router = APIRouter(tags=["Industries"])

ERROR_RESPONSES = {status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse}}


def _build(assembler: IndustryReportAssembler, route: str):
    try:
        return assembler.build_report()
    except Exception:
        logger.exception("report_request_failed", route=route, vertical=assembler.config.name)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ErrorResponse().model_dump(),
        )


# ========================================
# GET /carproduction
# ========================================
@router.get("/carproduction", response_model=CarProductionReport, responses=ERROR_RESPONSES)
def car_production(assembler: IndustryReportAssembler = Depends(get_car_production_assembler)):
    """Top producing countries and prices for automotive materials."""
    return _build(assembler, "/carproduction")


# ========================================
# GET /aerospace
# ========================================
@router.get("/aerospace", response_model=AerospaceReport, responses=ERROR_RESPONSES)
def aerospace(assembler: IndustryReportAssembler = Depends(get_aerospace_assembler)):
    return _build(assembler, "/aerospace")


# ========================================
# GET /fertilizer
# ========================================
@router.get("/fertilizer", response_model=FertilizerReport, responses=ERROR_RESPONSES)
def fertilizer(assembler: IndustryReportAssembler = Depends(get_fertilizer_assembler)):
    """Potash and Potassium are reported together as `potashpotassium`."""
    return _build(assembler, "/fertilizer")


# ========================================
# GET /stainlesssteel
# ========================================
@router.get("/stainlesssteel", response_model=StainlessSteelReport, responses=ERROR_RESPONSES)
def stainless_steel(assembler: IndustryReportAssembler = Depends(get_stainless_steel_assembler)):
    return _build(assembler, "/stainlesssteel")
