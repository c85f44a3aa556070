from __future__ import annotations

import pytest

from app.core.errors import DataAccessError, ReportAssemblyError
from app.models.report import StainlessSteelReport
from app.services.reports import (
    AEROSPACE,
    AUTOMOTIVE,
    FERTILIZER,
    STAINLESS_STEEL,
    VERTICALS,
    IndustryReportAssembler,
)
from tests.conftest import StubRepository


def test_stainless_steel_report_keys(stub_repository):
    report = IndustryReportAssembler(stub_repository, STAINLESS_STEEL).build_report()

    assert isinstance(report, StainlessSteelReport)
    body = report.model_dump(mode="json")
    assert set(body) == {"chromium", "nickel", "iron", "quartz", "manganese", "stockPrices"}
    assert set(body["stockPrices"]) == {"manganese"}
    assert body["chromium"][0] == {"country": "South Africa", "count": 12}
    assert body["stockPrices"]["manganese"] == [
        {"date": "2025-07-01", "price": 4.55},
        {"date": "2025-08-01", "price": 4.61},
    ]


def test_every_read_is_issued_once(stub_repository):
    IndustryReportAssembler(stub_repository, STAINLESS_STEEL, max_workers=3).build_report()

    assert sorted(stub_repository.material_calls) == sorted(
        [("Chromium",), ("Nickel",), ("Iron",), ("Quartz",), ("Manganese",)]
    )
    assert stub_repository.symbol_calls == ["Manganese"]


def test_fertilizer_uses_combined_potash_query(stub_repository):
    report = IndustryReportAssembler(stub_repository, FERTILIZER).build_report()

    assert ("Potash", "Potassium") in stub_repository.material_calls
    assert [(c.country, c.count) for c in report.potashpotassium] == [("Canada", 8), ("Belarus", 5)]
    assert sorted(stub_repository.symbol_calls) == ["Phosphorus", "Zinc"]
    assert set(report.model_dump()["stockPrices"]) == {"phosphorus", "zinc"}


@pytest.mark.parametrize(
    "config, keys, stock_keys",
    [
        (
            AUTOMOTIVE,
            {"copper", "manganese", "lithium", "nickel", "graphite", "zinc", "cobalt"},
            {"cobalt", "zinc"},
        ),
        (
            AEROSPACE,
            {"copper", "cobalt", "tungsten", "magnesite", "bauxite", "titanium", "gallium", "quartz"},
            {"cobalt", "gallium"},
        ),
        (
            FERTILIZER,
            {"phosphorite", "potashpotassium", "iron", "copper", "zinc"},
            {"phosphorus", "zinc"},
        ),
    ],
)
def test_vertical_report_keys(config, keys, stock_keys):
    body = IndustryReportAssembler(StubRepository(), config).build_report().model_dump()
    assert set(body) == keys | {"stockPrices"}
    assert set(body["stockPrices"]) == stock_keys


def test_verticals_registry():
    assert set(VERTICALS) == {"automotive", "aerospace", "fertilizer", "stainless_steel"}


def test_failed_read_fails_whole_report(stub_repository):
    stub_repository.fail_on = {"Iron"}

    with pytest.raises(ReportAssemblyError) as exc_info:
        IndustryReportAssembler(stub_repository, STAINLESS_STEEL).build_report()

    assert exc_info.value.vertical == "stainless_steel"
    assert isinstance(exc_info.value.cause, DataAccessError)
    assert isinstance(exc_info.value.__cause__, DataAccessError)


def test_failed_price_read_fails_whole_report(stub_repository):
    stub_repository.fail_on = {"Manganese"}
    with pytest.raises(ReportAssemblyError):
        IndustryReportAssembler(stub_repository, STAINLESS_STEEL).build_report()


def test_build_is_idempotent(stub_repository):
    assembler = IndustryReportAssembler(stub_repository, STAINLESS_STEEL)
    assert assembler.build_report() == assembler.build_report()


def test_sequential_and_concurrent_builds_match(stub_repository):
    one = IndustryReportAssembler(stub_repository, FERTILIZER, max_workers=1).build_report()
    many = IndustryReportAssembler(stub_repository, FERTILIZER, max_workers=8).build_report()
    assert one == many


def test_max_workers_must_be_positive(stub_repository):
    with pytest.raises(ValueError):
        IndustryReportAssembler(stub_repository, STAINLESS_STEEL, max_workers=0)
