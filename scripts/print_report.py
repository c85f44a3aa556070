from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

ROOT = Path(__file__).resolve().parents[1]
load_dotenv(dotenv_path=ROOT / ".env")

from app.config import settings
from app.core.errors import ReportAssemblyError
from app.core.logging import configure_logging
from app.models.production import RecencyWindow
from app.services.aggregation import AggregationRepository
from app.services.postgres import PostgresService
from app.services.reports import VERTICALS, IndustryReportAssembler


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Build one industry report straight from PostgreSQL and print it as JSON."
    )
    parser.add_argument("--vertical", required=True, choices=sorted(VERTICALS))
    parser.add_argument("--indent", type=int, default=2)
    parser.add_argument("--year", type=int, default=settings.STOCK_PRICE_YEAR, help="Stock price year")
    parser.add_argument(
        "--after-month",
        type=int,
        default=settings.STOCK_PRICE_AFTER_MONTH,
        help="Only stock prices in months after this one (0-11)",
    )
    args = parser.parse_args(argv)

    configure_logging(settings.LOG_LEVEL, json_logs=settings.LOG_JSON)

    svc = PostgresService(
        settings.postgres_conninfo,
        min_connections=settings.POSTGRES_POOL_MIN,
        max_connections=settings.POSTGRES_POOL_MAX,
    )
    repo = AggregationRepository(
        svc,
        window=RecencyWindow(year=args.year, after_month=args.after_month),
        limit=settings.TOP_PRODUCERS_LIMIT,
    )
    assembler = IndustryReportAssembler(
        repo, VERTICALS[args.vertical], max_workers=settings.REPORT_MAX_WORKERS
    )

    try:
        report = assembler.build_report()
    except ReportAssemblyError as e:
        print(f"❌ {e}", file=sys.stderr)
        return 1
    finally:
        svc.close()

    print(report.model_dump_json(indent=args.indent))
    return 0


if __name__ == "__main__":
    sys.exit(main())
