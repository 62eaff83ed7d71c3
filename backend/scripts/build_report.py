#!/usr/bin/env python3
"""CLI script for building an analysis report from a race results CSV.

Usage:
    # Print summary tables
    python backend/scripts/build_report.py resultados.csv --distance 42.195

    # Save the report JSON and store it in the database
    python backend/scripts/build_report.py resultados.csv --distance 42.195 \
        --output informe.json --save "Maratón de Santiago 2025"

    # List saved reports
    python backend/scripts/build_report.py --list
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from race_reports.config import settings
from race_reports.db.session import SessionLocal, init_db
from race_reports.features.results import (
    AnalysisReport,
    ReportMetadata,
    ResultsError,
    ResultsService,
    analyze,
    normalize_file,
)

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout),
    ]
)
logger = logging.getLogger(__name__)


def print_report(report: AnalysisReport) -> None:
    """Print the main tables of a report."""
    print("\n=== Percentiles (Ritmo Medio) ===")
    for row in report.percentile_rows:
        print(f"  {row.label:>5s}  M {row.masculino:>8s}  F {row.femenino:>8s}")

    print("\n=== Distribución por ritmo ===")
    for row in [*report.pace_distribution_rows, report.pace_distribution_totals]:
        print(f"  {row.label:>12s}  F {row.f:5d}  M {row.m:5d}  X {row.x:5d}")

    print("\n=== Resumen por split ===")
    for row in report.summary_stats_rows:
        print(f"  {row.label:>26s}  {row.count:6d}  {row.avg_pace}")

    print("\n=== Categorías ===")
    for row in report.category_stats_rows:
        print(
            f"  {row.categoria:>20s}  M {row.count_m:4d} {row.avg_pace_m}  "
            f"F {row.count_f:4d} {row.avg_pace_f}"
        )


def main() -> None:
    parser = argparse.ArgumentParser(description="Build an analysis report from a results CSV")
    parser.add_argument("csv", nargs="?", help="Results CSV file")
    parser.add_argument("--distance", help="Race distance in km")
    parser.add_argument("--output", help="Write the report JSON to this file")
    parser.add_argument("--save", metavar="NAME", help="Store the report in the database under NAME")
    parser.add_argument("--list", action="store_true", help="List saved reports")

    args = parser.parse_args()

    if args.list:
        init_db()
        with SessionLocal() as db:
            for summary in ResultsService(db).list_reports():
                print(f"{summary.id}  {summary.fecha:%Y-%m-%d %H:%M}  {summary.nombre}")
        return

    if not args.csv or not args.distance:
        parser.error("csv and --distance are required")

    try:
        result = normalize_file(args.csv, args.distance)
    except ResultsError as e:
        logger.error(f"Report failed: {e}")
        sys.exit(1)

    report = analyze(result.records)
    print_report(report)

    if args.output:
        path = Path(args.output)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            json.dumps(report.to_json_dict(), ensure_ascii=False, indent=2),
            encoding="utf-8",
        )
        print(f"\nSaved to {path}")

    if args.save:
        metadata = ReportMetadata(
            file_name=Path(args.csv).name,
            distance_km=float(args.distance),
            row_count=len(result.records),
        )
        init_db()
        with SessionLocal() as db:
            stored = ResultsService(db).save_report(args.save, report, metadata)
        print(f"Report stored: {stored.id}")


if __name__ == "__main__":
    main()
