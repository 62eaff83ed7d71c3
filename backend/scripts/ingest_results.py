#!/usr/bin/env python3
"""CLI script for loading race results into the database.

Usage:
    # Ingest a file (rows without chip time are skipped)
    python backend/scripts/ingest_results.py resultados.csv \
        --race "Maratón de Santiago 2025" --distance 42.195 --date 2025-04-06

    # Ingest and show the race analysis and podiums
    python backend/scripts/ingest_results.py resultados.csv \
        --race "Maratón de Santiago 2025" --distance 42.195 --top
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from race_reports.config import settings
from race_reports.db.session import SessionLocal, init_db
from race_reports.features.results import ResultsError, ResultsService

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout),
    ]
)
logger = logging.getLogger(__name__)


def print_race(service: ResultsService, race_id: int) -> None:
    """Print race analysis, pace ranges and podiums."""
    summary = service.race_summary(race_id)
    print(f"\nRitmo general: {summary.ritmo_general or '-'}")
    print(f"Masculino:     {summary.ritmo_masculino or '-'} ({summary.conteo_masculino})")
    print(f"Femenino:      {summary.ritmo_femenino or '-'} ({summary.conteo_femenino})")

    print("\n=== Rangos de ritmo ===")
    for share in service.pace_ranges(race_id).distribucion:
        print(
            f"  {share.rango:>12s}  F {share.femenino:4d} ({share.femenino_pct:>6s}%)  "
            f"M {share.masculino:4d} ({share.masculino_pct:>6s}%)"
        )

    top = service.top_by_gender(race_id)
    for genero, rows in top.items():
        print(f"\n=== Top {genero} ===")
        for pos, r in enumerate(rows, start=1):
            print(f"  {pos}. {r.nombre or '?'}  {r.tiempo_chip}  {r.categoria or ''}")

    print("\n=== Top por categoría ===")
    for rank in service.top_by_category(race_id):
        r = rank.result
        print(f"  {rank.categoria or '-':>20s}  {rank.pos}. {r.nombre or '?'}  {r.tiempo_chip}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Load race results into the database")
    parser.add_argument("csv", help="Results CSV file")
    parser.add_argument("--race", required=True, help="Race name (created if missing)")
    parser.add_argument("--distance", type=float, help="Race distance in km")
    parser.add_argument("--date", help="Race date, e.g. 2025-04-06")
    parser.add_argument("--elevation", type=float, help="Total elevation gain in m")
    parser.add_argument("--top", action="store_true", help="Show analysis and rankings")

    args = parser.parse_args()

    init_db()
    with SessionLocal() as db:
        service = ResultsService(db)
        try:
            race, ingestion = service.ingest_file(
                args.csv,
                args.race,
                args.distance,
                fecha=args.date,
                ascenso_total=args.elevation,
            )
        except ResultsError as e:
            logger.error(f"Ingestion failed: {e}")
            sys.exit(1)

        print(
            f"{race.nombre}: {len(ingestion.results)} results inserted, "
            f"{ingestion.omitted} omitted"
        )
        print(f"Columns: {', '.join(ingestion.columns)}")

        if args.top:
            print_race(service, race.id)


if __name__ == "__main__":
    main()
