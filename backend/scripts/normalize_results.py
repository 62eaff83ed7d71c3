#!/usr/bin/env python3
"""CLI script for normalizing a race results CSV.

Usage:
    # Print the normalized CSV
    python backend/scripts/normalize_results.py resultados.csv --distance 42.195

    # Write it to a file
    python backend/scripts/normalize_results.py resultados.csv \
        --distance 10 --output resultados_normalizados.csv
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from race_reports.config import settings
from race_reports.features.results import (
    ResultsError,
    normalize_file,
    write_normalized_csv,
)

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stderr),
    ]
)
logger = logging.getLogger(__name__)


def main() -> None:
    parser = argparse.ArgumentParser(description="Normalize a race results CSV")
    parser.add_argument("csv", help="Results CSV file")
    parser.add_argument("--distance", required=True, help="Race distance in km (42.195 for a marathon)")
    parser.add_argument("--output", help="Write the normalized CSV here instead of stdout")

    args = parser.parse_args()

    try:
        result = normalize_file(args.csv, args.distance)
    except ResultsError as e:
        logger.error(f"Normalization failed: {e}")
        sys.exit(1)

    if args.output:
        path = Path(args.output)
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8", newline="") as f:
            count = write_normalized_csv(result.records, f)
        print(f"Saved to {path} ({count} rows)")
    else:
        write_normalized_csv(result.records, sys.stdout)


if __name__ == "__main__":
    main()
