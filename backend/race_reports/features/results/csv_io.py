"""
CSV boundary for results files.

Reading turns a file into (headers, rows) where each row is a
{header: cell} dict; writing emits normalized records in canonical
column order. Delimiters are sniffed among , ; tab and |.
"""

from __future__ import annotations

import csv
import io
import logging
from pathlib import Path
from typing import Iterable, TextIO

from race_reports.config import settings
from race_reports.shared.constants import CANONICAL_COLUMNS

from .exceptions import ResultsFileError
from .records import NormalizedRecord

logger = logging.getLogger(__name__)

DELIMITERS = ",;\t|"
SNIFF_SAMPLE_SIZE = 64 * 1024


def _sniff_dialect(sample: str) -> type[csv.Dialect] | csv.Dialect:
    try:
        return csv.Sniffer().sniff(sample, delimiters=DELIMITERS)
    except csv.Error:
        return csv.excel


def _unique_headers(headers: list[str]) -> list[str]:
    """Suffix repeated header names (a, a_1, a_2) so the first column keeps the name."""
    seen = set(headers)
    counts: dict[str, int] = {}
    unique = []
    for header in headers:
        if header not in counts:
            counts[header] = 0
            unique.append(header)
            continue
        renamed = header
        while renamed in seen:
            counts[header] += 1
            renamed = f"{header}_{counts[header]}"
        seen.add(renamed)
        unique.append(renamed)
    return unique


def parse_results_csv(text: str) -> tuple[list[str], list[dict[str, str]]]:
    """
    Parse CSV text into headers and rows.

    Blank lines are skipped. Repeated header names get a numeric suffix,
    so the first column with a given name keeps it. A row with a different
    number of fields than the header aborts the parse.

    Raises:
        ResultsFileError: No header row, ragged row or malformed CSV
    """
    reader = csv.reader(io.StringIO(text), _sniff_dialect(text[:SNIFF_SAMPLE_SIZE]))
    try:
        lines = [line for line in reader if any(cell.strip() for cell in line)]
    except csv.Error as e:
        raise ResultsFileError(f"Malformed CSV: {e}") from e

    if not lines:
        raise ResultsFileError("Results file has no header row")

    headers = [h.strip() for h in lines[0]]
    if not any(headers):
        raise ResultsFileError("Results file has no header row")
    headers = _unique_headers(headers)

    rows = []
    for number, line in enumerate(lines[1:], start=2):
        if len(line) != len(headers):
            raise ResultsFileError(
                f"Row {number} has {len(line)} fields, expected {len(headers)}"
            )
        rows.append(dict(zip(headers, line)))

    logger.info(f"Read {len(rows)} rows with {len(headers)} columns")
    return headers, rows


def read_results_csv(
    path: Path | str,
    encoding: str | None = None,
) -> tuple[list[str], list[dict[str, str]]]:
    """
    Read a results file from disk.

    Args:
        path: CSV file path
        encoding: Defaults to settings.csv_encoding (BOM tolerant)

    Raises:
        ResultsFileError: File missing, undecodable or not a results table
    """
    path = Path(path)
    try:
        text = path.read_text(encoding=encoding or settings.csv_encoding)
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Cannot read {path}: {e}")
        raise ResultsFileError(f"Cannot read {path.name}: {e}") from e

    try:
        return parse_results_csv(text)
    except ResultsFileError as e:
        logger.error(f"Failed to parse {path.name}: {e}")
        raise


def write_normalized_csv(records: Iterable[NormalizedRecord], stream: TextIO) -> int:
    """
    Write records as CSV, header row first.

    Returns:
        Number of data rows written
    """
    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(CANONICAL_COLUMNS)
    count = 0
    for record in records:
        writer.writerow(record.as_row())
        count += 1
    return count
