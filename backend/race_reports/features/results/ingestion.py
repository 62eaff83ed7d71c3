"""
Ingestion gate: raw CSV rows → IngestedResult rows ready to persist.

Uses the ingestion alias table and the DROP_ZERO_TIME policy: a row
without a chip time, or with a chip time of zero, is not stored and is
counted as omitted. Report building instead keeps such rows with
'00:00:00' (see normalizer.ValidityPolicy).
"""

from __future__ import annotations

import logging
import math
import re
from typing import Any, Iterable

from race_reports.config import settings
from race_reports.shared.durations import format_hhmmss, parse_duration

from .gender import normalize_ingestion_gender
from .headers import INGESTION_OPTIONAL_COLUMNS, resolve_ingestion_headers
from .normalizer import RawRow, ValidityPolicy, cell_text, is_meaningful_row
from .records import IngestedResult, IngestionResult

logger = logging.getLogger(__name__)

BASE_COLUMNS: tuple[str, ...] = (
    "nombre",
    "genero",
    "categoria",
    "tiempo_chip",
    "ritmo_medio",
    "distancia",
    "ascenso_total",
)

_TIME_TOKEN = re.compile(r"([0-9]{1,2}:[0-9]{2}(?::[0-9]{2})?)")
_HMS = re.compile(r"[0-9]{1,2}:[0-9]{2}:[0-9]{2}")
_MS = re.compile(r"[0-9]{1,2}:[0-9]{2}")
_SECONDS = re.compile(r"[0-9]+")


def normalize_ingestion_time(value: Any) -> str | None:
    """
    Normalize a time cell to 'HH:MM:SS' for storage.

    The first h:mm[:ss] token found in the cell is used, so "3:05:10 (DQ)"
    still gives '03:05:10'.

    Examples:
        "3:05:10" → "03:05:10"
        "45:10"   → "00:45:10"
        "3725"    → "01:02:05"
        "DNF"     → None
    """
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None

    token = _TIME_TOKEN.search(text)
    if token:
        text = token.group(1)

    if _HMS.fullmatch(text):
        hours, minutes, seconds = text.split(":")
        return f"{int(hours):02d}:{minutes}:{seconds}"
    if _MS.fullmatch(text):
        return f"00:{text.zfill(5)}"
    if _SECONDS.fullmatch(text):
        return format_hhmmss(int(text))
    return None


def _debug(message: str) -> None:
    if settings.debug_uploads:
        logger.info(message)
    else:
        logger.debug(message)


def ingest_rows(
    rows: Iterable[RawRow],
    headers: Iterable[str] | None,
    distance_km: float | None,
    ascenso_total: float | None = None,
) -> IngestionResult:
    """
    Turn raw rows into rows to persist, dropping rows without chip time.

    Args:
        rows: {source header: cell} rows of one file
        headers: Source header row
        distance_km: Race distance (None or NaN when unknown)
        ascenso_total: Total elevation gain, copied to every row

    Returns:
        IngestionResult with accepted rows, omitted count and the
        persisted column list
    """
    policy = ValidityPolicy.DROP_ZERO_TIME
    headers = list(headers or ())
    matches = resolve_ingestion_headers(headers)
    optional = [c for c in INGESTION_OPTIONAL_COLUMNS if c.name in matches]
    _debug(f"Optional columns detected: {[c.name for c in optional]}")

    if distance_km is not None and (math.isnan(distance_km) or distance_km <= 0):
        distance_km = None

    result = IngestionResult(columns=[*BASE_COLUMNS, *(c.name for c in optional)])

    def raw(row: RawRow, name: str) -> Any:
        header = matches.get(name)
        return row.get(header) if header is not None else None

    for row in rows:
        if not is_meaningful_row(row):
            continue

        tiempo_chip = normalize_ingestion_time(raw(row, "tiempo_chip"))
        chip_seconds = parse_duration(tiempo_chip)
        if tiempo_chip is None or not policy.accepts(chip_seconds):
            result.omitted += 1
            continue

        ritmo_medio = None
        if distance_km:
            ritmo_medio = format_hhmmss(chip_seconds / distance_km)

        checkpoints: dict[str, str | None] = {}
        bib = None
        for column in optional:
            value = raw(row, column.name)
            if column.kind == "time":
                checkpoints[column.name] = normalize_ingestion_time(value)
            else:
                bib = cell_text(value) or None

        result.results.append(
            IngestedResult(
                nombre=cell_text(raw(row, "nombre")) or None,
                genero=normalize_ingestion_gender(raw(row, "genero")),
                categoria=cell_text(raw(row, "categoria")) or None,
                tiempo_chip=tiempo_chip,
                tiempo_chip_s=chip_seconds,
                ritmo_medio=ritmo_medio,
                distancia=distance_km,
                ascenso_total=ascenso_total,
                bib=bib,
                checkpoints=checkpoints,
            )
        )

    _debug(f"Rows to insert: {len(result.results)}, omitted: {result.omitted}")
    return result
