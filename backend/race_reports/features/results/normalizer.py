"""
Row normalization: raw CSV rows → NormalizedRecord.

Every source row becomes one complete record over the canonical columns.
Time cells are re-rendered as HH:MM:SS, gender is folded, and a few
columns are derived from the chip time and the race distance:

- Ritmo Medio: chip time / distance
- split_42km: the chip time itself on a marathon
- RM_42km: pace of the last 2.195 km on a marathon
- Rango: pace bucket of Ritmo Medio
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Mapping

from race_reports.shared.constants import (
    CanonicalField,
    MARATHON_DISTANCE_KM,
    MMSS_COLUMNS,
    TIME_COLUMNS,
    ZERO_PACE,
)
from race_reports.shared.durations import (
    format_hhmmss,
    parse_duration,
    sanitize_hhmmss,
    sanitize_mmss,
)

from .gender import normalize_category, normalize_gender
from .headers import resolve_headers
from .pace_ranges import pace_range_label
from .records import NormalizedRecord

logger = logging.getLogger(__name__)

F = CanonicalField

RawRow = Mapping[str, Any]


class ValidityPolicy(str, Enum):
    """
    What to do with a row whose chip time is missing or zero.

    DEFAULT_ZERO_TIME keeps the row with '00:00:00' (report building).
    DROP_ZERO_TIME drops it and counts it as omitted (persistence).
    """
    DEFAULT_ZERO_TIME = "default_zero_time"
    DROP_ZERO_TIME = "drop_zero_time"

    def accepts(self, chip_seconds: int | None) -> bool:
        if self is ValidityPolicy.DROP_ZERO_TIME:
            return bool(chip_seconds)
        return True


@dataclass
class NormalizationResult:
    """Records produced from one file plus the rows the policy rejected."""

    records: list[NormalizedRecord] = field(default_factory=list)
    omitted: int = 0


def cell_text(value: Any) -> str:
    """Trimmed string form of a raw cell; None becomes ''."""
    if value is None:
        return ""
    return str(value).strip()


def is_meaningful_row(row: RawRow) -> bool:
    """False when every cell of the row is blank."""
    return any(cell_text(value) for value in row.values())


def filter_meaningful_rows(rows: Iterable[RawRow]) -> list[RawRow]:
    """Drop rows that are entirely empty."""
    return [row for row in rows if is_meaningful_row(row)]


def normalize_row(
    row: RawRow,
    header_matches: Mapping[CanonicalField, str],
    distance_km: float,
) -> NormalizedRecord:
    """
    Normalize one raw row.

    Args:
        row: {source header: cell}
        header_matches: Output of resolve_headers() for the file
        distance_km: Race distance, shared by every row of the file

    Returns:
        Complete NormalizedRecord
    """

    def raw(column: CanonicalField) -> str:
        header = header_matches.get(column)
        if header is None:
            return ""
        return cell_text(row.get(header))

    is_marathon = distance_km == MARATHON_DISTANCE_KM

    chip_time = sanitize_hhmmss(raw(F.TIEMPO_CHIP))
    chip_seconds = parse_duration(chip_time)

    ritmo_medio = ZERO_PACE
    if chip_seconds is not None and distance_km > 0:
        ritmo_medio = format_hhmmss(chip_seconds / distance_km)

    split_42 = chip_time if is_marathon else sanitize_hhmmss(raw(F.SPLIT_42KM))

    rm_42 = sanitize_hhmmss(raw(F.RM_42KM))
    if is_marathon:
        split_42_seconds = parse_duration(split_42)
        split_40_seconds = parse_duration(sanitize_hhmmss(raw(F.SPLIT_40KM)))
        if split_42_seconds and split_40_seconds:
            last_pace = (split_42_seconds - split_40_seconds) / (MARATHON_DISTANCE_KM - 40)
            rm_42 = format_hhmmss(last_pace)

    derived = {
        F.RITMO_MEDIO: ritmo_medio,
        F.SPLIT_42KM: split_42,
        F.RM_42KM: rm_42,
        F.RANGO: pace_range_label(parse_duration(ritmo_medio)),
    }

    values: dict[str, str] = {}
    for column in CanonicalField:
        if column in derived:
            values[column.value] = derived[column]
        elif column is F.CATEGORIA:
            values[column.value] = normalize_category(raw(column))
        elif column is F.GENERO:
            values[column.value] = normalize_gender(raw(column)).value
        elif column in TIME_COLUMNS:
            values[column.value] = sanitize_hhmmss(raw(column))
        elif column in MMSS_COLUMNS:
            values[column.value] = sanitize_mmss(raw(column))
        else:
            values[column.value] = raw(column)

    return NormalizedRecord(values)


def normalize_rows(
    rows: Iterable[RawRow],
    headers: Iterable[str] | None,
    distance_km: float,
    policy: ValidityPolicy = ValidityPolicy.DEFAULT_ZERO_TIME,
) -> NormalizationResult:
    """
    Normalize every meaningful row of a file.

    Blank rows are skipped without being counted. Rows the policy rejects
    are counted in `omitted`.
    """
    header_matches = resolve_headers(headers)
    result = NormalizationResult()

    for row in filter_meaningful_rows(rows):
        record = normalize_row(row, header_matches, distance_km)
        if not policy.accepts(record.seconds(F.TIEMPO_CHIP)):
            result.omitted += 1
            continue
        result.records.append(record)

    logger.info(
        f"Normalized {len(result.records)} rows "
        f"({result.omitted} omitted, distance={distance_km} km, policy={policy.value})"
    )
    return result
