"""
Statistics over normalized records.

All functions are pure: they read a list of NormalizedRecord and return
report rows (see schemas.py). Paces are averaged in seconds and rendered
as HH:MM:SS.

Two record filters are used on purpose:
- percentiles and progressive summaries look at individual columns;
- the pace distribution and the per-category summaries only count
  full finishers (is_valid_for_analysis), which is stricter.
"""

from __future__ import annotations

import math
from collections import defaultdict
from typing import Iterable, Iterator, Sequence

from race_reports.shared.constants import (
    CanonicalField,
    FULL_COMPLETION_COLUMNS,
    GenderCategory,
    PACE_COLUMNS,
    SPLIT_LABELS,
    SPLIT_LABEL_TO_KM,
    ZERO_PACE,
)
from race_reports.shared.durations import format_hhmmss, parse_duration, sanitize_hhmmss
from race_reports.shared.text import strip_accents

from .pace_ranges import REPORT_PACE_RANGES, find_range
from .records import NormalizedRecord
from .schemas import (
    AnalysisReport,
    CategoryStatRow,
    GenderScatter,
    GenderSummaryStatRow,
    PaceDistributionRow,
    PercentileRow,
    ScatterPoint,
    SummaryStatRow,
)

F = CanonicalField
M = GenderCategory.MASCULINO.value
W = GenderCategory.FEMENINO.value

PERCENTILE_POINTS: tuple[tuple[str, float], ...] = (
    ("Min", 0.0),
    ("1%", 0.01),
    ("5%", 0.05),
    ("10%", 0.10),
    ("30%", 0.30),
    ("50%", 0.50),
    ("80%", 0.80),
    ("Max", 1.0),
)

WITH_CHIP_TIME_LABEL = "Con Tiempo Chip dif 0"
WITH_ALL_SPLITS_LABEL = "Con todos los Split y TC"
DEFAULT_CATEGORY_LABEL = "Sin categoría"
TOTAL_LABEL = "Total"


# =============================================================================
# Helpers
# =============================================================================

def is_valid_for_analysis(record: NormalizedRecord) -> bool:
    """
    Full finisher: chip time and every split up to 42 km are positive.

    Assumes a marathon layout; on shorter races runners without the long
    splits are left out.
    """
    return all(record.positive(column) for column in FULL_COMPLETION_COLUMNS)


def average_pace(records: Sequence[NormalizedRecord], column: str) -> str:
    """Mean of a time column over records (unparseable counts as 0)."""
    if not records:
        return ZERO_PACE
    total = sum(record.seconds(column) or 0 for record in records)
    return format_hhmmss(total / len(records))


def pick_percentile(values: Sequence[float], percentile: float) -> float:
    """
    Nearest-rank percentile of an ascending list.

    index = ceil(p * n) - 1, clamped to the list; p <= 0 gives the first
    value and p >= 1 the last.
    """
    if not values:
        return 0
    if percentile <= 0:
        return values[0]
    if percentile >= 1:
        return values[-1]
    index = math.ceil(percentile * len(values)) - 1
    return values[min(len(values) - 1, max(0, index))]


def _gender_key(genero: str) -> str:
    if genero == W:
        return "F"
    if genero == M:
        return "M"
    return "X"


# =============================================================================
# Percentiles
# =============================================================================

def compute_percentiles_by_gender(records: Iterable[NormalizedRecord]) -> list[PercentileRow]:
    """Average pace percentiles for Masculino and Femenino."""
    paces: dict[str, list[int]] = {M: [], W: []}
    for record in records:
        genero = record[F.GENERO]
        if genero not in paces:
            continue
        seconds = parse_duration(sanitize_hhmmss(record[F.RITMO_MEDIO]))
        if seconds:
            paces[genero].append(seconds)

    for values in paces.values():
        values.sort()

    rows = []
    for label, percentile in PERCENTILE_POINTS:
        cells = {
            genero: format_hhmmss(pick_percentile(values, percentile)) if values else "-"
            for genero, values in paces.items()
        }
        rows.append(PercentileRow(label=label, masculino=cells[M], femenino=cells[W]))
    return rows


# =============================================================================
# Pace distribution
# =============================================================================

def compute_pace_distribution(records: Iterable[NormalizedRecord]) -> list[PaceDistributionRow]:
    """Full finishers per report pace bucket and gender key (F/M/X)."""
    counts = [{"F": 0, "M": 0, "X": 0} for _ in REPORT_PACE_RANGES]

    for record in records:
        if not is_valid_for_analysis(record):
            continue
        pace_seconds = record.seconds(F.RITMO_MEDIO)
        if not pace_seconds:
            continue
        pace_range = find_range(pace_seconds, REPORT_PACE_RANGES)
        if pace_range is None:
            continue
        counts[REPORT_PACE_RANGES.index(pace_range)][_gender_key(record[F.GENERO])] += 1

    return [
        PaceDistributionRow(label=pace_range.label, f=c["F"], m=c["M"], x=c["X"])
        for pace_range, c in zip(REPORT_PACE_RANGES, counts)
    ]


def pace_distribution_totals(rows: Iterable[PaceDistributionRow]) -> PaceDistributionRow:
    """Column sums of the pace distribution."""
    rows = list(rows)
    return PaceDistributionRow(
        label=TOTAL_LABEL,
        f=sum(r.f for r in rows),
        m=sum(r.m for r in rows),
        x=sum(r.x for r in rows),
    )


# =============================================================================
# Progressive split summaries
# =============================================================================

def progressive_subsets(
    records: Sequence[NormalizedRecord],
) -> Iterator[tuple[str, list[NormalizedRecord], CanonicalField]]:
    """
    Yield (label, subset, pace column) for every summary row.

    Two fixed rows come first (positive chip time; positive chip time and
    every checkpoint pace). Then one row per checkpoint whose subset keeps
    only records with every checkpoint pace up to that one positive, so
    subsets never grow with distance.
    """
    with_chip = [r for r in records if r.positive(F.TIEMPO_CHIP)]
    yield WITH_CHIP_TIME_LABEL, with_chip, F.RITMO_MEDIO

    with_all = [r for r in with_chip if all(r.positive(c) for c in PACE_COLUMNS)]
    yield WITH_ALL_SPLITS_LABEL, with_all, F.RITMO_MEDIO

    subset = list(records)
    for label, column in zip(SPLIT_LABELS, PACE_COLUMNS):
        subset = [r for r in subset if r.positive(column)]
        yield label, subset, column


def compute_summary_stats(records: Sequence[NormalizedRecord]) -> list[SummaryStatRow]:
    """Count and average pace of each progressive subset."""
    return [
        SummaryStatRow(label=label, count=len(subset), avg_pace=average_pace(subset, column))
        for label, subset, column in progressive_subsets(records)
    ]


def compute_gender_summary_stats(records: Sequence[NormalizedRecord]) -> list[GenderSummaryStatRow]:
    """Progressive subsets split into Masculino and Femenino."""
    rows = []
    for label, subset, column in progressive_subsets(records):
        men = [r for r in subset if r[F.GENERO] == M]
        women = [r for r in subset if r[F.GENERO] == W]
        rows.append(
            GenderSummaryStatRow(
                label=label,
                count_m=len(men),
                count_f=len(women),
                avg_pace_m=average_pace(men, column),
                avg_pace_f=average_pace(women, column),
            )
        )
    return rows


# =============================================================================
# Categories
# =============================================================================

def _category_sort_key(categoria: str) -> tuple[str, str]:
    return strip_accents(categoria).casefold(), categoria


def compute_category_stats(
    records: Iterable[NormalizedRecord],
    empty_label: str = DEFAULT_CATEGORY_LABEL,
) -> list[CategoryStatRow]:
    """Count and average Ritmo Medio per gender in each category."""
    groups: dict[str, dict[str, list[NormalizedRecord]]] = {}
    for record in records:
        categoria = record[F.CATEGORIA] or empty_label
        by_gender = groups.setdefault(categoria, {M: [], W: []})
        if record[F.GENERO] in by_gender:
            by_gender[record[F.GENERO]].append(record)

    rows = [
        CategoryStatRow(
            categoria=categoria,
            count_m=len(by_gender[M]),
            count_f=len(by_gender[W]),
            avg_pace_m=average_pace(by_gender[M], F.RITMO_MEDIO),
            avg_pace_f=average_pace(by_gender[W], F.RITMO_MEDIO),
        )
        for categoria, by_gender in groups.items()
    ]
    return sorted(rows, key=lambda row: _category_sort_key(row.categoria))


def compute_gender_summary_by_category(
    records: Iterable[NormalizedRecord],
) -> dict[str, list[GenderSummaryStatRow]]:
    """Progressive gender summary of the full finishers of each category."""
    by_category: dict[str, list[NormalizedRecord]] = defaultdict(list)
    for record in records:
        if record[F.CATEGORIA] and is_valid_for_analysis(record):
            by_category[record[F.CATEGORIA]].append(record)

    return {
        categoria: compute_gender_summary_stats(by_category[categoria])
        for categoria in sorted(by_category)
    }


# =============================================================================
# Scatter series
# =============================================================================

def _series(points: list[tuple[float, str]]) -> list[ScatterPoint]:
    """Points sorted by km, with an x=0 copy of the 5 km pace prepended."""
    series: list[ScatterPoint] = []
    start_pace = None
    for km, avg_pace in points:
        pace_seconds = parse_duration(avg_pace)
        if pace_seconds is None:
            continue
        series.append(ScatterPoint(x=km, y=pace_seconds))
        if km == 5:
            start_pace = pace_seconds
    if start_pace is not None:
        series.append(ScatterPoint(x=0, y=start_pace))
    return sorted(series, key=lambda point: point.x)


def build_scatter_series(rows: Iterable[SummaryStatRow]) -> list[ScatterPoint]:
    """Chart points (km, pace seconds) from the general summary."""
    return _series([
        (SPLIT_LABEL_TO_KM[row.label], row.avg_pace)
        for row in rows
        if row.label in SPLIT_LABEL_TO_KM
    ])


def build_gender_scatter(rows: Iterable[GenderSummaryStatRow]) -> GenderScatter:
    """Chart points per gender from a gender summary."""
    rows = [row for row in rows if row.label in SPLIT_LABEL_TO_KM]
    return GenderScatter(
        data_m=_series([(SPLIT_LABEL_TO_KM[r.label], r.avg_pace_m) for r in rows]),
        data_f=_series([(SPLIT_LABEL_TO_KM[r.label], r.avg_pace_f) for r in rows]),
    )


# =============================================================================
# Full report
# =============================================================================

def build_analysis_report(
    records: Sequence[NormalizedRecord],
    empty_category_label: str = DEFAULT_CATEGORY_LABEL,
) -> AnalysisReport:
    """Compute every report group from one file's records."""
    distribution = compute_pace_distribution(records)
    summary = compute_summary_stats(records)
    gender_summary = compute_gender_summary_stats(records)
    by_category = compute_gender_summary_by_category(records)

    return AnalysisReport(
        percentile_rows=compute_percentiles_by_gender(records),
        pace_distribution_rows=distribution,
        pace_distribution_totals=pace_distribution_totals(distribution),
        summary_stats_rows=summary,
        gender_summary_stats_rows=gender_summary,
        category_stats_rows=compute_category_stats(records, empty_category_label),
        gender_summary_stats_by_category=by_category,
        scatter_data_by_category={
            categoria: build_gender_scatter(rows) for categoria, rows in by_category.items()
        },
        scatter_data=build_scatter_series(summary),
        scatter_data_genero=build_gender_scatter(gender_summary),
    )
