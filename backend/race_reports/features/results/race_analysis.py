"""
General analysis of a persisted race.

Works on ingested rows (IngestedResult or the RaceResultRow table): any
object with `genero`, `categoria` and `ritmo_medio` attributes. Rows
without a parseable ritmo_medio still count as runners but are left out
of the averages.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Sequence

from race_reports.shared.constants import GenderCategory
from race_reports.shared.durations import format_hhmmss, parse_duration

from .pace_ranges import RACE_ANALYSIS_PACE_RANGES

M = GenderCategory.MASCULINO.value
W = GenderCategory.FEMENINO.value


@dataclass
class RaceSummary:
    """Average pace overall and per gender, with runner counts."""

    ritmo_general: str | None
    ritmo_masculino: str | None
    ritmo_femenino: str | None
    conteo_masculino: int = 0
    conteo_femenino: int = 0


@dataclass
class PaceRangeShare:
    """Runners of each gender in one pace bucket."""

    rango: str
    femenino: int
    femenino_pct: str  # "12.50"
    masculino: int
    masculino_pct: str


@dataclass
class PaceRangeDistribution:
    total_femenino: int
    total_masculino: int
    distribucion: list[PaceRangeShare] = field(default_factory=list)


@dataclass
class CategoryBreakdown:
    """Average pace and runner count per gender in one category."""

    categoria: str | None
    ritmo_femenino: str | None
    corredoras: int
    ritmo_masculino: str | None
    corredores: int


def _pace_seconds(result: Any) -> int | None:
    return parse_duration(result.ritmo_medio)


def _average(results: Iterable[Any]) -> str | None:
    paces = [p for p in map(_pace_seconds, results) if p is not None]
    if not paces:
        return None
    return format_hhmmss(sum(paces) / len(paces))


def race_summary(results: Sequence[Any]) -> RaceSummary:
    """Average ritmo_medio of all runners, of men and of women."""
    men = [r for r in results if r.genero == M]
    women = [r for r in results if r.genero == W]
    return RaceSummary(
        ritmo_general=_average(results),
        ritmo_masculino=_average(men),
        ritmo_femenino=_average(women),
        conteo_masculino=len(men),
        conteo_femenino=len(women),
    )


def pace_range_distribution(results: Sequence[Any]) -> PaceRangeDistribution:
    """
    Runners per pace bucket and gender, with the share of each gender.

    Percentages are relative to the gender total, rendered with two
    decimals. A gender without runners uses 1 as total, so its shares
    are all "0.00".
    """
    total_f = sum(1 for r in results if r.genero == W) or 1
    total_m = sum(1 for r in results if r.genero == M) or 1

    distribution = PaceRangeDistribution(total_femenino=total_f, total_masculino=total_m)
    for pace_range in RACE_ANALYSIS_PACE_RANGES:
        in_range = [
            r for r in results
            if (pace := _pace_seconds(r)) is not None and pace_range.contains(pace)
        ]
        women = sum(1 for r in in_range if r.genero == W)
        men = sum(1 for r in in_range if r.genero == M)
        distribution.distribucion.append(
            PaceRangeShare(
                rango=pace_range.label,
                femenino=women,
                femenino_pct=f"{women / total_f * 100:.2f}",
                masculino=men,
                masculino_pct=f"{men / total_m * 100:.2f}",
            )
        )
    return distribution


def category_breakdown(results: Sequence[Any]) -> list[CategoryBreakdown]:
    """Per-category average pace and count for each gender (no category first)."""
    groups: dict[str | None, list[Any]] = {}
    for result in results:
        groups.setdefault(result.categoria, []).append(result)

    ordered = sorted(groups, key=lambda c: (c is not None, c or ""))
    rows = []
    for categoria in ordered:
        women = [r for r in groups[categoria] if r.genero == W]
        men = [r for r in groups[categoria] if r.genero == M]
        rows.append(
            CategoryBreakdown(
                categoria=categoria,
                ritmo_femenino=_average(women),
                corredoras=len(women),
                ritmo_masculino=_average(men),
                corredores=len(men),
            )
        )
    return rows
