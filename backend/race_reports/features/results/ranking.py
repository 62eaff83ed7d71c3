"""
Top-N rankings of a persisted race.

Rows are ordered by chip time; ties keep input order. Rows without chip
time are never ranked.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Sequence

from race_reports.shared.constants import GenderCategory
from race_reports.shared.text import strip_accents

DEFAULT_LIMIT = 5

# Para-sport and disability categories are left out of the gender podiums
DISABILITY_PATTERNS: tuple[str, ...] = (
    "invident",
    "ciego",
    "silla de ruedas",
    "ruedas",
    "wheelchair",
    "paralimp",
    "paralymp",
    "discapacidad",
    "pcd",
)


@dataclass
class CategoryRank:
    """Position of a result within its category."""

    pos: int
    result: Any

    @property
    def categoria(self) -> str | None:
        return self.result.categoria


def is_disability_category(categoria: str | None) -> bool:
    """True when the category names a para-sport or disability class (accents ignored)."""
    if categoria is None:
        return False
    lowered = strip_accents(categoria.lower())
    return any(pattern in lowered for pattern in DISABILITY_PATTERNS)


def _ranked(results: Iterable[Any]) -> list[Any]:
    timed = [r for r in results if r.tiempo_chip_s is not None]
    return sorted(timed, key=lambda r: r.tiempo_chip_s)


def top_by_gender(results: Sequence[Any], limit: int = DEFAULT_LIMIT) -> dict[str, list[Any]]:
    """
    Fastest women and men of a race.

    Returns:
        {"femenino": [...], "masculino": [...]}, each at most `limit` long
    """
    eligible = [r for r in _ranked(results) if not is_disability_category(r.categoria)]
    return {
        "femenino": [r for r in eligible if r.genero == GenderCategory.FEMENINO.value][:limit],
        "masculino": [r for r in eligible if r.genero == GenderCategory.MASCULINO.value][:limit],
    }


def top_by_category(results: Sequence[Any], limit: int = DEFAULT_LIMIT) -> list[CategoryRank]:
    """
    Fastest runners of every category, all categories included.

    Ordered by category (results without category first), then position.
    """
    by_category: dict[str | None, list[Any]] = {}
    for result in _ranked(results):
        by_category.setdefault(result.categoria, []).append(result)

    ranks = []
    for categoria in sorted(by_category, key=lambda c: (c is not None, c or "")):
        for pos, result in enumerate(by_category[categoria][:limit], start=1):
            ranks.append(CategoryRank(pos=pos, result=result))
    return ranks
