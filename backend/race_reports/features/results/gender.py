"""
Gender and category normalization.

Gender cells arrive as "F", "Mujer", "Damas", "Male", "Varón", ... and are
folded into the three values of GenderCategory. Category cells are kept
as-is apart from a couple of vendor codes that are remapped to age
brackets.
"""

from __future__ import annotations

import re

from race_reports.shared.constants import GenderCategory
from race_reports.shared.text import normalize_token, strip_accents

FEMININE_SYNONYMS: frozenset[str] = frozenset(
    normalize_token(s)
    for s in (
        "f", "femenino", "fem", "femenina", "female", "w", "woman", "women",
        "mujer", "mujeres", "dama", "damas", "lady", "ladies", "girl", "girls",
        "femenil",
    )
)

# "masculina" is masculine here, even where upload forms list it as feminine.
MASCULINE_SYNONYMS: frozenset[str] = frozenset(
    normalize_token(s)
    for s in (
        "m", "masculino", "masculina", "masc", "male", "man", "men", "hombre",
        "hombres", "caballero", "caballeros", "boy", "boys", "varon", "varones",
        "varonil",
    )
)

NEUTRAL_SYNONYMS: frozenset[str] = frozenset(
    normalize_token(s)
    for s in (
        "x", "nb", "nonbinary", "nonbinario", "nobinario", "otro", "otra",
        "neutral", "mixto", "open",
    )
)

# Vendor category codes → age bracket (matched case-insensitively)
CATEGORY_REMAP: dict[str, str] = {
    "h": "20 a 29",
    "ju20": "18 a 19 años",
}


def normalize_gender(value: object) -> GenderCategory:
    """
    Fold a gender cell into Masculino / Femenino / X.

    Empty, non-string and unknown values give X.
    """
    if not isinstance(value, str):
        return GenderCategory.X
    trimmed = value.strip()
    if not trimmed:
        return GenderCategory.X

    token = normalize_token(trimmed)
    if token in FEMININE_SYNONYMS:
        return GenderCategory.FEMENINO
    if token in MASCULINE_SYNONYMS:
        return GenderCategory.MASCULINO
    return GenderCategory.X


def normalize_category(value: str) -> str:
    """Apply the vendor code remap; other categories pass through unchanged."""
    return CATEGORY_REMAP.get(value.strip().lower(), value)


# =============================================================================
# Ingestion gender rules
# =============================================================================

_INGESTION_FEMININE = frozenset({
    "f", "f.", "fem", "fem.", "feme", "femen", "femenil", "femenina", "femeninas",
    "femenino", "female", "females", "woman", "women", "mujer", "mujeres", "dama",
    "damas", "lady", "ladies", "girl", "girls",
})

_INGESTION_MASCULINE = frozenset({
    "m", "m.", "masc", "masc.", "mascu", "mascul", "masculino", "masculina",
    "masculinas", "varon", "varones", "varonil", "male", "males", "man", "men",
    "hombre", "hombres", "caballero", "caballeros", "gentleman", "gentlemen",
    "boy", "boys",
})

_FEMININE_WORDS = (
    re.compile(r"\bfem(en|enin[oa]?|enil)?\b"),
    re.compile(r"\bmujer(es)?\b"),
    re.compile(r"\bdamas?\b"),
    re.compile(r"\blad(y|ies)\b"),
    re.compile(r"\bgirls?\b"),
)

_MASCULINE_WORDS = (
    re.compile(r"\bmasc(ulino|ulina)?\b"),
    re.compile(r"\bvaron(es)?\b"),
    re.compile(r"\bhombre(s)?\b"),
    re.compile(r"\bcaballer(os|o)\b"),
    re.compile(r"\bgentlemen?\b"),
    re.compile(r"\bboys?\b"),
)


def normalize_ingestion_gender(value: object) -> str | None:
    """
    Gender rule used when persisting results.

    Exact synonyms first (accent and case insensitive), then whole-word
    hints such as "Categoría Damas". Unrecognized values are stored as
    given; empty values become None.
    """
    if value is None:
        return None
    raw = str(value).strip()
    if not raw:
        return None

    folded = strip_accents(raw.lower())
    if folded in _INGESTION_FEMININE:
        return GenderCategory.FEMENINO.value
    if folded in _INGESTION_MASCULINE:
        return GenderCategory.MASCULINO.value
    if any(p.search(folded) for p in _FEMININE_WORDS):
        return GenderCategory.FEMENINO.value
    if any(p.search(folded) for p in _MASCULINE_WORDS):
        return GenderCategory.MASCULINO.value
    return value if isinstance(value, str) else raw
