"""
Text folding helpers for matching headers and labels.
"""

import re
import unicodedata

_COMBINING_MARKS = re.compile(r"[\u0300-\u036f]")
_NON_ALNUM = re.compile(r"[^a-z0-9]")
_NON_WORD = re.compile(r"[^A-Za-z0-9_]")


def strip_accents(value: str) -> str:
    """Remove diacritics: 'Género' → 'Genero'."""
    return _COMBINING_MARKS.sub("", unicodedata.normalize("NFD", value))


def normalize_token(value: str) -> str:
    """
    Fold a header or label for synonym lookup.

    Lower-cases, drops diacritics and keeps only [a-z0-9]:
    'Tiempo Chip' → 'tiempochip', 'Género' → 'genero', 'RM 5km' → 'rm5km'.
    """
    return _NON_ALNUM.sub("", strip_accents(value.lower()))


def normalize_ingestion_key(value: str) -> str:
    """
    Fold a header the way the ingestion alias table expects.

    Keeps ASCII letters, digits and underscores only, without transliterating
    accented letters: 'Tiempo Chip' → 'tiempochip', 'Género' → 'gnero',
    'split_5k' → 'split_5k'.
    """
    return _NON_WORD.sub("", value).lower()
