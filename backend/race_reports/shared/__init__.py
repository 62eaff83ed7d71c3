"""
Shared utilities (NOT business logic).

Usage:
    from race_reports.shared import parse_duration, format_hhmmss
    from race_reports.shared.constants import CanonicalField
"""
from .constants import (
    CanonicalField,
    GenderCategory,
    CANONICAL_COLUMNS,
    CHECKPOINTS,
    PACE_COLUMNS,
    SPLIT_COLUMNS,
    TIME_COLUMNS,
    FULL_COMPLETION_COLUMNS,
    SPLIT_LABELS,
    SPLIT_LABEL_TO_KM,
    MARATHON_DISTANCE_KM,
    ZERO_TIME,
    ZERO_PACE,
)
from .durations import (
    parse_duration,
    format_hhmmss,
    format_mmss,
    sanitize_hhmmss,
    sanitize_mmss,
    positive_seconds,
)
from .text import (
    strip_accents,
    normalize_token,
    normalize_ingestion_key,
)
from .repository import BaseRepository

__all__ = [
    # constants
    "CanonicalField",
    "GenderCategory",
    "CANONICAL_COLUMNS",
    "CHECKPOINTS",
    "PACE_COLUMNS",
    "SPLIT_COLUMNS",
    "TIME_COLUMNS",
    "FULL_COMPLETION_COLUMNS",
    "SPLIT_LABELS",
    "SPLIT_LABEL_TO_KM",
    "MARATHON_DISTANCE_KM",
    "ZERO_TIME",
    "ZERO_PACE",
    # durations
    "parse_duration",
    "format_hhmmss",
    "format_mmss",
    "sanitize_hhmmss",
    "sanitize_mmss",
    "positive_seconds",
    # text
    "strip_accents",
    "normalize_token",
    "normalize_ingestion_key",
    # repository
    "BaseRepository",
]
