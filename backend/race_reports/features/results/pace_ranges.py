"""
Pace range tables (seconds per km, inclusive bounds).

Two tables exist and both are shown to users, so they are kept separate:

- REPORT_PACE_RANGES: buckets of the normalized CSV "Rango" column and of
  the report pace distribution.
- RACE_ANALYSIS_PACE_RANGES: buckets of the per-race analysis computed
  over persisted results.
"""

from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class PaceRange:
    """One labeled pace bucket, [min_s, max_s] seconds per km."""

    label: str
    min_s: int
    max_s: float

    def contains(self, pace_seconds: float) -> bool:
        return self.min_s <= pace_seconds <= self.max_s


def _mmss(minutes: int, seconds: int) -> int:
    return minutes * 60 + seconds


REPORT_PACE_RANGES: tuple[PaceRange, ...] = (
    PaceRange("≤ 03:30", 0, _mmss(3, 30)),
    PaceRange("03:31–03:45", _mmss(3, 31), _mmss(3, 45)),
    PaceRange("03:46–04:00", _mmss(3, 46), _mmss(4, 0)),
    PaceRange("04:01–04:15", _mmss(4, 1), _mmss(4, 15)),
    PaceRange("04:16–04:46", _mmss(4, 16), _mmss(4, 46)),
    PaceRange("04:47–05:14", _mmss(4, 47), _mmss(5, 14)),
    PaceRange("05:15–05:55", _mmss(5, 15), _mmss(5, 55)),
    PaceRange("05:56–06:30", _mmss(5, 56), _mmss(6, 30)),
    PaceRange("06:31–07:37", _mmss(6, 31), _mmss(7, 37)),
    PaceRange("07:38–08:28", _mmss(7, 38), _mmss(8, 28)),
    PaceRange("≥ 08:29", _mmss(8, 29), math.inf),
)

RACE_ANALYSIS_PACE_RANGES: tuple[PaceRange, ...] = (
    PaceRange("< 03:20", 0, 199),
    PaceRange("03:20–03:45", 200, 225),
    PaceRange("03:45–04:00", 226, 240),
    PaceRange("04:00–04:15", 241, 255),
    PaceRange("04:16–04:46", 256, 286),
    PaceRange("04:47–05:14", 287, 314),
    PaceRange("05:15–05:30", 315, 330),
    PaceRange("05:31–06:30", 331, 390),
    PaceRange("06:31–07:37", 391, 457),
    PaceRange("07:38–08:28", 458, 508),
    PaceRange("≥ 08:29", 509, 10000),
)

NO_RANGE = "-"


def find_range(
    pace_seconds: float | None,
    ranges: tuple[PaceRange, ...] = REPORT_PACE_RANGES,
) -> PaceRange | None:
    """First bucket containing the pace, or None."""
    if pace_seconds is None:
        return None
    for pace_range in ranges:
        if pace_range.contains(pace_seconds):
            return pace_range
    return None


def pace_range_label(pace_seconds: float | None) -> str:
    """Label of the report bucket for a pace, '-' when there is none."""
    found = find_range(pace_seconds)
    return found.label if found else NO_RANGE
