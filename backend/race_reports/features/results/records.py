"""Value types for normalized and ingested results (no DB dependency)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Mapping

from race_reports.shared.constants import CANONICAL_COLUMNS
from race_reports.shared.durations import parse_duration, positive_seconds


class NormalizedRecord(Mapping[str, str]):
    """
    One normalized results row.

    Every canonical column is present (missing ones default to ""), keys
    iterate in canonical CSV order and the record cannot be modified.
    Columns can be addressed by CanonicalField or by their string name.
    """

    __slots__ = ("_values",)

    def __init__(self, values: Mapping[str, str]):
        self._values = {
            column: str(values.get(column, "")) for column in CANONICAL_COLUMNS
        }

    def __getitem__(self, key: str) -> str:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"NormalizedRecord({self._values!r})"

    def seconds(self, column: str) -> int | None:
        """Parsed duration of a time column."""
        return parse_duration(self._values[column])

    def positive(self, column: str) -> bool:
        """True when a time column holds more than zero seconds."""
        return positive_seconds(self._values[column]) > 0

    def as_row(self) -> list[str]:
        """Values in canonical column order."""
        return list(self._values.values())


@dataclass
class IngestedResult:
    """Single result row accepted by the ingestion gate."""

    nombre: str | None
    genero: str | None  # "Masculino" / "Femenino" / raw value
    categoria: str | None
    tiempo_chip: str  # "HH:MM:SS", never zero
    tiempo_chip_s: int
    ritmo_medio: str | None  # "HH:MM:SS" per km
    distancia: float | None
    ascenso_total: float | None = None
    bib: str | None = None
    checkpoints: dict[str, str | None] = field(default_factory=dict)  # {"split_5km": "00:21:10"}


@dataclass
class IngestionResult:
    """Outcome of ingesting one file."""

    results: list[IngestedResult] = field(default_factory=list)
    omitted: int = 0
    columns: list[str] = field(default_factory=list)  # persisted column names
