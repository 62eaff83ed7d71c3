"""
Results-related schemas.

Pydantic models for the analysis report and its stored envelope. JSON keys
are camelCase (percentileRows, avgPaceM, ...), matching reports already
saved by earlier versions; Python attributes are snake_case.
"""

import math
from datetime import datetime
from typing import Any, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    field_validator,
)
from pydantic.alias_generators import to_camel

REPORT_SCHEMA_VERSION = 1


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json_dict(self) -> dict[str, Any]:
        """Serializable dict with the stored (camelCase) keys."""
        return self.model_dump(mode="json", by_alias=True)


# =============================================================================
# Report rows
# =============================================================================

class PercentileRow(_CamelModel):
    """Average pace at a percentile, per gender ('-' when no data)."""

    label: str  # "Min", "1%", ..., "Max"
    masculino: str = Field(default="-", alias="Masculino")
    femenino: str = Field(default="-", alias="Femenino")


class PaceDistributionRow(_CamelModel):
    """Runner count per gender key in one pace bucket."""

    label: str
    f: int = Field(default=0, alias="F")
    m: int = Field(default=0, alias="M")
    x: int = Field(default=0, alias="X")


class SummaryStatRow(_CamelModel):
    """Finishers and average pace of one progressive subset."""

    label: str
    count: int = 0
    avg_pace: str = "00:00:00"


class GenderSummaryStatRow(_CamelModel):
    """Progressive subset split by gender."""

    label: str
    count_m: int = 0
    count_f: int = 0
    avg_pace_m: str = "00:00:00"
    avg_pace_f: str = "00:00:00"


class CategoryStatRow(_CamelModel):
    """Finishers and average pace per gender in one category."""

    categoria: str
    count_m: int = 0
    count_f: int = 0
    avg_pace_m: str = "00:00:00"
    avg_pace_f: str = "00:00:00"


class ScatterPoint(_CamelModel):
    """Chart point: x = km, y = pace in seconds."""

    x: float
    y: int


class GenderScatter(_CamelModel):
    data_m: list[ScatterPoint] = Field(default_factory=list)
    data_f: list[ScatterPoint] = Field(default_factory=list)


def _empty_totals() -> PaceDistributionRow:
    return PaceDistributionRow(label="Total")


class AnalysisReport(_CamelModel):
    """
    Full analysis of one results file.

    Every group defaults to empty, so partially stored reports still load.
    The x=0 point of each scatter series repeats the 5 km value to anchor
    the chart at the start line; it is not a measurement.
    """

    schema_version: int = REPORT_SCHEMA_VERSION
    percentile_rows: list[PercentileRow] = Field(default_factory=list)
    pace_distribution_rows: list[PaceDistributionRow] = Field(default_factory=list)
    pace_distribution_totals: PaceDistributionRow = Field(default_factory=_empty_totals)
    summary_stats_rows: list[SummaryStatRow] = Field(default_factory=list)
    gender_summary_stats_rows: list[GenderSummaryStatRow] = Field(default_factory=list)
    category_stats_rows: list[CategoryStatRow] = Field(default_factory=list)
    gender_summary_stats_by_category: dict[str, list[GenderSummaryStatRow]] = Field(
        default_factory=dict
    )
    scatter_data_by_category: dict[str, GenderScatter] = Field(default_factory=dict)
    scatter_data: list[ScatterPoint] = Field(default_factory=list)
    scatter_data_genero: GenderScatter = Field(default_factory=GenderScatter)

    @classmethod
    def from_stored(cls, raw: Any) -> "AnalysisReport":
        """
        Load a stored blob leniently.

        Groups that are missing or have the wrong shape fall back to their
        empty default instead of failing the whole report.
        """
        if not isinstance(raw, dict):
            return cls()
        data: dict[str, Any] = {}
        for name, field_info in cls.model_fields.items():
            key = field_info.alias or to_camel(name)
            if key not in raw:
                continue
            try:
                data[name] = TypeAdapter(field_info.annotation).validate_python(raw[key])
            except ValidationError:
                continue
        return cls(**data)


# =============================================================================
# Stored report envelope
# =============================================================================

class ReportMetadata(_CamelModel):
    """Source description of a report."""

    file_name: Optional[str] = None
    distance_km: Optional[float] = None
    row_count: Optional[int] = None

    @field_validator("row_count", mode="before")
    @classmethod
    def truncate_row_count(cls, v):
        if isinstance(v, float):
            return int(v)
        return v

    def is_empty(self) -> bool:
        return self.file_name is None and self.distance_km is None and self.row_count is None

    @classmethod
    def from_stored(cls, raw: Any) -> Optional["ReportMetadata"]:
        """
        Load stored metadata leniently.

        Ill-typed values are dropped; if nothing usable remains the
        metadata is None.
        """
        if not isinstance(raw, dict):
            return None

        def finite(value: Any) -> bool:
            return (
                isinstance(value, (int, float))
                and not isinstance(value, bool)
                and math.isfinite(value)
            )

        file_name = raw.get("fileName")
        distance_km = raw.get("distanceKm")
        row_count = raw.get("rowCount")
        metadata = cls(
            file_name=file_name if isinstance(file_name, str) else None,
            distance_km=distance_km if finite(distance_km) else None,
            row_count=row_count if finite(row_count) else None,
        )
        return None if metadata.is_empty() else metadata


class ReportSummary(_CamelModel):
    """Report list entry."""

    id: str
    nombre: str
    fecha: datetime


class StoredReport(ReportSummary):
    """Report as persisted: identity, name, date, metadata and analysis."""

    metadata: Optional[ReportMetadata] = None
    analysis: AnalysisReport = Field(default_factory=AnalysisReport)
