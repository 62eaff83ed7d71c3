"""
Results service.

Main entry point for the two pipelines:

- report: CSV → NormalizedRecord → AnalysisReport → saved report
- ingestion: CSV → IngestedResult → race_results table → rankings
"""

from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import Any, Sequence

from sqlalchemy.orm import Session

from race_reports.config import settings

from .csv_io import read_results_csv
from .exceptions import InvalidDistanceError, NoValidResultsError
from .ingestion import ingest_rows
from .models import Race, Report
from .normalizer import NormalizationResult, ValidityPolicy, normalize_rows
from .race_analysis import (
    CategoryBreakdown,
    PaceRangeDistribution,
    RaceSummary,
    category_breakdown,
    pace_range_distribution,
    race_summary,
)
from .ranking import CategoryRank, top_by_category, top_by_gender
from .records import IngestionResult, NormalizedRecord
from .repository import RaceRepository, ReportRepository, ResultRepository
from .schemas import AnalysisReport, ReportMetadata, ReportSummary, StoredReport
from .stats import build_analysis_report

logger = logging.getLogger(__name__)


def validate_distance(distance_km: Any) -> float:
    """
    Coerce a race distance to a positive float.

    Raises:
        InvalidDistanceError: Missing, non-numeric, non-finite or <= 0
    """
    try:
        value = float(distance_km)
    except (TypeError, ValueError) as e:
        raise InvalidDistanceError(f"Invalid distance: {distance_km!r}") from e
    if not math.isfinite(value) or value <= 0:
        raise InvalidDistanceError(f"Distance must be positive, got {distance_km!r}")
    return value


def normalize_file(
    path: Path | str,
    distance_km: Any,
    policy: ValidityPolicy = ValidityPolicy.DEFAULT_ZERO_TIME,
) -> NormalizationResult:
    """Read a results CSV and normalize every row."""
    distance = validate_distance(distance_km)
    headers, rows = read_results_csv(path)
    return normalize_rows(rows, headers, distance, policy)


def analyze(records: Sequence[NormalizedRecord]) -> AnalysisReport:
    """Full analysis report of normalized records."""
    return build_analysis_report(records, settings.default_category_label)


def _to_summary(report: Report) -> ReportSummary:
    return ReportSummary(id=report.id, nombre=report.nombre, fecha=report.fecha)


def _to_stored(report: Report) -> StoredReport:
    return StoredReport(
        id=report.id,
        nombre=report.nombre,
        fecha=report.fecha,
        metadata=ReportMetadata.from_stored(report.metadata_),
        analysis=AnalysisReport.from_stored(report.analysis),
    )


class ResultsService:
    """
    Persistence side of the results feature.

    Usage:
        service = ResultsService(db)
        stored = service.save_report("Maratón 2025", analysis, metadata)
    """

    def __init__(self, db: Session):
        self.db = db
        self.races = RaceRepository(db)
        self.results = ResultRepository(db)
        self.reports = ReportRepository(db)

    # =========================================================================
    # Reports
    # =========================================================================

    def save_report(
        self,
        nombre: str,
        analysis: AnalysisReport,
        metadata: ReportMetadata | None = None,
    ) -> StoredReport:
        """
        Save an analysis report under a name.

        Raises:
            ValueError: Name is empty after trimming
        """
        nombre = (nombre or "").strip()
        if not nombre:
            raise ValueError("Report name is required")

        stored_metadata = None
        if metadata is not None and not metadata.is_empty():
            stored_metadata = metadata.to_json_dict()

        report = self.reports.save(nombre, analysis.to_json_dict(), stored_metadata)
        self.db.commit()
        logger.info(f"Report saved: {report.id} ({nombre})")
        return _to_stored(report)

    def list_reports(self) -> list[ReportSummary]:
        """Saved reports, newest first."""
        return [_to_summary(r) for r in self.reports.list_newest_first()]

    def get_report(self, report_id: str) -> StoredReport:
        """Load a saved report; raises ReportNotFoundError."""
        return _to_stored(self.reports.get_required(report_id))

    def delete_report(self, report_id: str) -> None:
        """Delete a saved report; raises ReportNotFoundError."""
        report = self.reports.get_required(report_id)
        self.reports.delete(report)
        self.db.commit()
        logger.info(f"Report deleted: {report_id}")

    # =========================================================================
    # Races
    # =========================================================================

    def ingest_file(
        self,
        path: Path | str,
        race_name: str,
        distance_km: float | None,
        fecha: str | None = None,
        ascenso_total: float | None = None,
    ) -> tuple[Race, IngestionResult]:
        """
        Ingest a results CSV into a race.

        Rows without a positive chip time are dropped and counted.

        Raises:
            ResultsFileError: File cannot be read
            NoValidResultsError: No row survived the chip time check
        """
        headers, rows = read_results_csv(path)
        ingestion = ingest_rows(rows, headers, distance_km, ascenso_total)
        if not ingestion.results:
            logger.warning(f"No valid results in {path} ({ingestion.omitted} omitted)")
            raise NoValidResultsError(ingestion.omitted)

        race, created = self.races.get_or_create(
            race_name.strip(),
            fecha=fecha,
            distancia=ingestion.results[0].distancia,
            ascenso_total=ascenso_total,
        )
        added = self.results.add_results(race, ingestion.results)
        self.db.commit()

        logger.info(
            f"Race {race.id} ({'created' if created else 'existing'}): "
            f"{added} results inserted, {ingestion.omitted} omitted"
        )
        return race, ingestion

    def list_races(self) -> list[tuple[int, str]]:
        return self.races.list_races()

    def race_summary(self, race_id: int) -> RaceSummary:
        return race_summary(self._race_results(race_id))

    def pace_ranges(self, race_id: int) -> PaceRangeDistribution:
        return pace_range_distribution(self._race_results(race_id))

    def categories(self, race_id: int) -> list[CategoryBreakdown]:
        return category_breakdown(self._race_results(race_id))

    def top_by_gender(self, race_id: int, limit: int | None = None) -> dict[str, list]:
        return top_by_gender(self._race_results(race_id), limit or settings.ranking_limit)

    def top_by_category(self, race_id: int, limit: int | None = None) -> list[CategoryRank]:
        return top_by_category(self._race_results(race_id), limit or settings.ranking_limit)

    def _race_results(self, race_id: int) -> list:
        self.races.get_required(race_id)
        return self.results.get_for_race(race_id)
