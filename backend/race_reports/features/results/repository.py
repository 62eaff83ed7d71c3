"""
Results repositories.

Data access layer for Race, RaceResultRow and Report models.
"""

from datetime import datetime
from typing import Iterable

from sqlalchemy import select
from sqlalchemy.orm import Session

from race_reports.shared.repository import BaseRepository

from .exceptions import RaceNotFoundError, ReportNotFoundError
from .models import Race, RaceResultRow, Report, utcnow
from .records import IngestedResult


class RaceRepository(BaseRepository[Race]):
    """Repository for Race operations."""

    def __init__(self, db: Session):
        super().__init__(db, Race)

    def get_by_name(self, nombre: str) -> Race | None:
        return self.get_by(nombre=nombre)

    def get_or_create(
        self,
        nombre: str,
        fecha: str | None = None,
        distancia: float | None = None,
        ascenso_total: float | None = None,
    ) -> tuple[Race, bool]:
        """
        Get race by name or create it.

        Returns:
            Tuple of (race, created)
        """
        race = self.get_by_name(nombre)
        if race:
            return race, False
        race = self.create(
            nombre=nombre,
            fecha=fecha,
            distancia=distancia,
            ascenso_total=ascenso_total,
        )
        return race, True

    def get_required(self, race_id: int) -> Race:
        """Get race by ID or raise RaceNotFoundError."""
        race = self.get_by_id(race_id)
        if race is None:
            raise RaceNotFoundError(f"Race not found: {race_id}")
        return race

    def list_races(self) -> list[tuple[int, str]]:
        """All races as (id, nombre), in ID order."""
        result = self.db.execute(select(Race.id, Race.nombre).order_by(Race.id))
        return [(row.id, row.nombre) for row in result]


class ResultRepository(BaseRepository[RaceResultRow]):
    """Repository for ingested results."""

    def __init__(self, db: Session):
        super().__init__(db, RaceResultRow)

    def add_results(self, race: Race, results: Iterable[IngestedResult]) -> int:
        """
        Bulk insert ingested rows for a race.

        Returns:
            Number of rows added
        """
        rows = [
            RaceResultRow(
                race_id=race.id,
                bib=r.bib,
                nombre=r.nombre,
                genero=r.genero,
                categoria=r.categoria,
                tiempo_chip=r.tiempo_chip,
                tiempo_chip_s=r.tiempo_chip_s,
                ritmo_medio=r.ritmo_medio,
                distancia=r.distancia,
                ascenso_total=r.ascenso_total,
                checkpoints=r.checkpoints or None,
            )
            for r in results
        ]
        self.db.add_all(rows)
        self.db.flush()
        return len(rows)

    def get_for_race(self, race_id: int) -> list[RaceResultRow]:
        """Results of a race in insertion order."""
        result = self.db.execute(
            select(RaceResultRow)
            .where(RaceResultRow.race_id == race_id)
            .order_by(RaceResultRow.id)
        )
        return list(result.scalars().all())


class ReportRepository(BaseRepository[Report]):
    """Repository for saved reports."""

    def __init__(self, db: Session):
        super().__init__(db, Report)

    def save(
        self,
        nombre: str,
        analysis: dict,
        metadata: dict | None = None,
        fecha: datetime | None = None,
    ) -> Report:
        """
        Store a report.

        Args:
            nombre: Report name (already validated)
            analysis: Serialized AnalysisReport
            metadata: Serialized ReportMetadata, if any
            fecha: Defaults to now
        """
        return self.create(
            nombre=nombre,
            analysis=analysis,
            metadata_=metadata,
            fecha=fecha or utcnow(),
        )

    def list_newest_first(self) -> list[Report]:
        result = self.db.execute(
            select(Report).order_by(Report.fecha.desc(), Report.id)
        )
        return list(result.scalars().all())

    def get_required(self, report_id: str) -> Report:
        """Get report by ID or raise ReportNotFoundError."""
        report = self.get_by_id(report_id)
        if report is None:
            raise ReportNotFoundError(f"Report not found: {report_id}")
        return report
