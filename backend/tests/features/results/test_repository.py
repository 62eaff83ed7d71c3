"""
Tests for results repositories (in-memory SQLite).
"""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from race_reports.models.base import Base
from race_reports.features.results.exceptions import RaceNotFoundError, ReportNotFoundError
from race_reports.features.results.models import RaceResultRow
from race_reports.features.results.records import IngestedResult
from race_reports.features.results.repository import (
    RaceRepository,
    ReportRepository,
    ResultRepository,
)


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def db():
    """Fresh in-memory database per test."""
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(bind=engine, autoflush=False)()
    yield session
    session.close()
    engine.dispose()


def ingested(nombre, seconds, genero="Femenino"):
    return IngestedResult(
        nombre=nombre,
        genero=genero,
        categoria="Open",
        tiempo_chip=f"00:{seconds // 60:02d}:{seconds % 60:02d}",
        tiempo_chip_s=seconds,
        ritmo_medio="00:04:30",
        distancia=10,
        checkpoints={"split_5km": "00:21:00"},
    )


# =============================================================================
# Test RaceRepository / ResultRepository
# =============================================================================

class TestRaceRepository:
    """Tests for RaceRepository."""

    def test_get_or_create(self, db):
        repo = RaceRepository(db)
        race, created = repo.get_or_create("10K Santiago", fecha="2025-04-06", distancia=10)
        assert created
        assert race.id is not None

        again, created = repo.get_or_create("10K Santiago")
        assert not created
        assert again.id == race.id
        assert again.fecha == "2025-04-06"

    def test_list_races(self, db):
        repo = RaceRepository(db)
        repo.get_or_create("B")
        repo.get_or_create("A")
        assert [nombre for _, nombre in repo.list_races()] == ["B", "A"]

    def test_get_required_missing(self, db):
        with pytest.raises(RaceNotFoundError):
            RaceRepository(db).get_required(999)


class TestResultRepository:
    """Tests for ResultRepository."""

    def test_add_and_get(self, db):
        race, _ = RaceRepository(db).get_or_create("10K")
        repo = ResultRepository(db)
        added = repo.add_results(race, [ingested("Ana", 2700), ingested("Bea", 2600)])
        db.commit()

        assert added == 2
        rows = repo.get_for_race(race.id)
        assert [r.nombre for r in rows] == ["Ana", "Bea"]
        assert rows[0].tiempo_chip == "00:45:00"
        assert rows[0].checkpoints == {"split_5km": "00:21:00"}
        assert repo.count(race_id=race.id) == 2

    def test_results_scoped_to_race(self, db):
        races = RaceRepository(db)
        first, _ = races.get_or_create("A")
        second, _ = races.get_or_create("B")
        repo = ResultRepository(db)
        repo.add_results(first, [ingested("Ana", 2700)])
        repo.add_results(second, [ingested("Bea", 2600)])

        assert [r.nombre for r in repo.get_for_race(second.id)] == ["Bea"]
        assert isinstance(repo.get_for_race(second.id)[0], RaceResultRow)


# =============================================================================
# Test ReportRepository
# =============================================================================

class TestReportRepository:
    """Tests for ReportRepository."""

    def test_save_and_get(self, db):
        repo = ReportRepository(db)
        report = repo.save("Maratón", {"schemaVersion": 1}, {"fileName": "m.csv"})
        db.commit()

        loaded = repo.get_required(report.id)
        assert loaded.nombre == "Maratón"
        assert loaded.analysis == {"schemaVersion": 1}
        assert loaded.metadata_ == {"fileName": "m.csv"}
        assert len(loaded.id) == 36

    def test_newest_first(self, db):
        repo = ReportRepository(db)
        repo.save("old", {}, fecha=datetime(2024, 1, 1))
        repo.save("new", {}, fecha=datetime(2025, 1, 1))
        repo.save("mid", {}, fecha=datetime(2024, 6, 1))
        assert [r.nombre for r in repo.list_newest_first()] == ["new", "mid", "old"]

    def test_default_fecha_is_current_utc(self, db):
        report = ReportRepository(db).save("hoy", {})
        fecha = report.fecha.replace(tzinfo=timezone.utc)
        assert abs(datetime.now(timezone.utc) - fecha) < timedelta(minutes=1)

    def test_missing(self, db):
        with pytest.raises(ReportNotFoundError):
            ReportRepository(db).get_required("nope")
