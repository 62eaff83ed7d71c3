"""
Results database models.

Models:
- Race: One race (name, date, distance, elevation)
- RaceResultRow: Ingested runner result of a race
- Report: Saved analysis report (versioned JSON blob)
"""

from datetime import datetime, timezone
import uuid

from sqlalchemy import Column, String, DateTime, Integer, Float, ForeignKey, JSON
from sqlalchemy.orm import relationship

from race_reports.models.base import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Race(Base):
    """
    A race whose results have been ingested.

    Races are looked up by name, so re-ingesting a file with the same race
    name appends to the existing race.
    """

    __tablename__ = "races"

    id = Column(Integer, primary_key=True, autoincrement=True)
    nombre = Column(String(255), unique=True, nullable=False, index=True)
    fecha = Column(String(20), nullable=True)  # "2025-03-01" as given by the uploader
    distancia = Column(Float, nullable=True)  # km
    ascenso_total = Column(Float, nullable=True)  # m

    created_at = Column(DateTime, default=utcnow)

    results = relationship(
        "RaceResultRow",
        back_populates="race",
        cascade="all, delete-orphan",
    )

    def __repr__(self):
        return f"<Race id={self.id} nombre={self.nombre!r}>"


class RaceResultRow(Base):
    """
    One runner's result.

    Only rows with a positive chip time are stored. `tiempo_chip_s` is the
    chip time in seconds and is used for ordering; `checkpoints` holds the
    optional RM_/split_ columns found in the source file.
    """

    __tablename__ = "race_results"

    id = Column(Integer, primary_key=True, autoincrement=True)
    race_id = Column(Integer, ForeignKey("races.id"), nullable=False, index=True)

    bib = Column(String(20), nullable=True)
    nombre = Column(String(255), nullable=True)
    genero = Column(String(50), nullable=True)
    categoria = Column(String(100), nullable=True)

    tiempo_chip = Column(String(12), nullable=False)  # "HH:MM:SS"
    tiempo_chip_s = Column(Integer, nullable=False, index=True)
    ritmo_medio = Column(String(12), nullable=True)  # "HH:MM:SS" per km

    distancia = Column(Float, nullable=True)
    ascenso_total = Column(Float, nullable=True)

    # {"split_5km": "00:21:10", "RM_5km": "00:04:14", ...}
    checkpoints = Column(JSON, nullable=True)

    race = relationship("Race", back_populates="results")

    def __repr__(self):
        return f"<RaceResultRow race_id={self.race_id} nombre={self.nombre!r} tiempo_chip={self.tiempo_chip}>"


class Report(Base):
    """
    Saved analysis report.

    `analysis` holds AnalysisReport.to_json_dict(); `metadata` describes the
    source file ({fileName, distanceKm, rowCount}).
    """

    __tablename__ = "reports"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    nombre = Column(String(255), nullable=False)
    fecha = Column(DateTime, default=utcnow, nullable=False, index=True)

    # "metadata" is reserved on declarative classes
    metadata_ = Column("metadata", JSON, nullable=True)
    analysis = Column(JSON, nullable=False)

    def __repr__(self):
        return f"<Report id={self.id} nombre={self.nombre!r}>"
