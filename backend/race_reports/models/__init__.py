"""
Database Models

Feature tables live next to their feature (features/results/models.py)
and are imported by init_db() to register them with the shared Base.
"""

from race_reports.models.base import Base

__all__ = ["Base"]
