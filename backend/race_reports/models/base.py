"""
SQLAlchemy declarative base shared by all tables.
"""

from sqlalchemy.orm import declarative_base

Base = declarative_base()
