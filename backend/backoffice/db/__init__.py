# backend/backoffice/db/__init__.py

"""
Database Module

Contains SQLAlchemy models and database configuration.
Pydantic schemas live in backoffice.db.schemas.
"""

from backoffice.db.database import Base, engine, SessionLocal, get_db
from backoffice.db import models

__all__ = [
    'Base',
    'engine',
    'SessionLocal',
    'get_db',
    'models',
]
