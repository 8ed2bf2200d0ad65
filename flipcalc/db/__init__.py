"""
Database configuration and models.
"""

from flipcalc.db.database import engine, SessionLocal, get_db, init_db
from flipcalc.db.models import Base, RecordBlob

__all__ = ["engine", "SessionLocal", "get_db", "init_db", "Base", "RecordBlob"]
