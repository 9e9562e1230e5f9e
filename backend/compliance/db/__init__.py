from compliance.db.base import Base
from compliance.db.session import get_db, engine, SessionLocal
from compliance.db.tables import ALL_TABLE_NAMES

__all__ = ["get_db", "engine", "SessionLocal", "Base", "ALL_TABLE_NAMES"]
