"""Database package for the readiness scoring engine"""

from database.base import Base
from database.session import SessionLocal, engine, get_db

__all__ = ["Base", "get_db", "SessionLocal", "engine"]
