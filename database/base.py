"""Base class for SQLAlchemy models"""
import uuid

from sqlalchemy.orm import declarative_base

Base = declarative_base()


def generate_uuid() -> str:
    """Generate a new string UUID primary key"""
    return str(uuid.uuid4())
