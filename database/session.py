"""Database session management"""
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from core.config import settings

SQLITE_BUSY_TIMEOUT_SECONDS = 30


def is_memory_database(database_url: str) -> bool:
    url = make_url(database_url)
    return url.database in (None, "", ":memory:") or url.query.get("mode") == "memory"


def build_engine(database_url: str, echo: bool = False):
    """Create an engine with dialect-appropriate pool settings"""
    if database_url.startswith("sqlite"):
        if is_memory_database(database_url):
            # One shared connection keeps the in-memory database alive
            return create_engine(
                database_url,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
                echo=echo,
            )
        # File databases get a connection per session; writers wait on the lock
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False, "timeout": SQLITE_BUSY_TIMEOUT_SECONDS},
            echo=echo,
        )
    # PostgreSQL settings for production
    return create_engine(
        database_url,
        pool_size=settings.database_pool_size,
        max_overflow=20,
        echo=echo,
    )


engine = build_engine(settings.database_url, echo=settings.database_echo)

# Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    """Dependency to get database session"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def session_scope(session_factory=SessionLocal):
    """Session context manager for synchronous code"""
    db = session_factory()
    try:
        yield db
    finally:
        db.close()
