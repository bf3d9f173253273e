"""
Shared fixtures for all tests

Each test gets its own in-memory SQLite database holding every table.
"""
import os
import sys

# Add project root to Python path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import pytest  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

import database.models  # noqa: E402, F401
from batch_runner.service import ReadinessService  # noqa: E402
from d2_scoring.cache import ResponseCache  # noqa: E402
from d3_versioning.defaults import load_weights_document  # noqa: E402
from d3_versioning.store import ConfigurationVersionStore  # noqa: E402
from database.base import Base  # noqa: E402


@pytest.fixture
def db_engine():
    """In-memory database shared by every session of one test"""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return sessionmaker(bind=db_engine, autocommit=False, autoflush=False)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def strong_answers():
    """Launched, revenue-generating startup with angel interest (camelCase keys)"""
    return {
        "prototype": True,
        "milestones": "launch",
        "revenue": True,
        "mrr": "medium",
        "capTable": True,
        "externalCapital": False,
        "fullTimeTeam": True,
        "employees": "3-10",
        "termSheets": False,
        "investors": "angels",
    }


@pytest.fixture
def minimal_answers():
    """Idea-stage answers with every signal at its lowest value (snake_case keys)"""
    return {
        "prototype": False,
        "milestones": "concept",
        "revenue": False,
        "mrr": "none",
        "cap_table": False,
        "external_capital": False,
        "full_time_team": False,
        "employees": "1-2",
        "term_sheets": False,
        "investors": "none",
    }


@pytest.fixture
def weights_document():
    """The packaged default weights document"""
    return load_weights_document()


@pytest.fixture
def store(session_factory):
    return ConfigurationVersionStore(session_factory)


@pytest.fixture
def service(session_factory):
    """Service on the test database with a fresh memory cache and no config TTL"""
    return ReadinessService(
        session_factory=session_factory,
        response_cache=ResponseCache(),
        config_ttl_seconds=0,
        max_concurrency=1,
    )
