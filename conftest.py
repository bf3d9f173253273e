"""
Root conftest.py for pytest configuration

Applies location-based markers and registers them with pytest.
"""
import os

# Settings are read at import time; pin the test profile before any project import
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("TESTING", "true")
os.environ.setdefault("LOG_FORMAT", "text")
os.environ.setdefault("CACHE_BACKEND", "memory")

from tests.markers import apply_auto_markers, register_markers  # noqa: E402


def pytest_configure(config):
    """Register custom markers"""
    register_markers(config)


def pytest_collection_modifyitems(config, items):
    """Apply automatic markers based on test location"""
    for item in items:
        apply_auto_markers(item)
