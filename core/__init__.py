"""Core utilities and configuration for the readiness scoring engine"""
from core.config import settings
from core.exceptions import (
    InvalidConfigurationError,
    NotFoundError,
    PersistenceError,
    ReadinessError,
    ValidationError,
)
from core.logging import get_logger

__all__ = [
    "settings",
    "get_logger",
    "ReadinessError",
    "ValidationError",
    "InvalidConfigurationError",
    "PersistenceError",
    "NotFoundError",
]
