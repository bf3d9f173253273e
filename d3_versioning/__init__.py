"""
D3 Versioning Module

Append-only, audited history of scoring weight configurations with a single
active version, plus the TTL cache that serves it to the scoring engine.
"""

from .config_cache import ActiveConfigurationCache
from .defaults import BUILTIN_VERSION, default_configuration, load_weights_document
from .models import AuditLog, ScoringConfig
from .schemas import ScoringConfiguration, WeightConfiguration, validate_configuration
from .store import ConfigurationVersionStore

__all__ = [
    "ActiveConfigurationCache",
    "AuditLog",
    "BUILTIN_VERSION",
    "ConfigurationVersionStore",
    "ScoringConfig",
    "ScoringConfiguration",
    "WeightConfiguration",
    "default_configuration",
    "load_weights_document",
    "validate_configuration",
]
