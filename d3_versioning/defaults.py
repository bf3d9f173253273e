"""Loading of the built-in weights document"""

from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from core.config import Settings, get_settings
from core.exceptions import ConfigurationError, InvalidConfigurationError
from core.logging import get_logger

from .schemas import ScoringConfiguration

logger = get_logger("scoring_config.defaults", domain="d3_versioning")

DEFAULT_WEIGHTS_PATH = Path(__file__).parent / "default_weights.yaml"

# Version reported for results computed before any version is stored
BUILTIN_VERSION = 0


def resolve_weights_path(settings: Optional[Settings] = None) -> Path:
    """``settings.scoring_weights_path`` if set, else the packaged document"""
    settings = settings or get_settings()
    if settings.scoring_weights_path:
        return Path(settings.scoring_weights_path)
    return DEFAULT_WEIGHTS_PATH


def load_weights_document(path: Optional[Path] = None) -> Dict[str, Any]:
    """Read a weights YAML document from disk without validating it"""
    path = path or resolve_weights_path()
    try:
        with path.open("r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except FileNotFoundError as e:
        raise ConfigurationError(f"Scoring weights file not found: {path}", setting="scoring_weights_path") from e
    except yaml.YAMLError as e:
        raise InvalidConfigurationError(f"Could not parse scoring weights file '{path}': {e}", errors=[str(e)]) from e

    if not isinstance(data, dict):
        raise InvalidConfigurationError(
            f"Scoring weights file '{path}' must contain a mapping",
            errors=[f"expected mapping, got {type(data).__name__}"],
        )
    return data


def default_configuration(path: Optional[Path] = None) -> ScoringConfiguration:
    """The built-in configuration, reported as version 0"""
    path = path or resolve_weights_path()
    logger.debug(f"Loading built-in scoring weights from {path}")
    return ScoringConfiguration.from_document(
        BUILTIN_VERSION,
        "Built-in defaults",
        load_weights_document(path),
        change_reason="Built-in default weights",
    )
