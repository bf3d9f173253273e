"""
Scoring configuration documents

``WeightConfiguration`` is the validated weights document stored in
``scoring_config.config_data``. ``ScoringConfiguration`` is the immutable
snapshot of one stored version handed to the scoring pipeline.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Mapping, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator
from pydantic import ValidationError as PydanticValidationError

from core.exceptions import InvalidConfigurationError
from core.logging import get_logger
from d2_scoring.constants import WEIGHT_SUM_WARNING_THRESHOLD
from d2_scoring.types import Sector, WeightSet

logger = get_logger("scoring_config.schema", domain="d3_versioning")


class WeightConfiguration(BaseModel):
    """Base category weights plus optional per-sector overrides"""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    weights: WeightSet
    sector_overrides: Dict[Sector, WeightSet] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("sector_overrides", "sectorOverrides", "sectors"),
        serialization_alias="sectorOverrides",
    )

    @model_validator(mode="after")
    def _warn_on_weight_sums(self) -> "WeightConfiguration":
        """Weight sets far from 1.0 are accepted but logged"""
        tables = {"weights": self.weights}
        tables.update({f"sectorOverrides.{sector.value}": table for sector, table in self.sector_overrides.items()})
        for name, table in tables.items():
            deviation = abs(table.total - 1.0)
            if deviation > WEIGHT_SUM_WARNING_THRESHOLD:
                logger.warning(
                    f"Weights in '{name}' sum to {table.total:.4f} (deviation {deviation:.4f} from 1.0)"
                )
        return self

    def to_document(self) -> Dict[str, Any]:
        """JSON-safe document in the stored camelCase shape"""
        return self.model_dump(mode="json", by_alias=True)


def _format_error(error: Mapping[str, Any]) -> str:
    location = ".".join(str(part) for part in error.get("loc", ()))
    return f"{location}: {error.get('msg')}" if location else str(error.get("msg"))


def validate_configuration(document: Union[WeightConfiguration, Mapping[str, Any], None]) -> WeightConfiguration:
    """
    Validate a weights document

    Raises:
        InvalidConfigurationError: malformed document or any weight outside [0.1, 0.5]
    """
    if isinstance(document, WeightConfiguration):
        return document
    if not isinstance(document, Mapping):
        raise InvalidConfigurationError(
            "Scoring configuration must be a mapping",
            errors=[f"expected mapping, got {type(document).__name__}"],
        )
    try:
        return WeightConfiguration.model_validate(dict(document))
    except PydanticValidationError as e:
        errors = [_format_error(error) for error in e.errors()]
        raise InvalidConfigurationError(f"Invalid scoring configuration: {'; '.join(errors)}", errors=errors) from e


@dataclass(frozen=True)
class ScoringConfiguration:
    """One configuration version as read from the store"""

    version: int
    config_name: str
    weights: WeightSet
    sector_overrides: Mapping[Sector, WeightSet] = field(default_factory=dict)
    change_reason: Optional[str] = None
    created_by: Optional[str] = None
    is_active: bool = False
    created_at: Optional[datetime] = None

    @classmethod
    def from_document(cls, version: int, config_name: str, document: Any, **metadata) -> "ScoringConfiguration":
        parsed = validate_configuration(document)
        return cls(
            version=version,
            config_name=config_name,
            weights=parsed.weights,
            sector_overrides=dict(parsed.sector_overrides),
            **metadata,
        )

    @classmethod
    def from_row(cls, row) -> "ScoringConfiguration":
        return cls.from_document(
            row.version,
            row.config_name,
            row.config_data,
            change_reason=row.change_reason,
            created_by=row.created_by,
            is_active=bool(row.is_active),
            created_at=row.created_at,
        )

    def to_document(self) -> Dict[str, Any]:
        return WeightConfiguration(weights=self.weights, sector_overrides=dict(self.sector_overrides)).to_document()

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for API responses"""
        return {
            "version": self.version,
            "config_name": self.config_name,
            "config_data": self.to_document(),
            "change_reason": self.change_reason,
            "created_by": self.created_by,
            "is_active": self.is_active,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
