"""
Scoring Types and Enumerations

Category, sector and stage enumerations, the bounded weight set, and the
result records produced by the scoring pipeline.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Protocol

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .constants import MAX_WEIGHT, MIN_WEIGHT


class ScoreCategory(str, Enum):
    """The four weighted scoring categories"""

    BUSINESS_IDEA = "business_idea"
    FINANCIALS = "financials"
    TEAM = "team"
    TRACTION = "traction"


class Sector(str, Enum):
    """
    Market sector used to select weight overrides

    Values match the keys stored in configuration documents.
    """

    B2B_SAAS = "B2B SaaS"
    B2C_CONSUMER = "B2C Consumer"
    FINTECH = "FinTech"
    HEALTHTECH = "HealthTech"
    ECOMMERCE = "E-commerce"
    DEFAULT = "Default"


class Stage(str, Enum):
    """Funding maturity used for weight adjustment"""

    PRE_SEED = "pre-seed"
    SEED = "seed"


class WeightSet(BaseModel):
    """Category weights, each bounded to [0.1, 0.5]"""

    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel, extra="forbid")

    business_idea: float = Field(..., ge=MIN_WEIGHT, le=MAX_WEIGHT)
    financials: float = Field(..., ge=MIN_WEIGHT, le=MAX_WEIGHT)
    team: float = Field(..., ge=MIN_WEIGHT, le=MAX_WEIGHT)
    traction: float = Field(..., ge=MIN_WEIGHT, le=MAX_WEIGHT)

    def for_category(self, category: ScoreCategory) -> float:
        return getattr(self, category.value)

    @property
    def total(self) -> float:
        return self.business_idea + self.financials + self.team + self.traction


class WeightTable(Protocol):
    """What the weight resolver needs from a scoring configuration"""

    version: int
    weights: WeightSet
    sector_overrides: Mapping[Sector, WeightSet]


@dataclass(frozen=True)
class CategoryScore:
    """Sub-score for one category with its explanation"""

    score: int
    explanation: str


@dataclass(frozen=True)
class SubScores:
    """Evaluator output: one ``CategoryScore`` per category"""

    business_idea: CategoryScore
    financials: CategoryScore
    team: CategoryScore
    traction: CategoryScore

    def for_category(self, category: ScoreCategory) -> CategoryScore:
        return getattr(self, category.value)


@dataclass(frozen=True)
class ScoreResult:
    """
    Complete score for an assessment under one configuration version

    Derived data: recomputable at any time from the answers and the
    configuration identified by ``config_version``.
    """

    business_idea: CategoryScore
    financials: CategoryScore
    team: CategoryScore
    traction: CategoryScore
    total_score: int
    readiness: str
    sector: str
    stage: str
    weights: WeightSet
    config_version: int

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for storage and API responses"""
        data: dict[str, Any] = {}
        for category in ScoreCategory:
            sub = getattr(self, category.value)
            data[category.value] = sub.score
            data[f"{category.value}_explanation"] = sub.explanation
        data.update(
            {
                "total_score": self.total_score,
                "readiness": self.readiness,
                "sector": self.sector,
                "stage": self.stage,
                "weights": self.weights.model_dump(),
                "config_version": self.config_version,
            }
        )
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ScoreResult":
        """Create from dictionary"""
        categories = {
            category.value: CategoryScore(
                score=int(data[category.value]),
                explanation=data[f"{category.value}_explanation"],
            )
            for category in ScoreCategory
        }
        return cls(
            **categories,
            total_score=int(data["total_score"]),
            readiness=data["readiness"],
            sector=data["sector"],
            stage=data["stage"],
            weights=WeightSet.model_validate(data["weights"]),
            config_version=int(data["config_version"]),
        )
