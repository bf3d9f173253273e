"""
D2 Scoring Module

Rule-based readiness scoring: category evaluation, sector and stage detection,
weight resolution, aggregation onto the 0-999 scale and result caching.
"""

from .aggregator import ReadinessBucket, aggregate, readiness_bucket
from .cache import ResponseCache, build_response_cache, fingerprint
from .engine import ReadinessScoringEngine, StaticConfigurationProvider, StaticWeightTable
from .evaluator import evaluate
from .sectors import detect_sector, detect_stage
from .types import CategoryScore, ScoreCategory, ScoreResult, Sector, Stage, SubScores, WeightSet
from .weights import resolve_weights

__all__ = [
    # Pipeline
    "ReadinessScoringEngine",
    "StaticConfigurationProvider",
    "StaticWeightTable",
    "evaluate",
    "detect_sector",
    "detect_stage",
    "resolve_weights",
    "aggregate",
    "readiness_bucket",
    # Cache
    "ResponseCache",
    "build_response_cache",
    "fingerprint",
    # Types
    "CategoryScore",
    "ReadinessBucket",
    "ScoreCategory",
    "ScoreResult",
    "Sector",
    "Stage",
    "SubScores",
    "WeightSet",
]
