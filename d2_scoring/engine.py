"""
Readiness Scoring Engine

Runs the scoring pipeline for one answer set: sector and stage detection,
weight resolution, rule evaluation and aggregation. Results are memoised in a
``ResponseCache`` keyed by answers and configuration version.
"""

import time
from dataclasses import dataclass, field
from typing import Mapping, Optional, Protocol

from core.logging import get_logger
from core.metrics import metrics
from d1_assessment.schemas import AnswersInput, AssessmentAnswers, parse_answers

from .aggregator import aggregate, readiness_bucket
from .cache import ResponseCache, fingerprint
from .evaluator import evaluate
from .sectors import detect_sector, detect_stage
from .types import ScoreCategory, ScoreResult, Sector, WeightSet, WeightTable
from .weights import resolve_weights

logger = get_logger(__name__, domain="d2_scoring")


class ConfigurationProvider(Protocol):
    """Source of the configuration scores are computed with"""

    def get(self) -> WeightTable: ...


@dataclass(frozen=True)
class StaticWeightTable:
    version: int
    weights: WeightSet
    sector_overrides: Mapping[Sector, WeightSet] = field(default_factory=dict)


class StaticConfigurationProvider:
    """Always hands out the same configuration"""

    def __init__(self, configuration: WeightTable):
        self.configuration = configuration

    def get(self) -> WeightTable:
        return self.configuration


class ReadinessScoringEngine:
    """Computes ``ScoreResult`` objects under the provider's current configuration"""

    def __init__(self, config_provider: ConfigurationProvider, cache: Optional[ResponseCache] = None):
        self.config_provider = config_provider
        self.cache = cache

    def score_with_configuration(self, answers: AssessmentAnswers, configuration: WeightTable) -> ScoreResult:
        """Run the pipeline against an explicit configuration, without caching"""
        start = time.perf_counter()

        sector = detect_sector(answers)
        stage = detect_stage(answers)
        weights = resolve_weights(sector, stage, configuration)
        sub_scores = evaluate(answers)
        total = aggregate(sub_scores, weights)
        bucket = readiness_bucket(total)

        result = ScoreResult(
            **{category.value: sub_scores.for_category(category) for category in ScoreCategory},
            total_score=total,
            readiness=bucket,
            sector=sector.value,
            stage=stage.value,
            weights=weights,
            config_version=configuration.version,
        )

        metrics.track_score_computed(sector.value, stage.value, bucket, time.perf_counter() - start)
        return result

    def compute_score(self, answers: AnswersInput, use_cache: bool = True) -> ScoreResult:
        """
        Score an answer set with the active configuration

        Args:
            answers: Complete answers (model or mapping, snake_case or camelCase keys)
            use_cache: Read from the response cache before computing. The fresh
                result is written back either way.

        Returns:
            ScoreResult tagged with the configuration version used

        Raises:
            ValidationError: answers are incomplete or hold unknown values
        """
        complete = parse_answers(answers)
        configuration = self.config_provider.get()
        key = fingerprint(complete, configuration.version)

        if self.cache is not None and use_cache:
            cached = self.cache.get(key)
            if cached is not None:
                return cached

        result = self.score_with_configuration(complete, configuration)
        logger.debug(
            f"Scored answers as {result.total_score} ({result.readiness}), "
            f"sector={result.sector} stage={result.stage} config_version={result.config_version}"
        )

        if self.cache is not None:
            self.cache.put(key, result)
        return result
