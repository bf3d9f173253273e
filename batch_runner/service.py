"""
Readiness service facade

Wires the configuration store, the active-configuration cache, the response
cache, the scoring engine and the rescore processor together. The CLI and the
HTTP router both go through this class.
"""

import threading
from functools import lru_cache
from typing import Any, List, Mapping, Optional

from core.logging import get_logger
from d1_assessment.repository import AssessmentRepository
from d1_assessment.schemas import AnswersInput, normalize_answers, parse_answers
from d2_scoring.cache import ResponseCache, build_response_cache
from d2_scoring.engine import ReadinessScoringEngine
from d2_scoring.types import ScoreResult
from d3_versioning.config_cache import ActiveConfigurationCache
from d3_versioning.schemas import ScoringConfiguration
from d3_versioning.store import ConfigurationDocument, ConfigurationVersionStore
from database.session import SessionLocal, session_scope

from .processor import RescoreProcessor, RescoreResult, RescoreSummary

logger = get_logger("readiness_service", domain="batch_runner")


class ReadinessService:
    """Entry point for scoring, configuration management and rescoring"""

    def __init__(
        self,
        session_factory=SessionLocal,
        response_cache: Optional[ResponseCache] = None,
        config_ttl_seconds: Optional[float] = None,
        max_concurrency: Optional[int] = None,
    ):
        self.session_factory = session_factory
        self.store = ConfigurationVersionStore(session_factory)
        self.config_cache = ActiveConfigurationCache(self.store, ttl_seconds=config_ttl_seconds)
        self.response_cache = response_cache if response_cache is not None else build_response_cache()
        self.engine = ReadinessScoringEngine(self.config_cache, self.response_cache)
        self.processor = RescoreProcessor(self.engine, session_factory, max_concurrency=max_concurrency)

    # Scoring

    def compute_score(self, answers: AnswersInput, normalize: bool = False) -> ScoreResult:
        """
        Score answers with the active configuration

        Args:
            answers: Answer mapping or model
            normalize: Fill absent answers with documented defaults first;
                otherwise incomplete answers raise ``ValidationError``
        """
        if normalize and isinstance(answers, Mapping):
            answers = normalize_answers(answers)
        return self.engine.compute_score(answers)

    def submit_assessment(
        self, answers: AnswersInput, user_id: Optional[str] = None, normalize: bool = False
    ) -> tuple[str, ScoreResult]:
        """Store an assessment, score it and persist the score"""
        if normalize and isinstance(answers, Mapping):
            answers = normalize_answers(answers)
        complete = parse_answers(answers)
        result = self.engine.compute_score(complete)

        with session_scope(self.session_factory) as db:
            repository = AssessmentRepository(db)
            assessment = repository.create_assessment(complete, user_id=user_id)
            repository.save_score(assessment.id, result, user_id=user_id)
            assessment_id = assessment.id

        logger.info(f"Scored new assessment {assessment_id}: {result.total_score} ({result.readiness})")
        return assessment_id, result

    # Configuration

    def get_active_configuration(self) -> ScoringConfiguration:
        return self.config_cache.get()

    def create_scoring_version(
        self, document: ConfigurationDocument, reason: str, actor: Optional[str] = None
    ) -> ScoringConfiguration:
        created = self.store.create_version(document, reason, actor=actor)
        self.config_cache.invalidate()
        return created

    def revert_to_version(self, version: int, reason: str, actor: Optional[str] = None) -> ScoringConfiguration:
        created = self.store.revert_to_version(version, reason, actor=actor)
        self.config_cache.invalidate()
        return created

    def get_scoring_history(self, limit: Optional[int] = None) -> List[ScoringConfiguration]:
        return self.store.get_history(limit=limit)

    def get_audit_log(self, limit: Optional[int] = None) -> List[dict[str, Any]]:
        return self.store.get_audit_log(limit=limit)

    def ensure_default_configuration(self, actor: Optional[str] = "system") -> ScoringConfiguration:
        configuration = self.store.ensure_default(actor=actor)
        self.config_cache.invalidate()
        return configuration

    # Rescoring

    def rescore_one(self, assessment_id: str) -> RescoreResult:
        return self.processor.rescore_one(assessment_id)

    def rescore_all(self, cancel_event: Optional[threading.Event] = None) -> List[RescoreResult]:
        return self.processor.rescore_all(cancel_event)

    def run_rescore(self, cancel_event: Optional[threading.Event] = None) -> RescoreSummary:
        return self.processor.run(cancel_event)


@lru_cache()
def get_service() -> ReadinessService:
    """Process-wide service bound to the configured database"""
    return ReadinessService()
