"""
Rescore Processor

Recomputes persisted assessments under the active scoring configuration.
Each record is isolated: a failure is recorded against that assessment and the
batch moves on. Records may be processed on a bounded thread pool, with one
database session per record, and results are always returned in input order.
"""

import threading
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from core.config import get_settings
from core.exceptions import ReadinessError
from core.logging import get_logger
from core.metrics import metrics
from d1_assessment.repository import AssessmentRepository
from d1_assessment.schemas import answers_from_row, normalize_answers
from d2_scoring.engine import ReadinessScoringEngine
from database.session import SessionLocal, session_scope

logger = get_logger("rescore_processor", domain="batch_runner")


@dataclass(frozen=True)
class RescoreResult:
    """Outcome of rescoring one assessment"""

    assessment_id: str
    success: bool
    old_score: Optional[int] = None
    new_score: Optional[int] = None
    score_difference: Optional[int] = None
    old_readiness: Optional[str] = None
    new_readiness: Optional[str] = None
    error: Optional[str] = None
    error_code: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class RescoreSummary:
    """Aggregate view of one batch run"""

    total: int
    successful: int
    failed: int
    cancelled: bool
    duration_seconds: float
    config_version: Optional[int]
    started_at: datetime
    results: List[RescoreResult] = field(default_factory=list)

    @property
    def changed(self) -> int:
        return sum(1 for r in self.results if r.success and r.score_difference)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": self.total,
            "successful": self.successful,
            "failed": self.failed,
            "changed": self.changed,
            "cancelled": self.cancelled,
            "duration_seconds": self.duration_seconds,
            "config_version": self.config_version,
            "started_at": self.started_at.isoformat(),
            "results": [r.to_dict() for r in self.results],
        }


def _error_message(error: Exception) -> str:
    return str(error) or error.__class__.__name__


class RescoreProcessor:
    """Batch rescoring over all persisted assessments"""

    def __init__(
        self,
        engine: ReadinessScoringEngine,
        session_factory=SessionLocal,
        max_concurrency: Optional[int] = None,
        normalize: bool = False,
    ):
        """
        Args:
            engine: Scoring engine whose provider supplies the active configuration
            session_factory: Callable returning a new SQLAlchemy session
            max_concurrency: Worker threads for ``rescore_all``; 1 runs sequentially
            normalize: Apply documented defaults to stored rows with missing answers.
                Off by default, so incomplete rows fail with ``ValidationError``
        """
        self.engine = engine
        self.session_factory = session_factory
        self.max_concurrency = max_concurrency or get_settings().rescore_max_concurrency
        self.normalize = normalize

    def rescore_one(self, assessment_id: str) -> RescoreResult:
        """
        Rescore a single assessment and persist the new score

        Raises:
            NotFoundError: unknown assessment
            ValidationError: stored answers cannot be scored
            PersistenceError: the read or write failed
        """
        with session_scope(self.session_factory) as db:
            repository = AssessmentRepository(db)
            assessment = repository.get_assessment(assessment_id)

            answers = answers_from_row(assessment)
            if self.normalize:
                answers = normalize_answers(answers)

            previous = repository.get_score(assessment_id)
            old_score = previous.total_score if previous is not None else None
            old_readiness = previous.readiness if previous is not None else None

            result = self.engine.compute_score(answers, use_cache=False)
            repository.save_score(assessment_id, result, user_id=assessment.user_id)

        difference = result.total_score - old_score if old_score is not None else None
        logger.debug(f"Rescored assessment {assessment_id}: {old_score} -> {result.total_score}")
        metrics.track_rescore(True)

        return RescoreResult(
            assessment_id=assessment_id,
            success=True,
            old_score=old_score,
            new_score=result.total_score,
            score_difference=difference,
            old_readiness=old_readiness,
            new_readiness=result.readiness,
        )

    def _rescore_isolated(
        self, assessment_id: str, cancel_event: Optional[threading.Event]
    ) -> Optional[RescoreResult]:
        """Rescore one record, converting any failure into a failed result; None if cancelled first"""
        if cancel_event is not None and cancel_event.is_set():
            return None

        try:
            return self.rescore_one(assessment_id)
        except Exception as e:
            logger.bind(assessment_id=assessment_id).error(
                f"Failed to rescore assessment {assessment_id}: {_error_message(e)}"
            )
            metrics.track_rescore(False)
            metrics.track_error(e.__class__.__name__, "batch_runner")
            return RescoreResult(
                assessment_id=assessment_id,
                success=False,
                error=_error_message(e),
                error_code=getattr(e, "error_code", e.__class__.__name__),
            )

    def rescore_all(self, cancel_event: Optional[threading.Event] = None) -> List[RescoreResult]:
        """
        Rescore every stored assessment

        Args:
            cancel_event: When set, no further records are started. Records
                already in progress finish and are included.

        Returns:
            One result per processed assessment, in listing order

        Raises:
            PersistenceError: the assessment IDs could not be listed
        """
        with session_scope(self.session_factory) as db:
            assessment_ids = AssessmentRepository(db).list_assessment_ids()

        logger.info(f"Rescoring {len(assessment_ids)} assessments (max_concurrency={self.max_concurrency})")

        if self.max_concurrency <= 1:
            results: List[RescoreResult] = []
            for assessment_id in assessment_ids:
                result = self._rescore_isolated(assessment_id, cancel_event)
                if result is None:
                    break
                results.append(result)
        else:
            with ThreadPoolExecutor(max_workers=self.max_concurrency, thread_name_prefix="rescore") as pool:
                outcomes = list(pool.map(lambda i: self._rescore_isolated(i, cancel_event), assessment_ids))
            results = [result for result in outcomes if result is not None]

        if len(results) < len(assessment_ids):
            logger.warning(f"Rescore cancelled after {len(results)} of {len(assessment_ids)} assessments")

        if self.engine.cache is not None:
            active_version = self._active_version()
            if active_version is not None:
                self.engine.cache.evict_stale(active_version)

        return results

    def _active_version(self) -> Optional[int]:
        """Version of the active configuration, or None when it cannot be read"""
        try:
            return self.engine.config_provider.get().version
        except ReadinessError as e:
            logger.error(f"Could not read the active configuration after rescoring: {e.message}")
            metrics.track_error(e.error_code, "batch_runner")
            return None

    def summarize(
        self,
        results: List[RescoreResult],
        duration_seconds: float = 0.0,
        cancelled: bool = False,
        config_version: Optional[int] = None,
        started_at: Optional[datetime] = None,
    ) -> RescoreSummary:
        successful = sum(1 for r in results if r.success)
        return RescoreSummary(
            total=len(results),
            successful=successful,
            failed=len(results) - successful,
            cancelled=cancelled,
            duration_seconds=duration_seconds,
            config_version=config_version,
            started_at=started_at or datetime.utcnow(),
            results=list(results),
        )

    def run(self, cancel_event: Optional[threading.Event] = None) -> RescoreSummary:
        """``rescore_all`` plus timing and a summary"""
        started_at = datetime.utcnow()
        start = time.perf_counter()

        results = self.rescore_all(cancel_event)

        duration = time.perf_counter() - start
        metrics.track_rescore_batch(duration)
        summary = self.summarize(
            results,
            duration_seconds=round(duration, 3),
            cancelled=cancel_event is not None and cancel_event.is_set(),
            config_version=self._active_version(),
            started_at=started_at,
        )
        logger.info(
            f"Rescore finished: {summary.successful} successful, {summary.failed} failed, "
            f"{summary.changed} changed in {summary.duration_seconds}s"
        )
        return summary
