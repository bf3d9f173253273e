"""
Repository for assessment and score persistence.

Wraps SQLAlchemy access to the ``assessments`` and ``scores`` tables and
converts driver errors into ``PersistenceError``.
"""

from typing import TYPE_CHECKING, Any, Mapping, Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from core.exceptions import NotFoundError, PersistenceError
from core.logging import get_logger

from .models import Assessment, Score
from .schemas import AssessmentAnswers, answer_columns

if TYPE_CHECKING:
    from d2_scoring.types import ScoreResult

logger = get_logger("assessment_repository", domain="d1_assessment")


class AssessmentRepository:
    """Repository for Assessment and Score operations"""

    def __init__(self, db: Session):
        self.db = db

    def create_assessment(
        self,
        answers: AssessmentAnswers | Mapping[str, Any],
        user_id: str | None = None,
        assessment_id: str | None = None,
    ) -> Assessment:
        """
        Store a new answer set; mapping values are written as given

        Raises:
            ValidationError: a mapping key is not an answer field
            PersistenceError: the insert failed
        """
        values = answers.canonical() if isinstance(answers, AssessmentAnswers) else answer_columns(answers)
        try:
            if assessment_id:
                values["id"] = assessment_id
            assessment = Assessment(user_id=user_id, **values)
            self.db.add(assessment)
            self.db.commit()
            self.db.refresh(assessment)
            logger.info(f"Created assessment {assessment.id}")
            return assessment
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Database error creating assessment: {e}")
            raise PersistenceError(f"Failed to create assessment: {e}", operation="create_assessment") from e

    def get_assessment(self, assessment_id: str) -> Assessment:
        """Get assessment by ID"""
        try:
            assessment = self.db.query(Assessment).filter(Assessment.id == assessment_id).first()
        except SQLAlchemyError as e:
            raise PersistenceError(
                f"Failed to read assessment {assessment_id}: {e}", operation="get_assessment"
            ) from e
        if assessment is None:
            raise NotFoundError("Assessment", assessment_id)
        return assessment

    def list_assessment_ids(self) -> list[str]:
        """All assessment IDs in creation order"""
        try:
            rows = self.db.query(Assessment.id).order_by(Assessment.created_at, Assessment.id).all()
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to list assessments: {e}", operation="list_assessment_ids") from e
        return [row[0] for row in rows]

    def count_assessments(self) -> int:
        try:
            return self.db.query(func.count(Assessment.id)).scalar() or 0
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to count assessments: {e}", operation="count_assessments") from e

    def get_score(self, assessment_id: str) -> Optional[Score]:
        """Get the persisted score for an assessment, if any"""
        try:
            return self.db.query(Score).filter(Score.assessment_id == assessment_id).first()
        except SQLAlchemyError as e:
            raise PersistenceError(
                f"Failed to read score for {assessment_id}: {e}", operation="get_score"
            ) from e

    def save_score(self, assessment_id: str, result: "ScoreResult", user_id: str | None = None) -> Score:
        """Insert or overwrite the score row for an assessment"""
        try:
            score = self.db.query(Score).filter(Score.assessment_id == assessment_id).first()
            if score is None:
                score = Score(assessment_id=assessment_id, user_id=user_id)
                self.db.add(score)

            score.business_idea = result.business_idea.score
            score.business_idea_explanation = result.business_idea.explanation
            score.financials = result.financials.score
            score.financials_explanation = result.financials.explanation
            score.team = result.team.score
            score.team_explanation = result.team.explanation
            score.traction = result.traction.score
            score.traction_explanation = result.traction.explanation
            score.total_score = result.total_score
            score.readiness = result.readiness
            score.sector = result.sector
            score.stage = result.stage
            score.config_version = result.config_version

            self.db.commit()
            self.db.refresh(score)
            logger.debug(f"Saved score {result.total_score} for assessment {assessment_id}")
            return score
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Database error saving score for {assessment_id}: {e}")
            raise PersistenceError(
                f"Failed to save score for {assessment_id}: {e}", operation="save_score"
            ) from e
