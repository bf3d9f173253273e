"""
Test AssessmentRepository persistence
"""
from unittest.mock import Mock

import pytest
from sqlalchemy.exc import OperationalError

from core.exceptions import NotFoundError, PersistenceError, ValidationError
from d1_assessment.models import Assessment
from d1_assessment.repository import AssessmentRepository
from d1_assessment.schemas import parse_answers
from d2_scoring.engine import ReadinessScoringEngine, StaticConfigurationProvider
from d3_versioning.defaults import default_configuration


@pytest.fixture
def engine():
    return ReadinessScoringEngine(StaticConfigurationProvider(default_configuration()))


class TestAssessmentRepository:
    """Test AssessmentRepository functionality"""

    def test_create_from_model(self, db_session, strong_answers):
        repo = AssessmentRepository(db_session)

        assessment = repo.create_assessment(parse_answers(strong_answers), user_id="user-1")

        assert assessment.id is not None
        assert assessment.user_id == "user-1"
        assert assessment.full_time_team is True
        assert assessment.mrr == "medium"
        assert assessment.created_at is not None

    def test_create_with_explicit_id(self, db_session, minimal_answers):
        repo = AssessmentRepository(db_session)

        assessment = repo.create_assessment(minimal_answers, assessment_id="a-1")

        assert assessment.id == "a-1"
        assert repo.get_assessment("a-1").milestones == "concept"

    def test_incomplete_rows_can_be_stored(self, db_session):
        repo = AssessmentRepository(db_session)

        assessment = repo.create_assessment({"prototype": True})

        assert assessment.revenue is None

    def test_create_from_camel_case_mapping(self, db_session, strong_answers):
        repo = AssessmentRepository(db_session)

        assessment = repo.create_assessment(strong_answers)

        assert assessment.cap_table is True
        assert assessment.full_time_team is True
        assert assessment.term_sheets is False

    def test_unknown_answer_key_rejected(self, db_session, minimal_answers):
        repo = AssessmentRepository(db_session)

        with pytest.raises(ValidationError) as exc_info:
            repo.create_assessment({**minimal_answers, "burnRate": "high"})

        assert exc_info.value.field == "burnRate"
        assert repo.count_assessments() == 0

    def test_get_missing_assessment(self, db_session):
        repo = AssessmentRepository(db_session)

        with pytest.raises(NotFoundError):
            repo.get_assessment("does-not-exist")

    def test_list_ids_and_count(self, db_session, minimal_answers):
        repo = AssessmentRepository(db_session)
        ids = [repo.create_assessment(minimal_answers, assessment_id=f"a-{i}").id for i in range(3)]

        assert sorted(repo.list_assessment_ids()) == sorted(ids)
        assert repo.count_assessments() == 3

    def test_save_score_inserts_then_overwrites(self, db_session, engine, strong_answers, minimal_answers):
        repo = AssessmentRepository(db_session)
        assessment = repo.create_assessment(parse_answers(strong_answers))

        first = repo.save_score(assessment.id, engine.compute_score(strong_answers))
        second = repo.save_score(assessment.id, engine.compute_score(minimal_answers))

        assert first.id == second.id
        stored = repo.get_score(assessment.id)
        assert stored.total_score == second.total_score
        assert stored.business_idea == 30
        assert stored.config_version == 0
        assert db_session.query(type(stored)).count() == 1

    def test_get_score_absent(self, db_session, minimal_answers):
        repo = AssessmentRepository(db_session)
        assessment = repo.create_assessment(minimal_answers)

        assert repo.get_score(assessment.id) is None

    def test_database_error_becomes_persistence_error(self):
        db = Mock()
        db.add.side_effect = OperationalError("INSERT", {}, Exception("disk I/O error"))
        repo = AssessmentRepository(db)

        with pytest.raises(PersistenceError):
            repo.create_assessment({"prototype": True})

        db.rollback.assert_called_once()

    def test_list_failure_becomes_persistence_error(self):
        db = Mock()
        db.query.side_effect = OperationalError("SELECT", {}, Exception("connection refused"))

        with pytest.raises(PersistenceError):
            AssessmentRepository(db).list_assessment_ids()

    def test_model_to_dict(self, db_session, minimal_answers):
        assessment = AssessmentRepository(db_session).create_assessment(minimal_answers)
        data = db_session.get(Assessment, assessment.id).to_dict()

        assert data["id"] == assessment.id
        assert data["employees"] == "1-2"
