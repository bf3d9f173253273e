"""
Assessment and score models

``assessments`` holds raw answers exactly as submitted; ``scores`` holds one
derived result row per assessment and is rewritten by rescoring.
"""

from datetime import datetime
from typing import Any, Dict

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import relationship

from database.base import Base, generate_uuid


class Assessment(Base):
    """Immutable answer set for one submission"""

    __tablename__ = "assessments"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), index=True)

    # Answer columns are nullable so incomplete legacy rows can be stored;
    # completeness is enforced when the row is scored.
    prototype = Column(Boolean)
    revenue = Column(Boolean)
    full_time_team = Column(Boolean)
    term_sheets = Column(Boolean)
    cap_table = Column(Boolean)
    external_capital = Column(Boolean)
    mrr = Column(String(20))
    employees = Column(String(20))
    investors = Column(String(20))
    milestones = Column(String(20))
    funding_goal = Column(String(100))

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    score = relationship("Score", back_populates="assessment", uselist=False, cascade="all, delete-orphan")

    __table_args__ = (Index("idx_assessments_created_at", "created_at"),)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for API responses"""
        return {
            "id": self.id,
            "user_id": self.user_id,
            "prototype": self.prototype,
            "revenue": self.revenue,
            "full_time_team": self.full_time_team,
            "term_sheets": self.term_sheets,
            "cap_table": self.cap_table,
            "external_capital": self.external_capital,
            "mrr": self.mrr,
            "employees": self.employees,
            "investors": self.investors,
            "milestones": self.milestones,
            "funding_goal": self.funding_goal,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


class Score(Base):
    """Persisted score for an assessment"""

    __tablename__ = "scores"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    assessment_id = Column(String(36), ForeignKey("assessments.id"), nullable=False, unique=True)
    user_id = Column(String(36), index=True)

    business_idea = Column(Integer, nullable=False)
    business_idea_explanation = Column(Text, nullable=False)
    financials = Column(Integer, nullable=False)
    financials_explanation = Column(Text, nullable=False)
    team = Column(Integer, nullable=False)
    team_explanation = Column(Text, nullable=False)
    traction = Column(Integer, nullable=False)
    traction_explanation = Column(Text, nullable=False)
    total_score = Column(Integer, nullable=False)

    # Scoring context
    readiness = Column(String(30))
    sector = Column(String(30))
    stage = Column(String(20))
    config_version = Column(Integer)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    assessment = relationship("Assessment", back_populates="score")

    __table_args__ = (Index("idx_scores_total_score", "total_score"),)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for API responses"""
        return {
            "id": self.id,
            "assessment_id": self.assessment_id,
            "business_idea": self.business_idea,
            "business_idea_explanation": self.business_idea_explanation,
            "financials": self.financials,
            "financials_explanation": self.financials_explanation,
            "team": self.team,
            "team_explanation": self.team_explanation,
            "traction": self.traction,
            "traction_explanation": self.traction_explanation,
            "total_score": self.total_score,
            "readiness": self.readiness,
            "sector": self.sector,
            "stage": self.stage,
            "config_version": self.config_version,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
