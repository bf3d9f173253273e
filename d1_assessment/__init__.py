"""
D1 Assessment Module

Self-assessment answer types, the strict answer schema with its explicit
default-normalisation step, and persistence of assessments and scores.
"""

from .models import Assessment, Score
from .schemas import AssessmentAnswers, normalize_answers, parse_answers
from .types import EmployeeRange, InvestorEngagement, Milestone, MrrTier

__all__ = [
    # Models
    "Assessment",
    "Score",
    # Schemas
    "AssessmentAnswers",
    "normalize_answers",
    "parse_answers",
    # Types
    "EmployeeRange",
    "InvestorEngagement",
    "Milestone",
    "MrrTier",
]
