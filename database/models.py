"""
Model registry

Importing this module registers every table on ``Base.metadata``; used by
``init-db``, Alembic autogenerate and the test fixtures.
"""

from d1_assessment.models import Assessment, Score
from d3_versioning.models import AuditLog, ScoringConfig

__all__ = ["Assessment", "AuditLog", "Score", "ScoringConfig"]
