"""
Assessment answer enumerations

Categorical answer values accepted from the self-assessment form. The string
values are the ones stored in the ``assessments`` table.
"""

from enum import Enum


class MrrTier(str, Enum):
    """Monthly recurring revenue tier"""

    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class EmployeeRange(str, Enum):
    """Headcount range"""

    SOLO = "1-2"
    SMALL = "3-10"
    MEDIUM = "11-50"
    LARGE = "50+"


class InvestorEngagement(str, Enum):
    """Most advanced investor engagement so far"""

    NONE = "none"
    ANGELS = "angels"
    VC = "vc"
    LATE_STAGE = "lateStage"


class Milestone(str, Enum):
    """Product / company milestone reached"""

    CONCEPT = "concept"
    LAUNCH = "launch"
    SCALE = "scale"
    EXIT = "exit"


BOOLEAN_FIELDS = (
    "prototype",
    "revenue",
    "full_time_team",
    "term_sheets",
    "cap_table",
    "external_capital",
)

ENUM_FIELDS = {
    "mrr": MrrTier,
    "employees": EmployeeRange,
    "investors": InvestorEngagement,
    "milestones": Milestone,
}

# Fields the scoring rules read; all must be present before evaluation
REQUIRED_FIELDS = BOOLEAN_FIELDS + tuple(ENUM_FIELDS)
