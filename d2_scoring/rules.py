"""
Readiness scoring rules

Fixed point contributions per answer, grouped by category. Every rule is
additive and non-negative; the evaluator caps each category at 100.
"""

from dataclasses import dataclass
from typing import Any, Optional, Union

from d1_assessment.types import EmployeeRange, InvestorEngagement, Milestone, MrrTier

from .types import ScoreCategory


@dataclass(frozen=True)
class FlagRule:
    """Points for a yes/no answer"""

    field: str
    points_if_true: int
    points_if_false: int
    phrase_if_true: Optional[str] = None
    phrase_if_false: Optional[str] = None

    def evaluate(self, value: bool) -> tuple[int, Optional[str]]:
        if value:
            return self.points_if_true, self.phrase_if_true
        return self.points_if_false, self.phrase_if_false


@dataclass(frozen=True)
class TierRule:
    """Points for a categorical answer"""

    field: str
    points: dict[str, int]
    phrases: dict[str, str]

    def evaluate(self, value: Any) -> tuple[int, Optional[str]]:
        key = getattr(value, "value", value)
        return self.points[key], self.phrases.get(key)


Rule = Union[FlagRule, TierRule]


@dataclass(frozen=True)
class CategoryRules:
    """Ordered rules contributing to one category"""

    category: ScoreCategory
    rules: tuple[Rule, ...]

    @property
    def fields(self) -> tuple[str, ...]:
        return tuple(rule.field for rule in self.rules)

    @property
    def max_points(self) -> int:
        total = 0
        for rule in self.rules:
            if isinstance(rule, FlagRule):
                total += max(rule.points_if_true, rule.points_if_false)
            else:
                total += max(rule.points.values())
        return total


BUSINESS_IDEA_RULES = CategoryRules(
    category=ScoreCategory.BUSINESS_IDEA,
    rules=(
        FlagRule(
            "prototype",
            points_if_true=60,
            points_if_false=20,
            phrase_if_true="strong prototype foundation",
            phrase_if_false="no prototype limits validation",
        ),
        TierRule(
            "milestones",
            points={
                Milestone.CONCEPT.value: 10,
                Milestone.LAUNCH.value: 30,
                Milestone.SCALE.value: 40,
                Milestone.EXIT.value: 35,
            },
            phrases={
                Milestone.CONCEPT.value: "early concept stage",
                Milestone.LAUNCH.value: "MVP launched",
                Milestone.SCALE.value: "proven model",
                Milestone.EXIT.value: "exit preparation",
            },
        ),
    ),
)

FINANCIALS_RULES = CategoryRules(
    category=ScoreCategory.FINANCIALS,
    rules=(
        FlagRule(
            "revenue",
            points_if_true=40,
            points_if_false=15,
            phrase_if_true="revenue generating",
            phrase_if_false="pre-revenue stage",
        ),
        TierRule(
            "mrr",
            points={
                MrrTier.NONE.value: 10,
                MrrTier.LOW.value: 25,
                MrrTier.MEDIUM.value: 35,
                MrrTier.HIGH.value: 45,
            },
            phrases={
                MrrTier.NONE.value: "no recurring revenue",
                MrrTier.LOW.value: "low MRR",
                MrrTier.MEDIUM.value: "solid MRR",
                MrrTier.HIGH.value: "strong MRR",
            },
        ),
        FlagRule(
            "cap_table",
            points_if_true=20,
            points_if_false=0,
            phrase_if_true="documented cap table",
            phrase_if_false="missing cap table",
        ),
        FlagRule(
            "external_capital",
            points_if_true=15,
            points_if_false=0,
            phrase_if_true="external funding received",
        ),
    ),
)

TEAM_RULES = CategoryRules(
    category=ScoreCategory.TEAM,
    rules=(
        FlagRule(
            "full_time_team",
            points_if_true=60,
            points_if_false=25,
            phrase_if_true="full-time committed team",
            phrase_if_false="part-time team commitment",
        ),
        TierRule(
            "employees",
            points={
                EmployeeRange.SOLO.value: 15,
                EmployeeRange.SMALL.value: 35,
                EmployeeRange.MEDIUM.value: 40,
                EmployeeRange.LARGE.value: 30,
            },
            phrases={
                EmployeeRange.SOLO.value: "small founding team",
                EmployeeRange.SMALL.value: "growing team",
                EmployeeRange.MEDIUM.value: "established team",
                EmployeeRange.LARGE.value: "large organization",
            },
        ),
    ),
)

TRACTION_RULES = CategoryRules(
    category=ScoreCategory.TRACTION,
    rules=(
        FlagRule(
            "term_sheets",
            points_if_true=50,
            points_if_false=20,
            phrase_if_true="term sheets received",
            phrase_if_false="no term sheets yet",
        ),
        TierRule(
            "investors",
            points={
                InvestorEngagement.NONE.value: 10,
                InvestorEngagement.ANGELS.value: 30,
                InvestorEngagement.VC.value: 40,
                InvestorEngagement.LATE_STAGE.value: 35,
            },
            phrases={
                InvestorEngagement.NONE.value: "no investor engagement",
                InvestorEngagement.ANGELS.value: "angel investor interest",
                InvestorEngagement.VC.value: "VC engagement",
                InvestorEngagement.LATE_STAGE.value: "late-stage interest",
            },
        ),
    ),
)

RULE_SET: dict[ScoreCategory, CategoryRules] = {
    rules.category: rules for rules in (BUSINESS_IDEA_RULES, FINANCIALS_RULES, TEAM_RULES, TRACTION_RULES)
}
