"""
Sector & Stage Detection

Classifies an answer set into a market sector and a funding stage. Sector
detection walks an ordered rule table and the first matching rule wins.
"""

from dataclasses import dataclass
from typing import Callable

from d1_assessment.schemas import AnswersInput, AssessmentAnswers, parse_answers
from d1_assessment.types import MrrTier

from .types import Sector, Stage


def _has_recurring_revenue(answers: AssessmentAnswers) -> bool:
    return answers.mrr != MrrTier.NONE


@dataclass(frozen=True)
class SectorRule:
    """One detection heuristic mapping answers to a sector"""

    sector: Sector
    description: str
    matches: Callable[[AssessmentAnswers], bool]


SECTOR_RULES: tuple[SectorRule, ...] = (
    SectorRule(
        sector=Sector.B2B_SAAS,
        description="recurring revenue backed by term sheets or paying customers",
        matches=lambda a: (a.term_sheets or (a.revenue and _has_recurring_revenue(a))) and _has_recurring_revenue(a),
    ),
    SectorRule(
        sector=Sector.FINTECH,
        description="external capital raised and term sheets received",
        matches=lambda a: a.external_capital and a.term_sheets,
    ),
    SectorRule(
        sector=Sector.B2C_CONSUMER,
        description="prototype without revenue",
        matches=lambda a: a.prototype and not a.revenue,
    ),
    SectorRule(
        sector=Sector.ECOMMERCE,
        description="revenue without a recurring component",
        matches=lambda a: a.revenue and not _has_recurring_revenue(a),
    ),
)

# Unmatched answers fall back to B2B SaaS, not Sector.DEFAULT
FALLBACK_SECTOR = Sector.B2B_SAAS

SEED_MRR_TIERS = frozenset({MrrTier.MEDIUM, MrrTier.HIGH})


def detect_sector(answers: AnswersInput) -> Sector:
    """Return the sector of the first matching rule, or the fallback"""
    complete = parse_answers(answers)
    for rule in SECTOR_RULES:
        if rule.matches(complete):
            return rule.sector
    return FALLBACK_SECTOR


def detect_stage(answers: AnswersInput) -> Stage:
    """Seed once capital, term sheets or meaningful MRR exist; pre-seed otherwise"""
    complete = parse_answers(answers)
    if complete.external_capital or complete.term_sheets or complete.mrr in SEED_MRR_TIERS:
        return Stage.SEED
    return Stage.PRE_SEED
