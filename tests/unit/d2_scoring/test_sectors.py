"""
Test sector and stage detection
"""
import pytest

from d2_scoring.sectors import FALLBACK_SECTOR, SECTOR_RULES, detect_sector, detect_stage
from d2_scoring.types import Sector, Stage


class TestDetectSector:
    """First matching rule wins"""

    def test_recurring_revenue_is_b2b_saas(self, strong_answers):
        assert detect_sector(strong_answers) == Sector.B2B_SAAS

    def test_term_sheets_with_mrr_is_b2b_saas(self, minimal_answers):
        minimal_answers.update({"term_sheets": True, "mrr": "low"})
        assert detect_sector(minimal_answers) == Sector.B2B_SAAS

    def test_capital_and_term_sheets_without_mrr_is_fintech(self, minimal_answers):
        minimal_answers.update({"external_capital": True, "term_sheets": True})
        assert detect_sector(minimal_answers) == Sector.FINTECH

    def test_b2b_rule_takes_precedence_over_fintech(self, minimal_answers):
        minimal_answers.update({"external_capital": True, "term_sheets": True, "mrr": "high"})
        assert detect_sector(minimal_answers) == Sector.B2B_SAAS

    def test_prototype_without_revenue_is_b2c(self, minimal_answers):
        minimal_answers["prototype"] = True
        assert detect_sector(minimal_answers) == Sector.B2C_CONSUMER

    def test_revenue_without_mrr_is_ecommerce(self, minimal_answers):
        minimal_answers["revenue"] = True
        assert detect_sector(minimal_answers) == Sector.ECOMMERCE

    def test_no_signal_falls_back_to_b2b_saas(self, minimal_answers):
        assert detect_sector(minimal_answers) == FALLBACK_SECTOR == Sector.B2B_SAAS

    def test_never_detects_default_or_healthtech(self, minimal_answers):
        detectable = {rule.sector for rule in SECTOR_RULES} | {FALLBACK_SECTOR}
        assert Sector.DEFAULT not in detectable
        assert Sector.HEALTHTECH not in detectable


class TestDetectStage:
    def test_minimal_is_pre_seed(self, minimal_answers):
        assert detect_stage(minimal_answers) == Stage.PRE_SEED

    @pytest.mark.parametrize(
        "update",
        [{"external_capital": True}, {"term_sheets": True}, {"mrr": "medium"}, {"mrr": "high"}],
    )
    def test_seed_signals(self, minimal_answers, update):
        assert detect_stage({**minimal_answers, **update}) == Stage.SEED

    def test_low_mrr_stays_pre_seed(self, minimal_answers):
        assert detect_stage({**minimal_answers, "mrr": "low"}) == Stage.PRE_SEED
