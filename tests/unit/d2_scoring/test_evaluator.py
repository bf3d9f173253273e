"""
Test the category rule evaluator
"""
import itertools

import pytest

from core.exceptions import ValidationError
from d2_scoring.evaluator import evaluate, evaluate_category
from d2_scoring.rules import RULE_SET
from d2_scoring.types import ScoreCategory


class TestEvaluate:
    """Sub-scores and explanations for known answer sets"""

    def test_strong_answers(self, strong_answers):
        scores = evaluate(strong_answers)

        assert scores.business_idea.score == 90
        assert scores.financials.score == 95
        assert scores.team.score == 95
        assert scores.traction.score == 50

    def test_minimal_answers(self, minimal_answers):
        scores = evaluate(minimal_answers)

        assert scores.business_idea.score == 30
        assert scores.financials.score == 25
        assert scores.team.score == 40
        assert scores.traction.score == 30

    def test_explanations_list_contributing_phrases(self, strong_answers):
        scores = evaluate(strong_answers)

        assert scores.business_idea.explanation == "Strong prototype foundation, MVP launched"
        assert scores.financials.explanation == "Revenue generating, solid MRR, documented cap table"
        assert scores.team.explanation == "Full-time committed team, growing team"
        assert scores.traction.explanation == "No term sheets yet, angel investor interest"

    def test_minimal_explanations(self, minimal_answers):
        scores = evaluate(minimal_answers)

        assert scores.business_idea.explanation == "No prototype limits validation, early concept stage"
        assert scores.financials.explanation == "Pre-revenue stage, no recurring revenue, missing cap table"

    def test_external_capital_phrase_only_when_true(self, strong_answers):
        strong_answers["externalCapital"] = True
        scores = evaluate(strong_answers)

        assert scores.financials.explanation.endswith("external funding received")

    def test_financials_capped_at_100(self, strong_answers):
        strong_answers.update({"mrr": "high", "externalCapital": True})

        # 40 + 45 + 20 + 15 = 120 before the cap
        assert evaluate(strong_answers).financials.score == 100

    def test_missing_answer_rejected(self, strong_answers):
        del strong_answers["investors"]

        with pytest.raises(ValidationError) as exc_info:
            evaluate(strong_answers)

        assert exc_info.value.field == "investors"

    def test_evaluate_category_directly(self, strong_answers):
        from d1_assessment.schemas import parse_answers

        team = evaluate_category(parse_answers(strong_answers), RULE_SET[ScoreCategory.TEAM])
        assert team.score == 95


class TestEvaluatorProperties:
    """Bounds and monotonicity over the whole answer space"""

    BOOLEANS = ("prototype", "revenue", "full_time_team", "term_sheets", "cap_table", "external_capital")

    def _all_answer_sets(self):
        enums = {
            "mrr": ("none", "low", "medium", "high"),
            "employees": ("1-2", "3-10", "11-50", "50+"),
            "investors": ("none", "angels", "vc", "lateStage"),
            "milestones": ("concept", "launch", "scale", "exit"),
        }
        for flags in itertools.product((False, True), repeat=len(self.BOOLEANS)):
            for values in itertools.product(*enums.values()):
                yield {**dict(zip(self.BOOLEANS, flags)), **dict(zip(enums, values))}

    def test_scores_always_within_bounds(self):
        for answers in self._all_answer_sets():
            scores = evaluate(answers)
            for category in ScoreCategory:
                assert 0 <= scores.for_category(category).score <= 100

    @pytest.mark.parametrize("flag", BOOLEANS)
    def test_turning_a_flag_on_never_lowers_a_score(self, minimal_answers, flag):
        before = evaluate(minimal_answers)
        after = evaluate({**minimal_answers, flag: True})

        for category in ScoreCategory:
            assert after.for_category(category).score >= before.for_category(category).score

    def test_max_points_cover_every_rule(self):
        for category, rules in RULE_SET.items():
            assert rules.category == category
            assert rules.max_points >= 40
