"""
Scoring Rule Evaluator

Pure function from a complete answer set to four category sub-scores with
explanations. Incomplete answers are rejected, never defaulted.
"""

from d1_assessment.schemas import AnswersInput, AssessmentAnswers, parse_answers

from .constants import MAX_CATEGORY_SCORE
from .rules import RULE_SET, CategoryRules
from .types import CategoryScore, ScoreCategory, SubScores


def _capitalize(text: str) -> str:
    return text[:1].upper() + text[1:]


def evaluate_category(answers: AssessmentAnswers, category_rules: CategoryRules) -> CategoryScore:
    """Sum a category's rule contributions, capped at 100"""
    points = 0
    phrases: list[str] = []

    for rule in category_rules.rules:
        earned, phrase = rule.evaluate(getattr(answers, rule.field))
        points += earned
        if phrase:
            phrases.append(phrase)

    return CategoryScore(
        score=min(points, MAX_CATEGORY_SCORE),
        explanation=_capitalize(", ".join(phrases)),
    )


def evaluate(answers: AnswersInput) -> SubScores:
    """
    Evaluate all four categories for an assessment

    Args:
        answers: ``AssessmentAnswers`` or a mapping holding every rule field

    Returns:
        SubScores with each category score in [0, 100]

    Raises:
        ValidationError: a field read by the rules is missing or invalid
    """
    complete = parse_answers(answers)
    return SubScores(**{category.value: evaluate_category(complete, RULE_SET[category]) for category in ScoreCategory})
