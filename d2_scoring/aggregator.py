"""
Total Score Aggregator

Combines the four sub-scores with a resolved weight set into a total on the
0-999 scale and maps totals onto readiness buckets.
"""

from decimal import ROUND_HALF_UP, Decimal
from enum import Enum

from .constants import MAX_TOTAL_SCORE, MIN_TOTAL_SCORE, SCORE_SCALE_FACTOR
from .types import ScoreCategory, SubScores, WeightSet


class ReadinessBucket(str, Enum):
    """Named score ranges shown to founders"""

    INVESTOR_READY = "Investor Ready"
    NEARLY_READY = "Nearly Ready"
    DEVELOPING = "Developing"
    EARLY_STAGE = "Early Stage"
    PRE_INVESTMENT = "Pre-Investment"

    @property
    def min_score(self) -> int:
        return BUCKET_THRESHOLDS[self]

    @classmethod
    def from_score(cls, total_score: int) -> "ReadinessBucket":
        for bucket, threshold in BUCKET_THRESHOLDS.items():
            if total_score >= threshold:
                return bucket
        return cls.PRE_INVESTMENT


# Ordered highest first; the first threshold met wins
BUCKET_THRESHOLDS: dict[ReadinessBucket, int] = {
    ReadinessBucket.INVESTOR_READY: 800,
    ReadinessBucket.NEARLY_READY: 700,
    ReadinessBucket.DEVELOPING: 600,
    ReadinessBucket.EARLY_STAGE: 400,
    ReadinessBucket.PRE_INVESTMENT: MIN_TOTAL_SCORE,
}


def weighted_average(sub_scores: SubScores, weights: WeightSet) -> Decimal:
    """Weighted sum of the sub-scores, computed in Decimal to keep .5 boundaries exact"""
    return sum(
        (
            Decimal(sub_scores.for_category(category).score) * Decimal(str(weights.for_category(category)))
            for category in ScoreCategory
        ),
        Decimal("0"),
    )


def aggregate(sub_scores: SubScores, weights: WeightSet) -> int:
    """
    Compute the total readiness score

    Args:
        sub_scores: Evaluator output
        weights: Resolved weight set

    Returns:
        Integer total in [0, 999], rounded half-up
    """
    scaled = weighted_average(sub_scores, weights) * Decimal(str(SCORE_SCALE_FACTOR))
    total = int(scaled.quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    return max(MIN_TOTAL_SCORE, min(MAX_TOTAL_SCORE, total))


def readiness_bucket(total_score: int) -> str:
    """Display label for a total score"""
    return ReadinessBucket.from_score(total_score).value
