"""
Weight Resolver

Combines the configured base weights, the sector override and the stage
adjustment into a bounded ``WeightSet``. Weights are clamped individually and
are not renormalised; the aggregator's fixed scale factor absorbs the drift.
"""

from typing import Mapping

from core.logging import get_logger

from .constants import MAX_WEIGHT, MIN_WEIGHT, STAGE_WEIGHT_DELTA, WEIGHT_PRECISION
from .types import ScoreCategory, Sector, Stage, WeightSet, WeightTable

logger = get_logger(__name__, domain="d2_scoring")

STAGE_ADJUSTMENTS: dict[Stage, dict[ScoreCategory, float]] = {
    Stage.PRE_SEED: {
        ScoreCategory.BUSINESS_IDEA: STAGE_WEIGHT_DELTA,
        ScoreCategory.TEAM: STAGE_WEIGHT_DELTA,
        ScoreCategory.FINANCIALS: -STAGE_WEIGHT_DELTA,
        ScoreCategory.TRACTION: -STAGE_WEIGHT_DELTA,
    },
    Stage.SEED: {
        ScoreCategory.FINANCIALS: STAGE_WEIGHT_DELTA,
        ScoreCategory.TRACTION: STAGE_WEIGHT_DELTA,
        ScoreCategory.BUSINESS_IDEA: -STAGE_WEIGHT_DELTA,
        ScoreCategory.TEAM: -STAGE_WEIGHT_DELTA,
    },
}


def clamp_weight(value: float) -> float:
    """Clamp a weight into [0.10, 0.50]"""
    return round(max(MIN_WEIGHT, min(MAX_WEIGHT, value)), WEIGHT_PRECISION)


def base_weights_for(sector: Sector, configuration: WeightTable) -> WeightSet:
    """Sector override if configured, otherwise the configuration's default table"""
    overrides: Mapping[Sector, WeightSet] = configuration.sector_overrides or {}
    if sector in overrides:
        return overrides[sector]
    logger.debug(f"No weight override for sector '{sector.value}', using default weights")
    return configuration.weights


def resolve_weights(sector: Sector, stage: Stage, configuration: WeightTable) -> WeightSet:
    """
    Resolve the weight set for a sector and stage

    Args:
        sector: Detected market sector
        stage: Detected funding stage
        configuration: Active configuration supplying base and sector weights

    Returns:
        WeightSet with every weight in [0.10, 0.50]
    """
    base = base_weights_for(sector, configuration)
    adjustments = STAGE_ADJUSTMENTS.get(stage, {})

    return WeightSet(
        **{
            category.value: clamp_weight(base.for_category(category) + adjustments.get(category, 0.0))
            for category in ScoreCategory
        }
    )
