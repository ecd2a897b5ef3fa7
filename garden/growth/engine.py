"""Growth engine.

Advances a plant's continuous ``growth_progress`` and derives its discrete
``GrowthStage`` from it, drains water, and relaxes health toward a
water-dependent target. Every function takes the elapsed span (or ``now``)
explicitly; nothing here reads a clock.

The engine is forgiving: negative spans count as zero and all
levels are clamped, so malformed historical data never makes a garden
unusable.
"""

import logging
import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from garden.config.growth import (
    BASE_GROWTH_RATE,
    BASE_WATER_DEPLETION,
    DEFAULT_WATER_AMOUNT,
    FERTILIZER_HEALTH_BOOST,
    HEALTH_CRITICAL_TARGET,
    HEALTH_RELAXATION,
    HEALTH_TARGET_BANDS,
    LEVEL_MAX,
    LEVEL_MIN,
    NEEDS_WATER_THRESHOLD,
    SEASON_DEPLETION_FACTORS,
    SEASON_GROWTH_FACTORS,
    SECONDS_PER_DAY,
    STAGE_DEPLETION_FACTORS,
    WATER_CRITICAL_FACTOR,
    WATER_GOOD_FACTOR,
    WATER_LOW_FACTOR,
    WATER_OPTIMAL_FACTOR,
    WATER_OPTIMAL_MAX,
    WATER_OPTIMAL_MIN,
    WATER_OVERWATERED_FACTOR,
)
from garden.models import GrowthStage, Plant, Season
from garden.skills.ledger import growth_multiplier

logger = logging.getLogger(__name__)

MAX_STAGE = max(GrowthStage)


@dataclass(frozen=True)
class GrowthResult:
    """Outcome of advancing one plant.

    Attributes:
        stages_advanced: Growth progress added (fractional stages)
        new_stage: The stage reached, if the plant moved to a later stage
        bloomed: True when this advance made the plant mature
    """

    stages_advanced: float
    new_stage: Optional[GrowthStage] = None
    bloomed: bool = False


def _clamp_level(value: float) -> float:
    if math.isnan(value):
        return LEVEL_MIN
    return max(LEVEL_MIN, min(LEVEL_MAX, value))


def elapsed_days(delta: timedelta) -> float:
    """Convert a span to fractional days; negative spans count as zero."""
    return max(0.0, delta.total_seconds() / SECONDS_PER_DAY)


def water_factor(water_level: float) -> float:
    """Growth multiplier for a water level; best in the 60-80 band."""
    if WATER_OPTIMAL_MIN <= water_level <= WATER_OPTIMAL_MAX:
        return WATER_OPTIMAL_FACTOR
    if 40.0 <= water_level < WATER_OPTIMAL_MIN:
        return WATER_GOOD_FACTOR
    if WATER_OPTIMAL_MAX < water_level < 90.0:
        return WATER_GOOD_FACTOR
    if 20.0 <= water_level < 40.0:
        return WATER_LOW_FACTOR
    if water_level >= 90.0:
        return WATER_OVERWATERED_FACTOR
    return WATER_CRITICAL_FACTOR


def growth_rate(plant: Plant, season: Season, skill_level: int) -> float:
    """Stages per day for ``plant`` under the given season and skill level."""
    rate = BASE_GROWTH_RATE
    rate *= SEASON_GROWTH_FACTORS.get(season.value, 1.0)
    rate *= water_factor(plant.water_level)
    rate *= _clamp_level(plant.health) / 100.0
    rate *= growth_multiplier(skill_level)
    return max(0.0, rate)


def advance(plant: Plant, delta: timedelta, season: Season, skill_level: int) -> GrowthResult:
    """Grow ``plant`` by the progress accumulated over ``delta``.

    The stage is recomputed as ``floor(growth_progress)`` capped at mature,
    and never moves backwards.
    """
    stages_advanced = growth_rate(plant, season, skill_level) * elapsed_days(delta)
    plant.growth_progress = max(0.0, plant.growth_progress) + stages_advanced

    old_stage = plant.stage
    computed = GrowthStage(min(int(math.floor(plant.growth_progress)), int(MAX_STAGE)))
    if computed <= old_stage:
        return GrowthResult(stages_advanced=stages_advanced)

    plant.stage = computed
    bloomed = computed == GrowthStage.MATURE
    logger.debug(
        "Plant %s grew %s -> %s (progress %.3f)",
        plant.id,
        old_stage.label,
        computed.label,
        plant.growth_progress,
    )
    return GrowthResult(stages_advanced=stages_advanced, new_stage=computed, bloomed=bloomed)


def deplete_water(plant: Plant, delta: timedelta, season: Season) -> float:
    """Drain water used over ``delta``; returns the amount lost.

    Bigger plants drink more, summer speeds evaporation and winter slows it.
    """
    rate = BASE_WATER_DEPLETION
    rate *= SEASON_DEPLETION_FACTORS.get(season.value, 1.0)
    rate *= STAGE_DEPLETION_FACTORS[int(plant.stage)]

    before = _clamp_level(plant.water_level)
    plant.water_level = max(LEVEL_MIN, before - rate * elapsed_days(delta))
    return before - plant.water_level


def target_health(water_level: float) -> float:
    for min_water, health in HEALTH_TARGET_BANDS:
        if water_level >= min_water:
            return health
    return HEALTH_CRITICAL_TARGET


def update_health(plant: Plant) -> None:
    """Move health 10% of the way toward the target for the current water level."""
    current = _clamp_level(plant.health)
    gap = target_health(plant.water_level) - current
    plant.health = _clamp_level(current + gap * HEALTH_RELAXATION)


def water_plant(plant: Plant, now: datetime, amount: float = DEFAULT_WATER_AMOUNT) -> None:
    """Add water (capped at 100) and stamp ``last_watered``."""
    plant.water_level = _clamp_level(_clamp_level(plant.water_level) + max(0.0, amount))
    plant.last_watered = now


def fertilize_plant(plant: Plant) -> None:
    """Give an immediate health boost, capped at 100."""
    plant.health = _clamp_level(_clamp_level(plant.health) + FERTILIZER_HEALTH_BOOST)


def needs_water(plant: Plant) -> bool:
    return plant.water_level < NEEDS_WATER_THRESHOLD


def plant_condition(plant: Plant) -> str:
    """Short label for a plant's health."""
    if plant.health >= 80:
        return "thriving"
    if plant.health >= 60:
        return "healthy"
    if plant.health >= 40:
        return "stressed"
    return "struggling"
