"""Plant growth, water and health over elapsed time."""

from garden.growth.engine import (
    GrowthResult,
    advance,
    deplete_water,
    fertilize_plant,
    growth_rate,
    needs_water,
    plant_condition,
    target_health,
    update_health,
    water_factor,
    water_plant,
)

__all__ = [
    "GrowthResult",
    "advance",
    "deplete_water",
    "fertilize_plant",
    "growth_rate",
    "needs_water",
    "plant_condition",
    "target_health",
    "update_health",
    "water_factor",
    "water_plant",
]
