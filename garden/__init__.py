"""Eternal Garden: a persistent garden-growth simulator.

Plants grow over real elapsed time, pass their traits on through Mendelian
crossing, and respond to a skill economy that rewards care. The simulation
is pull-based: ``GardenStore`` catches the garden up to "now" on every call.
"""

from garden.config import GardenConfig
from garden.exceptions import (
    ConfigurationError,
    GardenError,
    NotFoundError,
    PersistenceError,
    PreconditionFailedError,
)
from garden.models import (
    GardenState,
    GeneticTrait,
    GrowthStage,
    Memory,
    MemoryType,
    Plant,
    PlantGenetics,
    Position,
    Rarity,
    Season,
    Seed,
    SkillLedger,
    TraitType,
)
from garden.store import ActionResult, GardenStatus, GardenStore, PlantDetails

__all__ = [
    "ActionResult",
    "ConfigurationError",
    "GardenConfig",
    "GardenError",
    "GardenState",
    "GardenStatus",
    "GardenStore",
    "GeneticTrait",
    "GrowthStage",
    "Memory",
    "MemoryType",
    "NotFoundError",
    "PersistenceError",
    "Plant",
    "PlantDetails",
    "PlantGenetics",
    "Position",
    "PreconditionFailedError",
    "Rarity",
    "Season",
    "Seed",
    "SkillLedger",
    "TraitType",
]
