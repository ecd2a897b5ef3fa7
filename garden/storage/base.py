"""Persistence boundary for the garden.

A repository stores exactly one garden as an opaque structured record.
``load()`` returning ``None`` means no garden has been saved yet, which is a
normal state rather than an error.
"""

import random
from datetime import datetime
from typing import Optional, Protocol

from garden.achievements import default_achievements
from garden.config import GardenConfig
from garden.models import GardenState, GeneticTrait, PlantGenetics, Resources, Season, Seed
from garden.util.ids import new_id

STARTER_SPECIES = "Morning Star Rose"

STARTER_GENETICS = PlantGenetics(
    color=GeneticTrait(dominant="pink", recessive="white", expressed="pink"),
    bloom_size=GeneticTrait(dominant="medium", recessive="small", expressed="medium"),
    height=GeneticTrait(dominant="medium", recessive="short", expressed="medium"),
    bloom_pattern=GeneticTrait(dominant="star", recessive="cup", expressed="star"),
    fragrance=GeneticTrait(dominant="sweet", recessive="subtle", expressed="sweet"),
)


class GardenRepository(Protocol):
    """Load/save contract for a single garden."""

    def load(self) -> Optional[GardenState]:
        """Return the saved garden, or None if nothing has been saved.

        Raises:
            PersistenceError: If a saved garden exists but cannot be read
        """
        ...

    def save(self, state: GardenState) -> None:
        """Persist ``state``.

        Raises:
            PersistenceError: If the write did not complete
        """
        ...


def create_new_garden(config: GardenConfig, now: datetime, rng: random.Random) -> GardenState:
    """A fresh spring garden with one starter seed and full resources."""
    starter = Seed(
        id=new_id("seed", rng),
        species=STARTER_SPECIES,
        genetics=STARTER_GENETICS,
        created_at=now,
    )
    return GardenState(
        id=new_id("garden", rng),
        name=config.name,
        created_at=now,
        season=Season.SPRING,
        season_start=now,
        last_update=now,
        resources=Resources(
            water=config.starting_water,
            fertilizer=config.starting_fertilizer,
            seeds=[starter],
        ),
        achievements=default_achievements(),
        seasons_seen=[Season.SPRING],
    )
