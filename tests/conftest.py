"""Pytest configuration and fixtures for garden tests."""

import random
from datetime import datetime, timezone

import pytest

from garden.config import GardenConfig
from garden.events import EventBus
from garden.models import GeneticTrait, GrowthStage, Plant, PlantGenetics, Position
from garden.storage import InMemoryRepository
from garden.store import GardenStore
from garden.util.clock import ManualClock

START = datetime(2024, 3, 20, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def seeded_rng():
    """Provide a deterministic RNG for tests."""
    return random.Random(42)


@pytest.fixture
def manual_clock():
    return ManualClock(START)


@pytest.fixture
def repository():
    return InMemoryRepository()


@pytest.fixture
def event_bus():
    return EventBus()


@pytest.fixture
def store(repository, manual_clock, seeded_rng, event_bus):
    """A store over an initialized in-memory garden."""
    garden_store = GardenStore(
        repository,
        clock=manual_clock,
        rng=seeded_rng,
        config=GardenConfig(),
        event_bus=event_bus,
    )
    garden_store.initialize()
    return garden_store


def make_trait(dominant, recessive=None, expressed=None):
    recessive = dominant if recessive is None else recessive
    return GeneticTrait(dominant, recessive, expressed or dominant)


def make_genetics(color=("pink", "white"), **overrides):
    """Genetics with sensible defaults; each override is a (dominant, recessive) pair."""
    pairs = {
        "color": color,
        "bloom_size": ("medium", "small"),
        "height": ("medium", "short"),
        "bloom_pattern": ("star", "cup"),
        "fragrance": ("sweet", "subtle"),
    }
    pairs.update(overrides)
    return PlantGenetics(**{name: make_trait(*pair) for name, pair in pairs.items()})


def make_plant(plant_id="plant-1", x=0, y=0, stage=GrowthStage.SEED, genetics=None, **fields):
    progress = fields.pop("growth_progress", float(stage))
    return Plant(
        id=plant_id,
        name=fields.pop("name", f"Plant {plant_id}"),
        species=fields.pop("species", "Morning Star Rose"),
        position=Position(x, y),
        genetics=genetics or make_genetics(),
        planted_at=fields.pop("planted_at", START),
        last_watered=fields.pop("last_watered", START),
        last_update=fields.pop("last_update", START),
        stage=stage,
        growth_progress=progress,
        **fields,
    )


@pytest.fixture
def plant_factory():
    return make_plant


@pytest.fixture
def genetics_factory():
    return make_genetics
