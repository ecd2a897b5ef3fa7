"""Domain event definitions delivered to the UI layer.

Events are frozen dataclasses: facts about something that already happened,
carrying everything a listener needs without calling back into the store.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from garden.models import Memory, Season


@dataclass(frozen=True)
class MemoryRecorded:
    """A new entry was added to the garden's memory journal."""

    memory: Memory


@dataclass(frozen=True)
class PlantBloomed:
    """A plant reached the mature stage.

    Attributes:
        plant_id: ID of the plant that bloomed
        name: Display name of the plant
        occurred_at: Observation time at which the bloom was detected
    """

    plant_id: str
    name: str
    occurred_at: datetime


@dataclass(frozen=True)
class SeasonChanged:
    previous: Season
    current: Season
    occurred_at: datetime


@dataclass(frozen=True)
class SkillLeveledUp:
    previous_level: int
    new_level: int
    tier: str


@dataclass(frozen=True)
class AchievementUnlocked:
    achievement_id: str
    name: str
    occurred_at: datetime
