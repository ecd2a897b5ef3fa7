"""Events module: typed garden events and the EventBus that dispatches them."""

from garden.events.domain_events import (
    AchievementUnlocked,
    MemoryRecorded,
    PlantBloomed,
    SeasonChanged,
    SkillLeveledUp,
)
from garden.events.event_bus import EventBus

__all__ = [
    "AchievementUnlocked",
    "EventBus",
    "MemoryRecorded",
    "PlantBloomed",
    "SeasonChanged",
    "SkillLeveledUp",
]
