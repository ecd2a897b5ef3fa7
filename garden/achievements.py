"""Garden achievements.

Definitions are declarative: each pairs the persisted ``Achievement`` record
fields with a condition evaluated against the garden after every
observation. Unlocking is one-way.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, List

from garden.config.store import GARDEN_KEEPER_DAYS
from garden.models import Achievement, GardenState, MemoryType, Season

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AchievementDefinition:
    id: str
    name: str
    description: str
    condition: Callable[[GardenState, datetime], bool]

    def new_record(self) -> Achievement:
        return Achievement(id=self.id, name=self.name, description=self.description)


def _has_memory(memory_type: MemoryType) -> Callable[[GardenState, datetime], bool]:
    def condition(state: GardenState, now: datetime) -> bool:
        return any(memory.type == memory_type for memory in state.memories)

    return condition


def _seen_all_seasons(state: GardenState, now: datetime) -> bool:
    return set(state.seasons_seen) >= set(Season)


def _kept_for_days(state: GardenState, now: datetime) -> bool:
    return now - state.created_at >= timedelta(days=GARDEN_KEEPER_DAYS)


ACHIEVEMENT_DEFINITIONS: List[AchievementDefinition] = [
    AchievementDefinition(
        "first-seed", "First Seed", "Plant your first seed", _has_memory(MemoryType.PLANTING)
    ),
    AchievementDefinition(
        "first-bloom", "First Bloom", "Witness your first flower bloom", _has_memory(MemoryType.BLOOM)
    ),
    AchievementDefinition(
        "geneticist", "Geneticist", "Cross-breed two plants", _has_memory(MemoryType.CROSS_BREED)
    ),
    AchievementDefinition(
        "full-cycle", "Full Cycle", "Experience all four seasons", _seen_all_seasons
    ),
    AchievementDefinition(
        "garden-keeper",
        "Garden Keeper",
        f"Maintain garden for {GARDEN_KEEPER_DAYS} days",
        _kept_for_days,
    ),
]


def default_achievements() -> List[Achievement]:
    """Fresh, locked achievement records for a new garden."""
    return [definition.new_record() for definition in ACHIEVEMENT_DEFINITIONS]


def evaluate_achievements(state: GardenState, now: datetime) -> List[Achievement]:
    """Unlock every achievement whose condition now holds.

    Definitions missing from an older save are added before evaluation.

    Returns:
        The achievements unlocked by this call (empty if none)
    """
    by_id = {achievement.id: achievement for achievement in state.achievements}
    unlocked: List[Achievement] = []

    for definition in ACHIEVEMENT_DEFINITIONS:
        record = by_id.get(definition.id)
        if record is None:
            record = definition.new_record()
            state.achievements.append(record)
            by_id[definition.id] = record
        if record.unlocked or not definition.condition(state, now):
            continue
        record.unlocked = True
        record.unlocked_at = now
        unlocked.append(record)
        logger.info("Achievement unlocked: %s", record.name)

    return unlocked
