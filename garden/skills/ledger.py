"""Skill ledger: experience, levels and the multipliers derived from them.

Only ``level``, ``experience`` and ``total_actions`` are stored on the
``SkillLedger`` record. Growth multipliers and rarity odds are recomputed
from the level every time they are needed, so a level-up mid-session is
picked up immediately.
"""

import logging
import random
from dataclasses import dataclass, field
from typing import List, Optional

from garden.config.skill import (
    ACTION_XP_RANGES,
    DEFAULT_SKILL_TIER,
    GROWTH_BONUS_PER_LEVEL,
    LEGENDARY_BASE,
    LEGENDARY_SPREAD,
    MAX_LEVEL,
    RARE_BASE,
    RARE_SPREAD,
    SKILL_TIERS,
    SKILL_UNLOCKS,
    UNCOMMON_BASE,
    UNCOMMON_SPREAD,
    XP_BASE_THRESHOLD,
    XP_THRESHOLD_INCREMENT,
)
from garden.models import GardeningAction, Rarity, SkillLedger
from garden.util.rng import require_rng_param

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SkillGain:
    """Outcome of a single experience grant.

    Attributes:
        leveled_up: Whether at least one level was gained
        xp_gained: Experience rolled for the action
        levels_gained: Number of thresholds crossed by this grant
        new_level: Level after the grant
        unlocks: Unlock messages for every level reached by this grant
    """

    leveled_up: bool
    xp_gained: int
    levels_gained: int = 0
    new_level: int = 1
    unlocks: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class RarityOdds:
    uncommon: float
    rare: float
    legendary: float

    @property
    def common(self) -> float:
        return max(0.0, 1.0 - self.uncommon - self.rare - self.legendary)


def xp_for_next_level(level: int) -> int:
    """Experience needed to go from ``level`` to ``level + 1``.

    A linear ramp: 100 XP for level 1, 110 for level 2, and so on.
    """
    return XP_BASE_THRESHOLD + (max(1, level) - 1) * XP_THRESHOLD_INCREMENT


def growth_multiplier(level: int) -> float:
    """Growth speed bonus for a skill level (1.0x at level 1)."""
    clamped = max(1, min(MAX_LEVEL, level))
    return 1.0 + (clamped - 1) * GROWTH_BONUS_PER_LEVEL


def rarity_distribution(level: int) -> RarityOdds:
    """Chance of each non-common rarity at ``level``; common is the remainder."""
    skill_bonus = max(0, min(MAX_LEVEL, level)) / MAX_LEVEL
    return RarityOdds(
        uncommon=UNCOMMON_BASE + skill_bonus * UNCOMMON_SPREAD,
        rare=RARE_BASE + skill_bonus * RARE_SPREAD,
        legendary=LEGENDARY_BASE + skill_bonus * LEGENDARY_SPREAD,
    )


def determine_rarity(level: int, rng: random.Random) -> Rarity:
    """Roll a rarity tier weighted by skill level."""
    odds = rarity_distribution(level)
    roll = rng.random()

    if roll < odds.legendary:
        return Rarity.LEGENDARY
    if roll < odds.legendary + odds.rare:
        return Rarity.RARE
    if roll < odds.legendary + odds.rare + odds.uncommon:
        return Rarity.UNCOMMON
    return Rarity.COMMON


def skill_tier(level: int) -> str:
    for min_level, name in SKILL_TIERS:
        if level >= min_level:
            return name
    return DEFAULT_SKILL_TIER


def skill_unlocks(level: int) -> List[str]:
    """Unlock messages for reaching exactly ``level``."""
    message = SKILL_UNLOCKS.get(level)
    return [message] if message else []


class SkillTracker:
    """Grants experience for gardening actions using an injected RNG."""

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self._rng = require_rng_param(rng, "SkillTracker.__init__")

    def roll_experience(self, action: GardeningAction) -> int:
        low, high = ACTION_XP_RANGES[action.value]
        return self._rng.randint(low, high)

    def grant_experience(self, ledger: SkillLedger, action: GardeningAction) -> SkillGain:
        """Add experience for ``action`` and roll any overflow into level-ups.

        After this returns, ``ledger.experience < xp_for_next_level(ledger.level)``
        holds, including at the level cap where surplus experience is clamped.
        """
        xp_gained = self.roll_experience(action)
        ledger.experience += xp_gained
        ledger.total_actions += 1

        levels_gained = 0
        unlocks: List[str] = []
        while ledger.level < MAX_LEVEL and ledger.experience >= xp_for_next_level(ledger.level):
            ledger.experience -= xp_for_next_level(ledger.level)
            ledger.level += 1
            levels_gained += 1
            unlocks.extend(skill_unlocks(ledger.level))

        if ledger.level >= MAX_LEVEL:
            ledger.level = MAX_LEVEL
            ledger.experience = min(ledger.experience, xp_for_next_level(MAX_LEVEL) - 1)

        if levels_gained:
            logger.info(
                "Skill level up: %d -> %d (%s)",
                ledger.level - levels_gained,
                ledger.level,
                skill_tier(ledger.level),
            )

        return SkillGain(
            leveled_up=levels_gained > 0,
            xp_gained=xp_gained,
            levels_gained=levels_gained,
            new_level=ledger.level,
            unlocks=unlocks,
        )
