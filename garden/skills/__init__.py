"""Gardening skill progression."""

from garden.skills.ledger import (
    RarityOdds,
    SkillGain,
    SkillTracker,
    determine_rarity,
    growth_multiplier,
    rarity_distribution,
    skill_tier,
    skill_unlocks,
    xp_for_next_level,
)

__all__ = [
    "RarityOdds",
    "SkillGain",
    "SkillTracker",
    "determine_rarity",
    "growth_multiplier",
    "rarity_distribution",
    "skill_tier",
    "skill_unlocks",
    "xp_for_next_level",
]
