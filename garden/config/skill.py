"""Gardening skill progression constants."""

MAX_LEVEL = 100

# XP needed for level N -> N+1 is BASE + (N - 1) * INCREMENT (linear ramp)
XP_BASE_THRESHOLD = 100
XP_THRESHOLD_INCREMENT = 10

# Growth bonus per level above 1 (1.0x at level 1, ~1.5x at level 100)
GROWTH_BONUS_PER_LEVEL = 0.005

# Inclusive XP ranges per action
ACTION_XP_RANGES = {
    "plant": (3, 6),
    "water": (1, 2),
    "cross-breed": (8, 15),
    "harvest": (4, 7),
    "fertilize": (2, 4),
}

# Rarity odds: base + level / MAX_LEVEL * spread
UNCOMMON_BASE, UNCOMMON_SPREAD = 0.15, 0.15
RARE_BASE, RARE_SPREAD = 0.05, 0.10
LEGENDARY_BASE, LEGENDARY_SPREAD = 0.01, 0.05

SKILL_TIERS = (
    (90, "master gardener"),
    (75, "expert gardener"),
    (50, "skilled gardener"),
    (25, "apprentice gardener"),
)
DEFAULT_SKILL_TIER = "novice gardener"

SKILL_UNLOCKS = {
    10: "New colors available",
    25: "Rare bloom patterns",
    50: "Exotic fragrances",
    75: "Legendary genetics",
    100: "Perfect harmony",
}
