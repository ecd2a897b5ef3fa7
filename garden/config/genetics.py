"""Genetics configuration constants."""

# Mutation chance scales linearly with skill level: 2% at level 0, 10% at level 100
MUTATION_RATE_BASE = 0.02
MUTATION_RATE_SKILL_SPREAD = 0.08

# Rank given to alleles missing from the dominance table
UNKNOWN_ALLELE_RANK = 1

# Allele options and dominance ranks per trait (higher rank = more dominant)
COLOR_DOMINANCE = {
    "red": 4,
    "pink": 3,
    "white": 1,
    "yellow": 2,
    "orange": 3,
    "purple": 3,
    "blue": 1,
    "lavender": 2,
}

BLOOM_SIZE_DOMINANCE = {
    "tiny": 1,
    "small": 1,
    "medium": 2,
    "large": 3,
    "huge": 4,
}

HEIGHT_DOMINANCE = {
    "dwarf": 1,
    "short": 1,
    "medium": 2,
    "tall": 3,
    "towering": 4,
}

BLOOM_PATTERN_DOMINANCE = {
    "single": 1,
    "double": 2,
    "star": 3,
    "cup": 2,
    "ruffled": 3,
    "spiral": 4,
    "fractal": 4,
}

FRAGRANCE_DOMINANCE = {
    "none": 1,
    "subtle": 1,
    "sweet": 2,
    "spicy": 3,
    "citrus": 3,
    "floral": 3,
    "exotic": 4,
}

# Words used when naming cross-bred seeds
HYBRID_SUFFIXES = ("Hybrid", "Cross", "Beauty", "Dream", "Whisper", "Star")
