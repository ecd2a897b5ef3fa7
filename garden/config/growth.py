"""Plant growth configuration constants.

Rates are expressed per simulated day; the growth engine converts elapsed
``timedelta`` spans to fractional days before applying them.
"""

SECONDS_PER_DAY = 24 * 60 * 60

# Growth progression
BASE_GROWTH_RATE = 0.5  # Stages per day (2 days per stage under neutral conditions)

SEASON_GROWTH_FACTORS = {
    "spring": 1.3,  # Best growth season
    "summer": 1.0,
    "fall": 0.8,
    "winter": 0.5,
}

# Water level bands (lower bound inclusive) -> growth multiplier
WATER_OPTIMAL_MIN = 60.0
WATER_OPTIMAL_MAX = 80.0
WATER_OPTIMAL_FACTOR = 1.2
WATER_GOOD_FACTOR = 1.0  # 40-60 and 80-90
WATER_LOW_FACTOR = 0.7  # 20-40
WATER_OVERWATERED_FACTOR = 0.8  # >= 90
WATER_CRITICAL_FACTOR = 0.4  # < 20

# Water depletion
BASE_WATER_DEPLETION = 15.0  # Water points lost per day

SEASON_DEPLETION_FACTORS = {
    "spring": 1.0,
    "summer": 1.5,  # Plants drink more in summer
    "fall": 0.8,
    "winter": 0.5,
}

STAGE_DEPLETION_FACTORS = (0.5, 0.7, 0.9, 1.1, 1.3)  # seed .. mature

# Health relaxation toward a water-dependent target
HEALTH_RELAXATION = 0.1  # Fraction of the gap closed per update
HEALTH_TARGET_BANDS = (
    (50.0, 100.0),  # Healthy
    (30.0, 80.0),  # Good
    (15.0, 60.0),  # Stressed
    (5.0, 40.0),  # Poor
)
HEALTH_CRITICAL_TARGET = 20.0

# Care actions
DEFAULT_WATER_AMOUNT = 30.0
FERTILIZER_HEALTH_BOOST = 20.0
NEEDS_WATER_THRESHOLD = 40.0

# Fresh plants
INITIAL_PLANT_HEALTH = 100.0
INITIAL_PLANT_WATER = 80.0  # Start well-watered

LEVEL_MIN = 0.0
LEVEL_MAX = 100.0
