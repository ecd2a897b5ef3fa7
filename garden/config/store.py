"""Garden store configuration constants."""

from pathlib import Path

DEFAULT_GARDEN_NAME = "Eternal Garden"

# One season lasts this many real days
SEASON_DURATION_DAYS = 5

# Plot dimensions; positions are valid for 0 <= x < width, 0 <= y < height
LAYOUT_WIDTH = 20
LAYOUT_HEIGHT = 20

# Starting resources
STARTING_WATER = 100.0
STARTING_FERTILIZER = 10

# Persistence
DEFAULT_SAVE_FILE = Path("data/garden/garden.json")

# Age for the "garden keeper" achievement
GARDEN_KEEPER_DAYS = 30
