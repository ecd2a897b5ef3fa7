"""Configuration package for the garden simulation.

Tuning constants are grouped by subsystem (genetics, growth, skill, store).
``GardenConfig`` bundles the knobs that callers are expected to override.
"""

from garden.config.garden_config import GardenConfig

__all__ = ["GardenConfig"]
