"""Lightweight garden configuration helpers."""

import math
import os
from dataclasses import dataclass
from datetime import timedelta
from typing import Mapping, Optional

from garden.config.growth import DEFAULT_WATER_AMOUNT
from garden.config.store import (
    DEFAULT_GARDEN_NAME,
    LAYOUT_HEIGHT,
    LAYOUT_WIDTH,
    SEASON_DURATION_DAYS,
    STARTING_FERTILIZER,
    STARTING_WATER,
)
from garden.exceptions import ConfigurationError


@dataclass
class GardenConfig:
    """Configuration toggles for the garden store.

    Attributes:
        name: Display name given to newly created gardens.
        season_duration: Real time covered by one season.
        layout_width: Number of plot columns.
        layout_height: Number of plot rows.
        default_water_amount: Water added when a caller does not specify an amount.
        starting_water: Water resource for a new garden.
        starting_fertilizer: Fertilizer units for a new garden.
        multi_season_catch_up: Advance every season boundary crossed while the
            garden was unobserved. When False only one season advances per
            observation and the season clock restarts at the observation time.
    """

    name: str = DEFAULT_GARDEN_NAME
    season_duration: timedelta = timedelta(days=SEASON_DURATION_DAYS)
    layout_width: int = LAYOUT_WIDTH
    layout_height: int = LAYOUT_HEIGHT
    default_water_amount: float = DEFAULT_WATER_AMOUNT
    starting_water: float = STARTING_WATER
    starting_fertilizer: int = STARTING_FERTILIZER
    multi_season_catch_up: bool = True

    def __post_init__(self) -> None:
        if self.season_duration <= timedelta(0):
            raise ConfigurationError(f"season_duration must be positive, got {self.season_duration}")
        if self.layout_width <= 0 or self.layout_height <= 0:
            raise ConfigurationError(
                f"layout must be non-empty, got {self.layout_width}x{self.layout_height}"
            )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "GardenConfig":
        """Build a config, applying ``GARDEN_*`` environment overrides."""
        env = os.environ if environ is None else environ
        kwargs = {}

        name = env.get("GARDEN_NAME")
        if name:
            kwargs["name"] = name

        raw_days = env.get("GARDEN_SEASON_DAYS")
        if raw_days:
            try:
                days = float(raw_days)
            except ValueError as e:
                raise ConfigurationError(f"GARDEN_SEASON_DAYS must be a number, got {raw_days!r}") from e
            if not math.isfinite(days):
                raise ConfigurationError(f"GARDEN_SEASON_DAYS must be finite, got {raw_days!r}")
            try:
                kwargs["season_duration"] = timedelta(days=days)
            except (ValueError, OverflowError) as e:
                raise ConfigurationError(f"GARDEN_SEASON_DAYS is out of range: {raw_days!r}") from e

        raw_policy = env.get("GARDEN_MULTI_SEASON")
        if raw_policy:
            kwargs["multi_season_catch_up"] = raw_policy.strip().lower() not in ("0", "false", "no")

        return cls(**kwargs)
