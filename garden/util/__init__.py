"""Core utilities for the simulation."""

from garden.util.clock import Clock, ManualClock, SystemClock
from garden.util.enum_utils import coerce_enum
from garden.util.rng import MissingRNGError, require_rng_param

__all__ = [
    "Clock",
    "ManualClock",
    "SystemClock",
    "MissingRNGError",
    "require_rng_param",
    "coerce_enum",
]
