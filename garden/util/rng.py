"""RNG utilities for deterministic simulation.

Engines take their ``random.Random`` through the constructor. These helpers
fail loudly when one is missing rather than silently creating an unseeded
fallback.
"""

import random
from typing import Optional


class MissingRNGError(RuntimeError):
    """Raised when an RNG is required but not available.

    This error indicates a bug in the garden setup - every engine should be
    handed the store's RNG when it is constructed.
    """

    pass


def require_rng_param(rng: Optional[random.Random], context: str) -> random.Random:
    """Validate that an RNG parameter was provided, failing loudly if not.

    Args:
        rng: The RNG that should have been provided
        context: Description of where this is called from (for error messages)

    Returns:
        The validated RNG

    Raises:
        MissingRNGError: If rng is None

    Example:
        def __init__(self, rng: Optional[random.Random] = None):
            self._rng = require_rng_param(rng, "GeneticsEngine.__init__")
    """
    if rng is None:
        raise MissingRNGError(f"RNG required: {context}. Pass the garden RNG explicitly.")
    return rng
