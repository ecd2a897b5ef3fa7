"""Record identifiers.

IDs are drawn from the garden RNG so a seeded run produces the same IDs
every time.
"""

import random
import uuid


def new_id(prefix: str, rng: random.Random) -> str:
    """Return ``"<prefix>-<12 hex chars>"`` derived from ``rng``."""
    return f"{prefix}-{uuid.UUID(int=rng.getrandbits(128), version=4).hex[:12]}"
