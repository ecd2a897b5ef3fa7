"""Garden exception hierarchy.

``NotFoundError`` and ``PreconditionFailedError`` are client-facing: they are
raised before any state is mutated and carry a message meant to be shown to
the player verbatim. ``PersistenceError`` wraps storage failures.
"""


class GardenError(Exception):
    """Root of all garden domain exceptions."""


class NotFoundError(GardenError):
    """A seed, plant, or garden does not exist."""


class PreconditionFailedError(GardenError):
    """An action was rejected because the garden is not in a state that allows it."""


class PersistenceError(GardenError):
    """Errors during save / load operations."""


class ConfigurationError(GardenError):
    """Invalid or missing configuration."""
