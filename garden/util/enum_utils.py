"""Utilities for working with enums."""

from enum import Enum
from typing import Any, Type, TypeVar

E = TypeVar("E", bound=Enum)


def coerce_enum(enum_cls: Type[E], value: Any, default: E) -> E:
    """Coerce a stored value to an enum instance.

    Handles multiple input types:
    - Enum instances are returned as-is
    - Raw values are looked up by value
    - Strings matching a member name (any case) are looked up by name
    - Anything else falls back to ``default``

    Args:
        enum_cls: The Enum class to coerce to
        value: The value to coerce
        default: Member returned when coercion fails

    Returns:
        An instance of enum_cls
    """
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except (TypeError, ValueError):
        pass
    if isinstance(value, str):
        member = enum_cls.__members__.get(value.upper().replace("-", "_"))
        if member is not None:
            return member
    return default
