"""Garden persistence: the repository contract and its implementations."""

from garden.storage.base import GardenRepository, create_new_garden
from garden.storage.json_store import JsonFileRepository
from garden.storage.memory_store import InMemoryRepository

__all__ = [
    "GardenRepository",
    "InMemoryRepository",
    "JsonFileRepository",
    "create_new_garden",
]
