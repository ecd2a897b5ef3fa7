"""In-process repository, mainly for tests and embedding."""

import logging
from typing import Any, Dict, Optional

from garden.models import GardenState
from garden.serialization import state_from_record, state_to_record

logger = logging.getLogger(__name__)


class InMemoryRepository:
    """Keeps the last saved garden as a serialized record.

    Going through the record on every save and load means callers never
    share mutable objects with the stored copy, exactly as with a real
    backing store.
    """

    def __init__(self) -> None:
        self._record: Optional[Dict[str, Any]] = None
        self.save_count = 0

    def load(self) -> Optional[GardenState]:
        if self._record is None:
            return None
        return state_from_record(self._record)

    def save(self, state: GardenState) -> None:
        self._record = state_to_record(state)
        self.save_count += 1
        logger.debug("Saved garden %s in memory", state.id)

    def clear(self) -> None:
        self._record = None
