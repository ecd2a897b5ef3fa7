"""JSON file repository.

The garden is stored as a single JSON document encoded with orjson. Writes
go to a sibling temporary file that is then moved over the target with
``os.replace``, so a crash mid-write leaves the previous save intact.
"""

import logging
import os
from contextlib import suppress
from pathlib import Path
from typing import Optional, Union

import orjson

from garden.config.store import DEFAULT_SAVE_FILE
from garden.exceptions import PersistenceError
from garden.models import GardenState
from garden.serialization import state_from_record, state_to_record

logger = logging.getLogger(__name__)


class JsonFileRepository:
    """Stores one garden in a JSON file."""

    def __init__(self, path: Union[str, Path] = DEFAULT_SAVE_FILE) -> None:
        self.path = Path(path)

    def load(self) -> Optional[GardenState]:
        """Read the garden file.

        Returns:
            The saved garden, or None if the file does not exist

        Raises:
            PersistenceError: If the file exists but cannot be read or decoded
        """
        if not self.path.exists():
            logger.info("No saved garden at %s", self.path)
            return None

        try:
            record = orjson.loads(self.path.read_bytes())
        except (OSError, orjson.JSONDecodeError) as e:
            logger.error("Failed to load garden from %s: %s", self.path, e, exc_info=True)
            raise PersistenceError(f"Failed to load garden from {self.path}: {e}") from e

        try:
            state = state_from_record(record)
        except PersistenceError as e:
            logger.error("Invalid garden record in %s: %s", self.path, e, exc_info=True)
            raise
        logger.debug(
            "Loaded garden %s from %s (%d plants)", state.id, self.path.name, len(state.plants)
        )
        return state

    def save(self, state: GardenState) -> None:
        """Atomically write the garden file.

        Raises:
            PersistenceError: If the file could not be written
        """
        payload = orjson.dumps(state_to_record(state), option=orjson.OPT_INDENT_2)
        tmp_path = self.path.with_name(f".{self.path.name}.tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_bytes(payload)
            os.replace(tmp_path, self.path)
        except OSError as e:
            logger.error("Failed to save garden %s to %s: %s", state.id, self.path, e, exc_info=True)
            with suppress(OSError):
                tmp_path.unlink(missing_ok=True)
            raise PersistenceError(f"Failed to save garden to {self.path}: {e}") from e

        logger.debug("Saved garden %s to %s (%d bytes)", state.id, self.path.name, len(payload))

    def clear(self) -> None:
        """Delete the saved garden, if any."""
        self.path.unlink(missing_ok=True)

    def export_json(self, destination: Union[str, Path]) -> Path:
        """Copy the saved garden to ``destination`` as a backup.

        Raises:
            PersistenceError: If there is no saved garden or the copy fails
        """
        destination = Path(destination)
        if not self.path.exists():
            raise PersistenceError(f"No saved garden at {self.path} to export")
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            destination.write_bytes(self.path.read_bytes())
        except OSError as e:
            logger.error("Failed to export garden to %s: %s", destination, e, exc_info=True)
            raise PersistenceError(f"Failed to export garden to {destination}: {e}") from e

        logger.info("Exported garden from %s to %s", self.path, destination)
        return destination

    def import_json(self, source: Union[str, Path]) -> GardenState:
        """Replace the saved garden with a backup read from ``source``.

        The backup is decoded and validated before anything is written, so a
        bad file leaves the current save untouched.

        Raises:
            PersistenceError: If the backup cannot be read, decoded or saved
        """
        source = Path(source)
        try:
            record = orjson.loads(source.read_bytes())
        except (OSError, orjson.JSONDecodeError) as e:
            logger.error("Failed to import garden from %s: %s", source, e, exc_info=True)
            raise PersistenceError(f"Failed to import garden from {source}: {e}") from e
        try:
            state = state_from_record(record)
        except PersistenceError as e:
            logger.error("Invalid garden record in %s: %s", source, e, exc_info=True)
            raise

        self.save(state)
        logger.info("Imported garden %s from %s", state.id, source)
        return state
