#!/usr/bin/env python3
# ABOUTME: Persistence for named context presets in a flat key-value blob.
# ABOUTME: The whole preset list is read and written at once under a fixed key.

import json
import logging
import os
import shutil
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

from quadslator.errors import StorageReadError, StorageWriteError
from quadslator.models import SavedContext

logger = logging.getLogger(__name__)

STORAGE_KEY = "quadslator_contexts"


def decode_presets(raw: Any) -> List[SavedContext]:
    """Turn the stored value into presets.

    Raises:
        ValueError: If the value is not a list of {name, value} records
    """
    if not isinstance(raw, list):
        raise ValueError(f"Expected a list of presets, got {type(raw).__name__}")
    return [SavedContext.from_dict(record) for record in raw]


def encode_presets(presets: Sequence[SavedContext]) -> List[Dict[str, str]]:
    return [preset.to_dict() for preset in presets]


class PresetStore(ABC):
    """Reads and writes the complete list of saved context presets."""

    @abstractmethod
    def load(self) -> Tuple[List[SavedContext], Optional[StorageReadError]]:
        """Read the persisted presets.

        Returns:
            A tuple containing:
                - The presets, or an empty list if absent or malformed
                - A StorageReadError if the content was malformed, otherwise None
        """
        pass

    @abstractmethod
    def save_all(self, presets: Sequence[SavedContext]) -> None:
        """Replace the persisted presets with the given list.

        Raises:
            StorageWriteError: If the presets cannot be written
        """
        pass


class MemoryPresetStore(PresetStore):
    """Keeps the serialized preset blob in memory."""

    def __init__(self, blob: Optional[str] = None):
        self.blob = blob

    def load(self) -> Tuple[List[SavedContext], Optional[StorageReadError]]:
        if self.blob is None:
            return [], None
        try:
            return decode_presets(json.loads(self.blob)), None
        except ValueError as e:
            return [], StorageReadError(f"Could not read saved contexts: {e}")

    def save_all(self, presets: Sequence[SavedContext]) -> None:
        self.blob = json.dumps(encode_presets(presets), ensure_ascii=False)


class JsonFilePresetStore(PresetStore):
    """Stores presets under a fixed key of a JSON object file.

    The file is a flat key-value map so other settings can live beside the
    presets. Writes go to a temporary file in the same directory which is then
    renamed over the original, so readers never see a partial write.
    """

    def __init__(self, path: Path, key: str = STORAGE_KEY):
        self.path = Path(path)
        self.key = key

    def _read_blob(self) -> Dict[str, Any]:
        with open(self.path, "r", encoding="utf-8") as file:
            data = json.loads(file.read())
        if not isinstance(data, dict):
            raise ValueError(f"Storage file must hold a JSON object, got {type(data).__name__}")
        return data

    def load(self) -> Tuple[List[SavedContext], Optional[StorageReadError]]:
        if not self.path.exists():
            return [], None

        try:
            blob = self._read_blob()
            if self.key not in blob:
                return [], None
            return decode_presets(blob[self.key]), None
        except (OSError, ValueError) as e:
            # json.JSONDecodeError is a ValueError
            logger.warning("Failed to read presets from %s: %s", self.path, e)
            return [], StorageReadError(f"Could not load saved contexts from {self.path}: {e}")

    def save_all(self, presets: Sequence[SavedContext]) -> None:
        try:
            blob = self._read_blob() if self.path.exists() else {}
        except (OSError, ValueError):
            # A corrupt file is replaced rather than blocking every save
            blob = {}
        blob[self.key] = encode_presets(presets)

        tmp_path = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                dir=str(self.path.parent), prefix=f".{self.path.name}.", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as file:
                file.write(json.dumps(blob, indent=2, ensure_ascii=False))
            if self.path.exists():
                shutil.copymode(self.path, tmp_path)
            os.replace(tmp_path, self.path)
        except OSError as e:
            if tmp_path and os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise StorageWriteError(f"Could not save contexts to {self.path}: {e}") from e

        logger.debug("Saved %d presets to %s", len(presets), self.path)
