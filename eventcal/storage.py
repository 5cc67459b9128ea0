"""
Named-slot storage backends (the local storage the event list lives in).
Supports FileStorage (durable, one JSON file per slot) and MemoryStorage
(in-process, with optional quota and disable switches for failure testing).
"""

import os
import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional

from eventcal.errors import StorageError
from eventcal.logging_helper import Log

_SLOT_NAME_RE = re.compile(r"^[A-Za-z0-9_.-]+$")


class SlotStorage(ABC):
    """Abstract base class for key/value slot storage."""

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """
        Read a slot.

        Returns:
            The stored string, or None if the slot does not exist

        Raises:
            StorageError: if the backend cannot be read
        """
        pass

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """
        Replace a slot's value. Either the old or the new value survives a failure.

        Raises:
            StorageError: if the value cannot be written
        """
        pass


class MemoryStorage(SlotStorage):
    """
    In-process storage.
    quota_bytes and disabled mimic a browser refusing writes.
    """

    def __init__(self, initial: Optional[Dict[str, str]] = None, quota_bytes: Optional[int] = None):
        self._slots: Dict[str, str] = dict(initial or {})
        self.quota_bytes = quota_bytes
        self.disabled = False

    def get_item(self, key: str) -> Optional[str]:
        if self.disabled:
            raise StorageError("Storage is disabled")
        return self._slots.get(key)

    def set_item(self, key: str, value: str) -> None:
        if self.disabled:
            raise StorageError("Storage is disabled")
        if self.quota_bytes is not None:
            others = sum(len(v.encode("utf-8")) for k, v in self._slots.items() if k != key)
            if others + len(value.encode("utf-8")) > self.quota_bytes:
                raise StorageError(f"Storage quota exceeded ({self.quota_bytes} bytes)")
        self._slots[key] = value


class FileStorage(SlotStorage):
    """Stores each slot as <directory>/<key>.json."""

    def __init__(self, directory):
        self.directory = Path(directory)

    def _slot_path(self, key: str) -> Path:
        if not _SLOT_NAME_RE.match(key):
            raise StorageError(f"Invalid slot name: {key!r}")
        return self.directory / f"{key}.json"

    def get_item(self, key: str) -> Optional[str]:
        path = self._slot_path(key)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as err:
            raise StorageError(f"Failed to read slot file ({path}): {err}") from err

    def set_item(self, key: str, value: str) -> None:
        path = self._slot_path(key)
        tmp = path.with_suffix(path.suffix + ".tmp")
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            with tmp.open("w", encoding="utf-8") as f:
                f.write(value)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp, path)
        except OSError as err:
            try:
                tmp.unlink(missing_ok=True)
            except OSError:
                Log.warn(f"Could not remove temporary slot file {tmp}")
            raise StorageError(f"Failed to write slot file ({path}): {err}") from err
