"""Device-local key/value storage."""

import errno
import json
import logging
import os
import re
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from snapcal.domain.errors import DeviceStorageFullError

ENTRIES_KEY = "snapcal_data_v1"
SUMMARIES_KEY = "snapcal_summaries_v1"
SETTINGS_KEY = "snapcal_settings_v1"
PROFILE_KEY = "snapcal_profile_v1"
ONBOARDING_KEY = "snapcal_onboarding_v1"
MODE_PREFERENCE_KEY = "snapcal_mode_preference"
SESSION_KEY = "snapcal_mock_session"

DATA_KEYS = (ENTRIES_KEY, SUMMARIES_KEY, SETTINGS_KEY, PROFILE_KEY)

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")
_TMP_PREFIX = ".tmp-"
_FULL_ERRNOS = {errno.ENOSPC, getattr(errno, "EDQUOT", errno.ENOSPC)}

_logger = logging.getLogger(__name__)


class StorageQuotaError(Exception):
    """Raised when a write does not fit in the device store."""


class KeyValueStore(Protocol):
    """Flat key to string store on the device."""

    def get_item(self, key: str) -> str | None:
        """Return the stored string, if any."""

    def set_item(self, key: str, value: str) -> None:
        """Store a string, replacing any previous value."""

    def remove_item(self, key: str) -> None:
        """Remove a key if present."""

    def keys(self) -> list[str]:
        """Return all stored keys."""


@dataclass
class FileKeyValueStore(KeyValueStore):
    """Key/value store keeping one file per key under a directory.

    Writes go to a temporary file that replaces the old one, so a failed
    write leaves the previous value untouched. The total size of all values
    is capped at ``quota_bytes``.
    """

    root: Path
    quota_bytes: int = 5 * 1024 * 1024

    def __post_init__(self) -> None:
        self.root = Path(self.root)
        self.root.mkdir(parents=True, exist_ok=True)

    def get_item(self, key: str) -> str | None:
        """Return the stored string, if any."""
        path = self._path(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    def set_item(self, key: str, value: str) -> None:
        """Store a string atomically within the quota."""
        path = self._path(key)
        encoded = value.encode("utf-8")
        used = self._used_bytes(exclude=key)
        if used + len(encoded) > self.quota_bytes:
            raise StorageQuotaError(
                f"Writing {key} needs {len(encoded)} bytes; "
                f"{self.quota_bytes - used} of {self.quota_bytes} available"
            )
        fd, tmp_name = tempfile.mkstemp(prefix=_TMP_PREFIX, dir=self.root)
        try:
            with os.fdopen(fd, "wb") as handle:
                handle.write(encoded)
            Path(tmp_name).replace(path)
        except OSError as exc:
            Path(tmp_name).unlink(missing_ok=True)
            if exc.errno in _FULL_ERRNOS:
                raise StorageQuotaError(str(exc)) from exc
            raise

    def remove_item(self, key: str) -> None:
        """Remove a key if present."""
        self._path(key).unlink(missing_ok=True)

    def keys(self) -> list[str]:
        """Return all stored keys."""
        return sorted(
            path.name
            for path in self.root.iterdir()
            if path.is_file() and not path.name.startswith(_TMP_PREFIX)
        )

    def _path(self, key: str) -> Path:
        if not _KEY_PATTERN.match(key):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self.root / key

    def _used_bytes(self, exclude: str) -> int:
        return sum(
            (self.root / key).stat().st_size for key in self.keys() if key != exclude
        )


def read_json(store: KeyValueStore, key: str, default: object) -> object:
    """Read a JSON value, treating missing or corrupt data as ``default``."""
    raw = store.get_item(key)
    if raw is None:
        return default
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        _logger.warning("Ignoring corrupt local data under %s", key)
        return default


def write_json(store: KeyValueStore, key: str, value: object) -> None:
    """Write a JSON value, surfacing capacity exhaustion as a typed error."""
    try:
        store.set_item(key, json.dumps(value))
    except StorageQuotaError as exc:
        _logger.warning("Local storage full while writing %s: %s", key, exc)
        raise DeviceStorageFullError() from exc
