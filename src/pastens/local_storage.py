"""
Key-value storage backends for client-local persistence.

Values are strings, as in a browser's localStorage. ``JsonFileStorage``
keeps all keys in one JSON object on disk and replaces the file
atomically on every write.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Optional, Protocol, runtime_checkable

from .exceptions import PersistenceError


@runtime_checkable
class KeyValueStorage(Protocol):
    """Minimal string-to-string storage interface."""

    def get_item(self, key: str) -> Optional[str]:
        ...

    def set_item(self, key: str, value: str) -> None:
        ...

    def remove_item(self, key: str) -> None:
        ...


class MemoryStorage:
    """In-process storage, used for tests and dry runs."""

    def __init__(self, initial: Optional[dict[str, str]] = None) -> None:
        self._items: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


class JsonFileStorage:
    """
    File-backed storage.

    The file holds a single JSON object mapping keys to string values.
    A missing file reads as empty storage.
    """

    def __init__(self, file_path: Path) -> None:
        """
        Initialize the storage.

        Args:
            file_path: Path to the storage file (JSON format)
        """
        self._file_path = file_path

    @property
    def file_path(self) -> Path:
        return self._file_path

    def _read_all(self) -> dict[str, str]:
        """
        Read the full key-value mapping.

        Raises:
            PersistenceError: If the file cannot be read or is not a JSON object
        """
        if not self._file_path.exists():
            return {}

        try:
            with open(self._file_path, "r", encoding="utf-8") as f:
                raw_data = json.load(f)
        except json.JSONDecodeError as e:
            raise PersistenceError(
                code="parse_error",
                message=f"Failed to parse storage file: {e}",
                details={"file_path": str(self._file_path)},
            )
        except OSError as e:
            raise PersistenceError(
                code="io_error",
                message=f"Failed to read storage file: {e}",
                details={"file_path": str(self._file_path)},
            )

        if not isinstance(raw_data, dict):
            raise PersistenceError(
                code="parse_error",
                message="Storage file does not contain a JSON object",
                details={"file_path": str(self._file_path)},
            )

        return {str(k): v for k, v in raw_data.items() if isinstance(v, str)}

    def _write_all(self, items: dict[str, str]) -> None:
        """
        Replace the storage file with ``items``.

        Raises:
            PersistenceError: If the file cannot be written
        """
        try:
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=".storage-", suffix=".tmp", dir=self._file_path.parent
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(items, f, indent=2, sort_keys=True, ensure_ascii=False)
                os.replace(tmp_name, self._file_path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise PersistenceError(
                code="io_error",
                message=f"Failed to write storage file: {e}",
                details={"file_path": str(self._file_path)},
            )

    def get_item(self, key: str) -> Optional[str]:
        return self._read_all().get(key)

    def set_item(self, key: str, value: str) -> None:
        try:
            items = self._read_all()
        except PersistenceError:
            # An unreadable file is overwritten rather than blocking writes
            items = {}
        items[key] = value
        self._write_all(items)

    def remove_item(self, key: str) -> None:
        items = self._read_all()
        if key in items:
            del items[key]
            self._write_all(items)
