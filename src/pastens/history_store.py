"""
Search History Store for previously searched ENS names.

Keeps a bounded, most-recent-first list of normalized names in
client-local storage. Unreadable stored content is treated as an empty
history and never surfaced to the user.
"""

import json
from typing import Callable, Optional

from .audit_logger import AuditLogger
from .exceptions import PersistenceError
from .local_storage import KeyValueStorage
from .name_normalizer import NameNormalizer, same_name


COMPONENT = "history_store"


class SearchHistoryStore:
    """
    Persistent search history.

    Every mutation rewrites the full list under a single storage key, so
    reloading a store over the same storage reproduces the in-memory list
    at the time of the last mutation.
    """

    DEFAULT_KEY = "pastens_search_history"
    DEFAULT_CAPACITY = 10

    def __init__(
        self,
        storage: KeyValueStorage,
        key: str = DEFAULT_KEY,
        capacity: int = DEFAULT_CAPACITY,
        normalizer: Optional[NameNormalizer] = None,
        logger: Optional[AuditLogger] = None,
        on_emptied: Optional[Callable[[], None]] = None,
    ) -> None:
        """
        Initialize the store and restore entries from storage.

        Args:
            storage: Key-value storage backend
            key: Storage key holding the JSON-encoded list
            capacity: Maximum number of entries kept
            normalizer: Name normalizer applied on record
            logger: Optional audit logger
            on_emptied: Called when ``remove`` leaves the history empty
        """
        if capacity < 1:
            raise ValueError("History capacity must be at least 1")

        self._storage = storage
        self._key = key
        self._capacity = capacity
        self._normalizer = normalizer or NameNormalizer()
        self._logger = logger
        self._on_emptied = on_emptied
        self._entries: list[str] = []
        self.load()

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def key(self) -> str:
        return self._key

    def load(self) -> tuple[str, ...]:
        """
        Restore entries from storage.

        Corrupt or mistyped content resets the history to empty.

        Returns:
            The restored entries
        """
        self._entries = self._read_entries()
        return self.list()

    def _read_entries(self) -> list[str]:
        try:
            stored = self._storage.get_item(self._key)
        except PersistenceError as e:
            self._log_corruption("Search history storage is unreadable", e)
            return []

        if not stored:
            return []

        try:
            data = json.loads(stored)
        except json.JSONDecodeError as e:
            self._log_corruption("Failed to parse search history", e)
            return []

        if not isinstance(data, list) or not all(isinstance(item, str) for item in data):
            self._log_corruption("Search history is not a list of names", None)
            return []

        # Re-apply the list invariants in case storage was edited by hand
        entries: list[str] = []
        for item in data:
            if item and not any(same_name(item, existing) for existing in entries):
                entries.append(item)
        return entries[: self._capacity]

    def list(self) -> tuple[str, ...]:
        """Return the entries, most recent first."""
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, str):
            return False
        return any(same_name(name, entry) for entry in self._entries)

    def record(self, term: str) -> tuple[str, ...]:
        """
        Promote ``term`` to the front of the history.

        Args:
            term: Search term; normalized before storing

        Returns:
            The updated entries
        """
        normalized = self._normalizer.normalize(term)
        if not normalized:
            return self.list()

        filtered = [entry for entry in self._entries if not same_name(entry, normalized)]
        self._entries = [normalized, *filtered][: self._capacity]
        self._persist()
        return self.list()

    def remove(self, term: str) -> bool:
        """
        Remove a case-insensitive match of ``term``.

        Args:
            term: Entry to remove

        Returns:
            True if the history is empty afterwards, signalling that any
            open history view should close
        """
        self._entries = [entry for entry in self._entries if not same_name(entry, term)]
        self._persist()

        emptied = not self._entries
        if emptied and self._on_emptied is not None:
            self._on_emptied()
        return emptied

    def clear(self) -> None:
        """Remove all entries."""
        self._entries = []
        self._persist()

    def _persist(self) -> None:
        # Write failures are logged only; the in-memory list stays authoritative
        try:
            self._storage.set_item(self._key, json.dumps(self._entries, ensure_ascii=False))
        except PersistenceError as e:
            if self._logger:
                self._logger.log_error(
                    COMPONENT,
                    "Failed to persist search history",
                    error=e,
                    additional_data={"key": self._key},
                )

    def _log_corruption(self, message: str, error: Optional[Exception]) -> None:
        if not self._logger:
            return
        data = {"key": self._key}
        if error is not None:
            data["error_message"] = str(error)
        self._logger.warn(COMPONENT, message, data)
