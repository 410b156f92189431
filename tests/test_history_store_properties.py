"""
Property-based tests for the Search History Store.

Uses Hypothesis for property-based testing to verify capacity,
de-duplication, persistence round trips and corruption recovery.
"""

import json
import tempfile
from io import StringIO
from pathlib import Path
from typing import Optional

from hypothesis import given, settings
from hypothesis import strategies as st

from pastens.audit_logger import AuditLogger
from pastens.enums import LogLevel
from pastens.exceptions import PersistenceError
from pastens.history_store import SearchHistoryStore
from pastens.local_storage import JsonFileStorage, MemoryStorage


KEY = SearchHistoryStore.DEFAULT_KEY


# Short labels so that repeats (in any case) are common
label_strategy = st.text(alphabet="abcdEFGH", min_size=1, max_size=3)


class FailingStorage(MemoryStorage):
    """Storage whose writes always fail."""

    def set_item(self, key: str, value: str) -> None:
        raise PersistenceError(code="io_error", message="disk full")


class UnreadableStorage(MemoryStorage):
    def get_item(self, key: str) -> Optional[str]:
        raise PersistenceError(code="io_error", message="permission denied")


class TestHistoryInvariantsProperty:
    """History never exceeds capacity and never holds case-insensitive duplicates."""

    @given(terms=st.lists(label_strategy, max_size=40))
    @settings(max_examples=200)
    def test_capacity_and_uniqueness(self, terms: list[str]) -> None:
        store = SearchHistoryStore(MemoryStorage())
        for term in terms:
            store.record(term)
            entries = store.list()
            assert len(entries) <= 10
            lowered = [entry.lower() for entry in entries]
            assert len(lowered) == len(set(lowered))

    @given(terms=st.lists(label_strategy, min_size=1, max_size=40))
    @settings(max_examples=200)
    def test_latest_record_is_first(self, terms: list[str]) -> None:
        store = SearchHistoryStore(MemoryStorage())
        for term in terms:
            store.record(term)
            assert store.list()[0] == term.lower() + ".eth"

    @given(terms=st.lists(label_strategy, max_size=40))
    @settings(max_examples=100)
    def test_matches_reference_model(self, terms: list[str]) -> None:
        store = SearchHistoryStore(MemoryStorage())
        expected: list[str] = []
        for term in terms:
            normalized = term.lower() + ".eth"
            expected = [normalized] + [e for e in expected if e != normalized]
            expected = expected[:10]
            store.record(term)
        assert list(store.list()) == expected

    @given(
        terms=st.lists(label_strategy, max_size=20),
        removals=st.lists(label_strategy, max_size=10),
    )
    @settings(max_examples=100)
    def test_reload_reproduces_last_mutation(
        self, terms: list[str], removals: list[str]
    ) -> None:
        storage = MemoryStorage()
        store = SearchHistoryStore(storage)
        for term in terms:
            store.record(term)
        for term in removals:
            store.remove(term + ".ETH")

        reloaded = SearchHistoryStore(storage)
        assert reloaded.list() == store.list()


class TestHistoryRemoval:
    def test_remove_only_entry_signals_empty(self) -> None:
        closed = []
        store = SearchHistoryStore(MemoryStorage(), on_emptied=lambda: closed.append(True))
        store.record("ens")

        assert store.remove("ENS.eth") is True
        assert store.list() == ()
        assert closed == [True]

    def test_remove_keeps_other_entries(self) -> None:
        store = SearchHistoryStore(MemoryStorage())
        store.record("a")
        store.record("b")

        assert store.remove("a.eth") is False
        assert store.list() == ("b.eth",)

    def test_remove_missing_entry_is_harmless(self) -> None:
        store = SearchHistoryStore(MemoryStorage())
        store.record("a")
        assert store.remove("zzz.eth") is False
        assert store.list() == ("a.eth",)

    def test_clear(self) -> None:
        storage = MemoryStorage()
        store = SearchHistoryStore(storage)
        store.record("a")
        store.clear()
        assert store.list() == ()
        assert json.loads(storage.get_item(KEY)) == []


class TestHistoryCorruptionRecovery:
    """Unreadable stored history reads as empty without raising."""

    def test_invalid_json_yields_empty_history(self) -> None:
        store = SearchHistoryStore(MemoryStorage({KEY: "{not json"}))
        assert store.list() == ()

    def test_non_list_json_yields_empty_history(self) -> None:
        store = SearchHistoryStore(MemoryStorage({KEY: '{"a": 1}'}))
        assert store.list() == ()

    def test_non_string_items_yield_empty_history(self) -> None:
        store = SearchHistoryStore(MemoryStorage({KEY: '["ens.eth", 3]'}))
        assert store.list() == ()

    def test_corruption_is_logged(self) -> None:
        logger = AuditLogger(output_format="json", output_stream=StringIO())
        SearchHistoryStore(MemoryStorage({KEY: "garbage"}), logger=logger)
        assert any(entry.level == LogLevel.WARN for entry in logger.entries)

    def test_unreadable_storage_yields_empty_history(self) -> None:
        store = SearchHistoryStore(UnreadableStorage())
        assert store.list() == ()

    def test_hand_edited_duplicates_are_collapsed(self) -> None:
        store = SearchHistoryStore(MemoryStorage({KEY: '["a.eth", "A.ETH", "b.eth"]'}))
        assert store.list() == ("a.eth", "b.eth")

    def test_recording_after_corruption_overwrites(self) -> None:
        storage = MemoryStorage({KEY: "garbage"})
        store = SearchHistoryStore(storage)
        store.record("ens")
        assert json.loads(storage.get_item(KEY)) == ["ens.eth"]

    def test_write_failure_is_not_raised(self) -> None:
        logger = AuditLogger(output_format="text", output_stream=StringIO())
        store = SearchHistoryStore(FailingStorage(), logger=logger)
        store.record("ens")
        assert store.list() == ("ens.eth",)
        assert any(entry.level == LogLevel.ERROR for entry in logger.entries)


class TestJsonFileStorage:
    def test_file_round_trip(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "nested" / "storage.json"
            store = SearchHistoryStore(JsonFileStorage(path))
            store.record("ens")
            store.record("nick")

            reloaded = SearchHistoryStore(JsonFileStorage(path))
            assert reloaded.list() == ("nick.eth", "ens.eth")

    def test_corrupt_file_yields_empty_history(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "storage.json"
            path.write_text("not json at all", encoding="utf-8")

            store = SearchHistoryStore(JsonFileStorage(path))
            assert store.list() == ()

            store.record("ens")
            assert SearchHistoryStore(JsonFileStorage(path)).list() == ("ens.eth",)

    def test_other_keys_are_preserved(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "storage.json"
            storage = JsonFileStorage(path)
            storage.set_item("other", "value")
            SearchHistoryStore(storage).record("ens")

            assert storage.get_item("other") == "value"
            storage.remove_item("other")
            assert storage.get_item("other") is None
            assert not list(Path(tmpdir).glob(".storage-*"))
