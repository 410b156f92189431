"""
UI events consumed by the search controller.

Each user interaction is one immutable event value, so a whole session
can be replayed against the controller without a UI.
"""

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class SubmitSearch:
    """The search form was submitted with ``raw_input``."""

    raw_input: str


@dataclass(frozen=True)
class UpdateInput:
    """The user typed into the search field."""

    text: str


@dataclass(frozen=True)
class SelectHistoryEntry:
    term: str


@dataclass(frozen=True)
class SelectLeaderboardEntry:
    name: str


@dataclass(frozen=True)
class RemoveHistoryEntry:
    term: str


@dataclass(frozen=True)
class ToggleHistory:
    pass


@dataclass(frozen=True)
class DismissHistory:
    """Outside click or close button on the history dropdown."""

    pass


@dataclass(frozen=True)
class RouteChanged:
    """The user navigated to ``path`` (deep link, back button)."""

    path: str


Event = Union[
    SubmitSearch,
    UpdateInput,
    SelectHistoryEntry,
    SelectLeaderboardEntry,
    RemoveHistoryEntry,
    ToggleHistory,
    DismissHistory,
    RouteChanged,
]
