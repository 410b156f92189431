"""
Data models for pastens.

This module defines the ownership records returned by the history API,
the search state variants held by the controller, and the snapshot
handed to the view renderer.
"""

from dataclasses import dataclass, field
from typing import Optional, Union

from .enums import LookupErrorCode, SearchPhase


@dataclass(frozen=True)
class OwnerRecord:
    """A single owner of an ENS name over a period of time."""

    address: str
    ens_name: Optional[str] = None  # Primary name of the owner, if any
    start_date: Optional[str] = None
    end_date: Optional[str] = None  # None while the owner still holds the name
    transaction_hash: Optional[str] = None
    block_number: Optional[str] = None


@dataclass(frozen=True)
class BurnEvent:
    """A revocation of an ENS name."""

    date: str
    transaction_hash: str
    block_number: str


@dataclass(frozen=True)
class SearchResult:
    """Ownership history of a single ENS name."""

    name: str
    owners: tuple[OwnerRecord, ...] = ()
    current_owner: Optional[OwnerRecord] = None
    expiry_date: Optional[str] = None
    burn_events: tuple[BurnEvent, ...] = ()


@dataclass(frozen=True)
class Idle:
    """No search has been started."""

    @property
    def phase(self) -> SearchPhase:
        return SearchPhase.IDLE


@dataclass(frozen=True)
class Loading:
    """A lookup for ``term`` is in flight."""

    term: str

    @property
    def phase(self) -> SearchPhase:
        return SearchPhase.LOADING


@dataclass(frozen=True)
class Failed:
    """The latest lookup failed; ``message`` is shown to the user."""

    message: str
    kind: LookupErrorCode = LookupErrorCode.LOOKUP_FAILED

    @property
    def phase(self) -> SearchPhase:
        return SearchPhase.ERROR


@dataclass(frozen=True)
class Succeeded:
    """The latest lookup returned ``result``."""

    result: SearchResult

    @property
    def phase(self) -> SearchPhase:
        return SearchPhase.SUCCESS


SearchState = Union[Idle, Loading, Failed, Succeeded]


@dataclass(frozen=True)
class ControllerSnapshot:
    """Everything the view renderer needs, captured at one instant."""

    state: SearchState = field(default_factory=Idle)
    history: tuple[str, ...] = ()
    history_open: bool = False
    input_text: str = ""
