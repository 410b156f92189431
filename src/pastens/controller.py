"""
Search Controller for pastens.

This module owns the lookup lifecycle. It reconciles user input, the URL
route, the asynchronous history lookup and the persisted search history
into a single consistent state:

- names are normalized before anything else happens
- the route is updated before the lookup request is issued
- history is recorded only after a successful lookup
- every search allocates a request token; a completion whose token is no
  longer the latest is discarded, so the most recently started search
  always wins regardless of response order
"""

import asyncio
import itertools
from typing import Callable, Optional, Protocol

from .api_client import LookupFailure, LookupResponse
from .audit_logger import AuditLogger
from .enums import LookupErrorCode, SearchSource
from .events import (
    DismissHistory,
    Event,
    RemoveHistoryEntry,
    RouteChanged,
    SelectHistoryEntry,
    SelectLeaderboardEntry,
    SubmitSearch,
    ToggleHistory,
    UpdateInput,
)
from .exceptions import PastensError, RateLimitedError, TransportError
from .history_store import SearchHistoryStore
from .i18n import get_message
from .models import (
    ControllerSnapshot,
    Failed,
    Idle,
    Loading,
    SearchState,
    Succeeded,
)
from .name_normalizer import NameNormalizer
from .route_adapter import RouteAdapter, term_from_path


COMPONENT = "controller"

StateListener = Callable[[ControllerSnapshot], None]


class HistoryLookup(Protocol):
    """
    Anything that can fetch the ownership history of a name.

    ENSHistoryClient reports every failure in the returned LookupResponse.
    Other implementations may raise LookupFailedError, RateLimitedError or
    TransportError instead; any other exception also ends the search as a
    failed lookup with the default message.
    """

    async def lookup(self, name: str) -> LookupResponse:
        ...


class SearchController:
    """
    State machine behind the search page.

    The search state is always exactly one of Idle, Loading, Failed or
    Succeeded and is replaced, never merged, on every transition.
    """

    def __init__(
        self,
        client: HistoryLookup,
        history: SearchHistoryStore,
        route: RouteAdapter,
        normalizer: Optional[NameNormalizer] = None,
        language: str = "en",
        prefer_server_rate_limit_message: bool = False,
        logger: Optional[AuditLogger] = None,
    ) -> None:
        """
        Initialize the controller.

        Args:
            client: History lookup client
            history: Persistent search history
            route: URL route adapter
            normalizer: Name normalizer (defaults to '.eth' suffix)
            language: Language for user-facing error messages
            prefer_server_rate_limit_message: Let a server-supplied error
                text replace the rate-limit message
            logger: Optional audit logger
        """
        self._client = client
        self._history = history
        self._route = route
        self._normalizer = normalizer or NameNormalizer()
        self._language = language
        self._prefer_server_rate_limit_message = prefer_server_rate_limit_message
        self._logger = logger

        self._state: SearchState = Idle()
        self._history_open = False
        self._input_text = ""
        self._tokens = itertools.count(1)
        self._latest_token = 0
        self._initialized = False
        self._listeners: list[StateListener] = []
        self._pending: set[asyncio.Task] = set()

        self._unsubscribe_route = route.add_listener(self._on_user_navigation)

    @property
    def state(self) -> SearchState:
        return self._state

    @property
    def history(self) -> SearchHistoryStore:
        return self._history

    @property
    def route(self) -> RouteAdapter:
        return self._route

    @property
    def latest_token(self) -> int:
        return self._latest_token

    def snapshot(self) -> ControllerSnapshot:
        """Capture everything the view needs."""
        return ControllerSnapshot(
            state=self._state,
            history=self._history.list(),
            history_open=self._history_open,
            input_text=self._input_text,
        )

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """
        Register a listener called with a snapshot after every change.

        Returns:
            A callable that unregisters the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def close(self) -> None:
        """Detach from the route adapter."""
        self._unsubscribe_route()

    async def search(
        self,
        raw_input: str,
        source: SearchSource = SearchSource.INPUT,
    ) -> SearchState:
        """
        Look up the ownership history of ``raw_input``.

        Blank input is ignored. Otherwise the state becomes Loading, the
        route is updated, and exactly one lookup is awaited. Its outcome is
        applied only if no newer search has started in the meantime.

        Args:
            raw_input: Name as typed, clicked or read from the route
            source: Where the search was initiated from

        Returns:
            The controller state after this search completes
        """
        term = self._normalizer.normalize(raw_input)
        if not term:
            return self._state

        token = next(self._tokens)
        self._latest_token = token

        self._input_text = term
        self._history_open = False
        self._set_state(Loading(term))
        if source == SearchSource.ROUTE and self._route.read_route() is not None:
            # The route already names a term; rewrite it in place so back() can leave it
            self._route.replace_route(term)
        else:
            self._route.set_route(term)

        if self._logger:
            self._logger.info(
                COMPONENT,
                "Search started",
                {"term": term, "source": source.value, "token": token},
            )

        try:
            response = await self._client.lookup(term)
        except PastensError as e:
            if not self._is_current(token, term):
                return self._state
            self._set_state(self._failed_from_exception(e))
            return self._state
        except Exception as e:
            if not self._is_current(token, term):
                return self._state
            if self._logger:
                self._logger.log_error(
                    COMPONENT,
                    "Lookup raised an unexpected error",
                    error=e,
                    additional_data={"term": term},
                )
            self._set_state(Failed(
                message=get_message("error.lookup_failed", self._language),
                kind=LookupErrorCode.LOOKUP_FAILED,
            ))
            return self._state

        if not self._is_current(token, term):
            return self._state

        if response.ok:
            self._set_state(Succeeded(response.result))
            self._history.record(term)
            self._notify()
        else:
            self._set_state(self._failed_from_response(response))

        return self._state

    async def initialize_from_route(
        self,
        path: Optional[str] = None,
        initial_term: Optional[str] = None,
    ) -> SearchState:
        """
        Run the initial search encoded in the page route.

        An explicit ``initial_term`` wins over ``path``; without either the
        route adapter's current path is used. Only the first call searches.
        """
        if self._initialized:
            return self._state
        self._initialized = True

        term = initial_term
        if not term:
            term = term_from_path(path) if path is not None else self._route.read_route()

        if term:
            return await self.search(term, SearchSource.ROUTE)
        return self._state

    async def dispatch(self, event: Event) -> ControllerSnapshot:
        """
        Apply a single UI event.

        Returns:
            Snapshot after the event has been fully processed
        """
        if isinstance(event, SubmitSearch):
            await self.search(event.raw_input, SearchSource.INPUT)
        elif isinstance(event, UpdateInput):
            self._input_text = event.text.lower()
            self._notify()
        elif isinstance(event, SelectHistoryEntry):
            self._history_open = False
            await self.search(event.term, SearchSource.HISTORY)
        elif isinstance(event, SelectLeaderboardEntry):
            await self.search(event.name, SearchSource.LEADERBOARD)
        elif isinstance(event, RemoveHistoryEntry):
            if self._history.remove(event.term):
                self._history_open = False
            self._notify()
        elif isinstance(event, ToggleHistory):
            self._history_open = not self._history_open and len(self._history) > 0
            self._notify()
        elif isinstance(event, DismissHistory):
            self._history_open = False
            self._notify()
        elif isinstance(event, RouteChanged):
            await self._follow_route(event.path)
        else:
            raise TypeError(f"Unknown event: {event!r}")

        return self.snapshot()

    async def wait_idle(self) -> None:
        """Wait for searches started by user navigation to finish."""
        while self._pending:
            await asyncio.gather(*list(self._pending))

    async def _follow_route(self, path: str) -> None:
        term = term_from_path(path)
        if term:
            await self.search(term, SearchSource.ROUTE)
            return

        # Back at the root: any in-flight search is now stale
        self._latest_token = next(self._tokens)
        self._input_text = ""
        self._history_open = False
        self._set_state(Idle())

    def _on_user_navigation(self, path: str) -> None:
        loop = asyncio.get_running_loop()
        task = loop.create_task(self.dispatch(RouteChanged(path)))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    def _is_current(self, token: int, term: str) -> bool:
        if token == self._latest_token:
            return True
        if self._logger:
            self._logger.debug(
                COMPONENT,
                "Discarding stale lookup result",
                {"term": term, "token": token, "latest_token": self._latest_token},
            )
        return False

    def error_message(self, error: LookupFailure) -> str:
        """
        Choose the user-facing message for a failed lookup.

        Rate limiting always gets its own message unless the server text is
        explicitly preferred. Other failures show the server's ``error``
        text when present and the default message otherwise.
        """
        default = get_message("error.lookup_failed", self._language)

        if error.code == LookupErrorCode.RATE_LIMITED:
            if self._prefer_server_rate_limit_message and error.server_message:
                return error.server_message
            return get_message("error.rate_limited", self._language)

        if error.code in (LookupErrorCode.TRANSPORT_FAILURE, LookupErrorCode.TIMEOUT):
            return error.message or default

        return error.server_message or default

    def _failed_from_response(self, response: LookupResponse) -> Failed:
        error = response.error
        if error is None:
            error = LookupFailure(
                code=LookupErrorCode.PARSE_ERROR,
                message="Lookup returned no result",
                http_status_code=response.http_status_code,
            )
        return Failed(message=self.error_message(error), kind=error.code)

    def _failed_from_exception(self, error: PastensError) -> Failed:
        if isinstance(error, RateLimitedError):
            code = LookupErrorCode.RATE_LIMITED
        elif isinstance(error, TransportError):
            code = LookupErrorCode.TRANSPORT_FAILURE
        else:
            code = LookupErrorCode.LOOKUP_FAILED

        server_message = error.details.get("server_message")
        if code == LookupErrorCode.LOOKUP_FAILED and not server_message:
            server_message = error.message or None

        failure = LookupFailure(
            code=code,
            message=error.message,
            server_message=server_message,
        )
        return Failed(message=self.error_message(failure), kind=code)

    def _set_state(self, state: SearchState) -> None:
        self._state = state
        self._notify()

    def _notify(self) -> None:
        if not self._listeners:
            return
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            listener(snapshot)
