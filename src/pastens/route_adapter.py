"""
URL route adapter.

Keeps the current search term reflected in a URL path (``/`` or
``/<term>``) and exposes deep links back as terms. Programmatic route
updates never notify listeners, so a search cannot trigger itself
through the route.
"""

from typing import Callable, Optional
from urllib.parse import quote, unquote

from .audit_logger import AuditLogger


COMPONENT = "route_adapter"

ROOT_PATH = "/"

RouteListener = Callable[[str], None]


def path_for_term(term: str) -> str:
    """
    Build the path that encodes ``term``.

    Args:
        term: Normalized search term, or empty for the root path

    Returns:
        '/' for an empty term, else '/' followed by the percent-encoded term
    """
    term = term.strip().lower()
    if not term:
        return ROOT_PATH
    return ROOT_PATH + quote(term, safe="")


def term_from_path(path: Optional[str]) -> Optional[str]:
    """
    Extract the term encoded in ``path``.

    Query strings and fragments are ignored.

    Args:
        path: URL path such as '/ens.eth'

    Returns:
        The percent-decoded term, or None for the root path
    """
    if not path:
        return None

    path = path.split("?", 1)[0].split("#", 1)[0]
    segment = path.lstrip("/").rstrip("/")
    if not segment:
        return None

    term = unquote(segment).strip()
    return term or None


class RouteAdapter:
    """
    In-process navigation stack of URL paths.

    ``set_route`` is the programmatic update made by a search; ``navigate``
    and ``back`` model navigation the user initiates and are the only
    operations that notify listeners.
    """

    def __init__(
        self,
        initial_path: str = ROOT_PATH,
        logger: Optional[AuditLogger] = None,
    ) -> None:
        self._stack: list[str] = [initial_path or ROOT_PATH]
        self._listeners: list[RouteListener] = []
        self._logger = logger

    @property
    def current_path(self) -> str:
        return self._stack[-1]

    @property
    def entries(self) -> tuple[str, ...]:
        """All navigation entries, oldest first."""
        return tuple(self._stack)

    def add_listener(self, listener: RouteListener) -> Callable[[], None]:
        """
        Register a listener for user-initiated navigation.

        Returns:
            A callable that unregisters the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def set_route(self, term: str) -> str:
        """
        Push a navigation entry for ``term`` without notifying listeners.

        Pushing the path that is already current is a no-op, so repeated
        searches do not grow the stack.

        Returns:
            The new current path
        """
        path = path_for_term(term)
        if path != self.current_path:
            self._stack.append(path)
            if self._logger:
                self._logger.debug(COMPONENT, "Route updated", {"path": path})
        return path

    def replace_route(self, term: str) -> str:
        """
        Rewrite the current entry to the path for ``term``.

        Used when a search was started by the route itself, so that a
        deep link such as '/ens' becomes '/ens.eth' in place and ``back``
        leaves it instead of landing on the unnormalized path again.
        Listeners are not notified.

        Returns:
            The new current path
        """
        path = path_for_term(term)
        if path != self.current_path:
            self._stack[-1] = path
            if self._logger:
                self._logger.debug(COMPONENT, "Route replaced", {"path": path})
        return path

    def read_route(self) -> Optional[str]:
        """Return the term encoded in the current path, if any."""
        return term_from_path(self.current_path)

    def navigate(self, path: str) -> None:
        """
        Push ``path`` as user navigation and notify listeners.

        If a listener raises (a controller needs a running event loop to
        follow navigation), the entry is not kept.
        """
        if not path.startswith(ROOT_PATH):
            path = ROOT_PATH + path
        self._move(self._stack + [path])

    def back(self) -> bool:
        """
        Return to the previous navigation entry.

        Returns:
            False if there is no previous entry
        """
        if len(self._stack) < 2:
            return False
        self._move(self._stack[:-1])
        return True

    def _move(self, stack: list[str]) -> None:
        previous = self._stack
        self._stack = stack
        try:
            self._notify(self.current_path)
        except Exception:
            self._stack = previous
            raise

    def _notify(self, path: str) -> None:
        for listener in list(self._listeners):
            listener(path)
