"""
Property-based tests for the URL route adapter.

Verifies the path encoding round trip and that only user-initiated
navigation notifies listeners.
"""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from pastens.name_normalizer import normalize_name
from pastens.route_adapter import RouteAdapter, path_for_term, term_from_path


term_strategy = st.text(
    alphabet=st.characters(blacklist_categories=("Cs",)),
    min_size=1,
    max_size=30,
).map(normalize_name).filter(bool)


class TestRouteEncodingProperty:
    @given(term=term_strategy)
    @settings(max_examples=300)
    def test_path_round_trip(self, term: str) -> None:
        path = path_for_term(term)
        assert path.startswith("/")
        assert "/" not in path[1:]
        assert term_from_path(path) == term

    @given(term=term_strategy)
    @settings(max_examples=100)
    def test_set_route_then_read_route(self, term: str) -> None:
        route = RouteAdapter()
        route.set_route(term)
        assert route.read_route() == term


class TestRouteContract:
    def test_root_has_no_term(self) -> None:
        assert term_from_path("/") is None
        assert term_from_path("") is None
        assert term_from_path(None) is None

    def test_empty_term_maps_to_root(self) -> None:
        assert path_for_term("") == "/"
        assert path_for_term("   ") == "/"

    def test_plain_name_is_not_escaped(self) -> None:
        assert path_for_term("ens.eth") == "/ens.eth"

    def test_percent_encoded_path_is_decoded(self) -> None:
        assert term_from_path("/%F0%9F%94%A5.eth") == "\U0001F525.eth"
        assert term_from_path("/caf%C3%A9.eth/") == "café.eth"

    def test_query_and_fragment_ignored(self) -> None:
        assert term_from_path("/ens.eth?tab=owners#top") == "ens.eth"

    def test_set_route_pushes_entries(self) -> None:
        route = RouteAdapter()
        route.set_route("a.eth")
        route.set_route("b.eth")
        route.set_route("b.eth")
        assert route.entries == ("/", "/a.eth", "/b.eth")
        assert route.current_path == "/b.eth"

    def test_set_route_does_not_notify(self) -> None:
        seen = []
        route = RouteAdapter()
        route.add_listener(seen.append)
        route.set_route("ens.eth")
        assert seen == []

    def test_navigate_and_back_notify(self) -> None:
        seen = []
        route = RouteAdapter()
        route.add_listener(seen.append)

        route.navigate("/ens.eth")
        route.navigate("nick.eth")
        assert route.back() is True

        assert seen == ["/ens.eth", "/nick.eth", "/ens.eth"]
        assert route.read_route() == "ens.eth"

    def test_back_at_first_entry(self) -> None:
        route = RouteAdapter()
        assert route.back() is False
        assert route.current_path == "/"

    def test_unsubscribe(self) -> None:
        seen = []
        route = RouteAdapter()
        unsubscribe = route.add_listener(seen.append)
        unsubscribe()
        route.navigate("/ens.eth")
        assert seen == []

    def test_replace_route_rewrites_current_entry(self) -> None:
        seen = []
        route = RouteAdapter()
        route.add_listener(seen.append)
        route.navigate("/ENS")

        assert route.replace_route("ens.eth") == "/ens.eth"
        assert route.entries == ("/", "/ens.eth")
        assert seen == ["/ENS"]

    def test_failed_listener_undoes_navigation(self) -> None:
        def refuse(path: str) -> None:
            raise RuntimeError("no running event loop")

        route = RouteAdapter()
        route.set_route("ens.eth")
        route.add_listener(refuse)

        with pytest.raises(RuntimeError):
            route.navigate("/nick.eth")
        assert route.entries == ("/", "/ens.eth")

        with pytest.raises(RuntimeError):
            route.back()
        assert route.entries == ("/", "/ens.eth")
