"""
Property-based tests for Audit Logger module.

Covers the json/text/both output formats, minimum-level filtering,
sensitive data masking and error context.
"""

import json
from io import StringIO

import pytest
from hypothesis import assume, given, settings
from hypothesis import strategies as st

from pastens.audit_logger import AuditLogger
from pastens.enums import LogLevel


LEVELS_IN_ORDER = [LogLevel.DEBUG, LogLevel.INFO, LogLevel.WARN, LogLevel.ERROR]

SENSITIVE_PATTERNS = [
    'token', 'secret', 'password', 'api_key', 'auth', 'authorization',
    'credential', 'private_key', 'access_token', 'refresh_token',
    'session_token', 'api_secret', 'cookie',
]


@st.composite
def component_name_strategy(draw) -> str:
    """Generate valid component names."""
    return draw(st.text(
        alphabet=st.sampled_from("abcdefghijklmnopqrstuvwxyz_-"),
        min_size=1,
        max_size=30,
    ))


@st.composite
def message_strategy(draw) -> str:
    """Generate single-line log messages."""
    return draw(st.text(
        alphabet=st.characters(
            whitelist_categories=('L', 'N', 'P', 'S', 'Z'),
            blacklist_characters='\x00\n\r',
        ),
        min_size=1,
        max_size=120,
    ))


@st.composite
def non_sensitive_key_strategy(draw) -> str:
    """Generate keys that are NOT sensitive."""
    key = draw(st.text(
        alphabet=st.sampled_from("abcdefghijklmnopqrstuvwxyz_"),
        min_size=1,
        max_size=20,
    ))
    for pattern in SENSITIVE_PATTERNS:
        assume(pattern not in key)
    return key


@st.composite
def sensitive_key_strategy(draw) -> str:
    """Generate keys that ARE sensitive."""
    base = draw(st.sampled_from(SENSITIVE_PATTERNS))
    prefix = draw(st.sampled_from(['', 'my_', 'graph_', 'App']))
    suffix = draw(st.sampled_from(['', '_value', '_1']))
    return f"{prefix}{base}{suffix}"


class TestOutputFormats:
    @given(
        level=st.sampled_from(LEVELS_IN_ORDER),
        component=component_name_strategy(),
        message=message_strategy(),
    )
    @settings(max_examples=100)
    def test_both_format_writes_json_then_text(
        self,
        level: LogLevel,
        component: str,
        message: str,
    ) -> None:
        output = StringIO()
        logger = AuditLogger(output_format="both", output_stream=output)

        logger.log(level, component, message, {"term": "ens.eth"})

        lines = output.getvalue().strip().split('\n')
        assert len(lines) == 2

        parsed = json.loads(lines[0])
        assert parsed["level"] == level.value
        assert parsed["component"] == component
        assert parsed["message"] == message
        assert parsed["data"] == {"term": "ens.eth"}

        assert level.value.upper() in lines[1]
        assert f"[{component}]" in lines[1]
        assert message in lines[1]

    def test_json_only(self) -> None:
        output = StringIO()
        logger = AuditLogger(output_format="json", output_stream=output)
        logger.info("controller", "Search started", {"token": 3})

        lines = [line for line in output.getvalue().split('\n') if line]
        assert len(lines) == 1
        assert json.loads(lines[0])["message"] == "Search started"

    def test_text_only(self) -> None:
        output = StringIO()
        logger = AuditLogger(output_format="text", output_stream=output)
        logger.warn("history", "Ignoring corrupt search history")

        text = output.getvalue()
        assert text.count('\n') == 1
        assert "WARN [history] Ignoring corrupt search history" in text

    def test_invalid_format_rejected(self) -> None:
        with pytest.raises(ValueError):
            AuditLogger(output_format="xml")

    def test_non_json_values_are_stringified(self) -> None:
        output = StringIO()
        logger = AuditLogger(output_format="json", output_stream=output)
        logger.info("route", "Route updated", {"levels": {LogLevel.INFO}})

        parsed = json.loads(output.getvalue())
        assert "info" in parsed["data"]["levels"]


class TestMinimumLevel:
    @given(
        min_level=st.sampled_from(LEVELS_IN_ORDER),
        level=st.sampled_from(LEVELS_IN_ORDER),
    )
    @settings(max_examples=50)
    def test_entries_below_min_level_are_dropped(
        self,
        min_level: LogLevel,
        level: LogLevel,
    ) -> None:
        output = StringIO()
        logger = AuditLogger(output_stream=output, min_level=min_level)

        entry = logger.log(level, "controller", "message")

        kept = LEVELS_IN_ORDER.index(level) >= LEVELS_IN_ORDER.index(min_level)
        assert (entry is not None) == kept
        assert (output.getvalue() != "") == kept
        assert len(logger.entries) == (1 if kept else 0)

    def test_clear_entries(self) -> None:
        logger = AuditLogger(output_stream=StringIO())
        logger.debug("a", "one")
        logger.info("a", "two")
        assert len(logger.entries) == 2
        logger.clear_entries()
        assert logger.entries == []


class TestSensitiveDataMasking:
    @given(
        sensitive_key=sensitive_key_strategy(),
        sensitive_value=st.text(alphabet=st.sampled_from("QWXYZ"), min_size=5, max_size=20),
    )
    @settings(max_examples=100)
    def test_sensitive_data_masked(self, sensitive_key: str, sensitive_value: str) -> None:
        output = StringIO()
        logger = AuditLogger(output_format="json", output_stream=output)

        entry = logger.info("api", "Request", {sensitive_key: sensitive_value})

        assert entry.data[sensitive_key] == AuditLogger.MASK_VALUE
        assert sensitive_value not in output.getvalue()

    @given(key=non_sensitive_key_strategy(), value=st.text(min_size=1, max_size=50))
    @settings(max_examples=100)
    def test_non_sensitive_data_not_masked(self, key: str, value: str) -> None:
        logger = AuditLogger(output_stream=StringIO())
        entry = logger.info("api", "Request", {key: value})
        assert entry.data[key] == value

    @given(sensitive_key=sensitive_key_strategy())
    @settings(max_examples=50)
    def test_nested_and_listed_data_masked(self, sensitive_key: str) -> None:
        logger = AuditLogger(output_stream=StringIO())
        entry = logger.info("api", "Request", {
            "headers": {sensitive_key: "hidden", "accept": "application/json"},
            "attempts": [{sensitive_key: "hidden"}, "plain"],
        })

        assert entry.data["headers"][sensitive_key] == AuditLogger.MASK_VALUE
        assert entry.data["headers"]["accept"] == "application/json"
        assert entry.data["attempts"][0][sensitive_key] == AuditLogger.MASK_VALUE
        assert entry.data["attempts"][1] == "plain"


class TestErrorContext:
    @given(
        status=st.one_of(st.none(), st.sampled_from([400, 404, 429, 500, 503])),
        message=message_strategy(),
    )
    @settings(max_examples=50)
    def test_error_logs_include_context(self, status, message: str) -> None:
        logger = AuditLogger(output_stream=StringIO(), min_level=LogLevel.ERROR)
        error = RuntimeError(message)

        entry = logger.log_error(
            "api",
            "Lookup failed",
            error=error,
            request_url="http://localhost:3000/api/ens?name=ens.eth",
            response_status_code=status,
            additional_data={"name": "ens.eth"},
        )

        assert entry.level == LogLevel.ERROR
        assert entry.data["error_message"] == message
        assert entry.data["error_type"] == "RuntimeError"
        assert entry.data["request_url"].endswith("name=ens.eth")
        assert entry.data["name"] == "ens.eth"
        if status is None:
            assert "response_status_code" not in entry.data
        else:
            assert entry.data["response_status_code"] == status

    def test_minimal_error(self) -> None:
        logger = AuditLogger(output_stream=StringIO())
        entry = logger.log_error("history", "Failed to persist search history")
        assert entry.data == {}
