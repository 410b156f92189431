"""
ENS History API client.

This module provides an async client for the ownership-history endpoint
(``GET /api/ens?name=<name>``), response parsing for defined fields only,
and error classification into rate limiting, lookup failures and
transport failures.
"""

from dataclasses import dataclass
from typing import Any, Optional
import time

import httpx

from .audit_logger import AuditLogger
from .enums import LookupErrorCode, LookupStatus
from .models import BurnEvent, OwnerRecord, SearchResult


COMPONENT = "api_client"

LOOKUP_PATH = "/api/ens"


@dataclass
class LookupFailure:
    """Error information from a history lookup."""

    code: LookupErrorCode
    message: str
    http_status_code: Optional[int] = None
    server_message: Optional[str] = None  # The body's "error" field, if readable


@dataclass
class LookupResponse:
    """Complete history lookup response."""

    status: LookupStatus
    http_status_code: int
    result: Optional[SearchResult]
    error: Optional[LookupFailure]
    response_time_ms: float = 0.0

    @property
    def ok(self) -> bool:
        return self.status == LookupStatus.FOUND and self.result is not None


def _optional_str(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    if isinstance(value, (str, int, float)) and not isinstance(value, bool):
        return str(value)
    return None


def parse_owner(data: Any) -> Optional[OwnerRecord]:
    """
    Parse a single owner object.

    Returns:
        OwnerRecord, or None if ``data`` has no address
    """
    if not isinstance(data, dict):
        return None
    address = _optional_str(data.get("address"))
    if address is None:
        return None
    return OwnerRecord(
        address=address,
        ens_name=_optional_str(data.get("ensName")),
        start_date=_optional_str(data.get("startDate")),
        end_date=_optional_str(data.get("endDate")),
        transaction_hash=_optional_str(data.get("transactionHash")),
        block_number=_optional_str(data.get("blockNumber")),
    )


def parse_burn_event(data: Any) -> Optional[BurnEvent]:
    if not isinstance(data, dict):
        return None
    date = _optional_str(data.get("date"))
    if date is None:
        return None
    return BurnEvent(
        date=date,
        transaction_hash=_optional_str(data.get("transactionHash")) or "",
        block_number=_optional_str(data.get("blockNumber")) or "",
    )


def parse_search_result(json_data: Any, requested_name: str) -> Optional[SearchResult]:
    """
    Parse a success body, extracting only defined fields.

    Unknown keys and malformed list items are ignored.

    Args:
        json_data: The decoded JSON body
        requested_name: Name used when the body does not echo one

    Returns:
        SearchResult, or None if the body is not a JSON object
    """
    if not isinstance(json_data, dict):
        return None

    raw_owners = json_data.get("owners", [])
    owners = []
    if isinstance(raw_owners, list):
        for item in raw_owners:
            owner = parse_owner(item)
            if owner is not None:
                owners.append(owner)

    raw_burns = json_data.get("burnEvents") or []
    burn_events = []
    if isinstance(raw_burns, list):
        for item in raw_burns:
            event = parse_burn_event(item)
            if event is not None:
                burn_events.append(event)

    return SearchResult(
        name=_optional_str(json_data.get("name")) or requested_name,
        owners=tuple(owners),
        current_owner=parse_owner(json_data.get("currentOwner")),
        expiry_date=_optional_str(json_data.get("expiryDate")),
        burn_events=tuple(burn_events),
    )


def _server_message(response: httpx.Response) -> Optional[str]:
    """Read the ``error`` field of a failure body, if there is one."""
    try:
        body = response.json()
    except (ValueError, RecursionError):
        return None
    if isinstance(body, dict):
        message = body.get("error")
        if isinstance(message, str) and message.strip():
            return message
    return None


class ENSHistoryClient:
    """
    Async client for the ownership-history API.

    Outcomes are returned as LookupResponse values; the client never
    raises for HTTP or transport failures.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 15.0,
        simulation_mode: bool = False,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        logger: Optional[AuditLogger] = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            base_url: Origin serving the /api/ens route
            timeout: Request timeout in seconds
            simulation_mode: If True, no real network requests are made
            transport: Optional httpx transport (used by tests)
            logger: Optional audit logger
        """
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._simulation_mode = simulation_mode
        self._transport = transport
        self._logger = logger
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "ENSHistoryClient":
        self._ensure_client()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    @property
    def lookup_url(self) -> str:
        return f"{self._base_url}{LOOKUP_PATH}"

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self._timeout),
                follow_redirects=True,
                transport=self._transport,
                headers={"Accept": "application/json"},
            )
        return self._client

    async def lookup(self, name: str) -> LookupResponse:
        """
        Fetch the ownership history of ``name``.

        Args:
            name: Normalized ENS name

        Returns:
            LookupResponse with the parsed result or a classified error
        """
        start_time = time.perf_counter()

        if self._simulation_mode:
            return self._create_simulation_response(name, start_time)

        client = self._ensure_client()

        if self._logger:
            self._logger.debug(COMPONENT, "Requesting ownership history", {"name": name})

        try:
            response = await client.get(self.lookup_url, params={"name": name})
        except httpx.TimeoutException as e:
            return self._transport_failure(
                LookupErrorCode.TIMEOUT,
                str(e) or f"Request timed out after {self._timeout}s",
                e,
                start_time,
            )
        except httpx.HTTPError as e:
            return self._transport_failure(
                LookupErrorCode.TRANSPORT_FAILURE, str(e), e, start_time
            )

        response_time_ms = self._elapsed_ms(start_time)

        if response.status_code == 429:
            return self._http_failure(
                response,
                LookupErrorCode.RATE_LIMITED,
                "Rate limited by history API",
                response_time_ms,
            )

        if not response.is_success:
            return self._http_failure(
                response,
                LookupErrorCode.LOOKUP_FAILED,
                f"Unexpected HTTP status: {response.status_code}",
                response_time_ms,
            )

        try:
            json_data = response.json()
        except (ValueError, RecursionError) as e:
            return self._parse_failure(response, f"Failed to parse response: {e}", response_time_ms)

        result = parse_search_result(json_data, name)
        if result is None:
            return self._parse_failure(
                response, "Response is not a JSON object", response_time_ms
            )

        if self._logger:
            self._logger.info(
                COMPONENT,
                "Ownership history received",
                {
                    "name": result.name,
                    "owners": len(result.owners),
                    "response_time_ms": round(response_time_ms, 1),
                },
            )

        return LookupResponse(
            status=LookupStatus.FOUND,
            http_status_code=response.status_code,
            result=result,
            error=None,
            response_time_ms=response_time_ms,
        )

    def _http_failure(
        self,
        response: httpx.Response,
        code: LookupErrorCode,
        message: str,
        response_time_ms: float,
    ) -> LookupResponse:
        server_message = _server_message(response)
        if self._logger:
            self._logger.log_error(
                COMPONENT,
                "History lookup failed",
                request_url=str(response.request.url),
                response_status_code=response.status_code,
                additional_data={"code": code.value, "server_message": server_message},
            )
        return LookupResponse(
            status=LookupStatus.ERROR,
            http_status_code=response.status_code,
            result=None,
            error=LookupFailure(
                code=code,
                message=message,
                http_status_code=response.status_code,
                server_message=server_message,
            ),
            response_time_ms=response_time_ms,
        )

    def _parse_failure(
        self,
        response: httpx.Response,
        message: str,
        response_time_ms: float,
    ) -> LookupResponse:
        if self._logger:
            self._logger.log_error(
                COMPONENT,
                message,
                request_url=str(response.request.url),
                response_status_code=response.status_code,
            )
        return LookupResponse(
            status=LookupStatus.ERROR,
            http_status_code=response.status_code,
            result=None,
            error=LookupFailure(
                code=LookupErrorCode.PARSE_ERROR,
                message=message,
                http_status_code=response.status_code,
            ),
            response_time_ms=response_time_ms,
        )

    def _transport_failure(
        self,
        code: LookupErrorCode,
        message: str,
        error: Exception,
        start_time: float,
    ) -> LookupResponse:
        if self._logger:
            self._logger.log_error(
                COMPONENT,
                "History API unreachable",
                error=error,
                request_url=self.lookup_url,
            )
        return LookupResponse(
            status=LookupStatus.ERROR,
            http_status_code=0,
            result=None,
            error=LookupFailure(code=code, message=message),
            response_time_ms=self._elapsed_ms(start_time),
        )

    def _elapsed_ms(self, start_time: float) -> float:
        """Calculate elapsed time in milliseconds."""
        return (time.perf_counter() - start_time) * 1000

    def _create_simulation_response(
        self, name: str, start_time: float
    ) -> LookupResponse:
        """Create a simulated response for use without network access."""
        registrant = OwnerRecord(
            address="0x0000000000000000000000000000000000000001",
            start_date="2020-01-01T00:00:00Z",
            end_date="2023-06-01T00:00:00Z",
            transaction_hash="0x" + "a" * 64,
            block_number="9200000",
        )
        holder = OwnerRecord(
            address="0x0000000000000000000000000000000000000002",
            start_date="2023-06-01T00:00:00Z",
            transaction_hash="0x" + "b" * 64,
            block_number="17390000",
        )
        return LookupResponse(
            status=LookupStatus.FOUND,
            http_status_code=200,
            result=SearchResult(
                name=name,
                owners=(registrant, holder),
                current_owner=holder,
                expiry_date="2030-01-01T00:00:00Z",
            ),
            error=None,
            response_time_ms=self._elapsed_ms(start_time),
        )

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None
