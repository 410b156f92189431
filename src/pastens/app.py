"""
Application wiring for pastens.

Builds the API client, history store, route adapter, controller and
leaderboard from an AppConfig and manages the client's lifetime.
"""

from typing import Optional

import httpx

from .api_client import ENSHistoryClient
from .audit_logger import AuditLogger
from .config import AppConfig
from .controller import SearchController
from .enums import LogLevel
from .events import SelectLeaderboardEntry
from .history_store import SearchHistoryStore
from .leaderboard import Leaderboard
from .local_storage import JsonFileStorage, KeyValueStorage
from .name_normalizer import NameNormalizer
from .route_adapter import ROOT_PATH, RouteAdapter


def create_logger(config: AppConfig) -> AuditLogger:
    """Create an audit logger honouring the logging configuration."""
    return AuditLogger(
        output_format=config.logging.output_format,
        min_level=LogLevel(config.logging.level),
    )


class PastensApp:
    """
    All components of one pastens session.

    Use as an async context manager so the HTTP client is closed.
    """

    def __init__(
        self,
        config: AppConfig,
        storage: Optional[KeyValueStorage] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        logger: Optional[AuditLogger] = None,
        initial_path: str = ROOT_PATH,
    ) -> None:
        """
        Initialize all components.

        Args:
            config: Application configuration
            storage: Storage backend (defaults to the configured JSON file)
            transport: Optional httpx transport for the API client
            logger: Optional audit logger
            initial_path: Path the route adapter starts on
        """
        self.config = config
        self.logger = logger
        self.normalizer = NameNormalizer(config.name_suffix)

        self.client = ENSHistoryClient(
            base_url=config.api.base_url,
            timeout=config.api.timeout_seconds,
            simulation_mode=config.api.simulation_mode,
            transport=transport,
            logger=logger,
        )
        self.history = SearchHistoryStore(
            storage=storage or JsonFileStorage(config.history.storage_path),
            key=config.history.storage_key,
            capacity=config.history.capacity,
            normalizer=self.normalizer,
            logger=logger,
        )
        self.route = RouteAdapter(initial_path=initial_path, logger=logger)
        self.controller = SearchController(
            client=self.client,
            history=self.history,
            route=self.route,
            normalizer=self.normalizer,
            language=config.language,
            prefer_server_rate_limit_message=config.messages.prefer_server_rate_limit_message,
            logger=logger,
        )
        self.leaderboard = Leaderboard(
            config.leaderboard,
            on_domain_click=self._search_from_leaderboard,
        )

    async def _search_from_leaderboard(self, name: str) -> None:
        await self.controller.dispatch(SelectLeaderboardEntry(name))

    async def __aenter__(self) -> "PastensApp":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def close(self) -> None:
        self.controller.close()
        await self.client.close()
