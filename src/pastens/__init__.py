"""
pastens - ownership history of ENS names.

This package looks up the ownership history of ENS names through an
indexing API and keeps the search page state: normalized search terms,
deep-linkable routes, a persistent search history and the lookup
lifecycle with stale-response protection.
"""

__version__ = "0.1.0"
__author__ = "pastens contributors"

from pastens.exceptions import (
    PastensError,
    LookupFailedError,
    RateLimitedError,
    TransportError,
    PersistenceError,
    ConfigError,
)
from pastens.enums import (
    SearchPhase,
    LookupStatus,
    LookupErrorCode,
    SearchSource,
    LogLevel,
)
from pastens.models import (
    OwnerRecord,
    BurnEvent,
    SearchResult,
    Idle,
    Loading,
    Failed,
    Succeeded,
    SearchState,
    ControllerSnapshot,
)
from pastens.name_normalizer import (
    NameNormalizer,
    normalize_name,
    same_name,
)
from pastens.config import (
    ApiConfig,
    HistoryConfig,
    LoggingConfig,
    MessagesConfig,
    AppConfig,
    create_default_config,
    load_config_from_file,
    save_config_to_file,
    apply_env_overrides,
)
from pastens.audit_logger import (
    AuditLogger,
    LogEntry,
)
from pastens.local_storage import (
    KeyValueStorage,
    MemoryStorage,
    JsonFileStorage,
)
from pastens.history_store import SearchHistoryStore
from pastens.route_adapter import (
    RouteAdapter,
    path_for_term,
    term_from_path,
)
from pastens.api_client import (
    ENSHistoryClient,
    LookupResponse,
    LookupFailure,
)
from pastens.events import (
    SubmitSearch,
    UpdateInput,
    SelectHistoryEntry,
    SelectLeaderboardEntry,
    RemoveHistoryEntry,
    ToggleHistory,
    DismissHistory,
    RouteChanged,
)
from pastens.controller import SearchController
from pastens.leaderboard import Leaderboard
from pastens.view import render
from pastens.i18n import (
    get_message,
    TRANSLATIONS,
    SUPPORTED_LANGUAGES,
    DEFAULT_LANGUAGE,
)
from pastens.app import PastensApp
from pastens.cli import main as cli_main

__all__ = [
    # Version
    "__version__",
    # Exceptions
    "PastensError",
    "LookupFailedError",
    "RateLimitedError",
    "TransportError",
    "PersistenceError",
    "ConfigError",
    # Enums
    "SearchPhase",
    "LookupStatus",
    "LookupErrorCode",
    "SearchSource",
    "LogLevel",
    # Models
    "OwnerRecord",
    "BurnEvent",
    "SearchResult",
    "Idle",
    "Loading",
    "Failed",
    "Succeeded",
    "SearchState",
    "ControllerSnapshot",
    # Normalization
    "NameNormalizer",
    "normalize_name",
    "same_name",
    # Config
    "ApiConfig",
    "HistoryConfig",
    "LoggingConfig",
    "MessagesConfig",
    "AppConfig",
    "create_default_config",
    "load_config_from_file",
    "save_config_to_file",
    "apply_env_overrides",
    # Audit Logger
    "AuditLogger",
    "LogEntry",
    # Storage
    "KeyValueStorage",
    "MemoryStorage",
    "JsonFileStorage",
    "SearchHistoryStore",
    # Routing
    "RouteAdapter",
    "path_for_term",
    "term_from_path",
    # API Client
    "ENSHistoryClient",
    "LookupResponse",
    "LookupFailure",
    # Events
    "SubmitSearch",
    "UpdateInput",
    "SelectHistoryEntry",
    "SelectLeaderboardEntry",
    "RemoveHistoryEntry",
    "ToggleHistory",
    "DismissHistory",
    "RouteChanged",
    # Controller
    "SearchController",
    "Leaderboard",
    "render",
    "PastensApp",
    # I18n
    "get_message",
    "TRANSLATIONS",
    "SUPPORTED_LANGUAGES",
    "DEFAULT_LANGUAGE",
    # CLI
    "cli_main",
]
