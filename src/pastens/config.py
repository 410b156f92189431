"""
Configuration dataclasses for pastens.

This module defines all configuration structures used throughout the system,
including the history API endpoint, search history persistence, logging,
message precedence, and the leaderboard, plus JSON and environment loading.
"""

import json
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .exceptions import ConfigError


DEFAULT_CONFIG_PATH = Path.home() / ".pastens" / "config.json"
DEFAULT_HISTORY_PATH = Path.home() / ".pastens" / "storage.json"

DEFAULT_LEADERBOARD = [
    "vitalik.eth",
    "nick.eth",
    "ens.eth",
    "brantly.eth",
    "jesse.eth",
    "coinbase.eth",
    "uniswap.eth",
    "dao.eth",
    "punk.eth",
    "000.eth",
]


@dataclass
class ApiConfig:
    """Where and how the ownership-history API is queried."""

    base_url: str = "http://localhost:3000"
    timeout_seconds: float = 15.0
    simulation_mode: bool = False


@dataclass
class HistoryConfig:
    """Search history persistence configuration."""

    storage_path: Path = DEFAULT_HISTORY_PATH
    storage_key: str = "pastens_search_history"
    capacity: int = 10


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "warn"
    output_format: str = "text"  # 'json', 'text', 'both'


@dataclass
class MessagesConfig:
    """User-facing message behaviour."""

    # When True a server-supplied error text replaces the rate-limit message
    prefer_server_rate_limit_message: bool = False


@dataclass
class AppConfig:
    """Main configuration combining all sub-configurations."""

    api: ApiConfig = field(default_factory=ApiConfig)
    history: HistoryConfig = field(default_factory=HistoryConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    messages: MessagesConfig = field(default_factory=MessagesConfig)
    language: str = "en"  # 'de' or 'en'
    name_suffix: str = ".eth"
    leaderboard: list[str] = field(default_factory=lambda: list(DEFAULT_LEADERBOARD))


def create_default_config(
    simulation_mode: bool = False,
    language: str = "en",
    storage_path: Optional[Path] = None,
) -> AppConfig:
    """
    Create a default configuration.

    Args:
        simulation_mode: Enable simulation mode (no real network requests)
        language: Output language ('de' or 'en')
        storage_path: Path to the search history storage file

    Returns:
        AppConfig with default settings
    """
    return AppConfig(
        api=ApiConfig(simulation_mode=simulation_mode),
        history=HistoryConfig(storage_path=storage_path or DEFAULT_HISTORY_PATH),
        language=language,
    )


def config_to_dict(config: AppConfig) -> dict:
    """Serialize a configuration to JSON-compatible data."""
    return {
        "api": {
            "base_url": config.api.base_url,
            "timeout_seconds": config.api.timeout_seconds,
            "simulation_mode": config.api.simulation_mode,
        },
        "history": {
            "storage_path": str(config.history.storage_path),
            "storage_key": config.history.storage_key,
            "capacity": config.history.capacity,
        },
        "logging": {
            "level": config.logging.level,
            "output_format": config.logging.output_format,
        },
        "messages": {
            "prefer_server_rate_limit_message": config.messages.prefer_server_rate_limit_message,
        },
        "language": config.language,
        "name_suffix": config.name_suffix,
        "leaderboard": list(config.leaderboard),
    }


def config_from_dict(data: dict) -> AppConfig:
    """
    Build a configuration from parsed JSON data.

    Missing sections and keys fall back to their defaults.

    Raises:
        ConfigError: If a value has the wrong type
    """
    if not isinstance(data, dict):
        raise ConfigError(
            code="invalid_config",
            message="Configuration root must be a JSON object",
        )

    try:
        api_data = data.get("api", {})
        api = ApiConfig(
            base_url=str(api_data.get("base_url", ApiConfig.base_url)),
            timeout_seconds=float(api_data.get("timeout_seconds", ApiConfig.timeout_seconds)),
            simulation_mode=bool(api_data.get("simulation_mode", False)),
        )

        history_data = data.get("history", {})
        storage_path = history_data.get("storage_path")
        history = HistoryConfig(
            storage_path=Path(storage_path) if storage_path else DEFAULT_HISTORY_PATH,
            storage_key=str(history_data.get("storage_key", HistoryConfig.storage_key)),
            capacity=int(history_data.get("capacity", HistoryConfig.capacity)),
        )

        logging_data = data.get("logging", {})
        logging_config = LoggingConfig(
            level=str(logging_data.get("level", LoggingConfig.level)),
            output_format=str(logging_data.get("output_format", LoggingConfig.output_format)),
        )

        messages_data = data.get("messages", {})
        messages = MessagesConfig(
            prefer_server_rate_limit_message=bool(
                messages_data.get("prefer_server_rate_limit_message", False)
            ),
        )

        leaderboard = data.get("leaderboard")
        if leaderboard is None:
            leaderboard = list(DEFAULT_LEADERBOARD)
        elif not isinstance(leaderboard, list):
            raise TypeError("leaderboard must be a list of names")

        config = AppConfig(
            api=api,
            history=history,
            logging=logging_config,
            messages=messages,
            language=str(data.get("language", "en")),
            name_suffix=str(data.get("name_suffix", ".eth")),
            leaderboard=[str(name) for name in leaderboard],
        )
    except (AttributeError, TypeError, ValueError) as e:
        raise ConfigError(
            code="invalid_config",
            message=f"Invalid configuration value: {e}",
        )

    validate_config(config)
    return config


def validate_config(config: AppConfig) -> None:
    """
    Check value ranges that the dataclasses cannot express.

    Raises:
        ConfigError: If any value is out of range
    """
    if config.history.capacity < 1:
        raise ConfigError(
            code="invalid_config",
            message="history.capacity must be at least 1",
            details={"capacity": config.history.capacity},
        )
    if config.api.timeout_seconds <= 0:
        raise ConfigError(
            code="invalid_config",
            message="api.timeout_seconds must be positive",
            details={"timeout_seconds": config.api.timeout_seconds},
        )
    if config.language not in ("de", "en"):
        raise ConfigError(
            code="invalid_config",
            message=f"Unsupported language: {config.language}",
            details={"language": config.language},
        )
    if config.logging.output_format not in ("json", "text", "both"):
        raise ConfigError(
            code="invalid_config",
            message=f"Invalid logging.output_format: {config.logging.output_format}",
        )
    if config.logging.level not in ("debug", "info", "warn", "error"):
        raise ConfigError(
            code="invalid_config",
            message=f"Invalid logging.level: {config.logging.level}",
        )
    if not config.name_suffix.strip():
        raise ConfigError(code="invalid_config", message="name_suffix cannot be empty")


def load_config_from_file(config_path: Path) -> Optional[AppConfig]:
    """
    Load configuration from a JSON file.

    Args:
        config_path: Path to the configuration file

    Returns:
        AppConfig if the file exists, None otherwise

    Raises:
        ConfigError: If the file is not valid JSON or holds invalid values
    """
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        return None
    except json.JSONDecodeError as e:
        raise ConfigError(
            code="parse_error",
            message=f"Failed to parse config file: {e}",
            details={"config_path": str(config_path)},
        )
    except OSError as e:
        raise ConfigError(
            code="io_error",
            message=f"Failed to read config file: {e}",
            details={"config_path": str(config_path)},
        )

    return config_from_dict(data)


def save_config_to_file(config: AppConfig, config_path: Path) -> None:
    """
    Save configuration to a JSON file.

    Raises:
        ConfigError: If the file cannot be written
    """
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, "w", encoding="utf-8") as f:
            json.dump(config_to_dict(config), f, indent=2, ensure_ascii=False)
    except OSError as e:
        raise ConfigError(
            code="io_error",
            message=f"Failed to write config file: {e}",
            details={"config_path": str(config_path)},
        )


def apply_env_overrides(config: AppConfig, dotenv_path: Optional[Path] = None) -> AppConfig:
    """
    Apply PASTENS_* environment variables on top of ``config``.

    A ``.env`` file is loaded first; variables already set in the
    environment take precedence over it.

    Recognized variables: PASTENS_API_URL, PASTENS_LANGUAGE,
    PASTENS_HISTORY_FILE, PASTENS_LOG_LEVEL.
    """
    load_dotenv(dotenv_path=dotenv_path)

    api = config.api
    history = config.history
    logging_config = config.logging
    language = config.language

    api_url = os.getenv("PASTENS_API_URL", "").strip()
    if api_url:
        api = replace(api, base_url=api_url)

    history_file = os.getenv("PASTENS_HISTORY_FILE", "").strip()
    if history_file:
        history = replace(history, storage_path=Path(history_file).expanduser())

    log_level = os.getenv("PASTENS_LOG_LEVEL", "").strip().lower()
    if log_level:
        logging_config = replace(logging_config, level=log_level)

    env_language = os.getenv("PASTENS_LANGUAGE", "").strip().lower()
    if env_language in ("de", "en"):
        language = env_language

    updated = replace(
        config,
        api=api,
        history=history,
        logging=logging_config,
        language=language,
    )
    validate_config(updated)
    return updated
