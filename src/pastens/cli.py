"""
Command-line interface for pastens.

This module provides the main CLI entry point with commands for:
- lookup: Show the ownership history of one ENS name or route path
- history: List, remove or clear previous searches
- leaderboard: List popular names and optionally look one up
- shell: Interactive search session
- config: Configuration management
"""

import argparse
import asyncio
import dataclasses
import json
import sys
from pathlib import Path
from typing import Optional

from . import __version__
from .app import PastensApp, create_logger
from .audit_logger import AuditLogger
from .config import (
    DEFAULT_CONFIG_PATH,
    AppConfig,
    apply_env_overrides,
    create_default_config,
    load_config_from_file,
    save_config_to_file,
)
from .enums import LogLevel
from .events import (
    DismissHistory,
    RemoveHistoryEntry,
    SelectHistoryEntry,
    SubmitSearch,
    ToggleHistory,
)
from .exceptions import ConfigError
from .history_store import SearchHistoryStore
from .i18n import get_message
from .local_storage import JsonFileStorage
from .models import ControllerSnapshot, Failed, Loading, Succeeded
from .name_normalizer import NameNormalizer
from .view import render


def resolve_config(args: argparse.Namespace) -> Optional[AppConfig]:
    """
    Build the effective configuration for a command.

    Order: config file (explicit or default path), then environment and
    .env overrides, then command line flags.

    Returns:
        AppConfig, or None if the configuration could not be loaded
    """
    config_path = Path(args.config) if getattr(args, "config", None) else DEFAULT_CONFIG_PATH
    try:
        config = load_config_from_file(config_path)
        if config is None and getattr(args, "config", None):
            print(f"Error: Config file not found: {config_path}", file=sys.stderr)
            return None
        if config is None:
            config = create_default_config()
        config = apply_env_overrides(config)
    except ConfigError as e:
        print(f"Error loading config: {e.message}", file=sys.stderr)
        return None

    if getattr(args, "language", None):
        config = dataclasses.replace(config, language=args.language)
    if getattr(args, "dry_run", False):
        config = dataclasses.replace(
            config, api=dataclasses.replace(config.api, simulation_mode=True)
        )
    return config


def build_logger(config: AppConfig, verbose: bool = False) -> AuditLogger:
    if verbose:
        return AuditLogger(output_format=config.logging.output_format, min_level=LogLevel.DEBUG)
    return create_logger(config)


def snapshot_to_dict(snapshot: ControllerSnapshot) -> dict:
    """Serialize a snapshot for --json output."""
    state = snapshot.state
    data = {
        "phase": state.phase.value,
        "history": list(snapshot.history),
    }
    if isinstance(state, Succeeded):
        data["result"] = dataclasses.asdict(state.result)
    elif isinstance(state, Failed):
        data["error"] = {"message": state.message, "kind": state.kind.value}
    elif isinstance(state, Loading):
        data["term"] = state.term
    return data


async def run_lookup(
    target: str,
    config: AppConfig,
    verbose: bool = False,
    as_json: bool = False,
) -> int:
    """
    Look up one name, or the name encoded in a route path.

    Args:
        target: Name ('ens') or route path ('/ens.eth')
        config: Application configuration
        verbose: Enable debug logging
        as_json: Print JSON instead of the rendered view

    Returns:
        Exit code (0 on success, 1 on error)
    """
    language = config.language

    if config.api.simulation_mode:
        print(get_message("simulation.enabled", language))

    is_path = target.startswith("/")
    async with PastensApp(
        config,
        logger=build_logger(config, verbose),
        initial_path=target if is_path else "/",
    ) as app:
        if is_path:
            await app.controller.initialize_from_route()
        else:
            if not as_json:
                print(get_message("cli.looking_up", language, name=app.normalizer.normalize(target)))
            await app.controller.dispatch(SubmitSearch(target))
        snapshot = app.controller.snapshot()
        leaderboard = app.leaderboard.names

    if as_json:
        print(json.dumps(snapshot_to_dict(snapshot), indent=2, ensure_ascii=False))
    else:
        print(render(snapshot, language, leaderboard=leaderboard if verbose else ()))

    return 0 if isinstance(snapshot.state, Succeeded) else 1


async def run_shell(config: AppConfig, verbose: bool = False) -> int:
    """Interactive session: every line is a search or a ':' command."""
    language = config.language

    async with PastensApp(config, logger=build_logger(config, verbose)) as app:
        controller = app.controller
        print(render(controller.snapshot(), language, leaderboard=app.leaderboard.names))
        print(get_message("cli.shell_help", language))

        while True:
            try:
                line = await asyncio.to_thread(input, "pastens> ")
            except (EOFError, KeyboardInterrupt):
                print()
                break

            line = line.strip()
            if not line:
                continue

            command, _, argument = line.partition(" ")
            argument = argument.strip()

            if command in (":q", ":quit"):
                break
            elif command == ":h":
                await controller.dispatch(ToggleHistory())
            elif command == ":x":
                await controller.dispatch(DismissHistory())
            elif command == ":rm":
                await controller.dispatch(RemoveHistoryEntry(argument))
            elif command == ":hist":
                history = controller.history.list()
                if argument.isdecimal() and 1 <= int(argument) <= len(history):
                    await controller.dispatch(SelectHistoryEntry(history[int(argument) - 1]))
                else:
                    print(get_message("cli.invalid_pick", language, choice=argument))
                    continue
            elif command == ":pick":
                try:
                    await app.leaderboard.choose(argument)
                except KeyError:
                    print(get_message("cli.invalid_pick", language, choice=argument))
                    continue
            elif command == ":back":
                app.route.back()
                await controller.wait_idle()
            elif command == ":go":
                app.route.navigate(argument or "/")
                await controller.wait_idle()
            elif command.startswith(":"):
                print(get_message("cli.shell_help", language))
                continue
            else:
                await controller.dispatch(SubmitSearch(line))

            print(render(controller.snapshot(), language))

    return 0


def open_history_store(config: AppConfig) -> SearchHistoryStore:
    return SearchHistoryStore(
        storage=JsonFileStorage(config.history.storage_path),
        key=config.history.storage_key,
        capacity=config.history.capacity,
        normalizer=NameNormalizer(config.name_suffix),
        logger=create_logger(config),
    )


def cmd_lookup(args: argparse.Namespace) -> int:
    """Handle the 'lookup' command."""
    config = resolve_config(args)
    if config is None:
        return 1

    return asyncio.run(run_lookup(
        target=args.name,
        config=config,
        verbose=args.verbose,
        as_json=args.json,
    ))


def cmd_history(args: argparse.Namespace) -> int:
    """Handle the 'history' command."""
    config = resolve_config(args)
    if config is None:
        return 1
    language = config.language
    store = open_history_store(config)

    if args.action == "list":
        entries = store.list()
        if not entries:
            print(get_message("cli.history_empty", language))
            return 0
        for index, entry in enumerate(entries, start=1):
            print(f"{index:>2}. {entry}")
        return 0

    if args.action == "remove":
        if not args.name:
            print("Error: 'history remove' needs a name", file=sys.stderr)
            return 1
        name = NameNormalizer(config.name_suffix).normalize(args.name)
        if name not in store:
            print(get_message("cli.history_not_found", language, name=name))
            return 1
        store.remove(name)
        print(get_message("cli.history_removed", language, name=name))
        return 0

    if args.action == "clear":
        store.clear()
        print(get_message("cli.history_cleared", language))
        return 0

    return 1


def cmd_leaderboard(args: argparse.Namespace) -> int:
    """Handle the 'leaderboard' command."""
    config = resolve_config(args)
    if config is None:
        return 1
    language = config.language

    async def pick(choice: str) -> int:
        async with PastensApp(config, logger=build_logger(config)) as app:
            try:
                await app.leaderboard.choose(choice)
            except KeyError:
                print(get_message("cli.invalid_pick", language, choice=choice), file=sys.stderr)
                return 1
            snapshot = app.controller.snapshot()
        print(render(snapshot, language))
        return 0 if isinstance(snapshot.state, Succeeded) else 1

    if args.pick:
        return asyncio.run(pick(args.pick))

    print(get_message("view.leaderboard", language))
    for index, name in enumerate(config.leaderboard, start=1):
        print(f"  {index:>2}. {name}")
    return 0


def cmd_shell(args: argparse.Namespace) -> int:
    """Handle the 'shell' command."""
    config = resolve_config(args)
    if config is None:
        return 1
    return asyncio.run(run_shell(config, verbose=args.verbose))


def cmd_config(args: argparse.Namespace) -> int:
    """Handle the 'config' command."""
    config_path = Path(args.path) if args.path else DEFAULT_CONFIG_PATH

    if args.action == "show":
        try:
            config = load_config_from_file(config_path)
        except ConfigError as e:
            print(f"Error: {e.message}", file=sys.stderr)
            return 1
        if config is None:
            print(f"No configuration found at: {config_path}")
            print("Use 'config init' to create a default configuration.")
            return 1

        print(f"Configuration from: {config_path}")
        print(f"  API: {config.api.base_url}")
        print(f"  Language: {config.language}")
        print(f"  Simulation mode: {config.api.simulation_mode}")
        print(f"  History file: {config.history.storage_path}")
        print(f"  History capacity: {config.history.capacity}")
        print(f"  Log level: {config.logging.level}")
        return 0

    elif args.action == "init":
        if config_path.exists() and not args.force:
            print(f"Configuration already exists at: {config_path}")
            print("Use --force to overwrite.")
            return 1

        try:
            save_config_to_file(create_default_config(language=args.language or "en"), config_path)
        except ConfigError as e:
            print(f"Error: {e.message}", file=sys.stderr)
            return 1
        print(f"Configuration created at: {config_path}")
        return 0

    elif args.action == "validate":
        try:
            config = load_config_from_file(config_path)
        except ConfigError as e:
            print(f"Error: {e.message}", file=sys.stderr)
            return 1
        if config is None:
            print(f"Error: Could not load config from {config_path}", file=sys.stderr)
            return 1

        print(f"Configuration at {config_path} is valid.")
        return 0

    return 1


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config", "-c",
        help="Path to configuration file",
    )
    parser.add_argument(
        "--language", "-l",
        choices=["de", "en"],
        help="Output language (default: en)",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="pastens",
        description="Explore the ownership history of ENS names",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # 'lookup' command
    lookup_parser = subparsers.add_parser(
        "lookup",
        help="Show the ownership history of an ENS name",
    )
    lookup_parser.add_argument(
        "name",
        help="ENS name (e.g., ens or ens.eth) or route path (e.g., /ens.eth)",
    )
    lookup_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Simulation mode - no real network requests",
    )
    lookup_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the result as JSON",
    )
    lookup_parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose output",
    )
    _add_common_arguments(lookup_parser)
    lookup_parser.set_defaults(func=cmd_lookup)

    # 'history' command
    history_parser = subparsers.add_parser(
        "history",
        help="Manage the search history",
    )
    history_parser.add_argument(
        "action",
        choices=["list", "remove", "clear"],
        help="History action",
    )
    history_parser.add_argument(
        "name",
        nargs="?",
        help="Name to remove (for 'remove')",
    )
    _add_common_arguments(history_parser)
    history_parser.set_defaults(func=cmd_history)

    # 'leaderboard' command
    leaderboard_parser = subparsers.add_parser(
        "leaderboard",
        help="List popular names",
    )
    leaderboard_parser.add_argument(
        "--pick", "-p",
        help="Look up the name at this position (or with this name)",
    )
    leaderboard_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Simulation mode - no real network requests",
    )
    _add_common_arguments(leaderboard_parser)
    leaderboard_parser.set_defaults(func=cmd_leaderboard)

    # 'shell' command
    shell_parser = subparsers.add_parser(
        "shell",
        help="Interactive search session",
    )
    shell_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Simulation mode - no real network requests",
    )
    shell_parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose output",
    )
    _add_common_arguments(shell_parser)
    shell_parser.set_defaults(func=cmd_shell)

    # 'config' command
    config_parser = subparsers.add_parser(
        "config",
        help="Configuration management",
    )
    config_parser.add_argument(
        "action",
        choices=["show", "init", "validate"],
        help="Configuration action",
    )
    config_parser.add_argument(
        "--path", "-p",
        help="Path to configuration file",
    )
    config_parser.add_argument(
        "--force", "-f",
        action="store_true",
        help="Force overwrite existing configuration",
    )
    config_parser.add_argument(
        "--language", "-l",
        choices=["de", "en"],
        help="Default language for new configuration",
    )
    config_parser.set_defaults(func=cmd_config)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
