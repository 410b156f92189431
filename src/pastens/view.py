"""
Text renderer for controller snapshots.

Every function here is a pure mapping from already-computed state to
lines of text; nothing mutates the controller.
"""

from datetime import datetime, timezone
from typing import Optional, Sequence

from .i18n import get_message
from .models import (
    ControllerSnapshot,
    Failed,
    Loading,
    OwnerRecord,
    SearchResult,
    SearchState,
    Succeeded,
)


RULE = "-" * 60


def format_date(value: Optional[str], language: str = "en") -> str:
    """
    Render an ISO-8601 string or unix timestamp as YYYY-MM-DD.

    Values that are neither are returned unchanged.
    """
    if not value:
        return get_message("view.unknown_date", language)

    text = value.strip()
    if text.isdecimal():
        seconds = int(text)
        # Millisecond timestamps
        if seconds > 10**11:
            seconds //= 1000
        try:
            return datetime.fromtimestamp(seconds, tz=timezone.utc).strftime("%Y-%m-%d")
        except (OverflowError, OSError, ValueError):
            return text

    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).strftime("%Y-%m-%d")
    except ValueError:
        return text


def format_owner(owner: OwnerRecord) -> str:
    if owner.ens_name:
        return f"{owner.address} ({owner.ens_name})"
    return owner.address


def render_form(snapshot: ControllerSnapshot, language: str = "en") -> list[str]:
    loading = isinstance(snapshot.state, Loading)
    text = snapshot.input_text or get_message("view.input_placeholder", language)
    button = get_message("view.searching_button" if loading else "view.search_button", language)
    return [f"[ {text} ] [{button}]"]


def render_history_dropdown(snapshot: ControllerSnapshot, language: str = "en") -> list[str]:
    """Render the dropdown; empty when closed or when there is no history."""
    if not snapshot.history_open or not snapshot.history:
        return []
    lines = [f"  {get_message('view.recent_searches', language)}"]
    for index, entry in enumerate(snapshot.history, start=1):
        lines.append(f"    {index}. {entry}")
    return lines


def render_leaderboard(names: Sequence[str], language: str = "en") -> list[str]:
    if not names:
        return []
    lines = [get_message("view.leaderboard", language)]
    for index, name in enumerate(names, start=1):
        lines.append(f"  {index:>2}. {name}")
    return lines


def render_timeline(result: SearchResult, language: str = "en") -> list[str]:
    """Render owners oldest first, followed by current owner, expiry and burns."""
    lines: list[str] = []

    if result.owners:
        present = get_message("view.present", language)
        for index, owner in enumerate(result.owners, start=1):
            start = format_date(owner.start_date, language)
            end = format_date(owner.end_date, language) if owner.end_date else present
            lines.append(f"  {index}. {format_owner(owner)}")
            lines.append(f"     {start} -> {end}")
            if owner.transaction_hash:
                block = f" @ {owner.block_number}" if owner.block_number else ""
                lines.append(f"     tx {owner.transaction_hash}{block}")
    else:
        lines.append(f"  {get_message('view.no_owners', language)}")

    if result.current_owner is not None:
        lines.append(
            f"{get_message('view.current_owner', language)}: {format_owner(result.current_owner)}"
        )

    if result.expiry_date:
        lines.append(
            f"{get_message('view.expiry_date', language)}: {format_date(result.expiry_date, language)}"
        )

    if result.burn_events:
        lines.append(get_message("view.burn_events", language))
        for event in result.burn_events:
            lines.append("  " + get_message(
                "view.burn_event",
                language,
                date=format_date(event.date, language),
                block=event.block_number or "?",
                tx=event.transaction_hash or "?",
            ))

    return lines


def render_panel(state: SearchState, language: str = "en") -> list[str]:
    """Render exactly one of the error, loading, result or idle panels."""
    if isinstance(state, Failed):
        return [get_message("view.error_title", language), state.message]

    if isinstance(state, Loading):
        return [get_message("view.loading", language, name=state.term)]

    if isinstance(state, Succeeded):
        result = state.result
        return [
            result.name,
            get_message("view.ownership_history", language),
            *render_timeline(result, language),
        ]

    return [
        get_message("view.idle_prompt", language),
        get_message("view.idle_hint", language),
    ]


def render(
    snapshot: ControllerSnapshot,
    language: str = "en",
    leaderboard: Sequence[str] = (),
) -> str:
    """Render the whole page."""
    lines = [get_message("view.title", language), ""]
    lines.extend(render_leaderboard(leaderboard, language))
    if leaderboard:
        lines.append("")
    lines.extend(render_form(snapshot, language))
    lines.extend(render_history_dropdown(snapshot, language))
    lines.append(RULE)
    lines.extend(render_panel(snapshot.state, language))
    return "\n".join(lines)
