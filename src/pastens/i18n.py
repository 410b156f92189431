"""
Internationalization (i18n) module for pastens.

Provides translations for all user-facing messages in German (de) and English (en).
"""

from typing import Optional


# Supported languages
SUPPORTED_LANGUAGES = frozenset({"de", "en"})
DEFAULT_LANGUAGE = "en"


# Translation dictionary with all messages
# Structure: {message_key: {language_code: translated_message}}
TRANSLATIONS: dict[str, dict[str, str]] = {
    # Lookup error messages
    "error.rate_limited": {
        "de": "Anfragelimit überschritten. Die Graph-API drosselt vorübergehend Anfragen. Bitte warte einen Moment und versuche es erneut.",
        "en": "Rate limit exceeded. The Graph API is temporarily rate-limiting requests. Please wait a few moments and try again.",
    },
    "error.lookup_failed": {
        "de": "ENS-Verlauf konnte nicht abgerufen werden. Bitte versuche es erneut.",
        "en": "Failed to fetch ENS history. Please try again.",
    },

    # View: header and form
    "view.title": {
        "de": "pastens - Besitzverlauf von ENS-Namen",
        "en": "pastens - ownership history of ENS names",
    },
    "view.input_placeholder": {
        "de": "ENS-Namen eingeben (z. B. ens.eth)",
        "en": "Enter ENS name (e.g., ens.eth)",
    },
    "view.search_button": {
        "de": "Suchen",
        "en": "Search",
    },
    "view.searching_button": {
        "de": "Suche läuft...",
        "en": "Searching...",
    },

    # View: history dropdown and leaderboard
    "view.recent_searches": {
        "de": "Letzte Suchen",
        "en": "Recent Searches",
    },
    "view.leaderboard": {
        "de": "Beliebte Namen",
        "en": "Popular names",
    },

    # View: result panel
    "view.idle_prompt": {
        "de": "Gib oben einen ENS-Namen ein, um seinen Besitzverlauf zu sehen",
        "en": "Enter an ENS name above to view its ownership history",
    },
    "view.idle_hint": {
        "de": "Sieh, wem die Domain gehörte und wann der Besitz wechselte",
        "en": "See who owned the domain and when ownership changed",
    },
    "view.loading": {
        "de": "Lade Besitzverlauf für {name}...",
        "en": "Loading ownership history for {name}...",
    },
    "view.error_title": {
        "de": "Fehler",
        "en": "Error",
    },
    "view.ownership_history": {
        "de": "Besitzverlauf",
        "en": "Ownership history",
    },
    "view.current_owner": {
        "de": "Aktueller Besitzer",
        "en": "Current owner",
    },
    "view.expiry_date": {
        "de": "Läuft ab am",
        "en": "Expires",
    },
    "view.present": {
        "de": "heute",
        "en": "present",
    },
    "view.unknown_date": {
        "de": "unbekannt",
        "en": "unknown",
    },
    "view.no_owners": {
        "de": "Keine Besitzwechsel gefunden",
        "en": "No ownership changes found",
    },
    "view.burn_events": {
        "de": "Burn-Ereignisse",
        "en": "Burn events",
    },
    "view.burn_event": {
        "de": "{date}: verbrannt in Block {block} (Tx {tx})",
        "en": "{date}: burned in block {block} (tx {tx})",
    },

    # CLI messages
    "cli.looking_up": {
        "de": "Suche Besitzverlauf für: {name}",
        "en": "Looking up ownership history for: {name}",
    },
    "cli.history_empty": {
        "de": "Keine bisherigen Suchen.",
        "en": "No previous searches.",
    },
    "cli.history_removed": {
        "de": "Aus dem Verlauf entfernt: {name}",
        "en": "Removed from history: {name}",
    },
    "cli.history_not_found": {
        "de": "Nicht im Verlauf: {name}",
        "en": "Not in history: {name}",
    },
    "cli.history_cleared": {
        "de": "Suchverlauf gelöscht.",
        "en": "Search history cleared.",
    },
    "cli.invalid_pick": {
        "de": "Ungültige Auswahl: {choice}",
        "en": "Invalid choice: {choice}",
    },
    "cli.shell_help": {
        "de": "Namen eingeben zum Suchen. Befehle: :h Verlauf, :rm <name>, :pick <nr>, :back, :q",
        "en": "Type a name to search. Commands: :h history, :rm <name>, :pick <n>, :back, :q",
    },
    "simulation.enabled": {
        "de": "Simulationsmodus aktiv - keine echten Netzwerkanfragen",
        "en": "Simulation mode enabled - no real network requests",
    },
}


def get_message(
    key: str,
    language: Optional[str] = None,
    **kwargs,
) -> str:
    """
    Get a translated message by key.

    Args:
        key: The message key (e.g., 'error.rate_limited')
        language: Language code ('de' or 'en'). Defaults to DEFAULT_LANGUAGE.
        **kwargs: Format arguments for the message template

    Returns:
        The translated and formatted message, or the key itself if not found.
    """
    if language is None or language not in SUPPORTED_LANGUAGES:
        language = DEFAULT_LANGUAGE

    translations = TRANSLATIONS.get(key)
    if translations is None:
        return key

    message = translations.get(language)
    if message is None:
        message = translations.get(DEFAULT_LANGUAGE)

    if message is None:
        return key

    if kwargs:
        try:
            message = message.format(**kwargs)
        except KeyError:
            # If formatting fails, return the unformatted message
            pass

    return message


def get_all_message_keys() -> set[str]:
    """Get all available message keys."""
    return set(TRANSLATIONS.keys())


def has_translation(key: str, language: str) -> bool:
    """Check if a translation exists for a key and language."""
    translations = TRANSLATIONS.get(key)
    if translations is None:
        return False
    return language in translations


def get_missing_translations(language: str) -> set[str]:
    """
    Get all message keys that are missing translations for a language.

    Args:
        language: The language code to check

    Returns:
        Set of message keys missing translations for the specified language.
    """
    missing = set()
    for key, translations in TRANSLATIONS.items():
        if language not in translations:
            missing.add(key)
    return missing


def validate_translations() -> dict[str, set[str]]:
    """
    Validate that all languages have all translations.

    Returns:
        Dictionary mapping language codes to sets of missing message keys.
        Empty sets indicate complete translations.
    """
    result = {}
    for language in SUPPORTED_LANGUAGES:
        result[language] = get_missing_translations(language)
    return result
