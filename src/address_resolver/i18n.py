"""
Internationalization (i18n) module for the address resolver.

Provides translations for all user-facing messages in English (en) and German (de).
"""

from typing import Iterable, Optional


# Supported languages
SUPPORTED_LANGUAGES = frozenset({"en", "de"})
DEFAULT_LANGUAGE = "en"


# Structure: {message_key: {language_code: translated_message}}
TRANSLATIONS: dict[str, dict[str, str]] = {
    # Recipient input messages
    "input.address_invalid": {
        "en": "Recipient address is invalid",
        "de": "Empfängeradresse ist ungültig",
    },
    "input.unsupported_suffix": {
        "en": "Currently only {suffixes} are supported.",
        "de": "Derzeit werden nur {suffixes} unterstützt.",
    },
    "input.not_found": {
        "en": "{name} does not exist",
        "de": "{name} existiert nicht",
    },
    "input.lookup_failed": {
        "en": "{error} for {name}",
        "de": "{error} für {name}",
    },
    "input.unconfirmed": {
        "en": (
            "This domain has been transferred or inscribed recently. "
            "Please wait for block confirmations ({confirmations}/{required})."
        ),
        "de": (
            "Diese Domain wurde kürzlich übertragen oder inskribiert. "
            "Bitte warte auf Blockbestätigungen ({confirmations}/{required})."
        ),
    },
    "input.name_resolved": {
        "en": "Name recognized and resolved.",
        "de": "Name erkannt und aufgelöst.",
    },
    "input.searching": {
        "en": "Loading...",
        "de": "Wird geladen...",
    },
    "list.and": {
        "en": "and",
        "de": "und",
    },

    # State labels
    "state.idle": {
        "en": "Idle",
        "de": "Leer",
    },
    "state.searching": {
        "en": "Searching",
        "de": "Suche läuft",
    },
    "state.resolved_trusted": {
        "en": "Resolved",
        "de": "Aufgelöst",
    },
    "state.resolved_untrusted": {
        "en": "Resolved (awaiting confirmations)",
        "de": "Aufgelöst (wartet auf Bestätigungen)",
    },
    "state.format_error": {
        "en": "Invalid input",
        "de": "Ungültige Eingabe",
    },
    "state.not_found": {
        "en": "Not found",
        "de": "Nicht gefunden",
    },

    # CLI messages
    "cli.resolving": {
        "en": "Resolving: {text}",
        "de": "Löse auf: {text}",
    },
    "cli.state": {
        "en": "State: {state}",
        "de": "Status: {state}",
    },
    "cli.address": {
        "en": "Address: {address}",
        "de": "Adresse: {address}",
    },
    "cli.owner": {
        "en": "Owner: {address} ({confirmations} confirmations)",
        "de": "Inhaber: {address} ({confirmations} Bestätigungen)",
    },
    "cli.replaying": {
        "en": "Replaying {count} keystroke(s)...",
        "de": "Spiele {count} Eingabe(n) ab...",
    },
    "cli.no_checker": {
        "en": "No address checker configured; raw addresses will be rejected.",
        "de": "Kein Adressprüfer konfiguriert; Rohadressen werden abgelehnt.",
    },
    "simulation.enabled": {
        "en": "Simulation mode: no network requests are made.",
        "de": "Simulationsmodus: Es werden keine Netzwerkanfragen gestellt.",
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
        key: The message key (e.g., 'input.address_invalid')
        language: Language code ('en' or 'de'). Defaults to DEFAULT_LANGUAGE.
        **kwargs: Format arguments for the message template

    Returns:
        The translated and formatted message string.
        If the key is not found, returns the key itself.
        If the language is not found, falls back to DEFAULT_LANGUAGE.

    Examples:
        >>> get_message('input.address_invalid', 'en')
        'Recipient address is invalid'
        >>> get_message('input.not_found', 'de', name='alice.sats')
        'alice.sats existiert nicht'
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
            # Missing placeholder value, keep the template
            pass

    return message


def join_with_and(items: Iterable[str], language: Optional[str] = None) -> str:
    """
    Join items with commas and a final localized "and".

    Examples:
        >>> join_with_and(['.sats'], 'en')
        '.sats'
        >>> join_with_and(['.sats', '.unisat', '.x'], 'en')
        '.sats, .unisat and .x'
    """
    items = list(items)
    if not items:
        return ""
    if len(items) == 1:
        return items[0]
    conjunction = get_message("list.and", language)
    return f"{', '.join(items[:-1])} {conjunction} {items[-1]}"


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
