"""Supported site locales"""

from types import MappingProxyType

LOCALES = ("en", "de", "es", "fr", "nl")
DEFAULT_LOCALE = "en"

LOCALE_NAMES = MappingProxyType({
    "en": "English",
    "de": "Deutsch",
    "es": "Español",
    "fr": "Français",
    "nl": "Nederlands",
})


def is_supported_locale(value: object) -> bool:
    """Check whether a value is one of the supported locale codes"""
    return isinstance(value, str) and value in LOCALES
