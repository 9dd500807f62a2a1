"""Internationalization module initialization"""

from surf_retreats.i18n.locales import (
    LOCALES,
    DEFAULT_LOCALE,
    LOCALE_NAMES,
    is_supported_locale,
)
from surf_retreats.i18n.negotiation import (
    LOCALE_COOKIE,
    parse_accept_language,
    negotiate_locale,
    strip_locale_prefix,
    is_admin_path,
)

__all__ = [
    "LOCALES",
    "DEFAULT_LOCALE",
    "LOCALE_NAMES",
    "LOCALE_COOKIE",
    "is_supported_locale",
    "parse_accept_language",
    "negotiate_locale",
    "strip_locale_prefix",
    "is_admin_path",
]
