"""
Locale negotiation

The site does not use locale-prefixed URLs. The active locale comes from
the ``locale`` cookie set by the language switcher, then from the browser's
Accept-Language header, then falls back to the default locale. Old
locale-prefixed links are permanently redirected to the unprefixed path.
"""

import re
from typing import List, Optional

from surf_retreats.i18n.locales import DEFAULT_LOCALE, LOCALES, is_supported_locale

LOCALE_COOKIE = "locale"

_LOCALE_PREFIX = re.compile(r"^/(%s)(/.*)?$" % "|".join(LOCALES))


def parse_accept_language(header: Optional[str]) -> List[str]:
    """
    Extract primary language subtags from an Accept-Language header

    Tags keep their header order. Quality values are dropped, not used
    for sorting.

    >>> parse_accept_language("de-DE,de;q=0.9,en;q=0.8")
    ['de', 'de', 'en']
    """
    if not header:
        return []

    tags: List[str] = []
    for part in header.split(","):
        tag = part.split(";")[0].strip().split("-")[0]
        if tag:
            tags.append(tag)
    return tags


def negotiate_locale(
    cookie_locale: Optional[str] = None,
    accept_language: Optional[str] = None,
    default: str = DEFAULT_LOCALE,
) -> str:
    """
    Pick the locale for a request

    Args:
        cookie_locale: Value of the ``locale`` cookie, if any
        accept_language: Raw Accept-Language header, if any
        default: Locale returned when nothing matches

    Returns:
        A supported locale code
    """
    if is_supported_locale(cookie_locale):
        return cookie_locale

    for tag in parse_accept_language(accept_language):
        if is_supported_locale(tag):
            return tag

    return default


def strip_locale_prefix(path: str) -> Optional[str]:
    """
    Return the path without its leading locale segment

    Returns ``None`` when the path carries no locale prefix, so callers
    can tell "no redirect needed" apart from a redirect to ``/``.

    >>> strip_locale_prefix("/de/retreats/bali")
    '/retreats/bali'
    >>> strip_locale_prefix("/fr")
    '/'
    """
    match = _LOCALE_PREFIX.match(path)
    if match is None:
        return None
    return match.group(2) or "/"


def is_admin_path(path: str) -> bool:
    """Admin pages require an authenticated admin profile"""
    return path.startswith("/admin")
