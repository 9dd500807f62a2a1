"""Logging setup and secret redaction"""

import logging
from typing import Any, Optional

PACKAGE_LOGGER = "surf_retreats"

DEFAULT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

# Substrings of keys whose values must never reach a log line
SENSITIVE_FIELDS = [
    "authorization",
    "secret",
    "password",
    "token",
    "api_key",
    "stripe-signature",
    "vat_id",
    "vatnumber",
]

REDACTED = "[REDACTED]"


def configure_logging(
    level: int = logging.INFO,
    fmt: str = DEFAULT_FORMAT,
    handler: Optional[logging.Handler] = None,
) -> logging.Logger:
    """
    Attach a handler to the package logger

    Safe to call more than once; the handler is only added the first time.

    Args:
        level: Log level for the package logger
        fmt: Format string for the handler
        handler: Handler to use instead of a stderr StreamHandler

    Returns:
        The package logger
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)

    if not logger.handlers:
        handler = handler or logging.StreamHandler()
        handler.setFormatter(logging.Formatter(fmt))
        logger.addHandler(handler)

    return logger


def redact_sensitive(obj: Any) -> Any:
    """Return a copy of ``obj`` with values under sensitive keys masked"""
    if isinstance(obj, list):
        return [redact_sensitive(item) for item in obj]

    if isinstance(obj, tuple) and len(obj) == 2 and isinstance(obj[0], str):
        # form field pair
        if _is_sensitive(obj[0]):
            return (obj[0], REDACTED)
        return obj

    if isinstance(obj, dict):
        redacted = {}
        for key, value in obj.items():
            if isinstance(key, str) and _is_sensitive(key):
                redacted[key] = REDACTED
            elif isinstance(value, (dict, list)):
                redacted[key] = redact_sensitive(value)
            else:
                redacted[key] = value
        return redacted

    return obj


def _is_sensitive(key: str) -> bool:
    lower_key = key.lower()
    return any(field in lower_key for field in SENSITIVE_FIELDS)
