"""Utilities module initialization"""

from surf_retreats.utils.logger import configure_logging, redact_sensitive

__all__ = ["configure_logging", "redact_sensitive"]
