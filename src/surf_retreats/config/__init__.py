"""
Configuration module
"""

from surf_retreats.config.site_config import (
    SiteConfig,
    SiteEnvironment,
    ENV_VAR_MAPPING,
    ConfigDefaults,
)
from surf_retreats.config.config_loader import ConfigLoader
from surf_retreats.config.config_validator import (
    ConfigValidator,
    ValidationResult,
    ValidationErrorDetail,
)

__all__ = [
    "SiteConfig",
    "SiteEnvironment",
    "ENV_VAR_MAPPING",
    "ConfigDefaults",
    "ConfigLoader",
    "ConfigValidator",
    "ValidationResult",
    "ValidationErrorDetail",
]
