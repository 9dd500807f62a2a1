"""
Configuration Loader
Loads site configuration from various sources
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from surf_retreats.config.site_config import (
    SiteConfig,
    SiteEnvironment,
    ENV_VAR_MAPPING,
    ConfigDefaults,
)
from surf_retreats.config.config_validator import ConfigValidator
from surf_retreats.exceptions import ConfigError


_BOOLEAN_FIELDS = ("enable_audit_log",)
_INTEGER_FIELDS = (
    "timeout",
    "retry_attempts",
    "retry_delay",
    "early_bird_percent",
    "webhook_tolerance",
)


class ConfigLoader:
    """
    ConfigLoader class
    Provides multiple ways to load and merge configuration
    """

    def __init__(self) -> None:
        self._validator = ConfigValidator()

    def from_file(self, path: Union[str, Path]) -> Dict[str, Any]:
        """
        Load configuration from a JSON file

        Args:
            path: Path to JSON configuration file

        Returns:
            Loaded configuration dictionary

        Raises:
            ConfigError: If file not found or invalid JSON
        """
        file_path = Path(path).resolve()

        if not file_path.exists():
            raise ConfigError(
                f"Configuration file not found: {file_path}",
                code="CONFIG_FILE_NOT_FOUND"
            )

        try:
            with open(file_path, "r", encoding="utf-8") as f:
                config = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(
                f"Invalid JSON in configuration file: {file_path}",
                code="CONFIG_PARSE_ERROR"
            ) from e

        if not isinstance(config, dict):
            raise ConfigError(
                f"Configuration file must contain a JSON object: {file_path}",
                code="CONFIG_PARSE_ERROR"
            )
        return config

    def from_environment(self) -> Dict[str, Any]:
        """
        Load configuration from environment variables

        Returns:
            Configuration dictionary from environment variables
        """
        config: Dict[str, Any] = {}

        for env_var, config_key in ENV_VAR_MAPPING.items():
            value = os.environ.get(env_var)
            if value is not None and value != "":
                config[config_key] = self._parse_env_value(config_key, value)

        return config

    def from_dict(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """Return a copy of a programmatic configuration dictionary"""
        return config.copy()

    def merge(self, *sources: Dict[str, Any]) -> Dict[str, Any]:
        """
        Merge multiple configuration sources
        Priority: later sources override earlier sources

        Args:
            sources: Configuration dictionaries in order of increasing priority

        Returns:
            Merged configuration dictionary
        """
        merged: Dict[str, Any] = {}

        for source in sources:
            merged.update(self._filter_none(source))

        return merged

    def resolve(self, config: Dict[str, Any]) -> SiteConfig:
        """
        Resolve configuration with defaults and validation

        Args:
            config: Partial configuration dictionary

        Returns:
            Fully resolved SiteConfig object

        Raises:
            ValidationError: If configuration is invalid
        """
        self._validator.validate_or_raise(config)
        return SiteConfig(**config)

    def load(
        self,
        file: Optional[Union[str, Path]] = None,
        env: bool = True,
        config: Optional[Dict[str, Any]] = None,
    ) -> SiteConfig:
        """
        Load, merge, and resolve configuration from multiple sources

        Args:
            file: Path to JSON configuration file (optional)
            env: Whether to load from environment variables (default: True)
            config: Programmatic configuration dictionary (optional)

        Returns:
            Fully resolved SiteConfig object
        """
        sources: List[Dict[str, Any]] = []

        if file is not None:
            sources.append(self.from_file(file))

        if env:
            sources.append(self.from_environment())

        if config is not None:
            sources.append(self.from_dict(config))

        return self.resolve(self.merge(*sources))

    def create_template(self, path: Union[str, Path]) -> None:
        """
        Create a configuration template file

        Secrets are left empty; they belong in the environment.

        Args:
            path: Path to write template
        """
        template = {
            "site_url": ConfigDefaults.SITE_URL,
            "environment": ConfigDefaults.ENVIRONMENT.value,
            "company_country": ConfigDefaults.COMPANY_COUNTRY,
            "default_locale": ConfigDefaults.DEFAULT_LOCALE,
            "currency": ConfigDefaults.CURRENCY,
            "stripe_secret_key": "",
            "stripe_webhook_secret": "",
            "feedback_token_secret": "",
            "vies_url": ConfigDefaults.VIES_URL,
            "timeout": ConfigDefaults.TIMEOUT,
            "retry_attempts": ConfigDefaults.RETRY_ATTEMPTS,
            "retry_delay": ConfigDefaults.RETRY_DELAY,
            "enable_audit_log": ConfigDefaults.ENABLE_AUDIT_LOG,
            "early_bird_percent": ConfigDefaults.EARLY_BIRD_PERCENT,
            "webhook_tolerance": ConfigDefaults.WEBHOOK_TOLERANCE,
        }

        file_path = Path(path)
        file_path.parent.mkdir(parents=True, exist_ok=True)

        with open(file_path, "w", encoding="utf-8") as f:
            json.dump(template, f, indent=2)

    def _parse_env_value(self, key: str, value: str) -> Any:
        """Parse environment variable value to appropriate type"""
        if key in _BOOLEAN_FIELDS:
            return value.lower() in ("true", "1", "yes")

        if key in _INTEGER_FIELDS:
            try:
                return int(value)
            except ValueError:
                return value

        if key == "environment":
            try:
                return SiteEnvironment(value.lower())
            except ValueError:
                return value

        if key == "company_country":
            return value.strip().upper()

        return value

    def _filter_none(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """Filter out None values and empty secrets from config dictionary"""
        return {
            k: v for k, v in config.items()
            if v is not None and not (isinstance(v, str) and v == "")
        }
