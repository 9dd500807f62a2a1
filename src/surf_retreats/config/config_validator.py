"""
Configuration Validator
Validates site configuration with clear error messages
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from surf_retreats.config.site_config import SiteEnvironment
from surf_retreats.i18n.locales import LOCALES


@dataclass
class ValidationErrorDetail:
    """Validation error detail"""
    field: str
    message: str
    value: Optional[Any] = None


@dataclass
class ValidationResult:
    """Validation result"""
    valid: bool
    errors: List[ValidationErrorDetail] = field(default_factory=list)


class ConfigValidator:
    """
    ConfigValidator class
    Validates a raw configuration dictionary before it is resolved
    """

    def __init__(self) -> None:
        self._errors: List[ValidationErrorDetail] = []

    def validate(self, config: Dict[str, Any]) -> ValidationResult:
        """
        Validate the entire configuration dictionary

        Args:
            config: Configuration dictionary to validate

        Returns:
            ValidationResult with any errors
        """
        self._errors = []

        self._validate_urls(config)
        self._validate_ranges(config)
        self._validate_environment(config)
        self._validate_locale_and_country(config)
        self._validate_production_secrets(config)

        return ValidationResult(
            valid=len(self._errors) == 0,
            errors=self._errors.copy()
        )

    def validate_or_raise(self, config: Dict[str, Any]) -> None:
        """
        Validate and raise if invalid

        Args:
            config: Configuration dictionary to validate

        Raises:
            ValidationError: If configuration is invalid
        """
        from surf_retreats.exceptions import ValidationError

        result = self.validate(config)
        if not result.valid:
            error_messages = "; ".join(
                f"{e.field}: {e.message}" for e in result.errors
            )
            raise ValidationError(
                f"Configuration validation failed: {error_messages}",
                field=result.errors[0].field,
            )

    def _validate_urls(self, config: Dict[str, Any]) -> None:
        """Validate URL fields"""
        for url_field in ("site_url", "stripe_api_base", "vies_url"):
            value = config.get(url_field)
            if value is None or value == "":
                continue
            if not isinstance(value, str) or not value.startswith(("http://", "https://")):
                self._errors.append(ValidationErrorDetail(
                    field=url_field,
                    message=f"{url_field} must be a valid HTTP/HTTPS URL",
                    value=value
                ))

    def _validate_ranges(self, config: Dict[str, Any]) -> None:
        """Validate numeric ranges"""
        timeout = config.get("timeout")
        if timeout is not None:
            if not isinstance(timeout, (int, float)) or timeout <= 0:
                self._errors.append(ValidationErrorDetail(
                    field="timeout",
                    message="timeout must be a positive number (milliseconds)",
                    value=timeout
                ))
            elif timeout < 1000:
                self._errors.append(ValidationErrorDetail(
                    field="timeout",
                    message="timeout should be at least 1000ms for reliable operation",
                    value=timeout
                ))
            elif timeout > 300000:
                self._errors.append(ValidationErrorDetail(
                    field="timeout",
                    message="timeout should not exceed 300000ms (5 minutes)",
                    value=timeout
                ))

        retry_attempts = config.get("retry_attempts")
        if retry_attempts is not None:
            if not isinstance(retry_attempts, int) or retry_attempts < 0:
                self._errors.append(ValidationErrorDetail(
                    field="retry_attempts",
                    message="retry_attempts must be a non-negative integer",
                    value=retry_attempts
                ))
            elif retry_attempts > 10:
                self._errors.append(ValidationErrorDetail(
                    field="retry_attempts",
                    message="retry_attempts should not exceed 10",
                    value=retry_attempts
                ))

        early_bird = config.get("early_bird_percent")
        if early_bird is not None:
            if not isinstance(early_bird, int) or not 0 <= early_bird <= 100:
                self._errors.append(ValidationErrorDetail(
                    field="early_bird_percent",
                    message="early_bird_percent must be an integer between 0 and 100",
                    value=early_bird
                ))

        tolerance = config.get("webhook_tolerance")
        if tolerance is not None:
            if not isinstance(tolerance, int) or tolerance < 0:
                self._errors.append(ValidationErrorDetail(
                    field="webhook_tolerance",
                    message="webhook_tolerance must be a non-negative integer (seconds)",
                    value=tolerance
                ))

    def _validate_environment(self, config: Dict[str, Any]) -> None:
        """Validate environment setting"""
        environment = config.get("environment")
        if environment is not None:
            valid_environments = [e.value for e in SiteEnvironment]
            env_value = environment.value if isinstance(environment, SiteEnvironment) else environment
            if env_value not in valid_environments:
                self._errors.append(ValidationErrorDetail(
                    field="environment",
                    message=f"environment must be one of: {', '.join(valid_environments)}",
                    value=environment
                ))

    def _validate_locale_and_country(self, config: Dict[str, Any]) -> None:
        """Validate default locale and company country"""
        locale = config.get("default_locale")
        if locale is not None and locale not in LOCALES:
            self._errors.append(ValidationErrorDetail(
                field="default_locale",
                message=f"default_locale must be one of: {', '.join(LOCALES)}",
                value=locale
            ))

        country = config.get("company_country")
        if country is not None:
            if not isinstance(country, str) or len(country) != 2 or not country.isupper():
                self._errors.append(ValidationErrorDetail(
                    field="company_country",
                    message="company_country must be an uppercase ISO alpha-2 code",
                    value=country
                ))

    def _validate_production_secrets(self, config: Dict[str, Any]) -> None:
        """Production deployments need the billing and token secrets"""
        environment = config.get("environment")
        env_value = environment.value if isinstance(environment, SiteEnvironment) else environment
        if env_value != SiteEnvironment.PRODUCTION.value:
            return

        for secret_field in ("stripe_secret_key", "stripe_webhook_secret", "feedback_token_secret"):
            value = config.get(secret_field)
            if value is None or (isinstance(value, str) and value.strip() == ""):
                self._errors.append(ValidationErrorDetail(
                    field=secret_field,
                    message=f"{secret_field} is required in production",
                    value="[REDACTED]"
                ))
