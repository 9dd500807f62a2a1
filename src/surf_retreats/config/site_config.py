"""
Site Configuration Types and Schema
Type-safe configuration objects for the booking site backend
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from surf_retreats.i18n.locales import LOCALES
from surf_retreats.i18n.negotiation import negotiate_locale


class SiteEnvironment(str, Enum):
    """Deployment environment types"""
    DEVELOPMENT = "development"
    PRODUCTION = "production"


class ConfigDefaults:
    """Default configuration values"""
    SITE_URL = "https://rainbowsurfretreats.com"
    ENVIRONMENT = SiteEnvironment.DEVELOPMENT
    COMPANY_COUNTRY = "PT"
    DEFAULT_LOCALE = "en"
    CURRENCY = "eur"
    STRIPE_API_BASE = "https://api.stripe.com"
    VIES_URL = "https://ec.europa.eu/taxation_customs/vies/services/checkVatService"
    TIMEOUT = 30000
    RETRY_ATTEMPTS = 2
    RETRY_DELAY = 500
    ENABLE_AUDIT_LOG = False
    EARLY_BIRD_PERCENT = 10
    WEBHOOK_TOLERANCE = 300


# Environment variable mapping
ENV_VAR_MAPPING = {
    "SURF_SITE_URL": "site_url",
    "SURF_ENVIRONMENT": "environment",
    "SURF_COMPANY_COUNTRY": "company_country",
    "SURF_DEFAULT_LOCALE": "default_locale",
    "SURF_CURRENCY": "currency",
    "SURF_STRIPE_API_BASE": "stripe_api_base",
    "SURF_VIES_URL": "vies_url",
    "SURF_TIMEOUT": "timeout",
    "SURF_RETRY_ATTEMPTS": "retry_attempts",
    "SURF_RETRY_DELAY": "retry_delay",
    "SURF_ENABLE_AUDIT_LOG": "enable_audit_log",
    "SURF_EARLY_BIRD_PERCENT": "early_bird_percent",
    "SURF_WEBHOOK_TOLERANCE": "webhook_tolerance",
    # Conventional names used by the hosting platform
    "STRIPE_SECRET_KEY": "stripe_secret_key",
    "STRIPE_WEBHOOK_SECRET": "stripe_webhook_secret",
    "FEEDBACK_TOKEN_SECRET": "feedback_token_secret",
}


class SiteConfig(BaseModel):
    """
    Main site configuration class
    Defines all configuration options consumed by the toolkit
    """

    site_url: str = Field(
        default=ConfigDefaults.SITE_URL,
        description="Public base URL of the site, without trailing slash"
    )
    environment: SiteEnvironment = Field(
        default=ConfigDefaults.ENVIRONMENT,
        description="Environment: 'development' or 'production'"
    )
    company_country: str = Field(
        default=ConfigDefaults.COMPANY_COUNTRY,
        description="Country the business is VAT-registered in (ISO alpha-2)",
        min_length=2,
        max_length=2,
    )
    default_locale: str = Field(
        default=ConfigDefaults.DEFAULT_LOCALE,
        description="Locale used when negotiation finds no match"
    )
    currency: str = Field(
        default=ConfigDefaults.CURRENCY,
        description="Three-letter currency code charged at checkout"
    )

    # Billing provider
    stripe_secret_key: Optional[str] = Field(
        default=None,
        description="Billing provider secret API key"
    )
    stripe_webhook_secret: Optional[str] = Field(
        default=None,
        description="Signing secret for billing provider webhooks"
    )
    stripe_api_base: str = Field(
        default=ConfigDefaults.STRIPE_API_BASE,
        description="Billing provider API base URL"
    )
    webhook_tolerance: int = Field(
        default=ConfigDefaults.WEBHOOK_TOLERANCE,
        description="Maximum webhook timestamp age in seconds",
        ge=0,
    )

    # Tokens
    feedback_token_secret: Optional[str] = Field(
        default=None,
        description="HMAC secret for guest feedback links"
    )

    # External VAT registry
    vies_url: str = Field(
        default=ConfigDefaults.VIES_URL,
        description="EU VIES checkVat SOAP endpoint"
    )

    # HTTP transport
    timeout: int = Field(
        default=ConfigDefaults.TIMEOUT,
        description="Request timeout in milliseconds",
        ge=1000,
        le=300000
    )
    retry_attempts: int = Field(
        default=ConfigDefaults.RETRY_ATTEMPTS,
        description="Number of retry attempts",
        ge=0,
        le=10
    )
    retry_delay: int = Field(
        default=ConfigDefaults.RETRY_DELAY,
        description="Base delay between retries in milliseconds",
        ge=1,
        le=60000
    )
    enable_audit_log: bool = Field(
        default=ConfigDefaults.ENABLE_AUDIT_LOG,
        description="Emit HTTP audit entries"
    )

    early_bird_percent: int = Field(
        default=ConfigDefaults.EARLY_BIRD_PERCENT,
        description="Early bird discount in percent",
        ge=0,
        le=100
    )

    model_config = {
        "str_strip_whitespace": True,
        "validate_assignment": True,
    }

    @field_validator("site_url", "stripe_api_base", "vies_url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Validate URL fields and drop the trailing slash"""
        if not v.startswith(("http://", "https://")):
            raise ValueError("must be a valid HTTP/HTTPS URL")
        return v.rstrip("/")

    @field_validator("company_country")
    @classmethod
    def validate_company_country(cls, v: str) -> str:
        """Company country must be an uppercase alpha-2 code"""
        if not (v.isalpha() and v.isupper()):
            raise ValueError("company_country must be an uppercase ISO alpha-2 code")
        return v

    @field_validator("default_locale")
    @classmethod
    def validate_default_locale(cls, v: str) -> str:
        """Default locale must be one of the supported locales"""
        if v not in LOCALES:
            raise ValueError(
                f"default_locale must be one of: {', '.join(LOCALES)}"
            )
        return v

    @field_validator("currency")
    @classmethod
    def validate_currency(cls, v: str) -> str:
        """Currency is stored lowercase, as the billing provider expects"""
        if len(v) != 3 or not v.isalpha():
            raise ValueError("currency must be a three-letter code")
        return v.lower()

    @property
    def is_production(self) -> bool:
        """Whether the site runs against live services"""
        return self.environment == SiteEnvironment.PRODUCTION

    def negotiate_locale(
        self,
        cookie_locale: Optional[str] = None,
        accept_language: Optional[str] = None,
    ) -> str:
        """Locale for a request, falling back to ``default_locale``"""
        return negotiate_locale(cookie_locale, accept_language, default=self.default_locale)
