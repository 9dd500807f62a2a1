"""
Rainbow Surf Retreats booking toolkit

Main entry point for the package
"""

from surf_retreats.exceptions import (
    SurfRetreatsError,
    ErrorCategory,
    ValidationError,
    NetworkError,
    ConfigError,
    BillingError,
    SignatureError,
)

# HTTP Client
from surf_retreats.client import (
    HttpClient,
    HttpMethod,
    HttpRequestOptions,
    HttpResponse,
    CircuitState,
    CircuitBreakerConfig,
)

# Configuration
from surf_retreats.config import (
    SiteConfig,
    SiteEnvironment,
    ConfigLoader,
    ConfigValidator,
    ENV_VAR_MAPPING,
    ConfigDefaults,
)

# Tax
from surf_retreats.tax import (
    VAT_RATES,
    get_vat_rate,
    compute_tax,
    compute_checkout_vat,
    validate_vat_format,
    validate_vat_id,
    ViesClient,
)

# Billing
from surf_retreats.billing import (
    BillingClient,
    WebhookDispatcher,
    calculate_payment_schedule,
    check_promo_code,
    choose_best_discount,
)
from surf_retreats.services import CheckoutService

# Models
from surf_retreats.models import (
    TaxComputation,
    CheckoutVat,
    PaymentScheduleResult,
    PromoCode,
    Retreat,
    CheckoutRequest,
    CheckoutQuote,
)

__version__ = "0.1.0"

__all__ = [
    # Exceptions
    "SurfRetreatsError",
    "ErrorCategory",
    "ValidationError",
    "NetworkError",
    "ConfigError",
    "BillingError",
    "SignatureError",
    # HTTP Client
    "HttpClient",
    "HttpMethod",
    "HttpRequestOptions",
    "HttpResponse",
    "CircuitState",
    "CircuitBreakerConfig",
    # Configuration
    "SiteConfig",
    "SiteEnvironment",
    "ConfigLoader",
    "ConfigValidator",
    "ENV_VAR_MAPPING",
    "ConfigDefaults",
    # Tax
    "VAT_RATES",
    "get_vat_rate",
    "compute_tax",
    "compute_checkout_vat",
    "validate_vat_format",
    "validate_vat_id",
    "ViesClient",
    # Billing
    "BillingClient",
    "WebhookDispatcher",
    "calculate_payment_schedule",
    "check_promo_code",
    "choose_best_discount",
    "CheckoutService",
    # Models
    "TaxComputation",
    "CheckoutVat",
    "PaymentScheduleResult",
    "PromoCode",
    "Retreat",
    "CheckoutRequest",
    "CheckoutQuote",
]
