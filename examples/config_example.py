"""
Configuration and Checkout Examples for the surf retreats toolkit
Demonstrates loading configuration and pricing a booking
"""

from datetime import date
from decimal import Decimal

from surf_retreats.billing import format_payment_schedule_for_email
from surf_retreats.config import (
    ConfigLoader,
    ConfigValidator,
    SiteConfig,
    SiteEnvironment,
)
from surf_retreats.models import CheckoutRequest, Retreat
from surf_retreats.services import CheckoutService
from surf_retreats.utils import configure_logging


# =============================================================================
# Example 1: Programmatic Configuration
# =============================================================================

def programmatic_config_example() -> SiteConfig:
    """Configure the toolkit programmatically"""
    loader = ConfigLoader()

    return loader.load(
        env=False,
        config={
            "site_url": "https://rainbowsurfretreats.com",
            "environment": SiteEnvironment.DEVELOPMENT,
            "company_country": "PT",
            "stripe_secret_key": "sk_test_your_key",
            "early_bird_percent": 10,
        },
    )


# =============================================================================
# Example 2: Merged Configuration (File + Environment + Programmatic)
# =============================================================================

def merged_config_example() -> SiteConfig:
    """
    Merge configuration from multiple sources
    Priority: programmatic > environment > file

    Secrets come from the environment:

    export STRIPE_SECRET_KEY="sk_live_..."
    export STRIPE_WEBHOOK_SECRET="whsec_..."
    export FEEDBACK_TOKEN_SECRET="..."
    export SURF_ENVIRONMENT="production"
    """
    loader = ConfigLoader()
    return loader.load(
        file="./config/site_config.json",
        env=True,
        config={"timeout": 60000},
    )


# =============================================================================
# Example 3: Configuration Validation
# =============================================================================

def validation_example() -> None:
    """Validate configuration before use"""
    validator = ConfigValidator()

    result = validator.validate({
        "environment": "production",
        "company_country": "pt",
    })

    if not result.valid:
        print("Configuration validation failed:")
        for error in result.errors:
            print(f"  - {error.field}: {error.message}")


# =============================================================================
# Example 4: Pricing a Booking
# =============================================================================

def quote_example(config: SiteConfig) -> None:
    """Print the amounts for a deposit booking from Germany"""
    request = CheckoutRequest(
        retreat=Retreat(
            id="bali-2026",
            title="Bali Surf Retreat",
            start_date=date(2026, 6, 15),
            end_date=date(2026, 6, 22),
        ),
        base_price=Decimal("1000"),
        booking_date=date(2026, 1, 10),
        email="guest@example.com",
        first_name="Ana",
        last_name="Silva",
        country="DE",
    )

    quote = CheckoutService(config).quote(request)

    print(format_payment_schedule_for_email(quote.schedule))
    print(f"Charged now (VAT included): €{quote.deposit_amount_with_vat}")
    print(f"Balance due (VAT included): €{quote.balance_due_with_vat}")


# =============================================================================
# Run Examples
# =============================================================================

if __name__ == "__main__":
    configure_logging()

    print("=== Surf Retreats Configuration Examples ===\n")

    print("1. Configuration Validation:")
    validation_example()
    print()

    print("2. Pricing a Booking:")
    quote_example(programmatic_config_example())
