"""
VAT rate table

Standard rates by destination country. Countries missing from the table
are charged no VAT. Adding a country is a code change and a deployment.
"""

from decimal import Decimal
from types import MappingProxyType

VAT_RATES = MappingProxyType({
    "DE": Decimal("0.19"),  # Germany
    "FR": Decimal("0.20"),  # France
    "ES": Decimal("0.21"),  # Spain
    "IT": Decimal("0.22"),  # Italy
    "PT": Decimal("0.23"),  # Portugal
    "NL": Decimal("0.21"),  # Netherlands
    "BE": Decimal("0.21"),  # Belgium
    "AT": Decimal("0.20"),  # Austria
    "IE": Decimal("0.23"),  # Ireland
    "PL": Decimal("0.23"),  # Poland
})

ZERO_RATE = Decimal("0")

EU_COUNTRIES = (
    "AT", "BE", "BG", "HR", "CY", "CZ", "DK", "EE", "FI", "FR",
    "DE", "GR", "HU", "IE", "IT", "LV", "LT", "LU", "MT", "NL",
    "PL", "PT", "RO", "SK", "SI", "ES", "SE",
)


def get_vat_rate(country_code: str) -> Decimal:
    """Rate for a country code, matched case-sensitively; zero if unknown"""
    return VAT_RATES.get(country_code, ZERO_RATE)


def is_eu_country(country_code: str) -> bool:
    """Check whether a country code is an EU member state"""
    return country_code in EU_COUNTRIES
