"""Tax module initialization"""

from surf_retreats.tax.rates import (
    VAT_RATES,
    EU_COUNTRIES,
    get_vat_rate,
    is_eu_country,
)
from surf_retreats.tax.calculator import (
    compute_tax,
    compute_checkout_vat,
    is_reverse_charge,
    round_currency,
    to_decimal,
)
from surf_retreats.tax.vat_id import (
    VAT_ID_PATTERNS,
    normalize_vat_id,
    validate_vat_format,
)
from surf_retreats.tax.vies import ViesClient, validate_vat_id

__all__ = [
    "VAT_RATES",
    "EU_COUNTRIES",
    "get_vat_rate",
    "is_eu_country",
    "compute_tax",
    "compute_checkout_vat",
    "is_reverse_charge",
    "round_currency",
    "to_decimal",
    "VAT_ID_PATTERNS",
    "normalize_vat_id",
    "validate_vat_format",
    "ViesClient",
    "validate_vat_id",
]
