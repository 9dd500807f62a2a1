"""EU VAT identification number format checks"""

import re

from surf_retreats.models.tax import VatFormatResult
from surf_retreats.tax.rates import is_eu_country

# Full VAT ID patterns, prefix included
VAT_ID_PATTERNS = {
    "AT": re.compile(r"^ATU\d{8}$"),
    "BE": re.compile(r"^BE[01]\d{9}$"),
    "BG": re.compile(r"^BG\d{9,10}$"),
    "HR": re.compile(r"^HR\d{11}$"),
    "CY": re.compile(r"^CY\d{8}[A-Z]$"),
    "CZ": re.compile(r"^CZ\d{8,10}$"),
    "DK": re.compile(r"^DK\d{8}$"),
    "EE": re.compile(r"^EE\d{9}$"),
    "FI": re.compile(r"^FI\d{8}$"),
    "FR": re.compile(r"^FR[A-HJ-NP-Z0-9]{2}\d{9}$"),
    "DE": re.compile(r"^DE\d{9}$"),
    "GR": re.compile(r"^EL\d{9}$"),
    "HU": re.compile(r"^HU\d{8}$"),
    "IE": re.compile(r"^IE\d{7}[A-W][A-IW]?$|^IE\d[A-Z+*]\d{5}[A-W]$"),
    "IT": re.compile(r"^IT\d{11}$"),
    "LV": re.compile(r"^LV\d{11}$"),
    "LT": re.compile(r"^LT(\d{9}|\d{12})$"),
    "LU": re.compile(r"^LU\d{8}$"),
    "MT": re.compile(r"^MT\d{8}$"),
    "NL": re.compile(r"^NL\d{9}B\d{2}$"),
    "PL": re.compile(r"^PL\d{10}$"),
    "PT": re.compile(r"^PT\d{9}$"),
    "RO": re.compile(r"^RO\d{2,10}$"),
    "SK": re.compile(r"^SK\d{10}$"),
    "SI": re.compile(r"^SI\d{8}$"),
    "ES": re.compile(r"^ES[A-Z0-9]\d{7}[A-Z0-9]$"),
    "SE": re.compile(r"^SE\d{12}$"),
}

_WHITESPACE = re.compile(r"\s")


def normalize_vat_id(vat_id: str) -> str:
    """Remove all whitespace and uppercase"""
    return _WHITESPACE.sub("", vat_id).upper()


def vat_prefix(country: str) -> str:
    """VAT IDs use the ISO code as prefix, except Greece which uses EL"""
    return "EL" if country == "GR" else country


def validate_vat_format(vat_id: str, country: str) -> VatFormatResult:
    """
    Check a VAT ID against its country's format, without any network call

    Args:
        vat_id: VAT ID as typed by the customer
        country: Uppercase ISO alpha-2 billing country

    Returns:
        Format result with the rejection reason, if any
    """
    normalized = normalize_vat_id(vat_id)

    if not is_eu_country(country):
        return VatFormatResult(
            valid=False,
            error="VAT ID validation is only available for EU countries",
        )

    prefix = vat_prefix(country)
    if not normalized.startswith(prefix):
        return VatFormatResult(valid=False, error=f"VAT ID should start with {prefix}")

    pattern = VAT_ID_PATTERNS.get(country)
    if pattern is not None and not pattern.match(normalized):
        return VatFormatResult(valid=False, error=f"Invalid VAT ID format for {country}")

    return VatFormatResult(valid=True)
