"""
VAT calculation for checkout amounts

Amounts go through ``Decimal(str(amount))`` so a float such as ``33.33``
is taken at its printed value. Both the tax and the total are rounded
half-up to cents, each straight from the unrounded figures: the total is
``round(amount + amount * rate)``, never ``amount + round(tax)`` rounded
again.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Union

from surf_retreats.models.tax import CheckoutVat, TaxComputation
from surf_retreats.tax.rates import ZERO_RATE, get_vat_rate, is_eu_country

Amount = Union[int, float, str, Decimal]

CENTS = Decimal("0.01")


def to_decimal(amount: Amount) -> Decimal:
    """Convert a caller-supplied amount to Decimal without float artifacts"""
    if isinstance(amount, Decimal):
        return amount
    return Decimal(str(amount))


def round_currency(value: Decimal) -> Decimal:
    """Round half-up to two decimal places"""
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def _apply_rate(base: Decimal, rate: Decimal) -> TaxComputation:
    raw_tax = base * rate
    return TaxComputation(
        rate=rate,
        tax_amount=round_currency(raw_tax),
        total=round_currency(base + raw_tax),
    )


def compute_tax(amount: Amount, country_code: str) -> TaxComputation:
    """
    Compute VAT for an amount charged to a customer in ``country_code``

    Unknown country codes yield a zero rate rather than an error. Callers
    are responsible for validating the amount and the code upstream.

    Args:
        amount: Non-negative amount in the checkout currency
        country_code: ISO 3166-1 alpha-2 code, matched case-sensitively

    Returns:
        Rate used, tax amount and total
    """
    return _apply_rate(to_decimal(amount), get_vat_rate(country_code))


def is_reverse_charge(
    country_code: str,
    customer_type: str,
    vat_id_valid: bool,
    company_country: str,
) -> bool:
    """
    Whether the B2B reverse charge applies

    A business buyer with a validated VAT ID in another EU member state
    self-accounts for VAT, so the invoice carries none.
    """
    return (
        customer_type == "business"
        and vat_id_valid is True
        and is_eu_country(country_code)
        and country_code != company_country
    )


def compute_checkout_vat(
    amount: Amount,
    country_code: str,
    company_country: str,
    customer_type: str = "private",
    vat_id_valid: bool = False,
) -> CheckoutVat:
    """Compute VAT for a checkout, applying the B2B reverse charge"""
    base = to_decimal(amount)

    if is_reverse_charge(country_code, customer_type, vat_id_valid, company_country):
        return CheckoutVat(
            rate=ZERO_RATE,
            tax_amount=round_currency(ZERO_RATE),
            total=round_currency(base),
            is_reverse_charge=True,
        )

    result = _apply_rate(base, get_vat_rate(country_code))
    return CheckoutVat(**result.model_dump(), is_reverse_charge=False)
