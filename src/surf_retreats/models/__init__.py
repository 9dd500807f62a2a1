"""Models module initialization"""

from surf_retreats.models.tax import (
    TaxComputation,
    CheckoutVat,
    VatFormatResult,
    ViesResult,
    VatValidationResult,
)
from surf_retreats.models.payment import (
    PaymentScheduleItem,
    PaymentScheduleResult,
    PromoCode,
    PromoCodeValidation,
    BestDiscount,
)
from surf_retreats.models.checkout import Retreat, CheckoutRequest, CheckoutQuote

__all__ = [
    "TaxComputation",
    "CheckoutVat",
    "VatFormatResult",
    "ViesResult",
    "VatValidationResult",
    "PaymentScheduleItem",
    "PaymentScheduleResult",
    "PromoCode",
    "PromoCodeValidation",
    "BestDiscount",
    "Retreat",
    "CheckoutRequest",
    "CheckoutQuote",
]
