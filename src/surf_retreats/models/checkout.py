"""Checkout models"""

from datetime import date
from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

from surf_retreats.models.payment import DiscountSource, PaymentScheduleResult, PaymentType, PromoCode
from surf_retreats.models.tax import CheckoutVat


class Retreat(BaseModel):
    """Retreat being booked"""

    id: str = Field(..., description="Retreat ID or slug")
    title: str = Field(..., description="Retreat name")
    start_date: date = Field(..., description="First day of the retreat")
    end_date: date = Field(..., description="Last day of the retreat")


class CheckoutRequest(BaseModel):
    """Booking form submission"""

    retreat: Retreat = Field(..., description="Retreat being booked")
    room_id: Optional[str] = Field(None, description="Room being booked")
    early_bird_enabled: bool = Field(True, description="Room offers the early bird discount")
    base_price: Decimal = Field(..., ge=0, description="Room price before discounts and VAT")
    booking_date: date = Field(..., description="Day the booking is made")
    email: str = Field(..., description="Guest e-mail")
    first_name: str = Field(..., min_length=1, description="Guest first name")
    last_name: str = Field(..., min_length=1, description="Guest last name")
    country: str = Field(..., min_length=2, max_length=2, description="Billing country")
    customer_type: Literal["private", "business"] = Field("private", description="Customer kind")
    company_name: Optional[str] = Field(None, description="Company name for business customers")
    vat_id: Optional[str] = Field(None, description="VAT ID for business customers")
    vat_id_valid: bool = Field(False, description="VAT ID passed VIES validation")
    payment_type: PaymentType = Field("deposit", description="Installments or full payment")
    promo_code: Optional[PromoCode] = Field(None, description="Looked-up promo code, if one was entered")
    language: str = Field("en", description="Locale for the payment page and e-mails")

    @field_validator("country")
    @classmethod
    def uppercase_country(cls, v: str) -> str:
        return v.upper()


class CheckoutQuote(BaseModel):
    """Amounts for a booking, ready to be stored and charged"""

    base_price: Decimal = Field(..., description="Price before discounts")
    discount_amount: Decimal = Field(..., description="Winning discount")
    discount_source: Optional[DiscountSource] = Field(None, description="Where the discount came from")
    discount_code: Optional[str] = Field(None, description="Promo code redeemed, if any")
    schedule: PaymentScheduleResult = Field(..., description="Installment plan before VAT")
    charge_amount: Decimal = Field(..., description="Amount due now, before VAT")
    charge_vat: CheckoutVat = Field(..., description="VAT on the amount due now")
    full_vat: CheckoutVat = Field(..., description="VAT on the whole booking")
    deposit_amount_with_vat: Decimal = Field(..., description="Amount charged now, VAT included")
    balance_due_with_vat: Decimal = Field(..., description="Remaining balance, VAT included")
