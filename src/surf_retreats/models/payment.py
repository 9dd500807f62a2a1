"""Payment schedule and discount models"""

from datetime import date
from decimal import Decimal
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

PaymentType = Literal["deposit", "full"]

InstallmentType = Literal["deposit", "second", "balance", "late_first", "late_second", "full"]

DiscountSource = Literal["promo_code", "early_bird"]


class PaymentScheduleItem(BaseModel):
    """One installment of a booking"""

    payment_number: int = Field(..., description="1-based installment number")
    amount: Decimal = Field(..., description="Installment amount before VAT")
    due_date: date = Field(..., description="Date the installment is charged")
    description: str = Field(..., description="Label shown to the guest")
    type: InstallmentType = Field(..., description="Installment kind")
    percentage: int = Field(..., description="Share of the total, in percent")


class PaymentScheduleResult(BaseModel):
    """Full payment plan for a booking"""

    is_late_booking: bool = Field(..., description="Booked less than two months ahead")
    is_early_bird: bool = Field(..., description="Early bird discount applied")
    total_amount: Decimal = Field(..., description="Total after early bird discount")
    early_bird_discount: Decimal = Field(..., description="Discount deducted from the total")
    schedules: List[PaymentScheduleItem] = Field(..., description="Installments in due order")


class PromoCode(BaseModel):
    """Promo code as stored by the admin area"""

    id: str = Field(..., description="Promo code ID")
    code: str = Field(..., description="Uppercase code typed by guests")
    discount_type: Literal["percentage", "fixed"] = Field(..., description="Discount kind")
    discount_value: Decimal = Field(..., description="Percent or fixed amount")
    is_active: bool = Field(True, description="Code can be redeemed")
    valid_from: date = Field(..., description="First day the code is valid")
    valid_until: Optional[date] = Field(None, description="Last day the code is valid")
    max_uses: Optional[int] = Field(None, description="Redemption limit")
    current_uses: int = Field(0, description="Redemptions so far")
    min_order_amount: Optional[Decimal] = Field(None, description="Minimum order amount")
    scope: Literal["global", "retreat", "room"] = Field("global", description="Where the code applies")
    retreat_id: Optional[str] = Field(None, description="Retreat for retreat-scoped codes")
    room_id: Optional[str] = Field(None, description="Room for room-scoped codes")


class PromoCodeValidation(BaseModel):
    """Outcome of checking a promo code against an order"""

    valid: bool
    error: Optional[str] = None
    promo_code: Optional[PromoCode] = None
    discount_amount: Decimal = Decimal("0")


class BestDiscount(BaseModel):
    """Winning discount between a promo code and the early bird offer"""

    amount: Decimal = Field(Decimal("0"), description="Discount to deduct")
    source: Optional[DiscountSource] = Field(None, description="Where the discount came from")

    model_config = {"frozen": True}
