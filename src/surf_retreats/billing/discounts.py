"""
Promo code and early bird discounts

Only one discount applies to a booking. When both a promo code and the
early bird offer are available the larger one wins; on a tie the early
bird wins because it needs no code redemption.
"""

from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from surf_retreats.billing.schedule import is_eligible_for_early_bird
from surf_retreats.models.payment import BestDiscount, PromoCode, PromoCodeValidation
from surf_retreats.tax.calculator import Amount, to_decimal

ZERO = Decimal("0")


def _round_whole(value: Decimal) -> Decimal:
    return value.quantize(Decimal("1"), rounding=ROUND_HALF_UP)


def normalize_promo_code(code: str) -> str:
    return code.strip().upper()


def calculate_promo_discount(base_price: Amount, promo: PromoCode) -> Decimal:
    """
    Discount granted by a promo code

    Percentage codes are rounded to whole currency units. Fixed codes
    never exceed the base price.
    """
    base = to_decimal(base_price)
    if promo.discount_type == "percentage":
        return _round_whole(base * promo.discount_value / 100)
    return min(promo.discount_value, base)


def check_promo_code(
    promo: Optional[PromoCode],
    retreat_id: str,
    room_id: Optional[str] = None,
    order_amount: Optional[Amount] = None,
    today: Optional[date] = None,
) -> PromoCodeValidation:
    """
    Check a looked-up promo code against an order

    Args:
        promo: Code fetched by its normalized value, or ``None`` if unknown
        retreat_id: Retreat being booked
        room_id: Room being booked, if any
        order_amount: Base price of the order
        today: Reference day for validity dates

    Returns:
        Validation result with the discount when valid
    """
    today = today or date.today()

    if promo is None or not promo.is_active:
        return PromoCodeValidation(valid=False, error="Invalid promo code")

    if promo.valid_from > today:
        return PromoCodeValidation(valid=False, error="Promo code is not yet active")

    if promo.valid_until is not None and promo.valid_until < today:
        return PromoCodeValidation(valid=False, error="Promo code has expired")

    if promo.max_uses is not None and promo.current_uses >= promo.max_uses:
        return PromoCodeValidation(valid=False, error="Promo code usage limit reached")

    if promo.min_order_amount is not None and order_amount is not None:
        if to_decimal(order_amount) < promo.min_order_amount:
            return PromoCodeValidation(
                valid=False,
                error=f"Minimum order amount is €{promo.min_order_amount}",
            )

    if promo.scope == "retreat" and promo.retreat_id != retreat_id:
        return PromoCodeValidation(valid=False, error="Promo code is not valid for this retreat")

    if promo.scope == "room" and (room_id is None or promo.room_id != room_id):
        return PromoCodeValidation(valid=False, error="Promo code is not valid for this room")

    return PromoCodeValidation(
        valid=True,
        promo_code=promo,
        discount_amount=calculate_promo_discount(order_amount or 0, promo),
    )


def calculate_early_bird_discount(
    base_price: Amount,
    retreat_start_date: date,
    booking_date: Optional[date] = None,
    percent: int = 10,
) -> Decimal:
    """Early bird discount in whole currency units, zero when not eligible"""
    booking_date = booking_date or date.today()
    if not is_eligible_for_early_bird(booking_date, retreat_start_date):
        return ZERO
    return _round_whole(to_decimal(base_price) * Decimal(percent) / 100)


def choose_best_discount(promo_amount: Amount, early_bird_amount: Amount) -> BestDiscount:
    """Pick the single discount to apply; ties go to the early bird"""
    promo = to_decimal(promo_amount)
    early_bird = to_decimal(early_bird_amount)

    if promo <= ZERO and early_bird <= ZERO:
        return BestDiscount()

    if promo > early_bird:
        return BestDiscount(amount=promo, source="promo_code")

    return BestDiscount(amount=early_bird, source="early_bird")
