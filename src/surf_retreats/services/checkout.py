"""
Checkout service

Turns a booking form submission into the amounts to store and charge,
then opens a hosted checkout session for the first payment:

1. pick the best discount (promo code or early bird)
2. split the discounted price into installments
3. charge the first installment, or everything for full payment
4. add VAT on the charge and on the full price, B2B reverse charge included
"""

import logging
from decimal import Decimal
from typing import Any, Dict, Optional

from surf_retreats.billing.discounts import (
    calculate_early_bird_discount,
    check_promo_code,
    choose_best_discount,
)
from surf_retreats.billing.schedule import calculate_payment_schedule
from surf_retreats.billing.stripe_client import BillingClient
from surf_retreats.config.site_config import SiteConfig
from surf_retreats.exceptions import ValidationError
from surf_retreats.models.checkout import CheckoutQuote, CheckoutRequest
from surf_retreats.tax.calculator import compute_checkout_vat, round_currency

logger = logging.getLogger(__name__)


class CheckoutService:
    """
    Prices bookings and starts payment

    Example:
        >>> service = CheckoutService(config, BillingClient(config))
        >>> quote = service.quote(request)
        >>> session = service.start_checkout(request, booking_id, success_url, cancel_url)
    """

    def __init__(self, config: SiteConfig, billing: Optional[BillingClient] = None) -> None:
        self.config = config
        self._billing = billing

    def quote(self, request: CheckoutRequest) -> CheckoutQuote:
        """Compute discounts, installments and VAT for a booking"""
        base_price = request.base_price

        promo_amount = Decimal("0")
        if request.promo_code is not None:
            promo = check_promo_code(
                request.promo_code,
                retreat_id=request.retreat.id,
                room_id=request.room_id,
                order_amount=base_price,
                today=request.booking_date,
            )
            if not promo.valid:
                logger.info("Rejecting promo code %s: %s", request.promo_code.code, promo.error)
                raise ValidationError(promo.error, field="promo_code")
            promo_amount = promo.discount_amount

        early_bird_amount = Decimal("0")
        if request.early_bird_enabled:
            early_bird_amount = calculate_early_bird_discount(
                base_price,
                request.retreat.start_date,
                booking_date=request.booking_date,
                percent=self.config.early_bird_percent,
            )
        best = choose_best_discount(promo_amount, early_bird_amount)

        # The early bird amount is already deducted here, so the schedule
        # must not apply it a second time.
        schedule = calculate_payment_schedule(
            total_price=base_price - best.amount,
            booking_date=request.booking_date,
            retreat_start_date=request.retreat.start_date,
            is_early_bird=False,
            payment_type=request.payment_type,
        )
        schedule = schedule.model_copy(update={
            "is_early_bird": best.source == "early_bird",
            "early_bird_discount": best.amount if best.source == "early_bird" else Decimal("0"),
        })

        if request.payment_type == "full":
            charge_amount = schedule.total_amount
        else:
            charge_amount = schedule.schedules[0].amount

        vat_kwargs = dict(
            country_code=request.country,
            company_country=self.config.company_country,
            customer_type=request.customer_type,
            vat_id_valid=request.vat_id_valid,
        )
        charge_vat = compute_checkout_vat(charge_amount, **vat_kwargs)
        full_vat = compute_checkout_vat(schedule.total_amount, **vat_kwargs)

        balance = Decimal("0") if request.payment_type == "full" else full_vat.total - charge_vat.total

        return CheckoutQuote(
            base_price=base_price,
            discount_amount=best.amount,
            discount_source=best.source,
            discount_code=request.promo_code.code if best.source == "promo_code" else None,
            schedule=schedule,
            charge_amount=charge_amount,
            charge_vat=charge_vat,
            full_vat=full_vat,
            deposit_amount_with_vat=charge_vat.total,
            balance_due_with_vat=round_currency(balance),
        )

    def build_metadata(self, request: CheckoutRequest, quote: CheckoutQuote, booking_id: str) -> Dict[str, Any]:
        """Metadata attached to the checkout session and payment intent"""
        return {
            "booking_id": booking_id,
            "retreat_id": request.retreat.id,
            "payment_type": request.payment_type,
            "payment_number": 1,
            "vat_rate": str(quote.charge_vat.rate),
            "vat_amount": str(quote.charge_vat.tax_amount),
            "is_reverse_charge": quote.charge_vat.is_reverse_charge,
            "discount_source": quote.discount_source,
            "customer_type": request.customer_type,
        }

    def start_checkout(
        self,
        request: CheckoutRequest,
        booking_id: str,
        success_url: str,
        cancel_url: str,
    ) -> Dict[str, Any]:
        """
        Quote a booking and open a checkout session for the first payment

        Installment bookings get a billing customer with the card saved, so
        later installments can be charged off-session.

        Args:
            request: Booking form submission
            booking_id: ID of the stored booking
            success_url: Redirect after payment
            cancel_url: Redirect when the guest abandons payment

        Returns:
            The created session object
        """
        if self._billing is None:
            self._billing = BillingClient(self.config)

        quote = self.quote(request)

        customer_id: Optional[str] = None
        installments = request.payment_type != "full"
        if installments:
            customer = self._billing.find_or_create_customer(
                request.email,
                name=f"{request.first_name} {request.last_name}",
                metadata={"booking_id": booking_id},
            )
            customer_id = customer.get("id")

        label = "Full payment" if request.payment_type == "full" else quote.schedule.schedules[0].description
        return self._billing.create_checkout_session(
            amount=quote.deposit_amount_with_vat,
            product_name=f"{request.retreat.title} - {label}",
            customer_email=request.email,
            success_url=success_url,
            cancel_url=cancel_url,
            description=f"{request.retreat.start_date.isoformat()} to {request.retreat.end_date.isoformat()}",
            metadata=self.build_metadata(request, quote, booking_id),
            customer_id=customer_id,
            locale=request.language,
            save_payment_method=installments,
            idempotency_key=f"checkout-{booking_id}",
        )
