"""Billing module initialization

- Payment schedule: installment plans, deadlines and reminders
- Discounts: promo codes and the early bird offer
- BillingClient: hosted checkout, customers and refunds
- Webhooks: signature verification and event dispatch
"""

from surf_retreats.billing.schedule import (
    calculate_payment_schedule,
    get_first_payment_amount,
    is_eligible_for_early_bird,
    is_late_booking,
    get_days_until_due,
    get_payment_deadline_status,
    should_send_reminder,
    format_payment_schedule_for_email,
)
from surf_retreats.billing.discounts import (
    normalize_promo_code,
    calculate_promo_discount,
    check_promo_code,
    calculate_early_bird_discount,
    choose_best_discount,
)
from surf_retreats.billing.stripe_client import BillingClient, encode_form, to_minor_units
from surf_retreats.billing.webhook import (
    SIGNATURE_HEADER,
    WebhookEvent,
    WebhookDispatcher,
    parse_signature_header,
    compute_signature,
    verify_signature,
    construct_event,
)

__all__ = [
    "calculate_payment_schedule",
    "get_first_payment_amount",
    "is_eligible_for_early_bird",
    "is_late_booking",
    "get_days_until_due",
    "get_payment_deadline_status",
    "should_send_reminder",
    "format_payment_schedule_for_email",
    "normalize_promo_code",
    "calculate_promo_discount",
    "check_promo_code",
    "calculate_early_bird_discount",
    "choose_best_discount",
    "BillingClient",
    "encode_form",
    "to_minor_units",
    "SIGNATURE_HEADER",
    "WebhookEvent",
    "WebhookDispatcher",
    "parse_signature_header",
    "compute_signature",
    "verify_signature",
    "construct_event",
]
