"""
Payment schedule logic

Standard booking (two months or more before the retreat), three payments:
- 10% deposit immediately
- 50% two months before the retreat
- the remaining 40% one month before the retreat

Late booking (less than two months before), two payments:
- 50% immediately
- the remaining 50% one month before the retreat

Full payment: 100% immediately.

The early bird discount is taken off the total before splitting and only
applies to bookings that are not late. The last installment is always the
remainder, so installments add up to the total to the cent.
"""

import calendar
from datetime import date
from decimal import Decimal
from typing import List, Literal, Optional

from surf_retreats.models.payment import (
    PaymentScheduleItem,
    PaymentScheduleResult,
    PaymentType,
)
from surf_retreats.tax.calculator import Amount, round_currency, to_decimal

LATE_BOOKING_MONTHS = 2
EARLY_BIRD_CUTOFF_MONTHS = 3

DEPOSIT_SHARE = Decimal("0.10")
SECOND_SHARE = Decimal("0.50")
LATE_FIRST_SHARE = Decimal("0.50")

PaymentDeadlineStatus = Literal[
    "upcoming",
    "due_2_weeks",
    "due_1_week",
    "due_3_days",
    "due_1_day",
    "due_today",
    "overdue",
]

ReminderType = Literal["14_days", "7_days", "3_days", "1_day", "today", "overdue"]

_DEADLINE_MILESTONES = {14: "due_2_weeks", 7: "due_1_week", 3: "due_3_days", 1: "due_1_day"}
_REMINDER_DAYS = {14: "14_days", 7: "7_days", 3: "3_days", 1: "1_day"}


def months_between(start: date, end: date) -> int:
    """
    Whole months from ``start`` to ``end``

    A month only counts once the day of month is reached, so Jan 31 to
    Feb 28 is zero months.
    """
    months = (end.year - start.year) * 12 + (end.month - start.month)
    return months - 1 if end.day < start.day else months


def add_months(value: date, months: int) -> date:
    """Shift a date by whole months, clamping to the last day of the month"""
    month_index = value.year * 12 + (value.month - 1) + months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def is_late_booking(booking_date: date, retreat_start_date: date) -> bool:
    return months_between(booking_date, retreat_start_date) < LATE_BOOKING_MONTHS


def calculate_payment_schedule(
    total_price: Amount,
    booking_date: date,
    retreat_start_date: date,
    is_early_bird: bool = False,
    early_bird_discount_percent: int = 10,
    payment_type: PaymentType = "deposit",
) -> PaymentScheduleResult:
    """
    Split a booking total into installments

    Args:
        total_price: Price before VAT
        booking_date: Day the booking is made
        retreat_start_date: First day of the retreat
        is_early_bird: Whether the early bird discount was granted
        early_bird_discount_percent: Discount in percent
        payment_type: ``deposit`` for installments, ``full`` for one payment

    Returns:
        The payment plan
    """
    total = to_decimal(total_price)
    late = is_late_booking(booking_date, retreat_start_date)

    early_bird_discount = round_currency(Decimal("0"))
    adjusted_total = round_currency(total)
    if is_early_bird and not late:
        early_bird_discount = round_currency(total * Decimal(early_bird_discount_percent) / 100)
        adjusted_total = round_currency(total - early_bird_discount)

    if payment_type == "full":
        description = (
            f"Full payment (100%) - Early Bird discount: €{early_bird_discount}"
            if is_early_bird
            else "Full payment (100%)"
        )
        return PaymentScheduleResult(
            is_late_booking=False,
            is_early_bird=is_early_bird,
            total_amount=adjusted_total,
            early_bird_discount=early_bird_discount,
            schedules=[PaymentScheduleItem(
                payment_number=1,
                amount=adjusted_total,
                due_date=booking_date,
                description=description,
                type="full",
                percentage=100,
            )],
        )

    one_month_before = add_months(retreat_start_date, -1)

    if late:
        first = round_currency(adjusted_total * LATE_FIRST_SHARE)
        schedules = [
            PaymentScheduleItem(
                payment_number=1,
                amount=first,
                due_date=booking_date,
                description="First payment (50%)",
                type="late_first",
                percentage=50,
            ),
            PaymentScheduleItem(
                payment_number=2,
                amount=round_currency(adjusted_total - first),
                due_date=one_month_before,
                description="Final payment (50%)",
                type="late_second",
                percentage=50,
            ),
        ]
    else:
        deposit = round_currency(adjusted_total * DEPOSIT_SHARE)
        second = round_currency(adjusted_total * SECOND_SHARE)
        deposit_description = (
            f"Deposit (10%) - Early Bird discount: €{early_bird_discount} applied"
            if is_early_bird
            else "Deposit (10%)"
        )
        schedules = [
            PaymentScheduleItem(
                payment_number=1,
                amount=deposit,
                due_date=booking_date,
                description=deposit_description,
                type="deposit",
                percentage=10,
            ),
            PaymentScheduleItem(
                payment_number=2,
                amount=second,
                due_date=add_months(retreat_start_date, -2),
                description="Second payment (50%)",
                type="second",
                percentage=50,
            ),
            PaymentScheduleItem(
                payment_number=3,
                amount=round_currency(adjusted_total - deposit - second),
                due_date=one_month_before,
                description="Final payment (40%)",
                type="balance",
                percentage=40,
            ),
        ]

    return PaymentScheduleResult(
        is_late_booking=late,
        is_early_bird=is_early_bird and not late,
        total_amount=adjusted_total,
        early_bird_discount=early_bird_discount,
        schedules=schedules,
    )


def get_first_payment_amount(
    total_price: Amount,
    booking_date: date,
    retreat_start_date: date,
    payment_type: PaymentType = "deposit",
) -> Decimal:
    """Amount charged at checkout: 10% deposit, 50% if late, 100% if full"""
    total = to_decimal(total_price)
    if payment_type == "full":
        return round_currency(total)

    if is_late_booking(booking_date, retreat_start_date):
        return round_currency(total * LATE_FIRST_SHARE)

    return round_currency(total * DEPOSIT_SHARE)


def is_eligible_for_early_bird(
    booking_date: date,
    retreat_start_date: date,
    cutoff_months: int = EARLY_BIRD_CUTOFF_MONTHS,
) -> bool:
    return months_between(booking_date, retreat_start_date) >= cutoff_months


def get_days_until_due(due_date: date, today: Optional[date] = None) -> int:
    """Days from today until ``due_date``; negative when overdue"""
    today = today or date.today()
    return (due_date - today).days


def get_payment_deadline_status(due_date: date, today: Optional[date] = None) -> PaymentDeadlineStatus:
    """Classify a due date for the admin payments view"""
    days = get_days_until_due(due_date, today)
    if days < 0:
        return "overdue"
    if days == 0:
        return "due_today"
    return _DEADLINE_MILESTONES.get(days, "upcoming")


def should_send_reminder(
    due_date: date,
    last_reminder_sent: Optional[date],
    today: Optional[date] = None,
) -> Optional[ReminderType]:
    """
    Decide whether a payment reminder goes out today

    Reminders go out 14, 7, 3 and 1 days ahead, on the due date, and daily
    once overdue, but never twice on the same day.

    Returns:
        The reminder type to send, or ``None``
    """
    today = today or date.today()
    if last_reminder_sent is not None and last_reminder_sent >= today:
        return None

    days = get_days_until_due(due_date, today)
    if days < 0:
        return "overdue"
    if days == 0:
        return "today"
    return _REMINDER_DAYS.get(days)


def format_payment_schedule_for_email(schedule: PaymentScheduleResult) -> str:
    """Plain-text payment plan for confirmation e-mails"""
    lines: List[str] = ["Payment Schedule:", ""]

    for index, item in enumerate(schedule.schedules):
        due = f"{item.due_date:%B} {item.due_date.day}, {item.due_date.year}"
        status = " (Due Now)" if index == 0 else ""
        lines.append(f"{item.payment_number}. {item.description}: €{item.amount} - {due}{status}")

    if schedule.is_early_bird:
        lines.append("")
        lines.append(f"Early Bird Discount Applied: -€{schedule.early_bird_discount}")

    lines.append("")
    lines.append(f"Total: €{schedule.total_amount}")

    return "\n".join(lines)
