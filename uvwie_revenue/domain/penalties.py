"""Late payment penalties"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from uvwie_revenue.domain.exceptions import InvalidArgumentError
from uvwie_revenue.domain.models import Payment, PenaltyAssessment
from uvwie_revenue.domain.rates import DEFAULT_RATE_SCHEDULE, RateSchedule
from uvwie_revenue.utils.date_utils import days_between_ceil
from uvwie_revenue.utils.money import round_to_unit, to_decimal


def calculate_penalty(
    outstanding_amount,
    days_overdue,
    rates: RateSchedule = DEFAULT_RATE_SCHEDULE,
) -> Decimal:
    """
    Penalty on an overdue balance.

    Formula:
        amount * 5% + amount * 1% * floor(days_overdue / 30)

    The 5% applies from the first day late; the 1% surcharge accrues per whole
    elapsed 30-day period, not per calendar month. Zero when not overdue.

    Raises:
        InvalidArgumentError: If either input is negative or not a number
    """
    amount = to_decimal(outstanding_amount, "outstanding_amount")
    days = to_decimal(days_overdue, "days_overdue")

    if amount < 0:
        raise InvalidArgumentError("outstanding_amount must be a non-negative number")
    if days < 0:
        raise InvalidArgumentError("days_overdue must be a non-negative number")

    if days == 0:
        return Decimal("0")

    periods = int(days // rates.penalty_period_days)
    penalty = amount * rates.initial_penalty_rate
    penalty += amount * rates.periodic_penalty_rate * periods

    return round_to_unit(penalty)


def calculate_days_overdue(due_date: Optional[datetime], now: datetime) -> int:
    """Days past due, part days rounded up; zero when not yet due or no due date"""
    if due_date is None:
        return 0
    return max(0, days_between_ceil(due_date, now))


def assess_payment_penalty(
    payment: Payment,
    now: datetime,
    rates: RateSchedule = DEFAULT_RATE_SCHEDULE,
) -> PenaltyAssessment:
    """
    Penalty for one payment record as of `now`.

    The record's current penalty is backed out of its amount due first, so
    assessing the same payment twice replaces the penalty instead of
    charging it on top of itself.
    """
    base_due = payment.amount_due - payment.penalty_amount
    outstanding = base_due - payment.amount_paid
    days_overdue = calculate_days_overdue(payment.due_date, now)

    penalty = calculate_penalty(outstanding, days_overdue, rates)

    return PenaltyAssessment(
        payment_id=payment.payment_id,
        days_overdue=days_overdue,
        outstanding_amount=outstanding,
        penalty_amount=penalty,
        amount_due=base_due + penalty,
    )
