"""Total-due aggregation - what a shop owes for an assessment year"""

import logging
from decimal import Decimal

from uvwie_revenue.domain.exceptions import InvalidArgumentError
from uvwie_revenue.domain.fees import quote_fees
from uvwie_revenue.domain.models import DuesAssessment, PaymentStatus, PenaltyAssessment
from uvwie_revenue.domain.penalties import calculate_days_overdue, calculate_penalty
from uvwie_revenue.domain.ports import PaymentReader, RevenueTypeReader, ShopReader
from uvwie_revenue.domain.rates import DEFAULT_RATE_SCHEDULE, RateSchedule
from uvwie_revenue.utils.clock import Clock
from uvwie_revenue.utils.money import round_to_unit

logger = logging.getLogger(__name__)

# Payments counted towards the amount already paid
SETTLED_STATUSES = (PaymentStatus.PAID, PaymentStatus.PARTIALLY_PAID)


def _validate_inputs(shop_id: str, assessment_year: int) -> None:
    if not isinstance(shop_id, str) or not shop_id.strip():
        raise InvalidArgumentError("shop_id is required")
    if isinstance(assessment_year, bool) or not isinstance(assessment_year, int):
        raise InvalidArgumentError("assessment_year must be an integer year")


async def assess_dues(
    shop_id: str,
    assessment_year: int,
    *,
    shops: ShopReader,
    payments: PaymentReader,
    revenue_types: RevenueTypeReader,
    clock: Clock,
    rates: RateSchedule = DEFAULT_RATE_SCHEDULE,
) -> DuesAssessment:
    """
    Compute a shop's dues for an assessment year with the full breakdown.

    Flow:
    1. Load the shop and the active revenue types
    2. Sum registration fee, annual permit fee, environmental levy and
       premises tax from the shop's size, business type and ward
    3. Sum amount paid over the year's Paid / Partially Paid payments
    4. Outstanding = base total - paid
    5. Add a penalty for every loaded payment that is Partially Paid, or
       Pending and past due, on its unpaid balance
    6. Round the result half-up to whole Naira

    Raises:
        InvalidArgumentError: Missing inputs, or a shop attribute the
            calculators do not recognize
        NotFoundError: Shop does not exist
        DependencyFailureError: A reader failed
    """
    _validate_inputs(shop_id, assessment_year)
    now = clock.now()

    shop = await shops.get_shop(shop_id)
    active_revenue_types = await revenue_types.list_active_revenue_types()

    fees = quote_fees(shop.shop_size_category, shop.business_type, shop.ward, rates=rates)

    year_payments = await payments.list_payments(
        shop_id,
        assessment_year=assessment_year,
        status_in=SETTLED_STATUSES,
    )
    total_paid = sum((p.amount_paid for p in year_payments), Decimal("0"))

    outstanding = fees.base_total - total_paid

    penalties = Decimal("0")
    penalised = []
    for payment in year_payments:
        is_partial = payment.payment_status == PaymentStatus.PARTIALLY_PAID
        is_late_pending = (
            payment.payment_status == PaymentStatus.PENDING
            and payment.due_date is not None
            and now > payment.due_date
        )
        if not (is_partial or is_late_pending):
            continue

        unpaid = payment.amount_due - payment.amount_paid
        days_overdue = calculate_days_overdue(payment.due_date, now)
        penalty = calculate_penalty(unpaid, days_overdue, rates)
        penalties += penalty
        penalised.append(
            PenaltyAssessment(
                payment_id=payment.payment_id,
                days_overdue=days_overdue,
                outstanding_amount=unpaid,
                penalty_amount=penalty,
                amount_due=payment.amount_due + penalty,
            )
        )

    total_due = round_to_unit(outstanding + penalties)

    logger.debug(
        "Dues assessed",
        extra={
            "shop_id": shop_id,
            "assessment_year": assessment_year,
            "base_total": str(fees.base_total),
            "total_paid": str(total_paid),
            "penalties": str(penalties),
        },
    )

    return DuesAssessment(
        shop_id=shop_id,
        assessment_year=assessment_year,
        fees=fees,
        total_paid=total_paid,
        penalties=penalties,
        total_due=total_due,
        active_revenue_types=len(active_revenue_types),
        penalised_payments=penalised,
    )


async def calculate_total_due(
    shop_id: str,
    assessment_year: int,
    *,
    shops: ShopReader,
    payments: PaymentReader,
    revenue_types: RevenueTypeReader,
    clock: Clock,
    rates: RateSchedule = DEFAULT_RATE_SCHEDULE,
) -> Decimal:
    """Total a shop owes for the year: fees - payments + penalties, whole Naira"""
    assessment = await assess_dues(
        shop_id,
        assessment_year,
        shops=shops,
        payments=payments,
        revenue_types=revenue_types,
        clock=clock,
        rates=rates,
    )
    return assessment.total_due
