"""Compliance classification - a shop's standing from its payments and permits"""

from datetime import datetime
from typing import Iterable

from uvwie_revenue.domain.exceptions import InvalidArgumentError
from uvwie_revenue.domain.models import ComplianceStatus, Payment, PaymentStatus, Permit
from uvwie_revenue.domain.ports import PaymentReader, PermitReader
from uvwie_revenue.domain.permits import is_permit_expired
from uvwie_revenue.utils.clock import Clock

# Payments still owing money; a status of Overdue alone does not count
OUTSTANDING_STATUSES = (PaymentStatus.PENDING, PaymentStatus.PARTIALLY_PAID)

_DECISION_TABLE = {
    (False, False): ComplianceStatus.COMPLIANT,
    (True, False): ComplianceStatus.OVERDUE_PAYMENTS,
    (False, True): ComplianceStatus.EXPIRED_PERMITS,
    (True, True): ComplianceStatus.NON_COMPLIANT,
}


def has_overdue_payment(payments: Iterable[Payment], now: datetime) -> bool:
    """Any outstanding payment whose due date has passed"""
    return any(
        p.payment_status in OUTSTANDING_STATUSES and p.due_date is not None and p.due_date < now
        for p in payments
    )


def has_expired_permit(permits: Iterable[Permit], now: datetime) -> bool:
    """Any permit whose expiry date has passed"""
    return any(is_permit_expired(p, now) for p in permits)


def determine_compliance_status(has_pending_overdue: bool, has_expired_permit: bool) -> ComplianceStatus:
    """
    Map the two compliance conditions to a status.

    | overdue payment | expired permit | status           |
    |-----------------|----------------|------------------|
    | no              | no             | Compliant        |
    | yes             | no             | Overdue Payments |
    | no              | yes            | Expired Permits  |
    | yes             | yes            | Non-Compliant    |
    """
    return _DECISION_TABLE[(bool(has_pending_overdue), bool(has_expired_permit))]


async def classify_shop(
    shop_id: str,
    *,
    payments: PaymentReader,
    permits: PermitReader,
    clock: Clock,
) -> ComplianceStatus:
    """
    Classify a shop from its current payment and permit records.

    Nothing is remembered between calls: every evaluation starts from the
    records as they are now. Persisting the result is the caller's job.

    Raises:
        InvalidArgumentError: Empty shop_id
        DependencyFailureError: A reader failed
    """
    if not isinstance(shop_id, str) or not shop_id.strip():
        raise InvalidArgumentError("shop_id is required")

    now = clock.now()

    overdue = await payments.list_payments(shop_id, status_in=OUTSTANDING_STATUSES, due_before=now)
    expired = await permits.list_permits(shop_id, expiry_before=now)

    return determine_compliance_status(
        has_overdue_payment(overdue, now),
        has_expired_permit(expired, now),
    )
