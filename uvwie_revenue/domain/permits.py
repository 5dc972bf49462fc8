"""Permit lifecycle: expiry, renewal window and renewal fee"""

from datetime import datetime, timedelta
from decimal import Decimal
from typing import Iterable, List, Optional

from uvwie_revenue.domain.exceptions import InvalidArgumentError
from uvwie_revenue.domain.models import Permit
from uvwie_revenue.domain.rates import DEFAULT_RATE_SCHEDULE, RateSchedule
from uvwie_revenue.utils.date_utils import add_years, days_between_ceil
from uvwie_revenue.utils.money import round_to_kobo


def calculate_expiry_date(issue_date: datetime, rates: RateSchedule = DEFAULT_RATE_SCHEDULE) -> datetime:
    """Every permit type is currently valid for the same number of years from issue"""
    return add_years(issue_date, rates.permit_validity_years)


def is_permit_expired(permit: Permit, now: datetime) -> bool:
    return permit.expiry_date is not None and permit.expiry_date < now


def days_until_expiry(permit: Permit, now: datetime) -> Optional[int]:
    """Days left before expiry (part days round up); negative once expired"""
    if permit.expiry_date is None:
        return None
    return days_between_ceil(now, permit.expiry_date)


def calculate_renewal_fee(
    permit: Permit,
    now: datetime,
    rates: RateSchedule = DEFAULT_RATE_SCHEDULE,
) -> Decimal:
    """Renewal costs the permit fee, with a 20% surcharge once the permit has lapsed"""
    if permit.permit_fee < 0:
        raise InvalidArgumentError(f"Permit {permit.permit_id} has a negative fee")

    fee = permit.permit_fee
    if is_permit_expired(permit, now):
        fee *= rates.late_renewal_multiplier
    return round_to_kobo(fee)


def select_expiring_permits(permits: Iterable[Permit], now: datetime, within_days: int) -> List[Permit]:
    """Permits expiring between now and `within_days` from now, soonest first"""
    if within_days < 0:
        raise InvalidArgumentError("within_days must be non-negative")

    horizon = now + timedelta(days=within_days)
    expiring = [
        p for p in permits
        if p.expiry_date is not None and now <= p.expiry_date <= horizon
    ]
    return sorted(expiring, key=lambda p: p.expiry_date)
