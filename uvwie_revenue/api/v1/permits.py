"""Permit renewal endpoints"""

import logging
from datetime import timedelta
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from uvwie_revenue.api.dependencies import get_clock, get_permit_repository, get_rates
from uvwie_revenue.api.v1.schemas import ExpiringPermit, ExpiringPermitsResponse, RenewalFeeResponse
from uvwie_revenue.config import settings
from uvwie_revenue.domain.exceptions import DependencyFailureError, InvalidArgumentError, NotFoundError
from uvwie_revenue.domain.permits import (
    calculate_renewal_fee,
    days_until_expiry,
    is_permit_expired,
    select_expiring_permits,
)
from uvwie_revenue.domain.rates import RateSchedule
from uvwie_revenue.infrastructure.database.repositories import PermitRepository
from uvwie_revenue.infrastructure.observability.metrics import dependency_failure_counter
from uvwie_revenue.utils.clock import Clock

router = APIRouter()


@router.get("/permits/expiring", response_model=ExpiringPermitsResponse)
async def get_expiring_permits(
    days: Optional[int] = Query(None, ge=0, description="Renewal window in days"),
    permit_repo: PermitRepository = Depends(get_permit_repository),
    clock: Clock = Depends(get_clock),
):
    """
    Permits due for renewal: expiring between now and `days` from now.

    Returns:
        Permits sorted by expiry date, with days left before each expires
    """
    within_days = settings.expiring_permit_days if days is None else days
    now = clock.now()

    try:
        candidates = await permit_repo.list_permits_expiring_between(now, now + timedelta(days=within_days))
    except DependencyFailureError as e:
        dependency_failure_counter.inc()
        logging.error(f"Data store error: {e}")
        raise HTTPException(status_code=503, detail="Revenue database unavailable")

    return ExpiringPermitsResponse(
        within_days=within_days,
        permits=[
            ExpiringPermit(
                permit_id=p.permit_id,
                shop_id=p.shop_id,
                permit_type=p.permit_type,
                expiry_date=p.expiry_date,
                days_until_expiry=days_until_expiry(p, now),
            )
            for p in select_expiring_permits(candidates, now, within_days)
        ],
    )


@router.get("/permits/{permit_id}/renewal-fee", response_model=RenewalFeeResponse)
async def get_renewal_fee(
    permit_id: str,
    permit_repo: PermitRepository = Depends(get_permit_repository),
    clock: Clock = Depends(get_clock),
    rates: RateSchedule = Depends(get_rates),
):
    """Fee to renew a permit; lapsed permits carry a late renewal surcharge"""
    now = clock.now()

    try:
        permit = await permit_repo.get_permit(permit_id)
        renewal_fee = calculate_renewal_fee(permit, now, rates)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidArgumentError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except DependencyFailureError as e:
        dependency_failure_counter.inc()
        logging.error(f"Data store error: {e}")
        raise HTTPException(status_code=503, detail="Revenue database unavailable")

    return RenewalFeeResponse(
        permit_id=permit.permit_id,
        expired=is_permit_expired(permit, now),
        expiry_date=permit.expiry_date,
        renewal_fee=renewal_fee,
    )
