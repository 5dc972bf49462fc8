"""POST /v1/payments/{payment_id}/apply-penalty - accrue a late penalty on a payment"""

import time
import logging
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from uvwie_revenue.api.dependencies import get_clock, get_payment_repository, get_rates, get_request_id
from uvwie_revenue.api.v1.schemas import PenaltyItem
from uvwie_revenue.domain.exceptions import DependencyFailureError, InvalidArgumentError, NotFoundError
from uvwie_revenue.domain.models import PaymentStatus
from uvwie_revenue.domain.penalties import assess_payment_penalty
from uvwie_revenue.domain.rates import RateSchedule
from uvwie_revenue.infrastructure.database.repositories import PaymentRepository
from uvwie_revenue.infrastructure.database.session import get_db
from uvwie_revenue.infrastructure.observability.logging import log_penalty_applied
from uvwie_revenue.infrastructure.observability.metrics import dependency_failure_counter, record_penalty
from uvwie_revenue.utils.clock import Clock

router = APIRouter()


@router.post("/payments/{payment_id}/apply-penalty", response_model=PenaltyItem)
async def apply_penalty(
    payment_id: str,
    request: Request,
    db: Session = Depends(get_db),
    payment_repo: PaymentRepository = Depends(get_payment_repository),
    clock: Clock = Depends(get_clock),
    rates: RateSchedule = Depends(get_rates),
):
    """
    Recompute a payment's penalty and write it back.

    The payment row is locked for the read-modify-write, and any penalty
    already on the record is replaced rather than added to.
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        payment = await payment_repo.get_payment(payment_id, for_update=True)
        if payment.payment_status == PaymentStatus.PAID:
            db.rollback()
            raise HTTPException(status_code=409, detail="Payment is already settled")

        assessment = assess_payment_penalty(payment, clock.now(), rates)
        await payment_repo.update_payment(payment_id, assessment.penalty_amount, assessment.amount_due)
        db.commit()

    except HTTPException:
        raise

    except NotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))

    except InvalidArgumentError as e:
        db.rollback()
        logging.warning(f"Cannot apply penalty: {e}", extra={"request_id": request_id, "payment_id": payment_id})
        raise HTTPException(status_code=422, detail=str(e))

    except DependencyFailureError as e:
        db.rollback()
        dependency_failure_counter.inc()
        logging.error(f"Data store error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="Revenue database unavailable")

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id, "payment_id": payment_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    record_penalty(float(assessment.penalty_amount))
    log_penalty_applied(
        request_id,
        payment_id,
        assessment.days_overdue,
        str(assessment.penalty_amount),
        (time.time() - start_time) * 1000,
    )

    return PenaltyItem(
        payment_id=assessment.payment_id,
        days_overdue=assessment.days_overdue,
        outstanding_amount=assessment.outstanding_amount,
        penalty_amount=assessment.penalty_amount,
        amount_due=assessment.amount_due,
    )
