"""Shop dues and compliance endpoints"""

import time
import logging
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from uvwie_revenue.api.dependencies import (
    get_clock,
    get_payment_repository,
    get_permit_repository,
    get_rates,
    get_request_id,
    get_revenue_type_repository,
    get_shop_repository,
)
from uvwie_revenue.api.v1.schemas import ComplianceResponse, DuesRequest, DuesResponse, PenaltyItem
from uvwie_revenue.domain.compliance import classify_shop
from uvwie_revenue.domain.dues import assess_dues
from uvwie_revenue.domain.exceptions import DependencyFailureError, InvalidArgumentError, NotFoundError
from uvwie_revenue.domain.rates import RateSchedule
from uvwie_revenue.infrastructure.database.repositories import (
    PaymentRepository,
    PermitRepository,
    RevenueTypeRepository,
    ShopRepository,
)
from uvwie_revenue.infrastructure.database.session import get_db
from uvwie_revenue.infrastructure.observability.logging import log_compliance_evaluation, log_dues_assessment
from uvwie_revenue.infrastructure.observability.metrics import (
    dependency_failure_counter,
    record_compliance,
    record_dues_outcome,
)
from uvwie_revenue.utils.clock import Clock

router = APIRouter()


@router.post("/shops/{shop_id}/calculate-dues", response_model=DuesResponse)
async def calculate_dues(
    shop_id: str,
    request_body: DuesRequest,
    request: Request,
    shop_repo: ShopRepository = Depends(get_shop_repository),
    payment_repo: PaymentRepository = Depends(get_payment_repository),
    revenue_type_repo: RevenueTypeRepository = Depends(get_revenue_type_repository),
    clock: Clock = Depends(get_clock),
    rates: RateSchedule = Depends(get_rates),
):
    """
    Calculate everything a shop owes for an assessment year.

    Flow:
    1. Sum the shop's annual fees from its size, business type and ward
    2. Subtract what has been paid for the year
    3. Add penalties on partially paid or late payments
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        assessment = await assess_dues(
            shop_id,
            request_body.assessment_year,
            shops=shop_repo,
            payments=payment_repo,
            revenue_types=revenue_type_repo,
            clock=clock,
            rates=rates,
        )

    except NotFoundError as e:
        record_dues_outcome("not_found")
        raise HTTPException(status_code=404, detail=str(e))

    except InvalidArgumentError as e:
        record_dues_outcome("invalid")
        logging.warning(f"Cannot assess dues: {e}", extra={"request_id": request_id, "shop_id": shop_id})
        raise HTTPException(status_code=422, detail=str(e))

    except DependencyFailureError as e:
        record_dues_outcome("unavailable")
        dependency_failure_counter.inc()
        logging.error(f"Data store error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="Revenue database unavailable")

    except Exception as e:
        record_dues_outcome("error")
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id, "shop_id": shop_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    record_dues_outcome("assessed")
    log_dues_assessment(
        request_id,
        shop_id,
        assessment.assessment_year,
        str(assessment.total_due),
        len(assessment.penalised_payments),
        (time.time() - start_time) * 1000,
    )

    return DuesResponse(
        shop_id=assessment.shop_id,
        assessment_year=assessment.assessment_year,
        business_registration_fee=assessment.fees.business_registration_fee,
        annual_permit_fee=assessment.fees.annual_permit_fee,
        environmental_levy=assessment.fees.environmental_levy,
        shop_premises_tax=assessment.fees.shop_premises_tax,
        base_total=assessment.fees.base_total,
        total_paid=assessment.total_paid,
        penalties=assessment.penalties,
        total_due=assessment.total_due,
        penalised_payments=[
            PenaltyItem(
                payment_id=p.payment_id,
                days_overdue=p.days_overdue,
                outstanding_amount=p.outstanding_amount,
                penalty_amount=p.penalty_amount,
                amount_due=p.amount_due,
            )
            for p in assessment.penalised_payments
        ],
    )


async def _evaluate_compliance(
    shop_id: str,
    request: Request,
    persist: bool,
    db: Session,
    shop_repo: ShopRepository,
    payment_repo: PaymentRepository,
    permit_repo: PermitRepository,
    clock: Clock,
) -> ComplianceResponse:
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        await shop_repo.get_shop(shop_id)
        status = await classify_shop(shop_id, payments=payment_repo, permits=permit_repo, clock=clock)
        if persist:
            await shop_repo.update_shop(shop_id, status)
            db.commit()

    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    except InvalidArgumentError as e:
        db.rollback()
        logging.warning(f"Cannot classify shop: {e}", extra={"request_id": request_id, "shop_id": shop_id})
        raise HTTPException(status_code=422, detail=str(e))

    except DependencyFailureError as e:
        db.rollback()
        dependency_failure_counter.inc()
        logging.error(f"Data store error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="Revenue database unavailable")

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id, "shop_id": shop_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    record_compliance(status.value)
    log_compliance_evaluation(request_id, shop_id, status.value, persist, (time.time() - start_time) * 1000)

    return ComplianceResponse(
        shop_id=shop_id,
        compliance_status=status.value,
        persisted=persist,
        evaluated_at=clock.now(),
    )


@router.get("/shops/{shop_id}/compliance", response_model=ComplianceResponse)
async def get_compliance(
    shop_id: str,
    request: Request,
    db: Session = Depends(get_db),
    shop_repo: ShopRepository = Depends(get_shop_repository),
    payment_repo: PaymentRepository = Depends(get_payment_repository),
    permit_repo: PermitRepository = Depends(get_permit_repository),
    clock: Clock = Depends(get_clock),
):
    """Classify a shop from its current payments and permits without saving the result"""
    return await _evaluate_compliance(shop_id, request, False, db, shop_repo, payment_repo, permit_repo, clock)


@router.post("/shops/{shop_id}/compliance", response_model=ComplianceResponse)
async def refresh_compliance(
    shop_id: str,
    request: Request,
    db: Session = Depends(get_db),
    shop_repo: ShopRepository = Depends(get_shop_repository),
    payment_repo: PaymentRepository = Depends(get_payment_repository),
    permit_repo: PermitRepository = Depends(get_permit_repository),
    clock: Clock = Depends(get_clock),
):
    """Classify a shop and store the result as its compliance status"""
    return await _evaluate_compliance(shop_id, request, True, db, shop_repo, payment_repo, permit_repo, clock)
