"""POST /v1/fees/quote and /v1/penalties/quote - stateless calculator endpoints"""

from fastapi import APIRouter, Depends, HTTPException

from uvwie_revenue.api.dependencies import get_rates
from uvwie_revenue.api.v1.schemas import FeeQuoteRequest, FeeQuoteResponse, PenaltyQuoteRequest, PenaltyQuoteResponse
from uvwie_revenue.domain.exceptions import InvalidArgumentError
from uvwie_revenue.domain.fees import quote_fees
from uvwie_revenue.domain.models import ShopSize
from uvwie_revenue.domain.penalties import calculate_penalty
from uvwie_revenue.domain.rates import RateSchedule
from uvwie_revenue.infrastructure.observability.metrics import fee_quote_counter

router = APIRouter()


@router.post("/fees/quote", response_model=FeeQuoteResponse)
def create_fee_quote(request_body: FeeQuoteRequest, rates: RateSchedule = Depends(get_rates)):
    """
    Quote every fee for a shop profile.

    Returns:
        Registration fee, annual permit fee, environmental levy, premises tax,
        the signage fee when a signage type is given, and the annual base total
    """
    try:
        quote = quote_fees(
            request_body.shop_size,
            request_body.business_type,
            request_body.ward,
            signage_type=request_body.signage_type,
            rates=rates,
        )
    except InvalidArgumentError as e:
        raise HTTPException(status_code=422, detail=str(e))

    fee_quote_counter.labels(shop_size=ShopSize.parse(request_body.shop_size).value).inc()

    return FeeQuoteResponse(
        business_registration_fee=quote.business_registration_fee,
        annual_permit_fee=quote.annual_permit_fee,
        environmental_levy=quote.environmental_levy,
        shop_premises_tax=quote.shop_premises_tax,
        signage_permit_fee=quote.signage_permit_fee,
        base_total=quote.base_total,
    )


@router.post("/penalties/quote", response_model=PenaltyQuoteResponse)
def create_penalty_quote(request_body: PenaltyQuoteRequest, rates: RateSchedule = Depends(get_rates)):
    """Penalty on an overdue balance, without touching any payment record"""
    try:
        penalty = calculate_penalty(request_body.outstanding_amount, request_body.days_overdue, rates)
    except InvalidArgumentError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return PenaltyQuoteResponse(
        outstanding_amount=request_body.outstanding_amount,
        days_overdue=request_body.days_overdue,
        penalty=penalty,
    )
