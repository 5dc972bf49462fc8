"""Pydantic schemas for API request/response validation"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field


class FeeQuoteRequest(BaseModel):
    """Request body for POST /v1/fees/quote"""

    shop_size: str = Field(..., description="small | medium | large")
    business_type: str = Field(..., description="e.g. restaurant, kiosk, bank")
    ward: str = Field(..., description="Ward or location of the shop")
    signage_type: Optional[str] = Field(None, description="small | medium | large | billboard")


class FeeQuoteResponse(BaseModel):
    """Response for POST /v1/fees/quote"""

    business_registration_fee: Decimal
    annual_permit_fee: Decimal
    environmental_levy: Decimal
    shop_premises_tax: Decimal
    signage_permit_fee: Optional[Decimal] = None
    base_total: Decimal


class PenaltyQuoteRequest(BaseModel):
    """Request body for POST /v1/penalties/quote"""

    outstanding_amount: Decimal
    days_overdue: Decimal = Field(..., description="Days late; part days allowed")


class PenaltyQuoteResponse(BaseModel):
    outstanding_amount: Decimal
    days_overdue: Decimal
    penalty: Decimal


class DuesRequest(BaseModel):
    """Request body for POST /v1/shops/{shop_id}/calculate-dues"""

    assessment_year: int = Field(..., ge=2000, description="Fiscal year the dues are attributed to")


class PenaltyItem(BaseModel):
    """Penalty accrued on a single payment"""

    payment_id: str
    days_overdue: int
    outstanding_amount: Decimal
    penalty_amount: Decimal
    amount_due: Decimal


class DuesResponse(BaseModel):
    """Response for POST /v1/shops/{shop_id}/calculate-dues"""

    shop_id: str
    assessment_year: int
    business_registration_fee: Decimal
    annual_permit_fee: Decimal
    environmental_levy: Decimal
    shop_premises_tax: Decimal
    base_total: Decimal
    total_paid: Decimal
    penalties: Decimal
    total_due: Decimal
    penalised_payments: List[PenaltyItem]


class ComplianceResponse(BaseModel):
    """Response for GET/POST /v1/shops/{shop_id}/compliance"""

    shop_id: str
    compliance_status: str
    persisted: bool
    evaluated_at: datetime


class ExpiringPermit(BaseModel):
    permit_id: str
    shop_id: str
    permit_type: str
    expiry_date: datetime
    days_until_expiry: int


class ExpiringPermitsResponse(BaseModel):
    """Response for GET /v1/permits/expiring"""

    within_days: int
    permits: List[ExpiringPermit]


class RenewalFeeResponse(BaseModel):
    """Response for GET /v1/permits/{permit_id}/renewal-fee"""

    permit_id: str
    expired: bool
    expiry_date: Optional[datetime] = None
    renewal_fee: Decimal
