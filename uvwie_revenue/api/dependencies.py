"""Dependency injection for FastAPI endpoints"""

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from uvwie_revenue.domain.rates import RateSchedule, get_rate_schedule
from uvwie_revenue.infrastructure.database.repositories import (
    PaymentRepository,
    PermitRepository,
    RevenueTypeRepository,
    ShopRepository,
)
from uvwie_revenue.infrastructure.database.session import get_db
from uvwie_revenue.utils.clock import Clock, SystemClock


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_clock() -> Clock:
    """Provide the clock used for penalties and compliance (overridden in tests)"""
    return SystemClock()


def get_rates() -> RateSchedule:
    """Provide the process-wide rate schedule"""
    return get_rate_schedule()


def get_shop_repository(db: Session = Depends(get_db)) -> ShopRepository:
    return ShopRepository(db)


def get_payment_repository(db: Session = Depends(get_db)) -> PaymentRepository:
    return PaymentRepository(db)


def get_permit_repository(db: Session = Depends(get_db)) -> PermitRepository:
    return PermitRepository(db)


def get_revenue_type_repository(db: Session = Depends(get_db)) -> RevenueTypeRepository:
    return RevenueTypeRepository(db)
