"""Data access layer implementing the revenue core's reader and writer ports"""

from datetime import datetime
from decimal import Decimal
from typing import Callable, Iterable, List, Optional, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from uvwie_revenue.domain.exceptions import DependencyFailureError, NotFoundError
from uvwie_revenue.domain.models import (
    CalculationMethod,
    ComplianceStatus,
    Frequency,
    Payment,
    PaymentStatus,
    Permit,
    PermitStatus,
    RevenueType,
    Shop,
)
from uvwie_revenue.infrastructure.database.models import PaymentRecord, PermitRecord, RevenueTypeRecord, ShopRecord
from uvwie_revenue.utils.date_utils import as_utc

T = TypeVar("T")


async def _run(query: Callable[[], T]) -> T:
    """Run blocking session work off the event loop, surfacing DB errors as DependencyFailureError"""
    try:
        return await run_in_threadpool(query)
    except SQLAlchemyError as e:
        raise DependencyFailureError(f"Database error: {e.__class__.__name__}") from e


def _to_shop(row: ShopRecord) -> Shop:
    return Shop(
        shop_id=row.shop_id,
        shop_size_category=row.shop_size_category,
        business_type=row.business_type,
        ward=row.ward,
        business_name=row.business_name,
        compliance_status=ComplianceStatus.parse(row.compliance_status),
    )


def _to_payment(row: PaymentRecord) -> Payment:
    return Payment(
        payment_id=row.payment_id,
        shop_id=row.shop_id,
        revenue_type_id=row.revenue_type_id,
        assessment_year=row.assessment_year,
        amount_due=Decimal(row.amount_due),
        amount_paid=Decimal(row.amount_paid),
        penalty_amount=Decimal(row.penalty_amount),
        due_date=as_utc(row.due_date),
        payment_status=PaymentStatus.parse(row.payment_status),
    )


def _to_permit(row: PermitRecord) -> Permit:
    return Permit(
        permit_id=row.permit_id,
        shop_id=row.shop_id,
        permit_type=row.permit_type,
        issue_date=as_utc(row.issue_date),
        expiry_date=as_utc(row.expiry_date),
        permit_status=PermitStatus.parse(row.permit_status),
        renewal_status=row.renewal_status,
        permit_fee=Decimal(row.permit_fee),
    )


def _to_revenue_type(row: RevenueTypeRecord) -> RevenueType:
    return RevenueType(
        type_id=row.type_id,
        type_name=row.type_name,
        base_amount=Decimal(row.base_amount),
        calculation_method=CalculationMethod.parse(row.calculation_method),
        frequency=Frequency.parse(row.frequency),
        is_active=row.is_active,
    )


class ShopRepository:
    """Repository for the shop register"""

    def __init__(self, db: Session):
        self.db = db

    def _get_record(self, shop_id: str) -> ShopRecord:
        row = self.db.get(ShopRecord, shop_id)
        if row is None:
            raise NotFoundError(f"Shop with ID {shop_id} not found")
        return row

    async def get_shop(self, shop_id: str) -> Shop:
        """Fetch a shop or raise NotFoundError"""
        return await _run(lambda: _to_shop(self._get_record(shop_id)))

    async def update_shop(self, shop_id: str, compliance_status: ComplianceStatus) -> None:
        """Record a shop's compliance status (flushed, committed by the caller)"""

        def update() -> None:
            row = self._get_record(shop_id)
            row.compliance_status = compliance_status.value
            self.db.flush()

        await _run(update)


class RevenueTypeRepository:
    """Repository for configured revenue types"""

    def __init__(self, db: Session):
        self.db = db

    async def list_active_revenue_types(self) -> List[RevenueType]:
        def query() -> List[RevenueType]:
            rows = (
                self.db.query(RevenueTypeRecord)
                .filter(RevenueTypeRecord.is_active.is_(True))
                .order_by(RevenueTypeRecord.type_id)
                .all()
            )
            return [_to_revenue_type(r) for r in rows]

        return await _run(query)


class PaymentRepository:
    """Repository for assessed payments"""

    def __init__(self, db: Session):
        self.db = db

    async def list_payments(
        self,
        shop_id: str,
        assessment_year: Optional[int] = None,
        status_in: Optional[Iterable[PaymentStatus]] = None,
        due_before: Optional[datetime] = None,
    ) -> List[Payment]:
        """
        Payments for a shop, optionally narrowed by year, status and due date.

        Status is matched after parsing, so legacy spellings such as
        "partially_paid" are found alongside "Partially Paid".
        """
        wanted = set(status_in) if status_in is not None else None

        def query() -> List[Payment]:
            q = self.db.query(PaymentRecord).filter(PaymentRecord.shop_id == shop_id)
            if assessment_year is not None:
                q = q.filter(PaymentRecord.assessment_year == assessment_year)
            if due_before is not None:
                q = q.filter(PaymentRecord.due_date.is_not(None), PaymentRecord.due_date < due_before)
            payments = [_to_payment(r) for r in q.order_by(PaymentRecord.payment_id).all()]
            if wanted is not None:
                payments = [p for p in payments if p.payment_status in wanted]
            return payments

        return await _run(query)

    async def get_payment(self, payment_id: str, for_update: bool = False) -> Payment:
        """
        Fetch a payment or raise NotFoundError.

        With for_update the row stays locked until the session's transaction
        ends (ignored by SQLite).
        """

        def query() -> Payment:
            q = self.db.query(PaymentRecord).filter(PaymentRecord.payment_id == payment_id)
            if for_update:
                q = q.with_for_update()
            row = q.first()
            if row is None:
                raise NotFoundError(f"Payment with ID {payment_id} not found")
            return _to_payment(row)

        return await _run(query)

    async def update_payment(self, payment_id: str, penalty_amount: Decimal, amount_due: Decimal) -> None:
        """Write back an applied penalty (flushed, committed by the caller)"""

        def update() -> None:
            row = self.db.get(PaymentRecord, payment_id)
            if row is None:
                raise NotFoundError(f"Payment with ID {payment_id} not found")
            row.penalty_amount = penalty_amount
            row.amount_due = amount_due
            self.db.flush()

        await _run(update)


class PermitRepository:
    """Repository for shop permits"""

    def __init__(self, db: Session):
        self.db = db

    async def list_permits(self, shop_id: str, expiry_before: Optional[datetime] = None) -> List[Permit]:
        def query() -> List[Permit]:
            q = self.db.query(PermitRecord).filter(PermitRecord.shop_id == shop_id)
            if expiry_before is not None:
                q = q.filter(PermitRecord.expiry_date.is_not(None), PermitRecord.expiry_date < expiry_before)
            return [_to_permit(r) for r in q.order_by(PermitRecord.permit_id).all()]

        return await _run(query)

    async def list_permits_expiring_between(self, start: datetime, end: datetime) -> List[Permit]:
        """Permits of every shop with an expiry date inside [start, end]"""

        def query() -> List[Permit]:
            rows = (
                self.db.query(PermitRecord)
                .filter(PermitRecord.expiry_date.between(start, end))
                .order_by(PermitRecord.expiry_date)
                .all()
            )
            return [_to_permit(r) for r in rows]

        return await _run(query)

    async def get_permit(self, permit_id: str) -> Permit:
        def query() -> Permit:
            row = self.db.get(PermitRecord, permit_id)
            if row is None:
                raise NotFoundError(f"Permit with ID {permit_id} not found")
            return _to_permit(row)

        return await _run(query)
