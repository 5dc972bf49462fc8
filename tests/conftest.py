"""Pytest fixtures for testing"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")

import pytest
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Dict, Generator, Iterable, List, Optional
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from uvwie_revenue.api.dependencies import get_clock
from uvwie_revenue.api.main import create_app
from uvwie_revenue.domain.exceptions import NotFoundError
from uvwie_revenue.domain.models import (
    CalculationMethod,
    ComplianceStatus,
    Frequency,
    Payment,
    PaymentStatus,
    Permit,
    RevenueType,
    Shop,
)
from uvwie_revenue.infrastructure.database.models import (
    Base,
    PaymentRecord,
    PermitRecord,
    RevenueTypeRecord,
    ShopRecord,
)
from uvwie_revenue.infrastructure.database.session import get_db
from uvwie_revenue.utils.clock import FixedClock


# Every test runs at this instant
NOW = datetime(2025, 6, 15, 12, 0, tzinfo=timezone.utc)

# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class InMemoryRecords:
    """Fake data store implementing every reader and writer port"""

    def __init__(self):
        self.shops: Dict[str, Shop] = {}
        self.payments: List[Payment] = []
        self.permits: List[Permit] = []
        self.revenue_types: List[RevenueType] = []
        self.calls: List[str] = []

    async def get_shop(self, shop_id: str) -> Shop:
        self.calls.append("get_shop")
        if shop_id not in self.shops:
            raise NotFoundError(f"Shop with ID {shop_id} not found")
        return self.shops[shop_id]

    async def list_active_revenue_types(self) -> List[RevenueType]:
        self.calls.append("list_active_revenue_types")
        return [r for r in self.revenue_types if r.is_active]

    async def list_payments(
        self,
        shop_id: str,
        assessment_year: Optional[int] = None,
        status_in: Optional[Iterable[PaymentStatus]] = None,
        due_before: Optional[datetime] = None,
    ) -> List[Payment]:
        self.calls.append("list_payments")
        wanted = set(status_in) if status_in is not None else None
        return [
            p for p in self.payments
            if p.shop_id == shop_id
            and (assessment_year is None or p.assessment_year == assessment_year)
            and (wanted is None or p.payment_status in wanted)
            and (due_before is None or (p.due_date is not None and p.due_date < due_before))
        ]

    async def list_permits(self, shop_id: str, expiry_before: Optional[datetime] = None) -> List[Permit]:
        self.calls.append("list_permits")
        return [
            p for p in self.permits
            if p.shop_id == shop_id
            and (expiry_before is None or (p.expiry_date is not None and p.expiry_date < expiry_before))
        ]

    async def update_shop(self, shop_id: str, compliance_status: ComplianceStatus) -> None:
        self.shops[shop_id].compliance_status = compliance_status

    def add_shop(self, shop_id: str = "UVW/SHP/2025/001", size: str = "medium", business_type: str = "bank", ward: str = "Effurun") -> Shop:
        shop = Shop(shop_id=shop_id, shop_size_category=size, business_type=business_type, ward=ward)
        self.shops[shop_id] = shop
        return shop

    def add_payment(
        self,
        payment_id: str,
        status: PaymentStatus,
        amount_due: str,
        amount_paid: str = "0",
        due_in_days: Optional[int] = None,
        shop_id: str = "UVW/SHP/2025/001",
        assessment_year: int = 2025,
    ) -> Payment:
        payment = Payment(
            payment_id=payment_id,
            shop_id=shop_id,
            revenue_type_id="REV-PERMIT",
            assessment_year=assessment_year,
            amount_due=Decimal(amount_due),
            amount_paid=Decimal(amount_paid),
            payment_status=status,
            due_date=NOW + timedelta(days=due_in_days) if due_in_days is not None else None,
        )
        self.payments.append(payment)
        return payment

    def add_permit(self, permit_id: str, expires_in_days: Optional[int], shop_id: str = "UVW/SHP/2025/001") -> Permit:
        permit = Permit(
            permit_id=permit_id,
            shop_id=shop_id,
            permit_type="Business Operating Permit",
            issue_date=NOW - timedelta(days=300),
            expiry_date=NOW + timedelta(days=expires_in_days) if expires_in_days is not None else None,
            permit_fee=Decimal("5000.00"),
        )
        self.permits.append(permit)
        return permit


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(NOW)


@pytest.fixture
def records() -> InMemoryRecords:
    """In-memory store with one active revenue type"""
    store = InMemoryRecords()
    store.revenue_types.append(
        RevenueType(
            type_id="REV-PERMIT",
            type_name="Annual Business Permit",
            base_amount=Decimal("25000.00"),
            calculation_method=CalculationMethod.FIXED,
            frequency=Frequency.ANNUAL,
        )
    )
    return store


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session) -> TestClient:
    """Create FastAPI test client with test database and a fixed clock"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: FixedClock(NOW)
    return TestClient(app)


class Seeder:
    """Insert ORM rows relative to NOW"""

    def __init__(self, db: Session):
        self.db = db

    def shop(
        self,
        shop_id: str,
        size: str = "Medium",
        business_type: str = "Bank",
        ward: str = "Effurun",
        compliance_status: str = "New",
    ) -> ShopRecord:
        row = ShopRecord(
            shop_id=shop_id,
            business_name=f"Shop {shop_id}",
            owner_name="Test Owner",
            ward=ward,
            business_type=business_type,
            shop_size_category=size,
            compliance_status=compliance_status,
        )
        self.db.add(row)
        self.db.commit()
        return row

    def revenue_type(self, type_id: str = "REV-PERMIT", is_active: bool = True) -> RevenueTypeRecord:
        row = RevenueTypeRecord(
            type_id=type_id,
            type_name="Annual Business Permit",
            base_amount=Decimal("25000.00"),
            calculation_method="Fixed",
            frequency="Annual",
            is_active=is_active,
        )
        self.db.add(row)
        self.db.commit()
        return row

    def payment(
        self,
        payment_id: str,
        shop_id: str,
        status: str,
        amount_due: str,
        amount_paid: str = "0",
        due_in_days: Optional[int] = None,
        assessment_year: int = 2025,
        penalty_amount: str = "0",
    ) -> PaymentRecord:
        row = PaymentRecord(
            payment_id=payment_id,
            shop_id=shop_id,
            revenue_type_id="REV-PERMIT",
            assessment_year=assessment_year,
            amount_due=Decimal(amount_due),
            amount_paid=Decimal(amount_paid),
            penalty_amount=Decimal(penalty_amount),
            due_date=NOW + timedelta(days=due_in_days) if due_in_days is not None else None,
            payment_status=status,
        )
        self.db.add(row)
        self.db.commit()
        return row

    def permit(
        self,
        permit_id: str,
        shop_id: str,
        expires_in_days: Optional[int],
        permit_fee: str = "5000.00",
    ) -> PermitRecord:
        row = PermitRecord(
            permit_id=permit_id,
            shop_id=shop_id,
            permit_type="Business Operating Permit",
            issue_date=NOW - timedelta(days=300),
            expiry_date=NOW + timedelta(days=expires_in_days) if expires_in_days is not None else None,
            permit_fee=Decimal(permit_fee),
        )
        self.db.add(row)
        self.db.commit()
        return row


@pytest.fixture
def seed(db: Session) -> Seeder:
    """Seeder with the annual permit revenue type already present"""
    seeder = Seeder(db)
    seeder.revenue_type()
    return seeder
