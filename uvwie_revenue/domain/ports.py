"""Data access contracts the revenue core depends on"""

from datetime import datetime
from decimal import Decimal
from typing import Iterable, List, Optional, Protocol

from uvwie_revenue.domain.models import ComplianceStatus, Payment, PaymentStatus, Permit, RevenueType, Shop


class ShopReader(Protocol):
    async def get_shop(self, shop_id: str) -> Shop:
        """Raises NotFoundError when the shop does not exist"""
        ...


class PaymentReader(Protocol):
    async def list_payments(
        self,
        shop_id: str,
        assessment_year: Optional[int] = None,
        status_in: Optional[Iterable[PaymentStatus]] = None,
        due_before: Optional[datetime] = None,
    ) -> List[Payment]:
        ...


class PermitReader(Protocol):
    async def list_permits(self, shop_id: str, expiry_before: Optional[datetime] = None) -> List[Permit]:
        ...


class RevenueTypeReader(Protocol):
    async def list_active_revenue_types(self) -> List[RevenueType]:
        ...


class PaymentWriter(Protocol):
    async def update_payment(self, payment_id: str, penalty_amount: Decimal, amount_due: Decimal) -> None:
        ...


class ShopWriter(Protocol):
    async def update_shop(self, shop_id: str, compliance_status: ComplianceStatus) -> None:
        ...
