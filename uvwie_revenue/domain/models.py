"""Domain models - pure Python dataclasses and enums representing revenue records"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Optional

from uvwie_revenue.domain.exceptions import InvalidArgumentError


def _lookup_key(raw: str) -> str:
    return raw.strip().lower().replace("-", " ").replace("_", " ")


class _ParsableEnum(str, Enum):
    """String enum parsed case-insensitively from stored or user-supplied values"""

    @classmethod
    def _aliases(cls) -> Dict[str, str]:
        return {}

    @classmethod
    def parse(cls, raw):
        if isinstance(raw, cls):
            return raw
        if not isinstance(raw, str) or not raw.strip():
            raise InvalidArgumentError(f"{cls.__name__} is required")

        key = _lookup_key(raw)
        key = cls._aliases().get(key, key)
        for member in cls:
            if key in (_lookup_key(member.value), _lookup_key(member.name)):
                return member

        raise InvalidArgumentError(f"Invalid {cls.__name__} provided: {raw!r}")


class ShopSize(_ParsableEnum):
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"


class SignageType(_ParsableEnum):
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"
    BILLBOARD = "billboard"


class PaymentStatus(_ParsableEnum):
    PAID = "Paid"
    PARTIALLY_PAID = "Partially Paid"
    PENDING = "Pending"
    OVERDUE = "Overdue"

    @classmethod
    def _aliases(cls) -> Dict[str, str]:
        # Spellings written by the legacy Node back end
        return {"completed": "paid", "partial": "partially paid"}


class PermitStatus(_ParsableEnum):
    ACTIVE = "Active"
    EXPIRED = "Expired"
    SUSPENDED = "Suspended"
    PENDING = "Pending"


class ComplianceStatus(_ParsableEnum):
    COMPLIANT = "Compliant"
    DEFAULTER = "Defaulter"
    NEW = "New"
    OVERDUE_PAYMENTS = "Overdue Payments"
    EXPIRED_PERMITS = "Expired Permits"
    NON_COMPLIANT = "Non-Compliant"


class CalculationMethod(_ParsableEnum):
    FIXED = "Fixed"
    PERCENTAGE = "Percentage"
    VARIABLE = "Variable"


class Frequency(_ParsableEnum):
    ONE_TIME = "One-time"
    MONTHLY = "Monthly"
    QUARTERLY = "Quarterly"
    ANNUAL = "Annual"

    @classmethod
    def _aliases(cls) -> Dict[str, str]:
        return {"onetime": "one time"}


@dataclass
class Shop:
    """Registered shop as read from the shop register"""

    shop_id: str
    shop_size_category: str  # raw stored value, parsed by the calculators
    business_type: str
    ward: str
    business_name: str = ""
    compliance_status: ComplianceStatus = ComplianceStatus.NEW


@dataclass
class RevenueType:
    """Configured revenue line (registration fee, levy, tax...)"""

    type_id: str
    type_name: str
    base_amount: Decimal
    calculation_method: CalculationMethod
    frequency: Frequency
    is_active: bool = True


@dataclass
class Payment:
    """Amount assessed against a shop for a revenue type and year"""

    payment_id: str
    shop_id: str
    revenue_type_id: str
    assessment_year: int
    amount_due: Decimal
    amount_paid: Decimal
    payment_status: PaymentStatus
    due_date: Optional[datetime] = None
    penalty_amount: Decimal = Decimal("0.00")


@dataclass
class Permit:
    """Permit issued to a shop"""

    permit_id: str
    shop_id: str
    permit_type: str
    issue_date: datetime
    expiry_date: Optional[datetime]
    permit_status: PermitStatus = PermitStatus.ACTIVE
    renewal_status: str = "Active"
    permit_fee: Decimal = Decimal("0.00")


@dataclass
class FeeQuote:
    """Every fee the calculators produce for one set of shop attributes"""

    business_registration_fee: Decimal
    annual_permit_fee: Decimal
    environmental_levy: Decimal
    shop_premises_tax: Decimal
    signage_permit_fee: Optional[Decimal] = None

    @property
    def base_total(self) -> Decimal:
        """Annual base due: the four fees charged to every shop (signage excluded)"""
        return (
            self.business_registration_fee
            + self.annual_permit_fee
            + self.environmental_levy
            + self.shop_premises_tax
        )


@dataclass
class PenaltyAssessment:
    """Penalty computed for a single payment at a point in time"""

    payment_id: str
    days_overdue: int
    outstanding_amount: Decimal
    penalty_amount: Decimal
    amount_due: Decimal  # base due plus the new penalty


@dataclass
class DuesAssessment:
    """Breakdown behind a shop's total due for an assessment year"""

    shop_id: str
    assessment_year: int
    fees: FeeQuote
    total_paid: Decimal
    penalties: Decimal
    total_due: Decimal
    active_revenue_types: int = 0
    penalised_payments: List[PenaltyAssessment] = field(default_factory=list)
