"""Unit tests for penalty calculation"""

import pytest
from datetime import timedelta
from decimal import Decimal
from uvwie_revenue.domain.exceptions import InvalidArgumentError
from uvwie_revenue.domain.models import Payment, PaymentStatus
from uvwie_revenue.domain.penalties import assess_payment_penalty, calculate_days_overdue, calculate_penalty
from uvwie_revenue.domain.rates import RateSchedule

from conftest import NOW


@pytest.mark.parametrize("amount", [0, 1, 10000, Decimal("2500.50")])
def test_no_penalty_when_not_overdue(amount):
    assert calculate_penalty(amount, 0) == 0


def test_penalty_one_period_plus_days():
    """35 days late on 10000: 5% flat + 1% for one whole 30-day period"""
    assert calculate_penalty(10000, 35) == 600


def test_penalty_period_boundaries():
    assert calculate_penalty(10000, 1) == 500
    assert calculate_penalty(10000, 29) == 500
    assert calculate_penalty(10000, 30) == 600
    assert calculate_penalty(10000, 65) == 700


def test_penalty_non_decreasing_in_days():
    penalties = [calculate_penalty(Decimal("7321.45"), d) for d in range(0, 400)]
    assert penalties == sorted(penalties)


def test_penalty_rounds_half_up():
    """333 * 5% = 16.65 rounds to 17"""
    assert calculate_penalty(333, 5) == 17


def test_penalty_rejects_bad_input():
    with pytest.raises(InvalidArgumentError):
        calculate_penalty(-1, 10)
    with pytest.raises(InvalidArgumentError):
        calculate_penalty(100, -1)
    with pytest.raises(InvalidArgumentError):
        calculate_penalty("100", 10)
    with pytest.raises(InvalidArgumentError):
        calculate_penalty(None, 10)
    with pytest.raises(InvalidArgumentError):
        calculate_penalty(100, True)
    with pytest.raises(InvalidArgumentError):
        calculate_penalty(float("nan"), 10)


def test_penalty_uses_injected_rates():
    rates = RateSchedule(initial_penalty_rate=Decimal("0.10"), penalty_period_days=7)
    # 10% + 1% * floor(15 / 7)
    assert calculate_penalty(1000, 15, rates) == 120


def test_days_overdue():
    assert calculate_days_overdue(None, NOW) == 0
    assert calculate_days_overdue(NOW + timedelta(days=3), NOW) == 0
    assert calculate_days_overdue(NOW, NOW) == 0
    assert calculate_days_overdue(NOW - timedelta(hours=1), NOW) == 1
    assert calculate_days_overdue(NOW - timedelta(days=2), NOW) == 2


def _partial_payment(**overrides) -> Payment:
    fields = dict(
        payment_id="UVW/PAY/2025/001",
        shop_id="UVW/SHP/2025/001",
        revenue_type_id="REV-PERMIT",
        assessment_year=2025,
        amount_due=Decimal("10000.00"),
        amount_paid=Decimal("4000.00"),
        payment_status=PaymentStatus.PARTIALLY_PAID,
        due_date=NOW - timedelta(days=35),
    )
    fields.update(overrides)
    return Payment(**fields)


def test_assess_payment_penalty():
    """6000 unpaid, 35 days late: 300 + 60"""
    assessment = assess_payment_penalty(_partial_payment(), NOW)

    assert assessment.days_overdue == 35
    assert assessment.outstanding_amount == Decimal("6000.00")
    assert assessment.penalty_amount == 360
    assert assessment.amount_due == Decimal("10360.00")


def test_assess_payment_penalty_replaces_existing_penalty():
    """Re-assessing an already penalised payment does not stack penalties"""
    first = assess_payment_penalty(_partial_payment(), NOW)
    updated = _partial_payment(amount_due=first.amount_due, penalty_amount=first.penalty_amount)

    second = assess_payment_penalty(updated, NOW)

    assert second.penalty_amount == first.penalty_amount
    assert second.amount_due == first.amount_due


def test_assess_payment_penalty_not_yet_due():
    assessment = assess_payment_penalty(_partial_payment(due_date=NOW + timedelta(days=5)), NOW)

    assert assessment.penalty_amount == 0
    assert assessment.amount_due == Decimal("10000.00")
