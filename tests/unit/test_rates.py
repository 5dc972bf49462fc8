"""Unit tests for rate schedule loading"""

import json
import pytest
from decimal import Decimal
from pydantic import ValidationError
from uvwie_revenue.domain.fees import calculate_business_registration_fee, calculate_shop_premises_tax
from uvwie_revenue.domain.rates import DEFAULT_RATE_SCHEDULE, load_rate_schedule


def test_load_rate_schedule_overrides_selected_tariffs(tmp_path):
    path = tmp_path / "rates.json"
    path.write_text(
        json.dumps(
            {
                "premises_base": {"small": "6000", "medium": "14000", "large": "30000"},
                "prime_wards": ["Effurun", "Warri", "Ugbomro"],
                "registration_special": {"Supermarket": {"small": "9000", "medium": "20000", "large": "40000"}},
            }
        )
    )

    rates = load_rate_schedule(path)

    assert calculate_shop_premises_tax("small", "Ugbomro", "kiosk", rates) == 7200
    assert calculate_business_registration_fee("medium", "supermarket", rates) == 20000
    # untouched keys keep their defaults
    assert rates.levy_base == DEFAULT_RATE_SCHEDULE.levy_base
    assert rates.initial_penalty_rate == Decimal("0.05")


def test_load_rate_schedule_rejects_incomplete_size_table(tmp_path):
    path = tmp_path / "rates.json"
    path.write_text(json.dumps({"permit_base": {"small": "10000", "medium": "25000"}}))

    with pytest.raises(ValidationError):
        load_rate_schedule(path)


def test_load_rate_schedule_rejects_unknown_keys(tmp_path):
    path = tmp_path / "rates.json"
    path.write_text(json.dumps({"permit_bse": {}}))

    with pytest.raises(ValidationError):
        load_rate_schedule(path)


def test_rate_schedule_is_frozen():
    with pytest.raises(ValidationError):
        DEFAULT_RATE_SCHEDULE.penalty_period_days = 7
