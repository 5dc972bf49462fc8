"""Unit tests for the fee calculators"""

import pytest
from decimal import Decimal
from uvwie_revenue.domain.exceptions import InvalidArgumentError
from uvwie_revenue.domain.fees import (
    calculate_annual_permit_fee,
    calculate_business_registration_fee,
    calculate_environmental_levy,
    calculate_shop_premises_tax,
    calculate_signage_permit_fee,
    quote_fees,
)
from uvwie_revenue.domain.models import ShopSize, SignageType
from uvwie_revenue.domain.rates import RateSchedule


def test_registration_fee_special_rate():
    """Special tariff wins over the general size rate"""
    assert calculate_business_registration_fee("small", "restaurant") == 10000
    assert calculate_business_registration_fee("medium", "pharmacy") == 30000
    assert calculate_business_registration_fee("large", "bank") == 75000


def test_registration_fee_general_rate_within_band():
    """small kiosk: general 7500 already inside the small band [5000, 15000]"""
    assert calculate_business_registration_fee("small", "kiosk") == 7500


def test_registration_fee_band_clamp_applies_literally():
    """A large kiosk is capped at the small band ceiling; a small hotel lifted to the large band floor"""
    assert calculate_business_registration_fee("large", "kiosk") == 15000
    assert calculate_business_registration_fee("small", "hotel") == 35000
    assert calculate_business_registration_fee("medium", "supermarket") == 25000


def test_registration_fee_unlisted_business_type_uses_general_rate():
    assert calculate_business_registration_fee("large", "salon") == 55000


def test_registration_fee_case_insensitive():
    assert calculate_business_registration_fee("SMALL", "Restaurant") == 10000
    assert calculate_business_registration_fee(" Medium ", "KIOSK") == 15000
    assert calculate_business_registration_fee(ShopSize.SMALL, "kiosk") == 7500


def test_annual_permit_fee_multipliers():
    """Medium bank in Effurun: 25000 * 1.2 (high impact) * 1.1 (prime ward)"""
    assert calculate_annual_permit_fee("medium", "bank", "Effurun") == 33000
    assert calculate_annual_permit_fee("large", "hotel", "warri") == 66000
    assert calculate_annual_permit_fee("small", "kiosk", "Ekpan") == 10000
    assert calculate_annual_permit_fee("small", "restaurant", "Ekpan") == 12000


def test_signage_permit_fee_size_adjustment():
    assert calculate_signage_permit_fee("billboard", "small") == 22500
    assert calculate_signage_permit_fee("medium", "large") == 5500
    assert calculate_signage_permit_fee(SignageType.LARGE, "medium") == 10000


def test_environmental_levy_high_impact():
    assert calculate_environmental_levy("restaurant", "small") == 1500
    assert calculate_environmental_levy("Manufacturing", "large") == 7500
    assert calculate_environmental_levy("kiosk", "medium") == 2500


def test_shop_premises_tax_multipliers():
    assert calculate_shop_premises_tax("small", "Effurun", "kiosk") == 6000
    assert calculate_shop_premises_tax("large", "Warri", "bank") == 33000
    assert calculate_shop_premises_tax("medium", "Ekpan", "large_retail") == 13200


@pytest.mark.parametrize("shop_size", ["small", "medium", "large"])
@pytest.mark.parametrize("business_type", ["kiosk", "restaurant", "bank", "hotel", "salon", "manufacturing"])
def test_fees_never_negative(shop_size, business_type):
    quote = quote_fees(shop_size, business_type, "Ekpan", signage_type="billboard")

    assert quote.business_registration_fee >= 0
    assert quote.annual_permit_fee >= 0
    assert quote.environmental_levy >= 0
    assert quote.shop_premises_tax >= 0
    assert quote.signage_permit_fee >= 0


def test_invalid_shop_size_raises_everywhere():
    """'huge' is rejected, never priced as zero"""
    with pytest.raises(InvalidArgumentError):
        calculate_business_registration_fee("huge", "kiosk")
    with pytest.raises(InvalidArgumentError):
        calculate_annual_permit_fee("huge", "kiosk", "Effurun")
    with pytest.raises(InvalidArgumentError):
        calculate_signage_permit_fee("small", "huge")
    with pytest.raises(InvalidArgumentError):
        calculate_environmental_levy("kiosk", "huge")
    with pytest.raises(InvalidArgumentError):
        calculate_shop_premises_tax("huge", "Effurun", "kiosk")


def test_missing_inputs_raise():
    with pytest.raises(InvalidArgumentError):
        calculate_business_registration_fee("small", "")
    with pytest.raises(InvalidArgumentError):
        calculate_business_registration_fee(None, "kiosk")
    with pytest.raises(InvalidArgumentError):
        calculate_annual_permit_fee("small", "kiosk", "  ")
    with pytest.raises(InvalidArgumentError):
        calculate_shop_premises_tax("small", None, "kiosk")
    with pytest.raises(InvalidArgumentError):
        calculate_environmental_levy(None, "small")


def test_unknown_signage_type_raises():
    with pytest.raises(InvalidArgumentError):
        calculate_signage_permit_fee("neon", "small")


def test_rounding_is_half_up():
    """2005 * 0.9 = 1804.5 rounds up to 1805, not to the even 1804"""
    rates = RateSchedule(
        signage_base={
            SignageType.SMALL: Decimal("2005"),
            SignageType.MEDIUM: Decimal("5000"),
            SignageType.LARGE: Decimal("10000"),
            SignageType.BILLBOARD: Decimal("25000"),
        }
    )
    assert calculate_signage_permit_fee("small", "small", rates) == 1805


def test_injected_schedule_changes_prime_wards():
    rates = RateSchedule(prime_wards=frozenset({"Ekpan"}))

    assert calculate_annual_permit_fee("small", "kiosk", "ekpan", rates) == 11000
    assert calculate_annual_permit_fee("small", "kiosk", "Effurun", rates) == 10000


def test_calculators_are_deterministic():
    first = quote_fees("large", "hotel", "Warri", signage_type="large")
    second = quote_fees("large", "hotel", "Warri", signage_type="large")
    assert first == second


def test_quote_fees_base_total_excludes_signage():
    quote = quote_fees("medium", "bank", "Effurun", signage_type="billboard")

    assert quote.business_registration_fee == 35000
    assert quote.annual_permit_fee == 33000
    assert quote.environmental_levy == 2500
    assert quote.shop_premises_tax == 15840
    assert quote.signage_permit_fee == 25000
    assert quote.base_total == 86340


def test_quote_fees_without_signage():
    assert quote_fees("small", "kiosk", "Ekpan").signage_permit_fee is None
