"""Fee calculators - tariffs charged to registered shops"""

from decimal import Decimal
from typing import Optional, Union

from uvwie_revenue.domain.exceptions import InvalidArgumentError
from uvwie_revenue.domain.models import FeeQuote, ShopSize, SignageType
from uvwie_revenue.domain.rates import DEFAULT_RATE_SCHEDULE, RateSchedule
from uvwie_revenue.utils.money import round_to_unit

ShopSizeInput = Union[ShopSize, str]
SignageTypeInput = Union[SignageType, str]


def normalize_name(raw: Optional[str], field: str) -> str:
    """
    Normalize a free-form name (business type, ward) for list matching.

    Raises:
        InvalidArgumentError: If the name is missing or blank
    """
    if not isinstance(raw, str) or not raw.strip():
        raise InvalidArgumentError(f"{field} is required")
    return raw.strip().lower()


def calculate_business_registration_fee(
    shop_size: ShopSizeInput,
    business_type: str,
    rates: RateSchedule = DEFAULT_RATE_SCHEDULE,
) -> Decimal:
    """
    Registration fee by shop size and business type.

    Rules:
    - Business types with a special tariff (restaurant, pharmacy, bank) use it
    - Everything else pays the general rate for its size
    - A general-rate fee is clamped into the band of the business type
      (small/medium/large business lists), when the type is listed

    The clamp can move a fee out of its size rate: a large kiosk pays the
    small band's 15000 ceiling rather than 55000.
    """
    business = normalize_name(business_type, "business_type")
    size = ShopSize.parse(shop_size)

    special = rates.registration_special.get(business)
    if special is not None:
        return special[size]

    fee = rates.registration_general[size]

    band = rates.registration_band_for(business)
    if band is not None:
        fee = max(band.minimum, min(band.maximum, fee))

    return fee


def calculate_annual_permit_fee(
    shop_size: ShopSizeInput,
    business_type: str,
    location: str,
    rates: RateSchedule = DEFAULT_RATE_SCHEDULE,
) -> Decimal:
    """Annual business permit: size base, +20% high-impact business, +10% prime ward"""
    business = normalize_name(business_type, "business_type")
    ward = normalize_name(location, "location")
    size = ShopSize.parse(shop_size)

    fee = rates.permit_base[size]
    if business in rates.permit_high_impact_types:
        fee *= rates.permit_high_impact_multiplier
    if ward in rates.prime_wards:
        fee *= rates.permit_prime_location_multiplier

    return round_to_unit(fee)


def calculate_signage_permit_fee(
    signage_type: SignageTypeInput,
    shop_size: ShopSizeInput,
    rates: RateSchedule = DEFAULT_RATE_SCHEDULE,
) -> Decimal:
    """Signage permit: base by sign type, scaled by shop size (0.9 / 1.0 / 1.1)"""
    signage = SignageType.parse(signage_type)
    size = ShopSize.parse(shop_size)

    fee = rates.signage_base[signage] * rates.signage_size_factor[size]
    return round_to_unit(fee)


def calculate_environmental_levy(
    business_type: str,
    shop_size: ShopSizeInput,
    rates: RateSchedule = DEFAULT_RATE_SCHEDULE,
) -> Decimal:
    """Environmental levy: size base, +50% for high environmental impact businesses"""
    business = normalize_name(business_type, "business_type")
    size = ShopSize.parse(shop_size)

    levy = rates.levy_base[size]
    if business in rates.levy_high_impact_types:
        levy *= rates.levy_high_impact_multiplier

    return round_to_unit(levy)


def calculate_shop_premises_tax(
    shop_size: ShopSizeInput,
    ward: str,
    business_type: str,
    rates: RateSchedule = DEFAULT_RATE_SCHEDULE,
) -> Decimal:
    """Premises tax: size base, +20% prime ward, +10% high-profit business"""
    normalized_ward = normalize_name(ward, "ward")
    business = normalize_name(business_type, "business_type")
    size = ShopSize.parse(shop_size)

    tax = rates.premises_base[size]
    if normalized_ward in rates.prime_wards:
        tax *= rates.premises_prime_ward_multiplier
    if business in rates.premises_high_profit_types:
        tax *= rates.premises_high_profit_multiplier

    return round_to_unit(tax)


def quote_fees(
    shop_size: ShopSizeInput,
    business_type: str,
    ward: str,
    signage_type: Optional[SignageTypeInput] = None,
    rates: RateSchedule = DEFAULT_RATE_SCHEDULE,
) -> FeeQuote:
    """
    Run every calculator for one shop profile.

    The signage fee is only quoted when a signage type is given; it is not
    part of the annual base total.
    """
    return FeeQuote(
        business_registration_fee=calculate_business_registration_fee(shop_size, business_type, rates),
        annual_permit_fee=calculate_annual_permit_fee(shop_size, business_type, ward, rates),
        environmental_levy=calculate_environmental_levy(business_type, shop_size, rates),
        shop_premises_tax=calculate_shop_premises_tax(shop_size, ward, business_type, rates),
        signage_permit_fee=(
            calculate_signage_permit_fee(signage_type, shop_size, rates)
            if signage_type is not None
            else None
        ),
    )
