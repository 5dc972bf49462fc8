"""Rate schedule - every tariff, multiplier and name list the calculators use

The schedule is immutable configuration: it is built once (defaults, or a JSON
file named by ``Settings.rate_schedule_path``) and passed into the calculators.
Tests substitute alternate schedules by constructing their own instance.
"""

from decimal import Decimal
from functools import lru_cache
from pathlib import Path
from typing import Dict, FrozenSet, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from uvwie_revenue.config import settings
from uvwie_revenue.domain.models import ShopSize, SignageType


def _names(*values: str) -> FrozenSet[str]:
    return frozenset(values)


class RegistrationBand(BaseModel):
    """Business types whose registration fee is clamped into [minimum, maximum]"""

    model_config = ConfigDict(frozen=True)

    name: str
    business_types: FrozenSet[str]
    minimum: Decimal
    maximum: Decimal

    @field_validator("business_types")
    @classmethod
    def _lowercase_business_types(cls, value: FrozenSet[str]) -> FrozenSet[str]:
        return frozenset(name.strip().lower() for name in value)


class RateSchedule(BaseModel):
    """Tariffs for the Uvwie LGA fee calculators (amounts in Naira)"""

    model_config = ConfigDict(frozen=True, extra="forbid")

    # Business registration
    registration_general: Dict[ShopSize, Decimal] = {
        ShopSize.SMALL: Decimal("7500"),
        ShopSize.MEDIUM: Decimal("25000"),
        ShopSize.LARGE: Decimal("55000"),
    }
    registration_special: Dict[str, Dict[ShopSize, Decimal]] = {
        "restaurant": {ShopSize.SMALL: Decimal("10000"), ShopSize.MEDIUM: Decimal("25000"), ShopSize.LARGE: Decimal("50000")},
        "pharmacy": {ShopSize.SMALL: Decimal("12000"), ShopSize.MEDIUM: Decimal("30000"), ShopSize.LARGE: Decimal("60000")},
        "bank": {ShopSize.SMALL: Decimal("15000"), ShopSize.MEDIUM: Decimal("35000"), ShopSize.LARGE: Decimal("75000")},
    }
    registration_bands: List[RegistrationBand] = [
        RegistrationBand(
            name="small",
            business_types=_names("kiosk", "barber_shop", "tailor", "small_retail"),
            minimum=Decimal("5000"),
            maximum=Decimal("15000"),
        ),
        RegistrationBand(
            name="medium",
            business_types=_names("boutique", "supermarket", "restaurant", "pharmacy"),
            minimum=Decimal("15000"),
            maximum=Decimal("35000"),
        ),
        RegistrationBand(
            name="large",
            business_types=_names("hotel", "bank", "manufacturing", "large_retail"),
            minimum=Decimal("35000"),
            maximum=Decimal("75000"),
        ),
    ]

    # Annual business permit
    permit_base: Dict[ShopSize, Decimal] = {
        ShopSize.SMALL: Decimal("10000"),
        ShopSize.MEDIUM: Decimal("25000"),
        ShopSize.LARGE: Decimal("50000"),
    }
    permit_high_impact_types: FrozenSet[str] = _names("restaurant", "hotel", "bank")
    permit_high_impact_multiplier: Decimal = Decimal("1.2")
    prime_wards: FrozenSet[str] = _names("effurun", "warri")
    permit_prime_location_multiplier: Decimal = Decimal("1.1")

    # Signage permit
    signage_base: Dict[SignageType, Decimal] = {
        SignageType.SMALL: Decimal("2000"),
        SignageType.MEDIUM: Decimal("5000"),
        SignageType.LARGE: Decimal("10000"),
        SignageType.BILLBOARD: Decimal("25000"),
    }
    signage_size_factor: Dict[ShopSize, Decimal] = {
        ShopSize.SMALL: Decimal("0.9"),
        ShopSize.MEDIUM: Decimal("1.0"),
        ShopSize.LARGE: Decimal("1.1"),
    }

    # Environmental levy
    levy_base: Dict[ShopSize, Decimal] = {
        ShopSize.SMALL: Decimal("1000"),
        ShopSize.MEDIUM: Decimal("2500"),
        ShopSize.LARGE: Decimal("5000"),
    }
    levy_high_impact_types: FrozenSet[str] = _names("restaurant", "manufacturing", "hotel")
    levy_high_impact_multiplier: Decimal = Decimal("1.5")

    # Shop premises tax
    premises_base: Dict[ShopSize, Decimal] = {
        ShopSize.SMALL: Decimal("5000"),
        ShopSize.MEDIUM: Decimal("12000"),
        ShopSize.LARGE: Decimal("25000"),
    }
    premises_prime_ward_multiplier: Decimal = Decimal("1.2")
    premises_high_profit_types: FrozenSet[str] = _names("bank", "hotel", "large_retail")
    premises_high_profit_multiplier: Decimal = Decimal("1.1")

    # Late payment penalty: flat rate once late, plus a surcharge per whole period
    initial_penalty_rate: Decimal = Decimal("0.05")
    periodic_penalty_rate: Decimal = Decimal("0.01")
    penalty_period_days: int = Field(default=30, gt=0)

    # Permits
    permit_validity_years: int = Field(default=1, gt=0)
    late_renewal_multiplier: Decimal = Decimal("1.2")

    @field_validator(
        "permit_high_impact_types",
        "prime_wards",
        "levy_high_impact_types",
        "premises_high_profit_types",
    )
    @classmethod
    def _lowercase_names(cls, value: FrozenSet[str]) -> FrozenSet[str]:
        return frozenset(name.strip().lower() for name in value)

    @field_validator("registration_special")
    @classmethod
    def _lowercase_special_keys(cls, value: Dict[str, Dict[ShopSize, Decimal]]) -> Dict[str, Dict[ShopSize, Decimal]]:
        for business_type, rates in value.items():
            missing = set(ShopSize) - set(rates)
            if missing:
                raise ValueError(f"special rate for {business_type!r} missing sizes: {sorted(s.value for s in missing)}")
        return {business_type.strip().lower(): rates for business_type, rates in value.items()}

    @field_validator("registration_general", "permit_base", "signage_size_factor", "levy_base", "premises_base")
    @classmethod
    def _covers_every_size(cls, value: Dict[ShopSize, Decimal]) -> Dict[ShopSize, Decimal]:
        missing = set(ShopSize) - set(value)
        if missing:
            raise ValueError(f"missing shop sizes: {sorted(s.value for s in missing)}")
        return value

    def registration_band_for(self, business_type: str) -> Optional[RegistrationBand]:
        """First band listing the (normalized) business type, if any"""
        for band in self.registration_bands:
            if business_type in band.business_types:
                return band
        return None


DEFAULT_RATE_SCHEDULE = RateSchedule()


def load_rate_schedule(path: str | Path) -> RateSchedule:
    """Parse and validate a JSON rate schedule; omitted keys keep their defaults"""
    return RateSchedule.model_validate_json(Path(path).read_text(encoding="utf-8"))


@lru_cache(maxsize=1)
def get_rate_schedule() -> RateSchedule:
    """Process-wide schedule, loaded once on first use"""
    if settings.rate_schedule_path:
        return load_rate_schedule(settings.rate_schedule_path)
    return DEFAULT_RATE_SCHEDULE
