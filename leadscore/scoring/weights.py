"""
leadscore/scoring/weights.py — Per-service weight profiles.

A profile is one multiplier per factor, applied to that factor's raw points.
Profiles are static data keyed by lowercase service type; anything unknown
resolves to DEFAULT_PROFILE.

Tuning rationale per vertical:
  - Energy services (solar, insulation, hvac) lean on energy data and ownership.
  - Windows care about building age and energy performance.
  - Repair trades (plumbing, electrical, carpentry, handyman) lean on activity
    and engagement over demographics.
"""

from dataclasses import dataclass
from types import MappingProxyType


@dataclass(frozen=True)
class WeightProfile:
    """Multipliers (0.0 – 1.5) keyed by factor ledger name."""

    # Demographic
    ownership: float
    wealth: float
    income: float
    income_high: float
    income_low: float
    household: float
    children: float
    stedelijkheid: float

    # Property / energy
    energy_label: float
    gas_usage: float
    electricity: float
    building_age: float
    woz_value: float

    # Behavioral
    lead_age: float
    activity: float
    photo: float
    service_status: float
    consumer_note: float
    source: float
    assigned: float
    appointments: float


DEFAULT_PROFILE = WeightProfile(
    ownership=1.0,
    wealth=1.0,
    income=1.0,
    income_high=0.8,
    income_low=0.8,
    household=1.0,
    children=1.0,
    stedelijkheid=0.5,
    energy_label=0.5,
    gas_usage=0.5,
    electricity=0.5,
    building_age=0.8,
    woz_value=0.8,
    lead_age=1.0,
    activity=1.0,
    photo=1.0,
    service_status=1.0,
    consumer_note=1.0,
    source=1.0,
    assigned=1.0,
    appointments=1.0,
)


PROFILES: MappingProxyType[str, WeightProfile] = MappingProxyType({
    # High electricity usage and ownership; wealth for financing
    "solar": WeightProfile(
        ownership=1.3, wealth=1.2, income=1.0, income_high=1.2, income_low=0.8,
        household=0.8, children=0.6, stedelijkheid=0.6,
        energy_label=0.8, gas_usage=0.2, electricity=1.5, building_age=0.6, woz_value=1.0,
        lead_age=1.0, activity=0.9, photo=1.2, service_status=1.0, consumer_note=1.1,
        source=1.0, assigned=0.8, appointments=1.1,
    ),
    # Poor labels, high gas usage, older buildings
    "insulation": WeightProfile(
        ownership=1.3, wealth=1.0, income=1.0, income_high=1.0, income_low=0.9,
        household=0.9, children=0.8, stedelijkheid=0.8,
        energy_label=1.5, gas_usage=1.4, electricity=0.5, building_age=1.3, woz_value=0.9,
        lead_age=1.0, activity=1.0, photo=1.1, service_status=1.0, consumer_note=1.2,
        source=1.0, assigned=0.9, appointments=1.0,
    ),
    # Heat pumps: boiler replacement, premium investment
    "hvac": WeightProfile(
        ownership=1.3, wealth=1.3, income=1.1, income_high=1.3, income_low=0.6,
        household=1.0, children=0.8, stedelijkheid=0.7,
        energy_label=1.2, gas_usage=1.4, electricity=1.0, building_age=0.8, woz_value=1.1,
        lead_age=1.0, activity=1.0, photo=1.0, service_status=1.0, consumer_note=1.1,
        source=1.0, assigned=0.9, appointments=1.1,
    ),
    "windows": WeightProfile(
        ownership=1.2, wealth=1.0, income=1.0, income_high=1.0, income_low=0.8,
        household=0.8, children=0.7, stedelijkheid=0.9,
        energy_label=1.0, gas_usage=0.8, electricity=0.4, building_age=1.3, woz_value=1.0,
        lead_age=1.0, activity=1.0, photo=1.2, service_status=1.0, consumer_note=1.1,
        source=1.0, assigned=0.9, appointments=1.0,
    ),
    "plumbing": WeightProfile(
        ownership=0.8, wealth=0.7, income=0.8, income_high=0.6, income_low=0.9,
        household=1.1, children=1.0, stedelijkheid=1.0,
        energy_label=0.1, gas_usage=0.3, electricity=0.1, building_age=1.0, woz_value=0.7,
        lead_age=1.2, activity=1.3, photo=1.3, service_status=1.1, consumer_note=1.4,
        source=1.0, assigned=1.2, appointments=1.3,
    ),
    "electrical": WeightProfile(
        ownership=0.8, wealth=0.8, income=0.8, income_high=0.7, income_low=0.9,
        household=0.9, children=0.8, stedelijkheid=1.0,
        energy_label=0.2, gas_usage=0.1, electricity=0.8, building_age=1.1, woz_value=0.8,
        lead_age=1.2, activity=1.3, photo=1.2, service_status=1.1, consumer_note=1.3,
        source=1.0, assigned=1.2, appointments=1.2,
    ),
    "carpentry": WeightProfile(
        ownership=0.9, wealth=0.9, income=0.9, income_high=0.9, income_low=0.7,
        household=0.8, children=0.8, stedelijkheid=0.8,
        energy_label=0.1, gas_usage=0.1, electricity=0.1, building_age=1.0, woz_value=1.0,
        lead_age=1.1, activity=1.2, photo=1.2, service_status=1.0, consumer_note=1.2,
        source=1.0, assigned=1.0, appointments=1.0,
    ),
    # Most activity-focused, least demographic
    "handyman": WeightProfile(
        ownership=0.6, wealth=0.5, income=0.6, income_high=0.4, income_low=1.0,
        household=0.8, children=0.9, stedelijkheid=1.1,
        energy_label=0.0, gas_usage=0.0, electricity=0.0, building_age=0.7, woz_value=0.5,
        lead_age=1.3, activity=1.4, photo=1.3, service_status=1.2, consumer_note=1.3,
        source=1.1, assigned=1.1, appointments=1.2,
    ),
})


def normalize_service_type(service_type: str | None) -> str:
    """Lowercase + trim; empty or missing becomes 'default'."""
    key = (service_type or "").strip().lower()
    return key or "default"


def resolve(service_type: str | None) -> WeightProfile:
    """Return the weight profile for a service type. Never fails."""
    return PROFILES.get(normalize_service_type(service_type), DEFAULT_PROFILE)
