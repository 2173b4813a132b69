"""Vehicle profiles — per-manufacturer performance constants.

A manufacturer is a tag, not a capability: every aircraft runs the same
state machine, parameterised by one ``VehicleProfile`` looked up from
``VEHICLE_PROFILES``.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Manufacturer(str, Enum):
    """Manufacturer tag.  Declaration order is the index used for random fleet assignment."""

    ALPHA = "Alpha"
    BRAVO = "Bravo"
    CHARLIE = "Charlie"
    DELTA = "Delta"
    ECHO = "Echo"


class VehicleProfile(BaseModel):
    """Immutable per-manufacturer constants."""

    model_config = ConfigDict(frozen=True)

    manufacturer: Manufacturer
    cruise_speed_mph: float = Field(gt=0, description="Cruise speed (mph)")
    battery_capacity_kwh: float = Field(gt=0, description="Usable battery capacity (kWh)")
    time_to_charge_hours: float = Field(gt=0, description="Hours to charge from empty to full")
    energy_use_kwh_per_mile: float = Field(gt=0, description="Energy use at cruise (kWh/mile)")
    passenger_count: int = Field(ge=0, description="Passengers carried per flight")
    fault_probability_per_hour: float = Field(
        ge=0, le=1.0,
        description="Probability of a fault per flight hour.  Scaled linearly "
                    "with segment length (valid for short segments only).",
    )

    @property
    def power_draw_kw(self) -> float:
        """Energy drawn per hour of cruise = kWh/mile × mph."""
        return self.energy_use_kwh_per_mile * self.cruise_speed_mph

    @property
    def charge_rate_kw(self) -> float:
        """Energy added per hour on a charger = capacity / time_to_charge."""
        return self.battery_capacity_kwh / self.time_to_charge_hours

    @property
    def max_flight_time_hours(self) -> float:
        """Endurance on a full battery."""
        return self.battery_capacity_kwh / self.power_draw_kw


VEHICLE_PROFILES: dict[Manufacturer, VehicleProfile] = {
    Manufacturer.ALPHA: VehicleProfile(
        manufacturer=Manufacturer.ALPHA,
        cruise_speed_mph=120,
        battery_capacity_kwh=320,
        time_to_charge_hours=0.6,
        energy_use_kwh_per_mile=1.6,
        passenger_count=4,
        fault_probability_per_hour=0.25,
    ),
    Manufacturer.BRAVO: VehicleProfile(
        manufacturer=Manufacturer.BRAVO,
        cruise_speed_mph=100,
        battery_capacity_kwh=100,
        time_to_charge_hours=0.2,
        energy_use_kwh_per_mile=1.5,
        passenger_count=5,
        fault_probability_per_hour=0.10,
    ),
    Manufacturer.CHARLIE: VehicleProfile(
        manufacturer=Manufacturer.CHARLIE,
        cruise_speed_mph=160,
        battery_capacity_kwh=220,
        time_to_charge_hours=0.8,
        energy_use_kwh_per_mile=2.2,
        passenger_count=3,
        fault_probability_per_hour=0.05,
    ),
    Manufacturer.DELTA: VehicleProfile(
        manufacturer=Manufacturer.DELTA,
        cruise_speed_mph=90,
        battery_capacity_kwh=120,
        time_to_charge_hours=0.62,
        energy_use_kwh_per_mile=0.8,
        passenger_count=2,
        fault_probability_per_hour=0.22,
    ),
    Manufacturer.ECHO: VehicleProfile(
        manufacturer=Manufacturer.ECHO,
        cruise_speed_mph=30,
        battery_capacity_kwh=150,
        time_to_charge_hours=0.3,
        energy_use_kwh_per_mile=5.8,
        passenger_count=2,
        fault_probability_per_hour=0.61,
    ),
}


def get_profile(manufacturer: Manufacturer | str) -> VehicleProfile:
    """Look up a profile by enum member or by its name (``"Alpha"``, ``"alpha"``)."""
    if isinstance(manufacturer, Manufacturer):
        return VEHICLE_PROFILES[manufacturer]
    for tag in Manufacturer:
        if tag.value.lower() == str(manufacturer).lower():
            return VEHICLE_PROFILES[tag]
    raise KeyError(f"Unknown manufacturer: {manufacturer!r}")
