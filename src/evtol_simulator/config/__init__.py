"""Configuration models — vehicle profiles and run settings."""

from evtol_simulator.config.vehicle import (
    VEHICLE_PROFILES,
    Manufacturer,
    VehicleProfile,
    get_profile,
)
from evtol_simulator.config.scenario import SECONDS_PER_HOUR, SimulationConfig

__all__ = [
    "Manufacturer",
    "VehicleProfile",
    "VEHICLE_PROFILES",
    "get_profile",
    "SimulationConfig",
    "SECONDS_PER_HOUR",
]
