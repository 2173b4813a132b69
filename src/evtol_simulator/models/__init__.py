"""Result models — snapshot contracts between the engine and its readers."""

from evtol_simulator.models.state import VehicleState
from evtol_simulator.models.results import (
    ChargerSlotSnapshot,
    SimulationResult,
    StatsSnapshot,
    TickSnapshot,
    VehicleSnapshot,
    VehicleTypeSummary,
)

__all__ = [
    "VehicleState",
    "ChargerSlotSnapshot",
    "SimulationResult",
    "StatsSnapshot",
    "TickSnapshot",
    "VehicleSnapshot",
    "VehicleTypeSummary",
]
