"""Result types — read-only snapshots handed to reporting, API and dashboard.

The engine mutates plain dataclasses in its hot loop; these pydantic models
are copies taken after a tick or at the end of a run.  Derived statistics are
exposed as computed fields so they serialise without being stored twice.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, computed_field

from evtol_simulator.config.scenario import SimulationConfig
from evtol_simulator.config.vehicle import Manufacturer
from evtol_simulator.models.state import VehicleState

if TYPE_CHECKING:
    from evtol_simulator.engine.stats import VehicleStats, VehicleTypeStats
    from evtol_simulator.engine.vehicle import Vehicle


# ═══════════════════════════════════════════════════════════════════════════
# Per-vehicle
# ═══════════════════════════════════════════════════════════════════════════

class StatsSnapshot(BaseModel):
    """Copy of a ``VehicleStats`` (hours, miles, counts)."""

    flight_time: float = 0.0
    queued_time: float = 0.0
    charging_time: float = 0.0
    faulted_time: float = 0.0
    distance_traveled: float = 0.0
    passenger_miles: float = 0.0
    faults: int = 0
    flights_completed: int = 0
    charges_completed: int = 0

    @classmethod
    def from_stats(cls, stats: VehicleStats) -> StatsSnapshot:
        return cls(
            flight_time=stats.flight_time,
            queued_time=stats.queued_time,
            charging_time=stats.charging_time,
            faulted_time=stats.faulted_time,
            distance_traveled=stats.distance_traveled,
            passenger_miles=stats.passenger_miles,
            faults=stats.faults,
            flights_completed=stats.flights_completed,
            charges_completed=stats.charges_completed,
        )


class VehicleSnapshot(BaseModel):
    """One vehicle as observed after a tick."""

    id: int
    manufacturer: Manufacturer
    state: VehicleState
    battery_level_kwh: float
    battery_pct: float
    step: StatsSnapshot
    total: StatsSnapshot

    @classmethod
    def from_vehicle(cls, vehicle: Vehicle) -> VehicleSnapshot:
        return cls(
            id=vehicle.id,
            manufacturer=vehicle.manufacturer,
            state=vehicle.state,
            battery_level_kwh=vehicle.battery_level,
            battery_pct=vehicle.battery_percent,
            step=StatsSnapshot.from_stats(vehicle.step_stats),
            total=StatsSnapshot.from_stats(vehicle.total_stats),
        )


class ChargerSlotSnapshot(BaseModel):
    slot: int
    vehicle_id: int | None = None
    """None = slot free."""


# ═══════════════════════════════════════════════════════════════════════════
# Per-manufacturer
# ═══════════════════════════════════════════════════════════════════════════

class VehicleTypeSummary(BaseModel):
    """Aggregate for one manufacturer.

    ``fault_rate`` is faults per vehicle; ``faults_per_flight_hour`` is
    provided for exposure-normalised comparisons.
    """

    manufacturer: Manufacturer
    vehicle_count: int
    total_flights: int
    total_charges: int
    total_flight_time: float
    total_distance: float
    total_charging_time: float
    total_faults: int
    total_passenger_miles: float

    @computed_field
    @property
    def fault_rate(self) -> float:
        return self.total_faults / self.vehicle_count if self.vehicle_count > 0 else 0.0

    @computed_field
    @property
    def faults_per_flight_hour(self) -> float:
        return self.total_faults / self.total_flight_time if self.total_flight_time > 0 else 0.0

    @computed_field
    @property
    def avg_flight_time_per_flight(self) -> float:
        return self.total_flight_time / self.total_flights if self.total_flights > 0 else 0.0

    @computed_field
    @property
    def avg_distance_per_flight(self) -> float:
        return self.total_distance / self.total_flights if self.total_flights > 0 else 0.0

    @computed_field
    @property
    def avg_charging_time_per_session(self) -> float:
        return self.total_charging_time / self.total_charges if self.total_charges > 0 else 0.0

    @classmethod
    def from_stats(cls, stats: VehicleTypeStats) -> VehicleTypeSummary:
        return cls(
            manufacturer=stats.manufacturer,
            vehicle_count=stats.vehicle_count,
            total_flights=stats.total_flights,
            total_charges=stats.total_charges,
            total_flight_time=stats.total_flight_time,
            total_distance=stats.total_distance,
            total_charging_time=stats.total_charging_time,
            total_faults=stats.total_faults,
            total_passenger_miles=stats.total_passenger_miles,
        )


# ═══════════════════════════════════════════════════════════════════════════
# Per-tick and per-run
# ═══════════════════════════════════════════════════════════════════════════

class TickSnapshot(BaseModel):
    """Fleet and charger state after one tick."""

    step: int
    """1-indexed tick number."""
    time_hours: float
    """Clock after the tick."""
    dt_hours: float
    vehicles: list[VehicleSnapshot]
    queue: list[int]
    """Waiting vehicle ids, head first."""
    chargers: list[ChargerSlotSnapshot]


class SimulationResult(BaseModel):
    """Complete output of one run."""

    config: SimulationConfig
    steps: int
    final_time_hours: float
    vehicles: list[VehicleSnapshot]
    type_stats: list[VehicleTypeSummary]
    """One entry per manufacturer present in the fleet, in manufacturer order."""
    ticks: list[TickSnapshot] | None = None
    """Populated only when ``config.record_ticks`` is set."""

    def type_summary(self, manufacturer: Manufacturer | str) -> VehicleTypeSummary | None:
        tag = manufacturer.value if isinstance(manufacturer, Manufacturer) else str(manufacturer)
        for summary in self.type_stats:
            if summary.manufacturer.value.lower() == tag.lower():
                return summary
        return None

    @property
    def state_counts(self) -> dict[VehicleState, int]:
        counts = {s: 0 for s in VehicleState}
        for v in self.vehicles:
            counts[v.state] += 1
        return counts
