"""Statistics accumulators — per-vehicle step/total stats and per-manufacturer rollups.

``VehicleStats`` is used twice by every vehicle: a *step* instance reset at
the start of each tick, and a *total* instance that absorbs the step instance
once at the end of the tick.  ``VehicleTypeStats`` folds step stats across all
vehicles of one manufacturer.  Averages and rates are derived on read.
"""

from __future__ import annotations

from dataclasses import dataclass

from evtol_simulator.config.vehicle import Manufacturer


@dataclass
class VehicleStats:
    """Time (hours), distance (miles), fault and session counters for one vehicle."""

    flight_time: float = 0.0
    queued_time: float = 0.0
    charging_time: float = 0.0
    faulted_time: float = 0.0
    distance_traveled: float = 0.0
    passenger_miles: float = 0.0
    faults: int = 0
    flights_completed: int = 0
    """Transitions out of Flying."""
    charges_completed: int = 0
    """Transitions out of Charging."""

    @property
    def accounted_time(self) -> float:
        """Sum of the four time buckets.  Equals the tick length for step stats."""
        return self.flight_time + self.queued_time + self.charging_time + self.faulted_time

    def reset(self) -> None:
        self.flight_time = 0.0
        self.queued_time = 0.0
        self.charging_time = 0.0
        self.faulted_time = 0.0
        self.distance_traveled = 0.0
        self.passenger_miles = 0.0
        self.faults = 0
        self.flights_completed = 0
        self.charges_completed = 0

    def add(self, other: VehicleStats) -> None:
        """Accumulate ``other`` into ``self`` field by field."""
        self.flight_time += other.flight_time
        self.queued_time += other.queued_time
        self.charging_time += other.charging_time
        self.faulted_time += other.faulted_time
        self.distance_traveled += other.distance_traveled
        self.passenger_miles += other.passenger_miles
        self.faults += other.faults
        self.flights_completed += other.flights_completed
        self.charges_completed += other.charges_completed


@dataclass
class VehicleTypeStats:
    """Rollup for one manufacturer across the whole run.

    ``total_flights`` and ``total_charges`` count completed sessions
    (transitions *away from* Flying / Charging), so a multi-tick flight
    contributes one flight, and a flight that starts and ends inside one
    tick still counts.
    """

    manufacturer: Manufacturer
    vehicle_count: int = 0
    total_flights: int = 0
    total_charges: int = 0
    total_flight_time: float = 0.0
    total_distance: float = 0.0
    total_charging_time: float = 0.0
    total_faults: int = 0
    total_passenger_miles: float = 0.0

    def accumulate(self, step: VehicleStats) -> None:
        self.total_flight_time += step.flight_time
        self.total_distance += step.distance_traveled
        self.total_charging_time += step.charging_time
        self.total_faults += step.faults
        self.total_passenger_miles += step.passenger_miles
        self.total_flights += step.flights_completed
        self.total_charges += step.charges_completed

    # ── Derived ─────────────────────────────────────────────────────────

    @property
    def fault_rate(self) -> float:
        """Faults per vehicle."""
        return self.total_faults / self.vehicle_count if self.vehicle_count > 0 else 0.0

    @property
    def faults_per_flight_hour(self) -> float:
        return self.total_faults / self.total_flight_time if self.total_flight_time > 0 else 0.0

    @property
    def avg_flight_time_per_flight(self) -> float:
        return self.total_flight_time / self.total_flights if self.total_flights > 0 else 0.0

    @property
    def avg_distance_per_flight(self) -> float:
        return self.total_distance / self.total_flights if self.total_flights > 0 else 0.0

    @property
    def avg_charging_time_per_session(self) -> float:
        return self.total_charging_time / self.total_charges if self.total_charges > 0 else 0.0
