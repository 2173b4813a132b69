"""Vehicle state machine — flight and charge energy accounting, fault injection.

States::

    Ready ──(battery > 0)──▶ Flying ──(battery depleted)──▶ Queued
      ▲                        │                              │
      │                        └──(fault trial)──▶ Faulted    │ start_charging()
      │                                                       ▼
      └──────────────(battery full)─────────────────────── Charging

``update_state(Δ)`` spends one tick.  Ready→Flying and Charging→Ready are
*automatic* and consume no time; Flying and Charging consume time through
``fly`` / ``charge``; Queued and Faulted absorb whatever time is left.
The four time buckets of the step stats always sum to Δ.

Fault model:
  A flight segment of ``h`` hours faults with probability
  ``fault_probability_per_hour × h``, evaluated once per ``fly`` call over the
  energy-limited segment.  The fault is placed at the segment midpoint: only
  half of the segment is flown and the rest of the tick is spent Faulted.
"""

from __future__ import annotations

import logging

from evtol_simulator.config.vehicle import Manufacturer, VehicleProfile
from evtol_simulator.engine.random_source import RandomSource
from evtol_simulator.engine.stats import VehicleStats
from evtol_simulator.models.state import VehicleState

logger = logging.getLogger(__name__)

EPSILON = 1e-10
"""Tolerance (kWh) under which a battery is treated as empty or full."""


class StateError(RuntimeError):
    """An operation was invoked in a state that does not allow it.

    Always a driver bug: the state machine was stepped out of protocol.
    """


class Vehicle:
    """One aircraft: battery, state and statistics.

    Parameters
    ----------
    profile : VehicleProfile
        Manufacturer constants (speed, capacity, charge time, ...).
    rng : RandomSource
        Source for fault trials.
    vehicle_id : int
        Stable identity, assigned by the owning ``Simulation``.
    """

    def __init__(self, profile: VehicleProfile, rng: RandomSource, vehicle_id: int = 0) -> None:
        self._profile = profile
        self._rng = rng
        self._id = vehicle_id

        self._state = VehicleState.READY
        self._battery_level = profile.battery_capacity_kwh

        self._step_stats = VehicleStats()
        self._total_stats = VehicleStats()

    def __repr__(self) -> str:
        return (
            f"Vehicle(id={self._id}, manufacturer={self.manufacturer.value}, "
            f"state={self._state.value}, battery={self._battery_level:.3f})"
        )

    # ── Properties ──────────────────────────────────────────────────────

    @property
    def id(self) -> int:
        return self._id

    @property
    def profile(self) -> VehicleProfile:
        return self._profile

    @property
    def manufacturer(self) -> Manufacturer:
        return self._profile.manufacturer

    @property
    def state(self) -> VehicleState:
        return self._state

    @property
    def battery_level(self) -> float:
        return self._battery_level

    @battery_level.setter
    def battery_level(self, level: float) -> None:
        capacity = self._profile.battery_capacity_kwh
        self._battery_level = min(max(level, 0.0), capacity)

    @property
    def battery_percent(self) -> float:
        return 100.0 * self._battery_level / self._profile.battery_capacity_kwh

    @property
    def max_flight_time(self) -> float:
        """Hours of cruise the current charge allows."""
        return self._battery_level / self._profile.power_draw_kw

    @property
    def step_stats(self) -> VehicleStats:
        """Contributions of the most recent ``update_state`` call only."""
        return self._step_stats

    @property
    def total_stats(self) -> VehicleStats:
        """Running sum of every step so far."""
        return self._total_stats

    # ── Tick ────────────────────────────────────────────────────────────

    def update_state(self, hours: float) -> None:
        """Advance the state machine by one tick of ``hours``."""
        step = self._step_stats
        step.reset()
        remaining = hours

        while True:
            state = self._state

            if state is VehicleState.READY:
                if self._battery_level > 0:
                    self._transition(VehicleState.FLYING)
                    continue
                break

            if state is VehicleState.FLYING:
                if remaining <= 0:
                    break
                remaining -= self.fly(remaining)
                if self._state is VehicleState.FLYING:
                    # Whole interval flown.
                    remaining = 0.0
                    break
                continue

            if state is VehicleState.CHARGING:
                if self._battery_level >= self._profile.battery_capacity_kwh:
                    self._finish_charging()
                    continue
                if remaining <= 0:
                    break
                remaining -= self.charge(remaining)
                if self._state is VehicleState.READY:
                    continue
                remaining = 0.0
                break

            if state is VehicleState.QUEUED:
                step.queued_time += max(remaining, 0.0)
                remaining = 0.0
                break

            # Faulted: terminal, the rest of the tick is lost.
            step.faulted_time += max(remaining, 0.0)
            remaining = 0.0
            break

        self._total_stats.add(step)

    def fly(self, hours: float) -> float:
        """Fly for up to ``hours``; return the time actually flown.

        The segment is limited by the energy on board.  One fault trial covers
        the limited segment; on a fault only its first half is flown and the
        vehicle becomes Faulted.  Otherwise a segment that empties the battery
        leaves the vehicle Queued.
        """
        if self._state is not VehicleState.FLYING:
            raise StateError(
                f"Vehicle {self._id} must be Flying to fly (state: {self._state.value})"
            )
        if hours <= 0:
            return 0.0

        max_flight_time = self.max_flight_time
        energy_limited = max_flight_time <= hours
        actual_flight_time = max_flight_time if energy_limited else hours

        if self.check_fault(actual_flight_time):
            flown = actual_flight_time * 0.5
            self._accrue_flight(flown)
            self._step_stats.faults += 1
            self._transition(VehicleState.FAULTED)
            return flown

        self._accrue_flight(actual_flight_time)
        if energy_limited or self._battery_level <= EPSILON:
            self.battery_level = 0.0
            self._transition(VehicleState.QUEUED)
        return actual_flight_time

    def check_fault(self, hours: float) -> bool:
        """One Bernoulli trial with p = fault_probability_per_hour × hours."""
        return self._rng.bernoulli(self._profile.fault_probability_per_hour * hours)

    def start_charging(self) -> None:
        """Queued → Charging.  Only the charger pool calls this."""
        if self._state is not VehicleState.QUEUED:
            raise StateError(
                f"Vehicle {self._id} must be Queued to start charging (state: {self._state.value})"
            )
        self._transition(VehicleState.CHARGING)

    def charge(self, hours: float) -> float:
        """Charge for up to ``hours``; return the time used.

        Less than ``hours`` is used only when the battery fills early, in
        which case the vehicle becomes Ready.
        """
        if self._state is not VehicleState.CHARGING:
            raise StateError(
                f"Vehicle {self._id} must be Charging to charge (state: {self._state.value}). "
                f"Call start_charging() first."
            )
        if hours <= 0:
            return 0.0

        capacity = self._profile.battery_capacity_kwh
        charge_rate = self._profile.charge_rate_kw
        energy_needed = capacity - self._battery_level
        max_energy = charge_rate * hours

        completes = energy_needed <= max_energy
        energy_added = energy_needed if completes else max_energy
        time_used = energy_added / charge_rate

        self.battery_level = self._battery_level + energy_added
        self._step_stats.charging_time += time_used

        if completes or self._battery_level >= capacity - EPSILON:
            self._finish_charging()
        return time_used

    # ── Internals ───────────────────────────────────────────────────────

    def _accrue_flight(self, hours: float) -> None:
        p = self._profile
        distance = p.cruise_speed_mph * hours
        self.battery_level = self._battery_level - distance * p.energy_use_kwh_per_mile

        step = self._step_stats
        step.flight_time += hours
        step.distance_traveled += distance
        step.passenger_miles += distance * p.passenger_count

    def _finish_charging(self) -> None:
        self._battery_level = self._profile.battery_capacity_kwh
        self._transition(VehicleState.READY)

    def _transition(self, new_state: VehicleState) -> None:
        if self._state is VehicleState.FLYING:
            self._step_stats.flights_completed += 1
        elif self._state is VehicleState.CHARGING:
            self._step_stats.charges_completed += 1
        logger.debug("Vehicle %d (%s): %s -> %s",
                     self._id, self.manufacturer.value, self._state.value, new_state.value)
        self._state = new_state
