"""Shared test fixtures — scripted random sources, profiles and small configs."""

from __future__ import annotations

from collections.abc import Iterable

import pytest

from evtol_simulator.config import Manufacturer, SimulationConfig, VehicleProfile, get_profile
from evtol_simulator.engine.random_source import RandomSource
from evtol_simulator.engine.vehicle import Vehicle, VehicleState


# ═══════════════════════════════════════════════════════════════════════════
# Random source stubs
# ═══════════════════════════════════════════════════════════════════════════

class FixedRandomSource(RandomSource):
    """Every Bernoulli trial returns ``outcome``; every int draw returns ``int_value`` (clamped)."""

    def __init__(self, outcome: bool = False, int_value: int = 0) -> None:
        self.outcome = outcome
        self.int_value = int_value
        self.probabilities: list[float] = []

    def bernoulli(self, p: float) -> bool:
        self.probabilities.append(p)
        return self.outcome

    def uniform_int(self, low: int, high: int) -> int:
        return min(max(self.int_value, low), high)


class ScriptedRandomSource(RandomSource):
    """Replays Bernoulli outcomes in order, then ``default`` once the script runs out."""

    def __init__(self, outcomes: Iterable[bool], ints: Iterable[int] = (), default: bool = False) -> None:
        self._outcomes = list(outcomes)
        self._ints = list(ints)
        self._default = default
        self.probabilities: list[float] = []

    def bernoulli(self, p: float) -> bool:
        self.probabilities.append(p)
        return self._outcomes.pop(0) if self._outcomes else self._default

    def uniform_int(self, low: int, high: int) -> int:
        return self._ints.pop(0) if self._ints else low


# ═══════════════════════════════════════════════════════════════════════════
# Fixtures
# ═══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def no_fault_rng() -> FixedRandomSource:
    return FixedRandomSource(outcome=False)


@pytest.fixture
def fault_rng() -> FixedRandomSource:
    return FixedRandomSource(outcome=True)


@pytest.fixture
def alpha_profile() -> VehicleProfile:
    return get_profile(Manufacturer.ALPHA)


@pytest.fixture
def bravo_profile() -> VehicleProfile:
    return get_profile(Manufacturer.BRAVO)


@pytest.fixture
def small_config() -> SimulationConfig:
    """15 vehicles, 2 chargers, 2 h at 30 s ticks — fast but exercises queueing and faults."""
    return SimulationConfig(
        num_vehicles=15,
        sim_hours=2.0,
        num_chargers=2,
        time_step_seconds=30,
        random_seed=123,
    )


def make_depleted(profile: VehicleProfile, vehicle_id: int) -> Vehicle:
    """A vehicle flown to an empty battery (state Queued), with no faults."""
    vehicle = Vehicle(profile, FixedRandomSource(outcome=False), vehicle_id=vehicle_id)
    vehicle.update_state(profile.max_flight_time_hours)
    assert vehicle.state is VehicleState.QUEUED
    return vehicle
