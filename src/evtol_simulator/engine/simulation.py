"""Simulation — fleet ownership, time stepping and charger assignment.

Each tick follows this sequence:
  1. free chargers whose occupant is no longer Charging
  2. advance every vehicle by the tick size; fold its step stats into the
     per-manufacturer rollup (flight / charge sessions are counted when a
     vehicle leaves Flying / Charging during the tick)
  3. queue newly depleted vehicles; seat the queue head in each free charger
  4. advance the clock

Releasing before updating means a charger vacated during tick *t* is seen
free at the start of tick *t+1* and re-assigned at the end of that tick.

The final tick is clamped to the time remaining so the run never overshoots
``sim_hours``.  Given the same seed (or scripted ``RandomSource``) and the same
configuration, a run is bit-for-bit reproducible.

Entry point: ``run_simulation(config)``.
"""

from __future__ import annotations

import itertools
import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from evtol_simulator.config.scenario import SimulationConfig
from evtol_simulator.config.vehicle import Manufacturer, get_profile
from evtol_simulator.engine.charging import ChargingResourcePool
from evtol_simulator.engine.random_source import NumpyRandomSource, RandomSource
from evtol_simulator.engine.stats import VehicleTypeStats
from evtol_simulator.engine.vehicle import Vehicle
from evtol_simulator.models.results import (
    ChargerSlotSnapshot,
    SimulationResult,
    TickSnapshot,
    VehicleSnapshot,
    VehicleTypeSummary,
)

logger = logging.getLogger(__name__)

TIME_EPSILON = 1e-9
"""Clock tolerance (hours).  After the first tick, remaining time at or below this ends the run."""

MANUFACTURERS: tuple[Manufacturer, ...] = tuple(Manufacturer)


# ═══════════════════════════════════════════════════════════════════════════
# Tick event
# ═══════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class TickEvent:
    """Immutable record of what happened in one tick."""

    step: int
    """1-indexed tick number."""

    start_time: float
    """Clock (hours) before the tick."""

    dt: float
    """Tick length actually applied (hours)."""

    released: tuple[tuple[int, int], ...]
    """(charger slot, vehicle id) freed at the start of the tick."""

    enqueued: tuple[int, ...]
    """Vehicle ids appended to the wait list this tick."""

    assigned: tuple[tuple[int, int], ...]
    """(charger slot, vehicle id) seated this tick."""

    @property
    def end_time(self) -> float:
        return self.start_time + self.dt


TickObserver = Callable[["Simulation", TickEvent], None]


# ═══════════════════════════════════════════════════════════════════════════
# Simulation
# ═══════════════════════════════════════════════════════════════════════════

class Simulation:
    """Owns the fleet and the charger pool for one run.

    Usage::

        sim = Simulation(SimulationConfig(num_vehicles=20, sim_hours=3, random_seed=7))
        result = sim.run()
        for summary in result.type_stats:
            print(summary.manufacturer, summary.avg_flight_time_per_flight)

    Parameters
    ----------
    config : SimulationConfig
        Run settings.  Defaults to ``SimulationConfig()``.
    rng : RandomSource
        Fault trials and random assignment.  Defaults to a
        ``NumpyRandomSource`` seeded from ``config.random_seed``.
    """

    def __init__(
        self,
        config: SimulationConfig | None = None,
        rng: RandomSource | None = None,
    ) -> None:
        self._config = config if config is not None else SimulationConfig()
        self._rng = rng if rng is not None else NumpyRandomSource(self._config.random_seed)
        self._step_hours = self._config.time_step_hours

        self._current_time = 0.0
        self._step_count = 0

        self._vehicles: list[Vehicle] = []
        self._next_id = itertools.count(1)
        self._pool = ChargingResourcePool(self._config.num_chargers)
        self._type_stats: dict[Manufacturer, VehicleTypeStats] = {}

        self._observers: list[TickObserver] = []
        self._ticks: list[TickSnapshot] = []

    # ── Read-only views ─────────────────────────────────────────────────

    @property
    def config(self) -> SimulationConfig:
        return self._config

    @property
    def rng(self) -> RandomSource:
        return self._rng

    @property
    def current_time(self) -> float:
        return self._current_time

    @property
    def step_count(self) -> int:
        return self._step_count

    @property
    def time_step_hours(self) -> float:
        """Configured tick size (hours), before end-of-run clamping."""
        return self._step_hours

    @property
    def vehicles(self) -> tuple[Vehicle, ...]:
        return tuple(self._vehicles)

    @property
    def pool(self) -> ChargingResourcePool:
        return self._pool

    @property
    def type_stats(self) -> dict[Manufacturer, VehicleTypeStats]:
        """Per-manufacturer rollups, in manufacturer order."""
        return {m: self._type_stats[m] for m in MANUFACTURERS if m in self._type_stats}

    @property
    def is_finished(self) -> bool:
        # A run always gets at least one tick, however short sim_hours is.
        if self._step_count == 0:
            return False
        return self._config.sim_hours - self._current_time <= TIME_EPSILON

    # ── Observers ───────────────────────────────────────────────────────

    def add_observer(self, observer: TickObserver) -> None:
        """Register ``observer(sim, event)`` to be called after every tick.

        Observers read state; they must not drive vehicles or the pool.
        """
        self._observers.append(observer)

    # ── Fleet setup ─────────────────────────────────────────────────────

    def create_vehicle(self, manufacturer: Manufacturer | str) -> Vehicle:
        """Build a Ready, fully charged vehicle with the next fleet id."""
        return Vehicle(get_profile(manufacturer), self._rng, vehicle_id=next(self._next_id))

    def initialize_vehicles(self, manufacturers: Iterable[Manufacturer | str] | None = None) -> None:
        """Create the fleet and reset the per-manufacturer rollups.

        ``manufacturers`` pins an explicit fleet mix; otherwise
        ``config.num_vehicles`` are drawn by ``config.assignment``.
        """
        if manufacturers is None:
            manufacturers = self._assign_manufacturers(self._config.num_vehicles)

        self._vehicles = [self.create_vehicle(m) for m in manufacturers]
        self._pool = ChargingResourcePool(self._config.num_chargers)
        self._type_stats = {}
        for vehicle in self._vehicles:
            stats = self._type_stats.setdefault(
                vehicle.manufacturer, VehicleTypeStats(vehicle.manufacturer),
            )
            stats.vehicle_count += 1

        logger.info(
            "Fleet initialised: %s",
            ", ".join(f"{m.value}={s.vehicle_count}" for m, s in self.type_stats.items()),
        )

    def _assign_manufacturers(self, count: int) -> list[Manufacturer]:
        if self._config.assignment == "equal":
            return [MANUFACTURERS[i % len(MANUFACTURERS)] for i in range(count)]
        last = len(MANUFACTURERS) - 1
        return [MANUFACTURERS[self._rng.uniform_int(0, last)] for _ in range(count)]

    # ── Time stepping ───────────────────────────────────────────────────

    def next_time_step(self) -> float:
        """Tick size for the next step: the configured size, clamped to the time left."""
        return max(0.0, min(self._step_hours, self._config.sim_hours - self._current_time))

    def step(self) -> TickEvent:
        """Run one tick.  Raises ``RuntimeError`` once the configured duration is reached."""
        if self.is_finished:
            raise RuntimeError(
                f"Simulation already reached {self._config.sim_hours} h; no ticks remain"
            )
        dt = self.next_time_step()
        start_time = self._current_time

        # 1. Free chargers
        released = self._pool.release_finished()

        # 2. Advance vehicles + fold stats
        for vehicle in self._vehicles:
            vehicle.update_state(dt)
            self._fold_step_stats(vehicle)

        # 3. Queue + assign
        enqueued = self._pool.enqueue_depleted(self._vehicles)
        assigned = self._pool.assign_free_chargers()

        # 4. Clock
        self._current_time += dt
        self._step_count += 1
        if self.is_finished:
            self._current_time = self._config.sim_hours

        event = TickEvent(
            step=self._step_count,
            start_time=start_time,
            dt=dt,
            released=tuple((slot, v.id) for slot, v in released),
            enqueued=tuple(v.id for v in enqueued),
            assigned=tuple((slot, v.id) for slot, v in assigned),
        )
        if self._config.record_ticks:
            self._ticks.append(self.snapshot(dt))
        for observer in self._observers:
            observer(self, event)
        return event

    def _fold_step_stats(self, vehicle: Vehicle) -> None:
        stats = self._type_stats.get(vehicle.manufacturer)
        if stats is None:
            # Vehicles added outside initialize_vehicles().
            stats = self._type_stats[vehicle.manufacturer] = VehicleTypeStats(vehicle.manufacturer)

        stats.accumulate(vehicle.step_stats)

    def run(self) -> SimulationResult:
        """Run to the configured duration and return the result.

        The fleet is created on first use if ``initialize_vehicles`` has not
        been called.  A ``StateError`` from any vehicle aborts the run.
        """
        if not self._vehicles:
            self.initialize_vehicles()

        cfg = self._config
        logger.info(
            "Simulation start: %d vehicles, %d chargers, %.3f h at %.3f s/tick",
            len(self._vehicles), cfg.num_chargers, cfg.sim_hours, cfg.time_step_seconds,
        )
        while not self.is_finished:
            self.step()
        logger.info("Simulation done: %d ticks, t=%.6f h", self._step_count, self._current_time)
        return self.result()

    # ── Snapshots ───────────────────────────────────────────────────────

    def snapshot(self, dt: float | None = None) -> TickSnapshot:
        """Read-only copy of fleet, queue and chargers at the current instant."""
        return TickSnapshot(
            step=self._step_count,
            time_hours=self._current_time,
            dt_hours=dt if dt is not None else 0.0,
            vehicles=[VehicleSnapshot.from_vehicle(v) for v in self._vehicles],
            queue=[v.id for v in self._pool.queue],
            chargers=[
                ChargerSlotSnapshot(slot=i, vehicle_id=v.id if v is not None else None)
                for i, v in enumerate(self._pool.slots)
            ],
        )

    def result(self) -> SimulationResult:
        return SimulationResult(
            config=self._config,
            steps=self._step_count,
            final_time_hours=self._current_time,
            vehicles=[VehicleSnapshot.from_vehicle(v) for v in self._vehicles],
            type_stats=[VehicleTypeSummary.from_stats(s) for s in self.type_stats.values()],
            ticks=list(self._ticks) if self._config.record_ticks else None,
        )


# ═══════════════════════════════════════════════════════════════════════════
# Public entry point
# ═══════════════════════════════════════════════════════════════════════════

def run_simulation(
    config: SimulationConfig | None = None,
    rng: RandomSource | None = None,
    observers: Iterable[TickObserver] = (),
) -> SimulationResult:
    """Build a ``Simulation``, attach ``observers`` and run it to completion."""
    sim = Simulation(config, rng)
    for observer in observers:
        sim.add_observer(observer)
    return sim.run()
