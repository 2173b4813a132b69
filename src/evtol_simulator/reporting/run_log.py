"""Run log — timestamped text report of one simulation run.

Attach a ``RunLogWriter`` to a ``Simulation`` as a tick observer::

    with RunLogWriter(default_log_path("output"), verbosity=2) as log:
        sim = Simulation(config)
        sim.initialize_vehicles()
        log.start(sim)
        sim.add_observer(log)
        result = sim.run()
        log.finish(result)

Verbosity 1 records inputs, fleet mix, charger hand-overs and the final
tables.  Verbosity 2 adds every vehicle's state, battery and stats on every
tick plus the wait list and charger slots (use for short runs only).
"""

from __future__ import annotations

import itertools
import logging
from datetime import datetime
from pathlib import Path

from evtol_simulator.engine.simulation import Simulation, TickEvent
from evtol_simulator.engine.stats import VehicleStats
from evtol_simulator.engine.vehicle import Vehicle
from evtol_simulator.models.results import SimulationResult
from evtol_simulator.reporting.tables import format_type_table

SECTION_WIDTH = 110
SUBSECTION_WIDTH = 60

_instance_ids = itertools.count()


def default_log_path(output_dir: str | Path = "output", now: datetime | None = None) -> Path:
    """``<output_dir>/eVTOL_sim_report_<YYYY-mm-dd_HH-MM-SS.mmm>.txt``."""
    now = now or datetime.now()
    stamp = now.strftime("%Y-%m-%d_%H-%M-%S") + f".{now.microsecond // 1000:03d}"
    return Path(output_dir) / f"eVTOL_sim_report_{stamp}.txt"


def _short_stats(stats: VehicleStats) -> str:
    return (
        f"Flight {stats.flight_time:.6f}, Queued {stats.queued_time:.6f}, "
        f"Charging {stats.charging_time:.6f}, Faulted {stats.faulted_time:.6f}"
    )


def _long_stats(stats: VehicleStats) -> str:
    return (
        f"Flight Time: {stats.flight_time:.6f}, Queued Time: {stats.queued_time:.6f}, "
        f"Distance: {stats.distance_traveled:.6f}, Charging Time: {stats.charging_time:.6f}, "
        f"Faulted Time: {stats.faulted_time:.6f}, Faults: {stats.faults}, "
        f"Passenger Miles: {stats.passenger_miles:.6f}"
    )


def _vehicle_line(vehicle: Vehicle) -> str:
    label = f"Vehicle {vehicle.id} ({vehicle.manufacturer.value})"
    battery = f"Battery {round(vehicle.battery_percent)}%"
    return (
        f"{label:<30}[{vehicle.state.value:<8}]   [{battery:<12}]   "
        f"Step: {_short_stats(vehicle.step_stats)} | Total: {_long_stats(vehicle.total_stats)}"
    )


class RunLogWriter:
    """Writes the run report through a dedicated, non-propagating logger."""

    def __init__(self, path: str | Path, verbosity: int = 1) -> None:
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._verbosity = verbosity

        self._logger = logging.getLogger(f"evtol_simulator.run_log.{next(_instance_ids)}")
        self._logger.setLevel(logging.INFO)
        self._logger.propagate = False
        self._handler = logging.FileHandler(self._path, mode="a", encoding="utf-8")
        self._handler.setFormatter(
            logging.Formatter("[%(asctime)s.%(msecs)03d] %(message)s", datefmt="%Y-%m-%d %H:%M:%S")
        )
        self._logger.addHandler(self._handler)

    @property
    def path(self) -> Path:
        return self._path

    @property
    def verbosity(self) -> int:
        return self._verbosity

    def __enter__(self) -> RunLogWriter:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self._logger.removeHandler(self._handler)
        self._handler.close()

    # ── Primitives ──────────────────────────────────────────────────────

    def line(self, message: str = "") -> None:
        self._logger.info(message)

    def section(self, title: str = "", width: int = SECTION_WIDTH) -> None:
        self.line("=" * width)
        if title:
            self.line(title)
        self.line("=" * width)

    # ── Run lifecycle ───────────────────────────────────────────────────

    def start(self, sim: Simulation) -> None:
        """Inputs and fleet mix.  Call after the fleet is initialised."""
        cfg = sim.config
        self.section("eVTOL Simulation START")
        self.line("Inputs:")
        self.line(f"  Number of vehicles: {cfg.num_vehicles}")
        self.line(f"  Simulation hours: {cfg.sim_hours}")
        self.line(f"  Number of chargers: {cfg.num_chargers}")
        self.line(f"  Time step: {cfg.time_step_seconds} seconds ({cfg.time_step_hours:.6f} hours)")
        self.line(f"  Vehicle assignment: {cfg.assignment}")
        self.line(f"  Random seed: {cfg.random_seed if cfg.random_seed is not None else 'none'}")
        self.line()
        self.section("Initialize Simulation Vehicles")
        self.line("Vehicle type counts:")
        for manufacturer, stats in sim.type_stats.items():
            self.line(f"  {manufacturer.value}: {stats.vehicle_count}")
        self.line(f"  Total vehicles: {len(sim.vehicles)}")
        self.line()

    def __call__(self, sim: Simulation, event: TickEvent) -> None:
        if self._verbosity >= 2:
            self._log_tick_detail(sim, event)
            return
        for slot, vehicle_id in event.released:
            self.line(f"t={event.end_time:.6f} h  S{slot} released by Vehicle {vehicle_id}")
        for slot, vehicle_id in event.assigned:
            self.line(f"t={event.end_time:.6f} h  S{slot} assigned to Vehicle {vehicle_id}")

    def _log_tick_detail(self, sim: Simulation, event: TickEvent) -> None:
        self.section(f"Simulation Step {event.step}", width=SUBSECTION_WIDTH)
        self.line(
            f"Current Time: {event.start_time:.6f} hours "
            f"(Delta +{event.dt:.6f} hours from previous step)"
        )
        for vehicle in sim.vehicles:
            self.line(_vehicle_line(vehicle))
        self.line()
        queue = ", ".join(f"Vehicle {v.id}" for v in sim.pool.queue)
        self.line(f"Charging Queue: [{queue}]")
        slots = " ".join(
            f"S{i}:[Vehicle {v.id}]" if v is not None else f"S{i}:[--]"
            for i, v in enumerate(sim.pool.slots)
        )
        self.line(f"Charging Stations: {slots}")
        self.line()

    def finish(self, result: SimulationResult) -> None:
        """Per-manufacturer table and final status."""
        self.line()
        self.section("Simulation Results by Vehicle Type")
        for row in format_type_table(result).splitlines():
            self.line(row)
        self.line()
        self.line("Final Status:")
        self.line(f"  Time: {result.final_time_hours:.6f}")
        self.line(f"  Step Count: {result.steps}")
        for state, count in result.state_counts.items():
            self.line(f"  {state.value}: {count}")
        self.line()
        self.line("Outputs:")
        self.line(f"  Log File: {self._path}")
        self.line()
        self.section("eVTOL Simulation DONE")
