"""Command-line entry point — ``evtol-sim``.

Examples::

    evtol-sim                              # defaults: 20 vehicles, 3 h, 3 chargers, 1 s ticks
    evtol-sim -v 50 -H 6                   # 50 vehicles, 6 hours
    evtol-sim --vehicles 30 --chargers 5   # 30 vehicles, 5 chargers
    evtol-sim -v 10 -H 4.5 -c 8 -t 0.5     # 10 vehicles, 4.5 h, 8 chargers, 0.5 s ticks
    evtol-sim -e -s 42 --json              # round-robin fleet, seeded, JSON result on stdout
"""

from __future__ import annotations

import argparse
import logging
import sys

from pydantic import ValidationError
from rich.console import Console
from rich.progress import BarColumn, Progress, TaskProgressColumn, TextColumn, TimeElapsedColumn
from rich.table import Table

from evtol_simulator.config.scenario import SimulationConfig
from evtol_simulator.engine.simulation import Simulation, TickEvent
from evtol_simulator.models.results import SimulationResult
from evtol_simulator.reporting.run_log import RunLogWriter, default_log_path

PROGRESS_EVERY_N_TICKS = 5

_DEFAULTS = SimulationConfig()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="evtol-sim",
        description="Simulate an eVTOL fleet cycling through flight, charger queueing and charging.",
    )
    parser.add_argument("-v", "--vehicles", type=int, default=_DEFAULTS.num_vehicles,
                        help=f"Number of vehicles (default: {_DEFAULTS.num_vehicles})")
    parser.add_argument("-H", "--hours", type=float, default=_DEFAULTS.sim_hours,
                        help=f"Simulation duration in hours, decimals allowed (default: {_DEFAULTS.sim_hours})")
    parser.add_argument("-c", "--chargers", type=int, default=_DEFAULTS.num_chargers,
                        help=f"Number of chargers (default: {_DEFAULTS.num_chargers})")
    parser.add_argument("-t", "--timestep", type=float, default=_DEFAULTS.time_step_seconds,
                        help=f"Tick size in seconds (default: {_DEFAULTS.time_step_seconds})")
    parser.add_argument("-l", "--log-verbosity", type=int, default=_DEFAULTS.log_verbosity,
                        help="Run-log verbosity [1, 2]. 2 logs every vehicle on every tick; "
                             "use only for short runs (default: %(default)s)")
    parser.add_argument("-e", "--equal", action="store_true",
                        help="Distribute manufacturers round-robin instead of at random")
    parser.add_argument("-s", "--seed", type=int, default=None,
                        help="RNG seed for a reproducible run")
    parser.add_argument("-o", "--output-dir", default="output",
                        help="Directory for the run log (default: %(default)s)")
    parser.add_argument("--no-log-file", action="store_true", help="Do not write a run log")
    parser.add_argument("--json", action="store_true", help="Print the full result as JSON")
    parser.add_argument("-q", "--quiet", action="store_true", help="No progress bar or table")
    return parser


def config_from_args(args: argparse.Namespace) -> SimulationConfig:
    return SimulationConfig(
        num_vehicles=args.vehicles,
        sim_hours=args.hours,
        num_chargers=args.chargers,
        time_step_seconds=args.timestep,
        assignment="equal" if args.equal else "random",
        random_seed=args.seed,
        log_verbosity=args.log_verbosity,
    )


def render_type_table(result: SimulationResult) -> Table:
    table = Table(title="Simulation Results by Vehicle Type")
    for header in ("Vehicle Type", "Count", "Avg Flight (hrs)", "Avg Dist (miles)",
                   "Avg Charge (hrs)", "Faults", "Passenger Miles"):
        table.add_column(header, justify="right" if header != "Vehicle Type" else "left")
    for s in result.type_stats:
        table.add_row(
            s.manufacturer.value,
            str(s.vehicle_count),
            f"{s.avg_flight_time_per_flight:.4f}",
            f"{s.avg_distance_per_flight:.2f}",
            f"{s.avg_charging_time_per_session:.4f}",
            f"{s.total_faults} ({s.fault_rate * 100:.1f}%)",
            f"{s.total_passenger_miles:.1f}",
        )
    return table


def _run(config: SimulationConfig, args: argparse.Namespace, console: Console) -> SimulationResult:
    sim = Simulation(config)
    sim.initialize_vehicles()

    run_log = None
    if not args.no_log_file:
        run_log = RunLogWriter(default_log_path(args.output_dir), verbosity=config.log_verbosity)
        run_log.start(sim)
        sim.add_observer(run_log)

    try:
        if args.quiet:
            result = sim.run()
        else:
            with Progress(
                TextColumn("[progress.description]{task.description}"),
                BarColumn(),
                TaskProgressColumn(),
                TextColumn("{task.completed:.2f}/{task.total:.2f} h"),
                TimeElapsedColumn(),
                console=console,
            ) as progress:
                task = progress.add_task("Simulating", total=config.sim_hours)

                def on_tick(s: Simulation, event: TickEvent) -> None:
                    if event.step % PROGRESS_EVERY_N_TICKS == 0 or s.is_finished:
                        progress.update(task, completed=s.current_time)

                sim.add_observer(on_tick)
                result = sim.run()
        if run_log is not None:
            run_log.finish(result)
    finally:
        if run_log is not None:
            run_log.close()

    if run_log is not None and not args.quiet:
        console.print(f"Run log: {run_log.path}")
    return result


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        config = config_from_args(args)
    except ValidationError as exc:
        print(f"Error: invalid arguments\n{exc}", file=sys.stderr)
        return 2

    console = Console(stderr=args.json)
    result = _run(config, args, console)

    if args.json:
        print(result.model_dump_json(indent=2))
    elif not args.quiet:
        console.print(render_type_table(result))
    return 0


if __name__ == "__main__":
    sys.exit(main())
