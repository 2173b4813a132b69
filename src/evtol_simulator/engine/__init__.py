"""Engine — vehicle state machine, charger pool and time-stepping loop."""

from evtol_simulator.engine.random_source import NumpyRandomSource, RandomSource
from evtol_simulator.engine.stats import VehicleStats, VehicleTypeStats
from evtol_simulator.engine.vehicle import EPSILON, StateError, Vehicle, VehicleState
from evtol_simulator.engine.charging import ChargingResourcePool
from evtol_simulator.engine.simulation import Simulation, TickEvent, run_simulation

__all__ = [
    "RandomSource",
    "NumpyRandomSource",
    "VehicleStats",
    "VehicleTypeStats",
    "EPSILON",
    "StateError",
    "Vehicle",
    "VehicleState",
    "ChargingResourcePool",
    "Simulation",
    "TickEvent",
    "run_simulation",
]
