"""FastAPI server — run eVTOL fleet simulations over HTTP.

Run with:
    uvicorn evtol_simulator.api.server:app --reload --port 8000

Or:
    python -m evtol_simulator.api.server

Endpoints:
    GET  /health           — liveness probe
    GET  /profiles         — manufacturer profile table
    GET  /config/defaults  — default SimulationConfig as JSON
    GET  /schema           — JSON Schema for SimulationConfig
    POST /simulate         — run a simulation (partial or full SimulationConfig)
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field, ValidationError

from evtol_simulator import __version__
from evtol_simulator.config.scenario import SimulationConfig
from evtol_simulator.config.vehicle import VEHICLE_PROFILES, Manufacturer, get_profile
from evtol_simulator.engine.simulation import Simulation
from evtol_simulator.models.results import SimulationResult

logger = logging.getLogger(__name__)

MAX_VEHICLE_TICKS = 20_000_000
"""Upper bound on vehicles × ticks accepted by /simulate."""

MAX_RECORDED_VEHICLE_TICKS = 200_000
"""Upper bound on vehicles × ticks when ``record_ticks`` keeps a snapshot of every tick."""


# ═══════════════════════════════════════════════════════════════════════════
# App setup
# ═══════════════════════════════════════════════════════════════════════════

app = FastAPI(
    title="eVTOL Fleet Simulator API",
    version=__version__,
    description=(
        "Run discrete-time simulations of an eVTOL fleet: flights, battery "
        "depletion, FIFO charger queueing, recharging and in-flight faults. "
        "Returns per-vehicle and per-manufacturer statistics."
    ),
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


# ═══════════════════════════════════════════════════════════════════════════
# Request models
# ═══════════════════════════════════════════════════════════════════════════

class SimulateRequest(BaseModel):
    """Request body for /simulate. All fields optional — defaults used for missing."""

    config: dict[str, Any] = Field(
        default_factory=dict,
        description="Partial or full SimulationConfig JSON. Missing fields use defaults. "
                    "Example: {'num_vehicles': 10, 'sim_hours': 1.5, 'random_seed': 7}",
    )
    fleet: list[Manufacturer] | None = Field(
        default=None,
        description="Optional explicit fleet mix, e.g. ['Alpha', 'Alpha', 'Echo']. "
                    "Overrides num_vehicles and assignment.",
    )


# ═══════════════════════════════════════════════════════════════════════════
# Helpers
# ═══════════════════════════════════════════════════════════════════════════

def _build_config(overrides: dict[str, Any], fleet: list[Manufacturer] | None) -> SimulationConfig:
    data = SimulationConfig().model_dump()
    data.update(overrides)
    if fleet:
        data["num_vehicles"] = len(fleet)
    try:
        return SimulationConfig(**data)
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=exc.errors(include_url=False)) from exc


def _check_workload(config: SimulationConfig) -> None:
    ticks = config.sim_hours / config.time_step_hours
    if config.record_ticks and ticks * config.num_vehicles > MAX_RECORDED_VEHICLE_TICKS:
        raise HTTPException(
            status_code=422,
            detail=f"Tick history too large: {config.num_vehicles} vehicles × {ticks:.0f} ticks "
                   f"exceeds {MAX_RECORDED_VEHICLE_TICKS:,} with record_ticks. "
                   f"Disable record_ticks or shorten the run.",
        )
    if ticks * config.num_vehicles > MAX_VEHICLE_TICKS:
        raise HTTPException(
            status_code=422,
            detail=f"Run too large: {config.num_vehicles} vehicles × {ticks:.0f} ticks "
                   f"exceeds {MAX_VEHICLE_TICKS:,}. Increase time_step_seconds or shorten sim_hours.",
        )


# ═══════════════════════════════════════════════════════════════════════════
# Endpoints
# ═══════════════════════════════════════════════════════════════════════════

@app.get("/health")
def health_check():
    return {"status": "ok"}


@app.get("/")
def root():
    return {
        "name": "eVTOL Fleet Simulator API",
        "version": __version__,
        "docs": "GET /docs (interactive Swagger UI)",
    }


@app.get("/profiles")
def get_profiles():
    """Manufacturer profiles with derived endurance and charge rate."""
    return [
        {
            **profile.model_dump(mode="json"),
            "power_draw_kw": profile.power_draw_kw,
            "charge_rate_kw": profile.charge_rate_kw,
            "max_flight_time_hours": profile.max_flight_time_hours,
        }
        for profile in VEHICLE_PROFILES.values()
    ]


@app.get("/profiles/{manufacturer}")
def get_one_profile(manufacturer: str):
    try:
        profile = get_profile(manufacturer)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=f"Unknown manufacturer: {manufacturer}") from exc
    return profile.model_dump(mode="json")


@app.get("/config/defaults")
def get_defaults():
    return SimulationConfig().model_dump(mode="json")


@app.get("/schema")
def get_schema():
    return SimulationConfig.model_json_schema()


@app.post("/simulate", response_model=SimulationResult)
def simulate(req: SimulateRequest):
    """Run one simulation to completion.

    Example minimal request:
    ```json
    {"config": {"num_vehicles": 10, "sim_hours": 1.0, "time_step_seconds": 5, "random_seed": 42}}
    ```
    """
    config = _build_config(req.config, req.fleet)
    _check_workload(config)

    sim = Simulation(config)
    sim.initialize_vehicles(req.fleet or None)
    logger.info("POST /simulate: %d vehicles, %.3f h", len(sim.vehicles), config.sim_hours)
    return sim.run()


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    uvicorn.run(app, host="0.0.0.0", port=8000)
