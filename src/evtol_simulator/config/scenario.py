"""Simulation-level settings — supplied at construction, never parsed by the engine."""

from typing import Literal

from pydantic import BaseModel, Field

SECONDS_PER_HOUR = 3600.0


class SimulationConfig(BaseModel):
    """Complete input bundle for one simulation run."""

    num_vehicles: int = Field(default=20, ge=1, description="Fleet size")
    sim_hours: float = Field(default=3.0, gt=0, description="Simulated duration (hours)")
    num_chargers: int = Field(default=3, ge=1, description="Number of charger slots shared by the fleet")
    time_step_seconds: float = Field(default=1.0, gt=0, description="Tick size (seconds)")
    assignment: Literal["random", "equal"] = Field(
        default="random",
        description="Vehicle-type assignment: 'random' draws each manufacturer "
                    "uniformly; 'equal' distributes manufacturers round-robin.",
    )
    random_seed: int | None = Field(
        default=None,
        description="Optional RNG seed for reproducible runs. None = non-deterministic.",
    )
    log_verbosity: int = Field(
        default=1, ge=1, le=2,
        description="Run-report detail: 1 = summary only, 2 = every vehicle on every tick. "
                    "Use 2 only for short runs.",
    )
    record_ticks: bool = Field(
        default=False,
        description="Keep a full per-tick snapshot history on the result. "
                    "Memory grows with vehicles × ticks.",
    )

    @property
    def time_step_hours(self) -> float:
        return self.time_step_seconds / SECONDS_PER_HOUR
