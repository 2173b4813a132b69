"""Vehicle state tags shared by the engine and the result contracts."""

from enum import Enum


class VehicleState(str, Enum):
    READY = "Ready"
    FLYING = "Flying"
    QUEUED = "Queued"
    CHARGING = "Charging"
    FAULTED = "Faulted"
