"""Charger pool — fixed charger slots plus a FIFO wait list.

Each tick the simulation calls, in order:
  1. ``release_finished()``     — free slots whose occupant stopped charging
  2. (vehicles advance)
  3. ``enqueue_depleted(fleet)`` — append newly Queued vehicles, once each
  4. ``assign_free_chargers()`` — seat the head of the queue in each free slot

A vehicle is either waiting or seated, never both, and never queued twice.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Iterable

from evtol_simulator.engine.vehicle import StateError, Vehicle, VehicleState

logger = logging.getLogger(__name__)


class ChargingResourcePool:
    """``num_chargers`` slots shared by the fleet, granted in arrival order."""

    def __init__(self, num_chargers: int) -> None:
        if num_chargers <= 0:
            raise ValueError(f"num_chargers must be positive, got {num_chargers}")
        self._slots: list[Vehicle | None] = [None] * num_chargers
        self._queue: deque[Vehicle] = deque()
        self._queued_ids: set[int] = set()

    # ── Read-only views ─────────────────────────────────────────────────

    @property
    def num_chargers(self) -> int:
        return len(self._slots)

    @property
    def slots(self) -> tuple[Vehicle | None, ...]:
        return tuple(self._slots)

    @property
    def queue(self) -> tuple[Vehicle, ...]:
        return tuple(self._queue)

    @property
    def free_slot_count(self) -> int:
        return sum(1 for v in self._slots if v is None)

    def __len__(self) -> int:
        """Number of vehicles waiting."""
        return len(self._queue)

    def is_queued(self, vehicle: Vehicle) -> bool:
        return vehicle.id in self._queued_ids

    def slot_of(self, vehicle: Vehicle) -> int | None:
        for i, occupant in enumerate(self._slots):
            if occupant is vehicle:
                return i
        return None

    # ── Queue ───────────────────────────────────────────────────────────

    def enqueue(self, vehicle: Vehicle) -> bool:
        """Append ``vehicle`` to the wait list.  Returns False if it was already there."""
        if vehicle.id in self._queued_ids:
            return False
        if self.slot_of(vehicle) is not None:
            raise StateError(f"Vehicle {vehicle.id} is on a charger and cannot be queued")
        self._queue.append(vehicle)
        self._queued_ids.add(vehicle.id)
        return True

    def dequeue(self) -> Vehicle | None:
        """Pop the head of the wait list (None when empty)."""
        if not self._queue:
            return None
        vehicle = self._queue.popleft()
        self._queued_ids.discard(vehicle.id)
        return vehicle

    def enqueue_depleted(self, vehicles: Iterable[Vehicle]) -> list[Vehicle]:
        """Queue every Queued-state vehicle not already waiting or seated, in fleet order."""
        added: list[Vehicle] = []
        for vehicle in vehicles:
            if vehicle.state is not VehicleState.QUEUED:
                continue
            if vehicle.id in self._queued_ids or self.slot_of(vehicle) is not None:
                continue
            self.enqueue(vehicle)
            added.append(vehicle)
        return added

    # ── Slots ───────────────────────────────────────────────────────────

    def assign_free_chargers(self) -> list[tuple[int, Vehicle]]:
        """Seat waiting vehicles in free slots, lowest slot index first.

        Returns the ``(slot, vehicle)`` pairs assigned this call.
        """
        assigned: list[tuple[int, Vehicle]] = []
        for i, occupant in enumerate(self._slots):
            if not self._queue:
                break
            if occupant is not None:
                continue
            vehicle = self.dequeue()
            # Still Queued unless something moved it since it was enqueued.
            if vehicle.state is not VehicleState.QUEUED:
                logger.warning("Vehicle %d left the queue in state %s; skipped",
                               vehicle.id, vehicle.state.value)
                continue
            self._slots[i] = vehicle
            vehicle.start_charging()
            assigned.append((i, vehicle))
            logger.debug("Charger %d -> vehicle %d", i, vehicle.id)
        return assigned

    def release_finished(self) -> list[tuple[int, Vehicle]]:
        """Free every slot whose occupant is no longer Charging."""
        released: list[tuple[int, Vehicle]] = []
        for i, occupant in enumerate(self._slots):
            if occupant is not None and occupant.state is not VehicleState.CHARGING:
                self._slots[i] = None
                released.append((i, occupant))
                logger.debug("Charger %d released by vehicle %d", i, occupant.id)
        return released
