"""Tests for engine/charging.py — charger slots and the FIFO wait list.

Covers:
  - Construction: slot count, rejection of non-positive counts
  - FIFO ordering and no-duplicate enqueue
  - enqueue_depleted: only Queued vehicles, fleet order, skips waiting/seated
  - assign_free_chargers: lowest free slot first, Queued → Charging
  - release_finished: frees slots whose occupant stopped charging
  - Defensive skip of a head that is no longer Queued
"""

from __future__ import annotations

import logging

import pytest

from evtol_simulator.config import Manufacturer, get_profile
from evtol_simulator.engine.charging import ChargingResourcePool
from evtol_simulator.engine.vehicle import StateError, Vehicle, VehicleState

from conftest import FixedRandomSource, make_depleted


@pytest.fixture
def depleted(bravo_profile) -> list[Vehicle]:
    return [make_depleted(bravo_profile, vehicle_id=i) for i in range(1, 6)]


# ═══════════════════════════════════════════════════════════════════════════
# Construction
# ═══════════════════════════════════════════════════════════════════════════

class TestConstruction:

    def test_slots_start_free(self):
        pool = ChargingResourcePool(3)
        assert pool.num_chargers == 3
        assert pool.slots == (None, None, None)
        assert pool.free_slot_count == 3
        assert len(pool) == 0
        assert pool.queue == ()

    @pytest.mark.parametrize("count", [0, -1])
    def test_rejects_non_positive(self, count: int):
        with pytest.raises(ValueError, match="num_chargers"):
            ChargingResourcePool(count)


# ═══════════════════════════════════════════════════════════════════════════
# Wait list
# ═══════════════════════════════════════════════════════════════════════════

class TestQueue:

    def test_fifo_order(self, depleted):
        pool = ChargingResourcePool(1)
        for v in depleted[:3]:
            assert pool.enqueue(v) is True
        assert [v.id for v in pool.queue] == [1, 2, 3]
        assert pool.dequeue() is depleted[0]
        assert pool.dequeue() is depleted[1]
        assert pool.dequeue() is depleted[2]
        assert pool.dequeue() is None

    def test_no_duplicates(self, depleted):
        pool = ChargingResourcePool(1)
        assert pool.enqueue(depleted[0]) is True
        assert pool.enqueue(depleted[0]) is False
        assert len(pool) == 1
        assert pool.is_queued(depleted[0])

    def test_dequeued_vehicle_can_be_queued_again(self, depleted):
        pool = ChargingResourcePool(1)
        pool.enqueue(depleted[0])
        pool.dequeue()
        assert not pool.is_queued(depleted[0])
        assert pool.enqueue(depleted[0]) is True

    def test_seated_vehicle_cannot_be_queued(self, depleted):
        pool = ChargingResourcePool(1)
        pool.enqueue(depleted[0])
        pool.assign_free_chargers()
        with pytest.raises(StateError):
            pool.enqueue(depleted[0])

    def test_enqueue_depleted_filters_and_keeps_fleet_order(self, depleted, no_fault_rng):
        flying = Vehicle(get_profile(Manufacturer.ALPHA), no_fault_rng, vehicle_id=99)
        flying.update_state(0.1)
        fleet = [depleted[2], flying, depleted[0], depleted[1]]

        pool = ChargingResourcePool(1)
        added = pool.enqueue_depleted(fleet)

        assert [v.id for v in added] == [3, 1, 2]
        assert [v.id for v in pool.queue] == [3, 1, 2]

    def test_enqueue_depleted_is_idempotent(self, depleted):
        pool = ChargingResourcePool(1)
        pool.enqueue_depleted(depleted)
        assert pool.enqueue_depleted(depleted) == []
        assert len(pool) == len(depleted)


# ═══════════════════════════════════════════════════════════════════════════
# Slots
# ═══════════════════════════════════════════════════════════════════════════

class TestAssignment:

    def test_lowest_free_slot_first(self, depleted):
        pool = ChargingResourcePool(3)
        pool.enqueue_depleted(depleted)
        assigned = pool.assign_free_chargers()

        assert [(slot, v.id) for slot, v in assigned] == [(0, 1), (1, 2), (2, 3)]
        assert all(v.state is VehicleState.CHARGING for _, v in assigned)
        assert [v.id for v in pool.queue] == [4, 5]
        assert pool.free_slot_count == 0

    def test_fills_gap_left_by_release(self, depleted):
        pool = ChargingResourcePool(3)
        pool.enqueue_depleted(depleted)
        pool.assign_free_chargers()

        # Charge the middle occupant to full: Charging → Ready → Flying.
        depleted[1].update_state(0.3)
        released = pool.release_finished()
        assert [(slot, v.id) for slot, v in released] == [(1, 2)]
        assert pool.slots[1] is None

        assigned = pool.assign_free_chargers()
        assert [(slot, v.id) for slot, v in assigned] == [(1, 4)]
        assert pool.slot_of(depleted[3]) == 1

    def test_empty_queue_assigns_nothing(self):
        pool = ChargingResourcePool(2)
        assert pool.assign_free_chargers() == []
        assert pool.free_slot_count == 2

    def test_more_chargers_than_waiting(self, depleted):
        pool = ChargingResourcePool(4)
        pool.enqueue_depleted(depleted[:2])
        assigned = pool.assign_free_chargers()
        assert [slot for slot, _ in assigned] == [0, 1]
        assert pool.free_slot_count == 2

    def test_release_keeps_charging_occupants(self, depleted):
        pool = ChargingResourcePool(2)
        pool.enqueue_depleted(depleted[:2])
        pool.assign_free_chargers()
        depleted[0].update_state(0.05)
        assert depleted[0].state is VehicleState.CHARGING
        assert pool.release_finished() == []


# ═══════════════════════════════════════════════════════════════════════════
# Defensive skip
# ═══════════════════════════════════════════════════════════════════════════

class TestSkipNonQueued:

    def test_ready_head_is_dropped_and_slot_left_free(self, depleted, caplog):
        ready = Vehicle(get_profile(Manufacturer.BRAVO), FixedRandomSource(), vehicle_id=42)
        pool = ChargingResourcePool(1)
        pool.enqueue(ready)
        pool.enqueue(depleted[0])

        with caplog.at_level(logging.WARNING, logger="evtol_simulator.engine.charging"):
            assigned = pool.assign_free_chargers()

        assert assigned == []
        assert pool.slots == (None,)
        assert ready.state is VehicleState.READY
        assert not pool.is_queued(ready)
        assert [v.id for v in pool.queue] == [1]
        assert "Vehicle 42" in caplog.text

        assigned = pool.assign_free_chargers()
        assert [(slot, v.id) for slot, v in assigned] == [(0, 1)]
