#!/usr/bin/env python3
"""Tests for hub and driver exclusivity."""

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from fleet_engine.errors import Conflict, NotFound
from fleet_engine.services import registry


@pytest.fixture
def hub(store):
    return registry.register_hub(store, {"serial_number": "OBD-0001", "manufacturer": "Freematics"})


@pytest.fixture
def driver(store):
    return registry.register_driver(store, {"email": "Alice@Example.com", "full_name": "Alice"})


class TestRegistration:
    """Tests for registering fleet resources."""

    def test_plate_numbers_are_unique(self, store, vehicle):
        """Plates are normalised and compared case-insensitively."""
        assert vehicle.plate_number == "KAA-101"
        with pytest.raises(Conflict):
            registry.register_vehicle(store, {"plate_number": "KAA-101"})

    def test_hub_key_is_generated(self, hub):
        """Omitting the auth key generates one."""
        assert hub.auth_key
        assert hub.vehicle_id is None

    def test_hub_serial_and_key_are_unique(self, store, hub):
        """Serial numbers and auth keys cannot repeat."""
        with pytest.raises(Conflict):
            registry.register_hub(store, {"serial_number": "OBD-0001"})
        with pytest.raises(Conflict):
            registry.register_hub(store, {"serial_number": "OBD-0002", "auth_key": hub.auth_key})

    def test_driver_email_is_normalised(self, store, driver):
        """Emails are stored lower-case and must be unique."""
        assert driver.email == "alice@example.com"
        with pytest.raises(Conflict):
            registry.register_driver(store, {"email": "ALICE@example.com"})


class TestHubAssignment:
    """Tests for the hub/vehicle link."""

    def test_assign_links_both_sides(self, store, hub, vehicle):
        """Hub and vehicle agree after assignment."""
        linked = registry.assign_hub(store, hub.id, vehicle.id)
        assert linked.vehicle_id == vehicle.id
        assert registry.get_vehicle(store, vehicle.id).hub_id == hub.id

    def test_second_assignment_conflicts(self, store, hub, vehicle, other_vehicle):
        """A hub already on V1 cannot move to V2 without unassigning."""
        registry.assign_hub(store, hub.id, vehicle.id)
        with pytest.raises(Conflict):
            registry.assign_hub(store, hub.id, other_vehicle.id)
        assert registry.get_hub(store, hub.id).vehicle_id == vehicle.id
        assert registry.get_vehicle(store, other_vehicle.id).hub_id is None

    def test_vehicle_takes_one_hub(self, store, hub, vehicle):
        """A vehicle with a hub rejects another one untouched."""
        spare = registry.register_hub(store, {"serial_number": "OBD-0002"})
        registry.assign_hub(store, hub.id, vehicle.id)
        with pytest.raises(Conflict):
            registry.assign_hub(store, spare.id, vehicle.id)
        assert registry.get_hub(store, spare.id).vehicle_id is None

    def test_unassign_clears_both_sides(self, store, hub, vehicle):
        """Unassigning frees the hub and the vehicle."""
        registry.assign_hub(store, hub.id, vehicle.id)
        freed = registry.unassign_hub(store, hub.id)
        assert freed.vehicle_id is None
        assert registry.get_vehicle(store, vehicle.id).hub_id is None
        assert [h.id for h in registry.list_hubs(store, unassigned_only=True)] == [hub.id]

    def test_unassign_unassigned_hub(self, store, hub):
        """Unassigning a free hub is not found."""
        with pytest.raises(NotFound):
            registry.unassign_hub(store, hub.id)

    def test_unknown_vehicle(self, store, hub):
        """The vehicle must exist."""
        with pytest.raises(NotFound):
            registry.assign_hub(store, hub.id, "missing")
        assert registry.get_hub(store, hub.id).vehicle_id is None

    def test_concurrent_assignment_has_one_winner(self, store, hub, vehicle, other_vehicle):
        """Racing managers: exactly one wins, the other sees Conflict."""
        barrier = threading.Barrier(2)

        def attempt(vehicle_id):
            barrier.wait()
            try:
                registry.assign_hub(store, hub.id, vehicle_id)
                return "ok"
            except Conflict:
                return "conflict"

        with ThreadPoolExecutor(max_workers=2) as pool:
            results = list(pool.map(attempt, [vehicle.id, other_vehicle.id]))

        assert sorted(results) == ["conflict", "ok"]
        linked = registry.get_hub(store, hub.id).vehicle_id
        assert linked in (vehicle.id, other_vehicle.id)
        holders = [v.id for v in registry.list_vehicles(store) if v.hub_id == hub.id]
        assert holders == [linked]


class TestDriverAssignment:
    """Tests for the driver/vehicle link."""

    def test_assign_links_both_sides(self, store, driver, vehicle):
        """Vehicle and driver agree after assignment."""
        updated = registry.assign_driver(store, vehicle.id, driver.id)
        assert updated.driver_id == driver.id
        assert registry.get_driver(store, driver.id).vehicle_id == vehicle.id
        assert registry.list_available_drivers(store) == []

    def test_driver_assigned_elsewhere(self, store, driver, vehicle, other_vehicle):
        """A driver drives one vehicle at a time."""
        registry.assign_driver(store, vehicle.id, driver.id)
        with pytest.raises(Conflict):
            registry.assign_driver(store, other_vehicle.id, driver.id)
        assert registry.get_vehicle(store, other_vehicle.id).driver_id is None

    def test_vehicle_already_has_driver(self, store, driver, vehicle):
        """A vehicle has at most one driver."""
        second = registry.register_driver(store, {"email": "bob@example.com"})
        registry.assign_driver(store, vehicle.id, driver.id)
        with pytest.raises(Conflict):
            registry.assign_driver(store, vehicle.id, second.id)
        assert registry.get_driver(store, second.id).vehicle_id is None

    def test_unavailable_driver(self, store, driver, vehicle):
        """Unavailable drivers cannot be newly assigned."""
        registry.set_driver_availability(store, driver.id, False)
        with pytest.raises(Conflict):
            registry.assign_driver(store, vehicle.id, driver.id)
        assert registry.get_vehicle(store, vehicle.id).driver_id is None

    def test_unavailability_keeps_existing_link(self, store, driver, vehicle):
        """Marking an assigned driver unavailable does not unlink them."""
        registry.assign_driver(store, vehicle.id, driver.id)
        registry.set_driver_availability(store, driver.id, False)
        assert registry.get_vehicle(store, vehicle.id).driver_id == driver.id

    def test_remove_driver(self, store, driver, vehicle):
        """Removing clears both sides."""
        registry.assign_driver(store, vehicle.id, driver.id)
        updated = registry.remove_driver(store, vehicle.id)
        assert updated.driver_id is None
        assert registry.get_driver(store, driver.id).vehicle_id is None
        with pytest.raises(NotFound):
            registry.remove_driver(store, vehicle.id)
