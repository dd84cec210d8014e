"""Shared fixtures: a fresh store with a small registered fleet."""

from datetime import date

import pytest

from fleet_engine.services import job_lifecycle, registry
from fleet_engine.store import FleetStore


@pytest.fixture
def store():
    return FleetStore(job_number_prefix="SJ")


@pytest.fixture
def vehicle(store):
    return registry.register_vehicle(store, {"plate_number": "kaa-101", "manufacturer": "Toyota", "model": "Hilux"})


@pytest.fixture
def other_vehicle(store):
    return registry.register_vehicle(store, {"plate_number": "KAB-202", "manufacturer": "Ford", "model": "Transit"})


@pytest.fixture
def mechanics(store):
    return [
        registry.register_mechanic(store, {"email": "m1@example.com", "full_name": "Mechanic One"}),
        registry.register_mechanic(store, {"email": "m2@example.com", "full_name": "Mechanic Two"}),
        registry.register_mechanic(store, {"email": "m3@example.com", "full_name": "Mechanic Three"}),
    ]


@pytest.fixture
def job_payload(vehicle, mechanics):
    return {
        "title": "Brake inspection",
        "description": "Squealing front brakes",
        "instructions": "Check pads and discs",
        "priority": "HIGH",
        "vehicle_id": vehicle.id,
        "scheduled_date": date(2026, 10, 1),
        "estimated_cost": 100.0,
        "mechanic_ids": [mechanics[0].id, mechanics[1].id],
    }


@pytest.fixture
def job(store, job_payload):
    return job_lifecycle.create_job(store, job_payload)
