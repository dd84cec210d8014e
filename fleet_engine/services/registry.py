"""
Resource registry: vehicles, diagnostic hubs, drivers and mechanics.

Hub and driver links are kept on both sides (``hub.vehicle_id`` and
``vehicle.hub_id``, ``driver.vehicle_id`` and ``vehicle.driver_id``). Both
sides are written together under the store lock once every exclusivity check
has passed; a lost race surfaces as ``Conflict`` and leaves the winner intact.
"""

import logging
import secrets
from typing import Any, List

from fleet_engine.errors import Conflict, NotFound
from fleet_engine.models import DriverModel, HubModel, MechanicModel, VehicleModel
from fleet_engine.schemas import DriverCreate, HubCreate, MechanicCreate, VehicleCreate
from fleet_engine.services import detached, parse_payload
from fleet_engine.store import FleetStore
from fleet_engine.utils.object_id import new_object_id, utc_now

logger = logging.getLogger(__name__)


def register_vehicle(store: FleetStore, payload: Any) -> VehicleModel:
    data = parse_payload(VehicleCreate, payload)
    with store.atomic():
        plate = data.plate_number.strip().upper()
        for existing in store.vehicles.values():
            if existing.plate_number.upper() == plate:
                raise Conflict(
                    message="Plate number already registered",
                    details=f"Vehicle with plate number '{data.plate_number}' already exists",
                    example="Each vehicle must have a unique plate number",
                )
        vehicle = VehicleModel(id=new_object_id(), **data.model_dump(exclude={"plate_number"}), plate_number=plate)
        store.add("vehicles", vehicle)
    logger.info("Registered vehicle %s (%s)", vehicle.id, vehicle.plate_number)
    return detached(vehicle)


def register_hub(store: FleetStore, payload: Any) -> HubModel:
    data = parse_payload(HubCreate, payload)
    auth_key = data.auth_key or secrets.token_urlsafe(24)
    with store.atomic():
        for existing in store.hubs.values():
            if existing.serial_number == data.serial_number:
                raise Conflict(
                    message="Serial number already registered",
                    details=f"Hub with serial number '{data.serial_number}' already exists",
                    example="Each hub must have a unique serial number",
                )
            if existing.auth_key == auth_key:
                raise Conflict(
                    message="Authentication key already in use",
                    details="Another hub already uses the supplied authentication key",
                    example="Omit the key to have a unique one generated",
                )
        hub = HubModel(
            id=new_object_id(),
            auth_key=auth_key,
            created_at=utc_now(),
            **data.model_dump(exclude={"auth_key"}),
        )
        store.add("hubs", hub)
    logger.info("Registered hub %s (serial %s)", hub.id, hub.serial_number)
    return detached(hub)


def register_driver(store: FleetStore, payload: Any) -> DriverModel:
    data = parse_payload(DriverCreate, payload)
    email = data.email.strip().lower()
    with store.atomic():
        if any(existing.email == email for existing in store.drivers.values()):
            raise Conflict(
                message="Email already registered",
                details=f"Driver with email '{email}' already exists",
            )
        driver = DriverModel(id=new_object_id(), **data.model_dump(exclude={"email"}), email=email)
        store.add("drivers", driver)
    logger.info("Registered driver %s (%s)", driver.id, driver.email)
    return detached(driver)


def register_mechanic(store: FleetStore, payload: Any) -> MechanicModel:
    data = parse_payload(MechanicCreate, payload)
    email = data.email.strip().lower()
    with store.atomic():
        if any(existing.email == email for existing in store.mechanics.values()):
            raise Conflict(
                message="Email already registered",
                details=f"Mechanic with email '{email}' already exists",
            )
        mechanic = MechanicModel(id=new_object_id(), email=email, full_name=data.full_name)
        store.add("mechanics", mechanic)
    logger.info("Registered mechanic %s (%s)", mechanic.id, mechanic.email)
    return detached(mechanic)


def get_vehicle(store: FleetStore, vehicle_id: str) -> VehicleModel:
    with store.atomic():
        return detached(store.get("vehicles", vehicle_id))


def get_hub(store: FleetStore, hub_id: str) -> HubModel:
    with store.atomic():
        return detached(store.get("hubs", hub_id))


def get_driver(store: FleetStore, driver_id: str) -> DriverModel:
    with store.atomic():
        return detached(store.get("drivers", driver_id))


def list_vehicles(store: FleetStore) -> List[VehicleModel]:
    with store.atomic():
        return [detached(vehicle) for vehicle in store.vehicles.values()]


def list_hubs(store: FleetStore, unassigned_only: bool = False) -> List[HubModel]:
    with store.atomic():
        return [
            detached(hub) for hub in store.hubs.values()
            if not unassigned_only or hub.vehicle_id is None
        ]


def list_drivers(store: FleetStore) -> List[DriverModel]:
    with store.atomic():
        return [detached(driver) for driver in store.drivers.values()]


def list_available_drivers(store: FleetStore) -> List[DriverModel]:
    """Drivers that may be newly assigned: available and not linked to a vehicle."""
    with store.atomic():
        return [
            detached(driver) for driver in store.drivers.values()
            if driver.available and driver.vehicle_id is None
        ]


def list_mechanics(store: FleetStore) -> List[MechanicModel]:
    with store.atomic():
        return [detached(mechanic) for mechanic in store.mechanics.values()]


def set_driver_availability(store: FleetStore, driver_id: str, available: bool) -> DriverModel:
    # Only blocks new assignments; an existing link is left alone
    with store.atomic():
        driver = store.get("drivers", driver_id)
        driver.available = available
        store.touch("drivers", driver.id)
        result = detached(driver)
    logger.info("Driver %s availability set to %s", driver_id, available)
    return result


def assign_hub(store: FleetStore, hub_id: str, vehicle_id: str) -> HubModel:
    with store.atomic():
        hub = store.get("hubs", hub_id)
        vehicle = store.get("vehicles", vehicle_id)
        if hub.vehicle_id is not None:
            logger.warning("Hub %s already linked to vehicle %s", hub.id, hub.vehicle_id)
            raise Conflict(
                message="Hub already assigned",
                details=f"Hub '{hub.serial_number}' is already assigned to vehicle ID: {hub.vehicle_id}",
                example="Unassign the hub before attaching it to another vehicle",
            )
        if vehicle.hub_id is not None:
            logger.warning("Vehicle %s already has hub %s", vehicle.id, vehicle.hub_id)
            raise Conflict(
                message="Vehicle already has a hub",
                details=f"Vehicle '{vehicle.plate_number}' already has hub ID: {vehicle.hub_id}",
                example="A vehicle can carry only one hub at a time",
            )
        hub.vehicle_id = vehicle.id
        vehicle.hub_id = hub.id
        store.touch("hubs", hub.id)
        store.touch("vehicles", vehicle.id)
        result = detached(hub)
    logger.info("Hub %s assigned to vehicle %s", hub_id, vehicle_id)
    return result


def unassign_hub(store: FleetStore, hub_id: str) -> HubModel:
    with store.atomic():
        hub = store.get("hubs", hub_id)
        if hub.vehicle_id is None:
            raise NotFound(
                message="Hub assignment not found",
                details=f"Hub '{hub.serial_number}' is not assigned to any vehicle",
            )
        vehicle = store.vehicles.get(hub.vehicle_id)
        if vehicle is not None and vehicle.hub_id == hub.id:
            vehicle.hub_id = None
            store.touch("vehicles", vehicle.id)
        previous = hub.vehicle_id
        hub.vehicle_id = None
        store.touch("hubs", hub.id)
        result = detached(hub)
    logger.info("Hub %s unassigned from vehicle %s", hub_id, previous)
    return result


def assign_driver(store: FleetStore, vehicle_id: str, driver_id: str) -> VehicleModel:
    with store.atomic():
        vehicle = store.get("vehicles", vehicle_id)
        driver = store.get("drivers", driver_id)
        if not driver.available:
            logger.warning("Driver %s is unavailable", driver.id)
            raise Conflict(
                message="Driver unavailable",
                details=f"Driver '{driver.email}' is marked unavailable",
                example="Only available drivers can be assigned",
            )
        if driver.vehicle_id is not None:
            logger.warning("Driver %s already linked to vehicle %s", driver.id, driver.vehicle_id)
            raise Conflict(
                message="Driver already assigned",
                details=f"Driver '{driver.email}' is already assigned to vehicle ID: {driver.vehicle_id}",
                example="A driver can only be assigned to one vehicle at a time",
            )
        if vehicle.driver_id is not None:
            logger.warning("Vehicle %s already has driver %s", vehicle.id, vehicle.driver_id)
            raise Conflict(
                message="Vehicle already has a driver",
                details=f"Vehicle '{vehicle.plate_number}' already has driver ID: {vehicle.driver_id}",
                example="Remove the current driver first",
            )
        vehicle.driver_id = driver.id
        driver.vehicle_id = vehicle.id
        store.touch("vehicles", vehicle.id)
        store.touch("drivers", driver.id)
        result = detached(vehicle)
    logger.info("Driver %s assigned to vehicle %s", driver_id, vehicle_id)
    return result


def remove_driver(store: FleetStore, vehicle_id: str) -> VehicleModel:
    with store.atomic():
        vehicle = store.get("vehicles", vehicle_id)
        if vehicle.driver_id is None:
            raise NotFound(
                message="Driver assignment not found",
                details=f"Vehicle '{vehicle.plate_number}' has no assigned driver",
            )
        driver = store.drivers.get(vehicle.driver_id)
        if driver is not None and driver.vehicle_id == vehicle.id:
            driver.vehicle_id = None
            store.touch("drivers", driver.id)
        previous = vehicle.driver_id
        vehicle.driver_id = None
        store.touch("vehicles", vehicle.id)
        result = detached(vehicle)
    logger.info("Driver %s removed from vehicle %s", previous, vehicle_id)
    return result
