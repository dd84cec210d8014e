# fleet_engine/routes/driver.py
from typing import List
from fastapi import APIRouter, Depends
from fleet_engine.database import get_store, sync_store
from fleet_engine.schemas import DriverAvailability, DriverCreate, DriverOut
from fleet_engine.services import registry
from fleet_engine.store import FleetStore

router = APIRouter()

@router.post("/drivers/", response_model=DriverOut, status_code=201)
async def create_driver(driver: DriverCreate, store: FleetStore = Depends(get_store)):
    created = registry.register_driver(store, driver)
    await sync_store(store)
    return DriverOut.model_validate(created)

@router.get("/drivers/", response_model=List[DriverOut])
async def get_drivers(store: FleetStore = Depends(get_store)):
    return [DriverOut.model_validate(driver) for driver in registry.list_drivers(store)]

@router.get("/drivers/{driver_id}", response_model=DriverOut)
async def get_driver(driver_id: str, store: FleetStore = Depends(get_store)):
    return DriverOut.model_validate(registry.get_driver(store, driver_id))

@router.patch("/drivers/{driver_id}/availability", response_model=DriverOut)
async def set_driver_availability(driver_id: str, payload: DriverAvailability, store: FleetStore = Depends(get_store)):
    driver = registry.set_driver_availability(store, driver_id, payload.available)
    await sync_store(store)
    return DriverOut.model_validate(driver)
