# fleet_engine/routes/vehicle.py
from typing import List
from fastapi import APIRouter, Depends, Query
from fleet_engine.database import get_store, sync_store
from fleet_engine.schemas import DriverOut, VehicleCreate, VehicleErrorCreate, VehicleErrorOut, VehicleOut
from fleet_engine.services import fault_ledger, registry
from fleet_engine.store import FleetStore

router = APIRouter()

@router.post("/vehicles/", response_model=VehicleOut, status_code=201)
async def create_vehicle(vehicle: VehicleCreate, store: FleetStore = Depends(get_store)):
    created = registry.register_vehicle(store, vehicle)
    await sync_store(store)
    return VehicleOut.model_validate(created)

@router.get("/vehicles/", response_model=List[VehicleOut])
async def get_vehicles(store: FleetStore = Depends(get_store)):
    return [VehicleOut.model_validate(vehicle) for vehicle in registry.list_vehicles(store)]

@router.get("/vehicles/drivers/available", response_model=List[DriverOut])
async def get_available_drivers(store: FleetStore = Depends(get_store)):
    return [DriverOut.model_validate(driver) for driver in registry.list_available_drivers(store)]

@router.get("/vehicles/{vehicle_id}", response_model=VehicleOut)
async def get_vehicle(vehicle_id: str, store: FleetStore = Depends(get_store)):
    return VehicleOut.model_validate(registry.get_vehicle(store, vehicle_id))

@router.post("/vehicles/{vehicle_id}/driver", response_model=VehicleOut)
async def assign_driver(vehicle_id: str, driver_id: str = Query(...), store: FleetStore = Depends(get_store)):
    vehicle = registry.assign_driver(store, vehicle_id, driver_id)
    await sync_store(store)
    return VehicleOut.model_validate(vehicle)

@router.delete("/vehicles/{vehicle_id}/driver", response_model=VehicleOut)
async def remove_driver(vehicle_id: str, store: FleetStore = Depends(get_store)):
    vehicle = registry.remove_driver(store, vehicle_id)
    await sync_store(store)
    return VehicleOut.model_validate(vehicle)

@router.post("/vehicles/{vehicle_id}/errors", response_model=VehicleErrorOut, status_code=201)
async def report_vehicle_error(vehicle_id: str, error: VehicleErrorCreate, store: FleetStore = Depends(get_store)):
    fault = fault_ledger.record_fault(store, vehicle_id, error)
    await sync_store(store)
    return VehicleErrorOut.model_validate(fault)

@router.get("/vehicles/{vehicle_id}/errors", response_model=List[VehicleErrorOut])
async def get_vehicle_errors(vehicle_id: str, unresolved_only: bool = False, store: FleetStore = Depends(get_store)):
    faults = fault_ledger.list_faults(store, vehicle_id=vehicle_id, unresolved_only=unresolved_only)
    return [VehicleErrorOut.model_validate(fault) for fault in faults]
