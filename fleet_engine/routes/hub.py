# fleet_engine/routes/hub.py
from typing import List
from fastapi import APIRouter, Depends
from fleet_engine.database import get_store, sync_store
from fleet_engine.schemas import HubAssign, HubCreate, HubCreatedOut, HubOut
from fleet_engine.services import registry
from fleet_engine.store import FleetStore

router = APIRouter()

@router.post("/hubs/", response_model=HubCreatedOut, status_code=201)
async def create_hub(hub: HubCreate, store: FleetStore = Depends(get_store)):
    created = registry.register_hub(store, hub)
    await sync_store(store)
    return HubCreatedOut.model_validate(created)

@router.get("/hubs/", response_model=List[HubOut])
async def get_hubs(unassigned_only: bool = False, store: FleetStore = Depends(get_store)):
    return [HubOut.model_validate(hub) for hub in registry.list_hubs(store, unassigned_only)]

@router.get("/hubs/{hub_id}", response_model=HubOut)
async def get_hub(hub_id: str, store: FleetStore = Depends(get_store)):
    return HubOut.model_validate(registry.get_hub(store, hub_id))

@router.post("/hubs/{hub_id}/assignment", response_model=HubOut)
async def assign_hub(hub_id: str, assignment: HubAssign, store: FleetStore = Depends(get_store)):
    hub = registry.assign_hub(store, hub_id, assignment.vehicle_id)
    await sync_store(store)
    return HubOut.model_validate(hub)

@router.delete("/hubs/{hub_id}/assignment", response_model=HubOut)
async def unassign_hub(hub_id: str, store: FleetStore = Depends(get_store)):
    hub = registry.unassign_hub(store, hub_id)
    await sync_store(store)
    return HubOut.model_validate(hub)
