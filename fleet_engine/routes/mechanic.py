# fleet_engine/routes/mechanic.py
from typing import List, Optional
from fastapi import APIRouter, Depends
from fleet_engine.database import get_store, sync_store
from fleet_engine.schemas import (
    AssignmentDecision,
    JobCompletion,
    MechanicCreate,
    MechanicOut,
    ServiceJobOut,
    WorkflowUpdate,
)
from fleet_engine.services import job_lifecycle, mechanic_tracker, registry
from fleet_engine.store import FleetStore

router = APIRouter()

@router.post("/mechanics/", response_model=MechanicOut, status_code=201)
async def create_mechanic(mechanic: MechanicCreate, store: FleetStore = Depends(get_store)):
    created = registry.register_mechanic(store, mechanic)
    await sync_store(store)
    return MechanicOut.model_validate(created)

@router.get("/mechanics/", response_model=List[MechanicOut])
async def get_mechanics(store: FleetStore = Depends(get_store)):
    return [MechanicOut.model_validate(mechanic) for mechanic in registry.list_mechanics(store)]

@router.get("/mechanics/{mechanic_id}/jobs", response_model=List[ServiceJobOut])
async def get_mechanic_jobs(mechanic_id: str, store: FleetStore = Depends(get_store)):
    jobs = mechanic_tracker.list_mechanic_jobs(store, mechanic_id)
    return [ServiceJobOut.model_validate(job) for job in jobs]

@router.get("/mechanics/{mechanic_id}/pending-assignments", response_model=List[ServiceJobOut])
async def get_pending_assignments(mechanic_id: str, store: FleetStore = Depends(get_store)):
    jobs = mechanic_tracker.list_pending_assignments(store, mechanic_id)
    return [ServiceJobOut.model_validate(job) for job in jobs]

@router.get("/mechanics/{mechanic_id}/ongoing-jobs", response_model=List[ServiceJobOut])
async def get_ongoing_jobs(mechanic_id: str, store: FleetStore = Depends(get_store)):
    jobs = mechanic_tracker.list_mechanic_ongoing_jobs(store, mechanic_id)
    return [ServiceJobOut.model_validate(job) for job in jobs]

@router.post("/service-jobs/{job_id}/accept", response_model=ServiceJobOut)
async def accept_job(job_id: str, decision: AssignmentDecision, store: FleetStore = Depends(get_store)):
    job = mechanic_tracker.accept_assignment(store, job_id, decision.mechanic_id, decision.notes)
    await sync_store(store)
    return ServiceJobOut.model_validate(job)

@router.post("/service-jobs/{job_id}/decline", response_model=ServiceJobOut)
async def decline_job(job_id: str, decision: AssignmentDecision, store: FleetStore = Depends(get_store)):
    job = mechanic_tracker.decline_assignment(store, job_id, decision.mechanic_id, decision.notes)
    await sync_store(store)
    return ServiceJobOut.model_validate(job)

@router.post("/service-jobs/{job_id}/start", response_model=ServiceJobOut)
async def start_job(job_id: str, store: FleetStore = Depends(get_store)):
    job = job_lifecycle.start_job(store, job_id)
    await sync_store(store)
    return ServiceJobOut.model_validate(job)

@router.patch("/service-jobs/{job_id}/workflow", response_model=ServiceJobOut)
async def update_job_workflow(job_id: str, update: WorkflowUpdate, store: FleetStore = Depends(get_store)):
    job = mechanic_tracker.update_workflow(store, job_id, update.mechanic_id, update.notes)
    await sync_store(store)
    return ServiceJobOut.model_validate(job)

@router.post("/service-jobs/{job_id}/complete", response_model=ServiceJobOut)
async def complete_job(
    job_id: str,
    completion: Optional[JobCompletion] = None,
    store: FleetStore = Depends(get_store),
):
    job = job_lifecycle.complete_job(store, job_id, completion)
    await sync_store(store)
    return ServiceJobOut.model_validate(job)
