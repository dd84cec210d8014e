# fleet_engine/routes/service_job.py
from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from fleet_engine.database import get_store, sync_store
from fleet_engine.models import JobStatus
from fleet_engine.schemas import (
    MechanicAssign,
    RequiredPartIn,
    ServiceJobCreate,
    ServiceJobOut,
    ServiceJobSummary,
    ServiceJobUpdate,
)
from fleet_engine.services import job_lifecycle, mechanic_tracker, parts_ledger, summary
from fleet_engine.store import FleetStore

router = APIRouter()

@router.post("/service-jobs/", response_model=ServiceJobOut, status_code=201)
async def create_service_job(payload: ServiceJobCreate, store: FleetStore = Depends(get_store)):
    job = job_lifecycle.create_job(store, payload)
    await sync_store(store)
    return ServiceJobOut.model_validate(job)

@router.get("/service-jobs/", response_model=List[ServiceJobOut])
async def get_service_jobs(
    status: Optional[JobStatus] = None,
    vehicle_id: Optional[str] = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    store: FleetStore = Depends(get_store),
):
    jobs = job_lifecycle.list_jobs(store, status=status, vehicle_id=vehicle_id, skip=skip, limit=limit)
    return [ServiceJobOut.model_validate(job) for job in jobs]

@router.get("/service-jobs/ongoing", response_model=List[ServiceJobOut])
async def get_ongoing_service_jobs(store: FleetStore = Depends(get_store)):
    return [ServiceJobOut.model_validate(job) for job in job_lifecycle.list_ongoing_jobs(store)]

@router.get("/service-jobs/completed", response_model=List[ServiceJobOut])
async def get_completed_service_jobs(store: FleetStore = Depends(get_store)):
    return [ServiceJobOut.model_validate(job) for job in job_lifecycle.list_completed_jobs(store)]

@router.get("/service-jobs/summary", response_model=ServiceJobSummary)
async def get_service_job_summary(store: FleetStore = Depends(get_store)):
    return summary.summarize_jobs(store)

@router.get("/service-jobs/{job_id}", response_model=ServiceJobOut)
async def get_service_job(job_id: str, store: FleetStore = Depends(get_store)):
    return ServiceJobOut.model_validate(job_lifecycle.get_job(store, job_id))

@router.put("/service-jobs/{job_id}", response_model=ServiceJobOut)
async def update_service_job(job_id: str, payload: ServiceJobUpdate, store: FleetStore = Depends(get_store)):
    job = job_lifecycle.update_job(store, job_id, payload)
    await sync_store(store)
    return ServiceJobOut.model_validate(job)

@router.post("/service-jobs/{job_id}/mechanics", response_model=ServiceJobOut)
async def assign_additional_mechanics(job_id: str, payload: MechanicAssign, store: FleetStore = Depends(get_store)):
    job = mechanic_tracker.assign_mechanics(store, job_id, payload.mechanic_ids)
    await sync_store(store)
    return ServiceJobOut.model_validate(job)

@router.post("/service-jobs/{job_id}/parts", response_model=ServiceJobOut)
async def add_parts_to_job(job_id: str, parts: List[RequiredPartIn], store: FleetStore = Depends(get_store)):
    job = parts_ledger.add_parts(store, job_id, parts)
    await sync_store(store)
    return ServiceJobOut.model_validate(job)

@router.post("/service-jobs/{job_id}/parts/{part_id}/ordered", response_model=ServiceJobOut)
async def mark_part_ordered(job_id: str, part_id: str, store: FleetStore = Depends(get_store)):
    job = parts_ledger.mark_ordered(store, job_id, part_id)
    await sync_store(store)
    return ServiceJobOut.model_validate(job)

@router.post("/service-jobs/{job_id}/parts/{part_id}/received", response_model=ServiceJobOut)
async def mark_part_received(job_id: str, part_id: str, store: FleetStore = Depends(get_store)):
    job = parts_ledger.mark_received(store, job_id, part_id)
    await sync_store(store)
    return ServiceJobOut.model_validate(job)

@router.post("/service-jobs/{job_id}/cancel", response_model=ServiceJobOut)
async def cancel_service_job(job_id: str, store: FleetStore = Depends(get_store)):
    job = job_lifecycle.cancel_job(store, job_id)
    await sync_store(store)
    return ServiceJobOut.model_validate(job)
