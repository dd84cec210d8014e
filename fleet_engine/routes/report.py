# fleet_engine/routes/report.py
from typing import Optional
from fastapi import APIRouter, Depends
from fleet_engine.database import get_store
from fleet_engine.schemas import ServiceJobSummary, VehicleFaultSummary
from fleet_engine.services import summary
from fleet_engine.store import FleetStore

router = APIRouter()

@router.get("/reports/service-jobs", response_model=ServiceJobSummary)
async def get_service_job_report(vehicle_id: Optional[str] = None, store: FleetStore = Depends(get_store)):
    """Job counts and cost totals, optionally for one vehicle"""
    return summary.summarize_jobs(store, vehicle_id=vehicle_id)

@router.get("/reports/vehicles/{vehicle_id}/faults", response_model=VehicleFaultSummary)
async def get_vehicle_fault_report(vehicle_id: str, store: FleetStore = Depends(get_store)):
    return summary.summarize_vehicle_faults(store, vehicle_id)
