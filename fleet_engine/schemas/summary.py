# fleet_engine/schemas/summary.py
from pydantic import BaseModel

class ServiceJobSummary(BaseModel):
    """Read-side aggregate over service jobs, recomputed on every request"""
    total_jobs: int
    pending_jobs: int
    in_progress_jobs: int
    completed_jobs: int
    cancelled_jobs: int
    total_mechanics_assigned: int
    total_parts_ordered: int
    total_estimated_cost: float
    total_actual_cost: float
    total_parts_cost: float

class VehicleFaultSummary(BaseModel):
    vehicle_id: str
    total_errors: int
    unresolved_errors: int
    critical_errors: int
