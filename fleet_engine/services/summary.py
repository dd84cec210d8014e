"""Read-only aggregates recomputed from the store on every call."""

from typing import Optional

from fleet_engine.models import ErrorSeverity, JobStatus
from fleet_engine.schemas import ServiceJobSummary, VehicleFaultSummary
from fleet_engine.store import FleetStore


def summarize_jobs(store: FleetStore, vehicle_id: Optional[str] = None) -> ServiceJobSummary:
    with store.atomic():
        if vehicle_id is not None:
            store.get("vehicles", vehicle_id)
        jobs = [
            job for job in store.service_jobs.values()
            if vehicle_id is None or job.vehicle_id == vehicle_id
        ]
        counts = {status: 0 for status in JobStatus}
        for job in jobs:
            counts[job.status] += 1
        return ServiceJobSummary(
            total_jobs=len(jobs),
            pending_jobs=counts[JobStatus.PENDING],
            in_progress_jobs=counts[JobStatus.IN_PROGRESS],
            completed_jobs=counts[JobStatus.COMPLETED],
            cancelled_jobs=counts[JobStatus.CANCELLED],
            total_mechanics_assigned=sum(job.total_mechanics for job in jobs),
            total_parts_ordered=sum(job.total_parts for job in jobs),
            total_estimated_cost=sum(job.estimated_cost for job in jobs),
            total_actual_cost=sum(
                job.actual_cost or 0 for job in jobs if job.status == JobStatus.COMPLETED
            ),
            total_parts_cost=sum(job.total_parts_cost for job in jobs),
        )


def summarize_vehicle_faults(store: FleetStore, vehicle_id: str) -> VehicleFaultSummary:
    with store.atomic():
        store.get("vehicles", vehicle_id)
        faults = [f for f in store.vehicle_errors.values() if f.vehicle_id == vehicle_id]
        return VehicleFaultSummary(
            vehicle_id=vehicle_id,
            total_errors=len(faults),
            unresolved_errors=sum(1 for f in faults if not f.resolved),
            critical_errors=sum(1 for f in faults if f.severity == ErrorSeverity.CRITICAL),
        )
