"""
Service job lifecycle.

    PENDING -> IN_PROGRESS -> COMPLETED
    PENDING | IN_PROGRESS -> CANCELLED

COMPLETED and CANCELLED are terminal: no transition and no further mutation
(accept, decline, parts, mechanics, details) is applied once a job is there.
"""

import logging
from typing import Any, List, Optional

from fleet_engine.errors import InvalidTransition, PreconditionFailed
from fleet_engine.models import ALLOWED_TRANSITIONS, JobStatus, ServiceJobModel
from fleet_engine.schemas import JobCompletion, ServiceJobCreate, ServiceJobUpdate
from fleet_engine.services import detached, parse_payload, require_open
from fleet_engine.services.fault_ledger import (
    check_fault_linkable,
    link_fault,
    release_fault,
    resolve_fault,
)
from fleet_engine.services.mechanic_tracker import build_assignments
from fleet_engine.services.parts_ledger import build_parts
from fleet_engine.store import FleetStore
from fleet_engine.utils.object_id import new_object_id, utc_now

logger = logging.getLogger(__name__)


def _check_transition(job: ServiceJobModel, target: JobStatus) -> None:
    if target not in ALLOWED_TRANSITIONS[job.status]:
        raise InvalidTransition(
            message=f"Cannot move job from {job.status.value} to {target.value}",
            details=f"Service job {job.job_number} is {job.status.value}",
            example="Jobs move PENDING -> IN_PROGRESS -> COMPLETED, or to CANCELLED before completion",
        )


def _transition(job: ServiceJobModel, target: JobStatus) -> None:
    _check_transition(job, target)
    job.status = target


def create_job(store: FleetStore, payload: Any) -> ServiceJobModel:
    data = parse_payload(ServiceJobCreate, payload)
    with store.atomic():
        vehicle = store.get("vehicles", data.vehicle_id)
        fault = None
        if data.vehicle_error_id:
            fault = check_fault_linkable(store, data.vehicle_error_id, vehicle.id)

        now = utc_now()
        job = ServiceJobModel(
            id=new_object_id(),
            job_number="",
            title=data.title,
            description=data.description,
            instructions=data.instructions,
            priority=data.priority,
            vehicle_id=vehicle.id,
            vehicle_error_id=fault.id if fault else None,
            scheduled_date=data.scheduled_date,
            estimated_cost=data.estimated_cost,
            created_at=now,
        )
        job.assigned_mechanics = build_assignments(store, job, data.mechanic_ids)
        job.required_parts = build_parts(job.id, data.required_parts)

        # Every check has passed; from here on nothing can fail
        job.job_number = store.next_job_number(now)
        store.add("service_jobs", job)
        if fault is not None:
            link_fault(store, fault, job.id)
        result = detached(job)
    logger.info("Created service job %s for vehicle %s with %d mechanic(s)",
                result.job_number, result.vehicle_id, result.total_mechanics)
    return result


def get_job(store: FleetStore, job_id: str) -> ServiceJobModel:
    with store.atomic():
        return detached(store.get("service_jobs", job_id))


def list_jobs(
    store: FleetStore,
    status: Optional[JobStatus] = None,
    vehicle_id: Optional[str] = None,
    skip: int = 0,
    limit: Optional[int] = None,
) -> List[ServiceJobModel]:
    """Jobs matching the filters, newest first."""
    with store.atomic():
        jobs = [
            job for job in store.service_jobs.values()
            if (status is None or job.status == status)
            and (vehicle_id is None or job.vehicle_id == vehicle_id)
        ]
        jobs.sort(key=lambda job: job.created_at, reverse=True)
        end = None if limit is None else skip + limit
        return [detached(job) for job in jobs[skip:end]]


def list_ongoing_jobs(store: FleetStore) -> List[ServiceJobModel]:
    with store.atomic():
        return [
            detached(job) for job in store.service_jobs.values()
            if job.status in (JobStatus.PENDING, JobStatus.IN_PROGRESS)
        ]


def list_completed_jobs(store: FleetStore) -> List[ServiceJobModel]:
    return list_jobs(store, status=JobStatus.COMPLETED)


def update_job(store: FleetStore, job_id: str, payload: Any) -> ServiceJobModel:
    data = parse_payload(ServiceJobUpdate, payload)
    changes = data.model_dump(exclude_unset=True, exclude_none=True)
    with store.atomic():
        job = store.get("service_jobs", job_id)
        require_open(job, "update")
        for field, value in changes.items():
            setattr(job, field, value)
        store.touch("service_jobs", job.id)
        result = detached(job)
    logger.info("Updated job %s fields %s", result.job_number, sorted(changes))
    return result


def start_job(store: FleetStore, job_id: str) -> ServiceJobModel:
    with store.atomic():
        job = store.get("service_jobs", job_id)
        _check_transition(job, JobStatus.IN_PROGRESS)
        if not job.accepted_mechanics:
            raise PreconditionFailed(
                message="No accepted mechanic",
                details=f"Service job {job.job_number} needs at least one mechanic who accepted it before it can start",
                example="Have an assigned mechanic accept the job first",
            )
        _transition(job, JobStatus.IN_PROGRESS)
        job.started_at = utc_now()
        store.touch("service_jobs", job.id)
        result = detached(job)
    logger.info("Started job %s", result.job_number)
    return result


def complete_job(store: FleetStore, job_id: str, payload: Any = None) -> ServiceJobModel:
    data = parse_payload(JobCompletion, payload or {})
    with store.atomic():
        job = store.get("service_jobs", job_id)
        _transition(job, JobStatus.COMPLETED)
        job.actual_cost = data.actual_cost if data.actual_cost is not None else job.estimated_cost
        job.completion_notes = data.completion_notes
        job.completed_at = utc_now()
        if job.vehicle_error_id:
            resolve_fault(store, job.vehicle_error_id, job.id)
        store.touch("service_jobs", job.id)
        result = detached(job)
    logger.info("Completed job %s at cost %.2f", result.job_number, result.actual_cost)
    return result


def cancel_job(store: FleetStore, job_id: str) -> ServiceJobModel:
    """Forced terminal transition; needs no agreement from assigned mechanics."""
    with store.atomic():
        job = store.get("service_jobs", job_id)
        _transition(job, JobStatus.CANCELLED)
        job.cancelled_at = utc_now()
        if job.vehicle_error_id:
            release_fault(store, job.vehicle_error_id, job.id)
        store.touch("service_jobs", job.id)
        result = detached(job)
    logger.info("Cancelled job %s", result.job_number)
    return result
