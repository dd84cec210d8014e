"""
Mechanic assignment tracker.

An assignment is an offer of a job to one mechanic. Accepting it is one-way;
declining removes the row altogether. Waiting on a mechanic's answer is the
PENDING, unaccepted state, never a blocked call.
"""

import logging
from typing import Iterable, List, Optional

from fleet_engine.errors import Conflict, NotFound, PreconditionFailed, ValidationError
from fleet_engine.models import JobStatus, MechanicAssignmentModel, ServiceJobModel
from fleet_engine.services import detached, require_open
from fleet_engine.store import FleetStore
from fleet_engine.utils.object_id import new_object_id, utc_now

logger = logging.getLogger(__name__)


def build_assignments(store: FleetStore, job: ServiceJobModel, mechanic_ids: Iterable[str]) -> List[MechanicAssignmentModel]:
    """Check every mechanic and return fresh unaccepted rows; caller holds the lock."""
    mechanic_ids = list(mechanic_ids or [])
    if not mechanic_ids:
        raise ValidationError(
            message="No mechanics supplied",
            details="At least one mechanic ID is required",
        )
    if len(set(mechanic_ids)) != len(mechanic_ids):
        raise ValidationError(
            message="Duplicate mechanic IDs",
            details="Each mechanic can be listed only once",
        )
    now = utc_now()
    assignments = []
    for mechanic_id in mechanic_ids:
        store.get("mechanics", mechanic_id)
        if job.find_assignment(mechanic_id) is not None:
            raise Conflict(
                message="Mechanic already assigned",
                details=f"Mechanic {mechanic_id} is already assigned to service job {job.job_number}",
            )
        assignments.append(MechanicAssignmentModel(
            id=new_object_id(),
            job_id=job.id,
            mechanic_id=mechanic_id,
            assigned_at=now,
        ))
    return assignments


def _find_assignment(job: ServiceJobModel, mechanic_id: str) -> MechanicAssignmentModel:
    assignment = job.find_assignment(mechanic_id)
    if assignment is None:
        raise NotFound(
            message="Assignment not found",
            details=f"Mechanic {mechanic_id} has no assignment on service job {job.job_number}",
        )
    return assignment


def assign_mechanics(store: FleetStore, job_id: str, mechanic_ids: Iterable[str]) -> ServiceJobModel:
    with store.atomic():
        job = store.get("service_jobs", job_id)
        require_open(job, "assign mechanics to")
        assignments = build_assignments(store, job, mechanic_ids)
        job.assigned_mechanics.extend(assignments)
        store.touch("service_jobs", job.id)
        result = detached(job)
    logger.info("Assigned %d mechanic(s) to job %s", len(assignments), result.job_number)
    return result


def accept_assignment(store: FleetStore, job_id: str, mechanic_id: str, notes: Optional[str] = None) -> ServiceJobModel:
    with store.atomic():
        job = store.get("service_jobs", job_id)
        require_open(job, "accept")
        assignment = _find_assignment(job, mechanic_id)
        if assignment.accepted:
            return detached(job)
        assignment.accepted = True
        assignment.accepted_at = utc_now()
        if notes is not None:
            assignment.notes = notes
        store.touch("service_jobs", job.id)
        result = detached(job)
    logger.info("Mechanic %s accepted job %s", mechanic_id, result.job_number)
    return result


def decline_assignment(store: FleetStore, job_id: str, mechanic_id: str, notes: Optional[str] = None) -> ServiceJobModel:
    """Drop the mechanic from the job. A job left without mechanics stays PENDING."""
    with store.atomic():
        job = store.get("service_jobs", job_id)
        require_open(job, "decline")
        assignment = _find_assignment(job, mechanic_id)
        if (
            job.status == JobStatus.IN_PROGRESS
            and assignment.accepted
            and len(job.accepted_mechanics) == 1
        ):
            raise PreconditionFailed(
                message="Last accepted mechanic cannot decline",
                details=f"Service job {job.job_number} is in progress and needs at least one accepted mechanic",
                example="Assign and have another mechanic accept first, or cancel the job",
            )
        job.assigned_mechanics = [a for a in job.assigned_mechanics if a.id != assignment.id]
        store.touch("service_jobs", job.id)
        result = detached(job)
    logger.info("Mechanic %s declined job %s%s", mechanic_id, result.job_number,
                f": {notes}" if notes else "")
    return result


def update_workflow(store: FleetStore, job_id: str, mechanic_id: str, notes: str) -> ServiceJobModel:
    with store.atomic():
        job = store.get("service_jobs", job_id)
        require_open(job, "update the workflow of")
        assignment = _find_assignment(job, mechanic_id)
        if not assignment.accepted:
            raise PreconditionFailed(
                message="Assignment not accepted",
                details=f"Mechanic {mechanic_id} must accept service job {job.job_number} before updating it",
            )
        assignment.notes = notes
        store.touch("service_jobs", job.id)
        return detached(job)


def list_mechanic_jobs(store: FleetStore, mechanic_id: str) -> List[ServiceJobModel]:
    with store.atomic():
        store.get("mechanics", mechanic_id)
        return [
            detached(job) for job in store.service_jobs.values()
            if job.find_assignment(mechanic_id) is not None
        ]


def list_pending_assignments(store: FleetStore, mechanic_id: str) -> List[ServiceJobModel]:
    """Open jobs offered to the mechanic that they have not accepted yet."""
    with store.atomic():
        store.get("mechanics", mechanic_id)
        jobs = []
        for job in store.service_jobs.values():
            assignment = job.find_assignment(mechanic_id)
            if assignment is not None and not assignment.accepted and not job.is_terminal:
                jobs.append(detached(job))
        return jobs


def list_mechanic_ongoing_jobs(store: FleetStore, mechanic_id: str) -> List[ServiceJobModel]:
    """Open jobs the mechanic has accepted."""
    with store.atomic():
        store.get("mechanics", mechanic_id)
        jobs = []
        for job in store.service_jobs.values():
            assignment = job.find_assignment(mechanic_id)
            if assignment is not None and assignment.accepted and not job.is_terminal:
                jobs.append(detached(job))
        return jobs
