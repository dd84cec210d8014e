"""
Vehicle fault ledger.

Faults arrive from telemetry ingestion through ``record_fault``. Afterwards
only the job lifecycle moves them, through the link/release/resolve helpers
below, which expect the caller to already hold the store lock.
"""

import logging
from typing import Any, List, Optional

from fleet_engine.errors import Conflict, ValidationError
from fleet_engine.models import ErrorStatus, VehicleErrorModel
from fleet_engine.schemas import VehicleErrorCreate
from fleet_engine.services import detached, parse_payload
from fleet_engine.store import FleetStore
from fleet_engine.utils.object_id import new_object_id, utc_now

logger = logging.getLogger(__name__)


def record_fault(store: FleetStore, vehicle_id: str, payload: Any) -> VehicleErrorModel:
    data = parse_payload(VehicleErrorCreate, payload)
    with store.atomic():
        vehicle = store.get("vehicles", vehicle_id)
        fault = VehicleErrorModel(
            id=new_object_id(),
            vehicle_id=vehicle.id,
            reported_at=utc_now(),
            **data.model_dump(),
        )
        store.add("vehicle_errors", fault)
    logger.info("Recorded fault %s (%s, %s) on vehicle %s",
                fault.id, fault.error_code, fault.severity.value, vehicle_id)
    return detached(fault)


def get_fault(store: FleetStore, fault_id: str) -> VehicleErrorModel:
    with store.atomic():
        return detached(store.get("vehicle_errors", fault_id))


def list_faults(store: FleetStore, vehicle_id: Optional[str] = None, unresolved_only: bool = False) -> List[VehicleErrorModel]:
    with store.atomic():
        if vehicle_id is not None:
            store.get("vehicles", vehicle_id)
        return [
            detached(fault) for fault in store.vehicle_errors.values()
            if (vehicle_id is None or fault.vehicle_id == vehicle_id)
            and (not unresolved_only or not fault.resolved)
        ]


def check_fault_linkable(store: FleetStore, fault_id: str, vehicle_id: str) -> VehicleErrorModel:
    """Return the fault if a new job for ``vehicle_id`` may take it on."""
    fault = store.get("vehicle_errors", fault_id)
    if fault.vehicle_id != vehicle_id:
        raise ValidationError(
            message="Fault belongs to another vehicle",
            details=f"Fault {fault.id} was reported on vehicle ID: {fault.vehicle_id}",
        )
    if fault.resolved:
        raise Conflict(
            message="Fault already resolved",
            details=f"Fault {fault.id} was resolved by service job ID: {fault.service_job_id}",
        )
    if fault.service_job_id is not None:
        job = store.service_jobs.get(fault.service_job_id)
        if job is not None and not job.is_terminal:
            raise Conflict(
                message="Fault already has an active service job",
                details=f"Fault {fault.id} is handled by service job {job.job_number}",
            )
    return fault


def link_fault(store: FleetStore, fault: VehicleErrorModel, job_id: str) -> None:
    fault.service_job_id = job_id
    fault.status = ErrorStatus.IN_SERVICE
    store.touch("vehicle_errors", fault.id)


def release_fault(store: FleetStore, fault_id: str, job_id: str) -> None:
    fault = store.vehicle_errors.get(fault_id)
    if fault is None or fault.resolved or fault.service_job_id != job_id:
        return
    fault.service_job_id = None
    fault.status = ErrorStatus.PENDING
    store.touch("vehicle_errors", fault.id)
    logger.info("Fault %s released by cancelled job %s", fault_id, job_id)


def resolve_fault(store: FleetStore, fault_id: str, job_id: str) -> None:
    fault = store.vehicle_errors.get(fault_id)
    if fault is None:
        return
    fault.resolved = True
    fault.status = ErrorStatus.RESOLVED
    fault.resolved_at = utc_now()
    fault.service_job_id = job_id
    store.touch("vehicle_errors", fault.id)
    logger.info("Fault %s resolved by job %s", fault_id, job_id)
