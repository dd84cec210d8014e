"""
Parts ledger: required part line items of a service job.

A part's total price is a read-only property over quantity and unit price,
so it can never drift from them.
"""

import logging
from collections.abc import Iterable
from typing import Any, List

from fleet_engine.errors import NotFound, ValidationError
from fleet_engine.models import RequiredPartModel, ServiceJobModel
from fleet_engine.schemas import RequiredPartIn
from fleet_engine.services import detached, parse_payload, require_open
from fleet_engine.store import FleetStore
from fleet_engine.utils.object_id import new_object_id

logger = logging.getLogger(__name__)


def build_parts(job_id: str, parts: Iterable[Any]) -> List[RequiredPartModel]:
    """Validate incoming part rows and turn them into line items for ``job_id``."""
    if parts is None:
        return []
    if isinstance(parts, (str, bytes)) or not isinstance(parts, Iterable):
        raise ValidationError(message="Parts must be a list", details=f"Got {type(parts).__name__}")
    rows = [parse_payload(RequiredPartIn, part) for part in parts]
    return [RequiredPartModel(id=new_object_id(), job_id=job_id, **row.model_dump()) for row in rows]


def add_parts(store: FleetStore, job_id: str, parts: Iterable[Any]) -> ServiceJobModel:
    with store.atomic():
        job = store.get("service_jobs", job_id)
        require_open(job, "add parts to")
        new_parts = build_parts(job.id, parts)
        if not new_parts:
            raise ValidationError(
                message="No parts supplied",
                details="At least one part is required",
            )
        job.required_parts.extend(new_parts)
        store.touch("service_jobs", job.id)
        result = detached(job)
    logger.info("Added %d part(s) to job %s", len(new_parts), result.job_number)
    return result


def _find_part(job: ServiceJobModel, part_id: str) -> RequiredPartModel:
    part = job.find_part(part_id)
    if part is None:
        raise NotFound(
            message="Part not found",
            details=f"No part with ID {part_id} on service job {job.job_number}",
        )
    return part


def mark_ordered(store: FleetStore, job_id: str, part_id: str) -> ServiceJobModel:
    with store.atomic():
        job = store.get("service_jobs", job_id)
        part = _find_part(job, part_id)
        if not part.ordered:
            part.ordered = True
            store.touch("service_jobs", job.id)
            logger.info("Part %s on job %s marked ordered", part_id, job.job_number)
        return detached(job)


def mark_received(store: FleetStore, job_id: str, part_id: str) -> ServiceJobModel:
    # Receiving a part says nothing about the job's progress
    with store.atomic():
        job = store.get("service_jobs", job_id)
        part = _find_part(job, part_id)
        if not part.received:
            part.received = True
            store.touch("service_jobs", job.id)
            logger.info("Part %s on job %s marked received", part_id, job.job_number)
        return detached(job)
