"""
Authoritative in-process entity store.

Every entity kind lives in its own arena keyed by identifier. The engine
functions in ``fleet_engine.services`` are the only code that mutates the
arenas, and they always do so inside ``atomic()`` after every check for the
operation has passed, so a failed operation leaves nothing half-applied.
"""

import logging
import re
import threading
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Dict, Iterator, List, Optional, Set, Tuple

from fleet_engine.errors import NotFound
from fleet_engine.models import (
    DriverModel,
    HubModel,
    MechanicModel,
    ServiceJobModel,
    VehicleErrorModel,
    VehicleModel,
)

logger = logging.getLogger(__name__)

MODELS = {
    "vehicles": VehicleModel,
    "hubs": HubModel,
    "drivers": DriverModel,
    "mechanics": MechanicModel,
    "vehicle_errors": VehicleErrorModel,
    "service_jobs": ServiceJobModel,
}

LABELS = {
    "vehicles": "Vehicle",
    "hubs": "Hub",
    "drivers": "Driver",
    "mechanics": "Mechanic",
    "vehicle_errors": "Vehicle error",
    "service_jobs": "Service job",
}

JOB_SEQUENCE_PATTERN = re.compile(r"-(\d+)$")


class FleetStore:
    def __init__(self, job_number_prefix: str = "SJ"):
        self.job_number_prefix = job_number_prefix
        self.vehicles: Dict[str, VehicleModel] = {}
        self.hubs: Dict[str, HubModel] = {}
        self.drivers: Dict[str, DriverModel] = {}
        self.mechanics: Dict[str, MechanicModel] = {}
        self.vehicle_errors: Dict[str, VehicleErrorModel] = {}
        self.service_jobs: Dict[str, ServiceJobModel] = {}
        # Change tracking only matters when a database mirrors the store
        self.track_changes = False
        self._lock = threading.RLock()
        self._job_sequence = 0
        self._dirty: Set[Tuple[str, str]] = set()

    @contextmanager
    def atomic(self) -> Iterator["FleetStore"]:
        """Serialise a read-check-write sequence against every other operation."""
        with self._lock:
            yield self

    def arena(self, collection: str) -> Dict[str, Any]:
        if collection not in MODELS:
            raise KeyError(collection)
        return getattr(self, collection)

    def get(self, collection: str, entity_id: Optional[str]):
        entity = self.arena(collection).get(entity_id) if entity_id else None
        if entity is None:
            label = LABELS[collection]
            raise NotFound(
                message=f"{label} not found",
                details=f"No {label.lower()} found with ID: {entity_id}",
                example=f"Please ensure you're using a valid {label.lower()} ID",
            )
        return entity

    def add(self, collection: str, entity) -> None:
        with self._lock:
            self.arena(collection)[entity.id] = entity
            self.touch(collection, entity.id)

    def touch(self, collection: str, entity_id: str) -> None:
        if self.track_changes:
            self._dirty.add((collection, entity_id))

    def next_job_number(self, when: datetime) -> str:
        with self._lock:
            self._job_sequence += 1
            return f"{self.job_number_prefix}-{when:%Y%m%d}-{self._job_sequence:05d}"

    def is_empty(self) -> bool:
        with self._lock:
            return not any(self.arena(collection) for collection in MODELS)

    def load(self, collection: str, documents: List[Dict[str, Any]]) -> int:
        """Replace an arena with entities parsed from stored documents."""
        model = MODELS[collection]
        entities = [model.model_validate(document) for document in documents]
        with self._lock:
            arena = self.arena(collection)
            arena.clear()
            for entity in entities:
                arena[entity.id] = entity
            if collection == "service_jobs":
                self._job_sequence = max(
                    [self._job_sequence] + [_job_sequence(job.job_number) for job in entities]
                )
        logger.debug("Loaded %d %s", len(entities), collection)
        return len(entities)

    def drain_changes(self) -> List[Tuple[str, Dict[str, Any]]]:
        """Return the current document of every entity touched since the last drain."""
        with self._lock:
            changes = []
            for collection, entity_id in sorted(self._dirty):
                entity = self.arena(collection).get(entity_id)
                if entity is not None:
                    changes.append((collection, to_document(entity)))
            self._dirty.clear()
            return changes

    def requeue_changes(self, changes: List[Tuple[str, Dict[str, Any]]]):
        """Mark drained changes as pending again after a failed write-back."""
        with self._lock:
            for collection, document in changes:
                self.touch(collection, document["_id"])


def to_document(entity) -> Dict[str, Any]:
    # Derived values are properties, so they never reach the document
    return entity.model_dump(by_alias=True, mode="json")


def _job_sequence(job_number: str) -> int:
    match = JOB_SEQUENCE_PATTERN.search(job_number or "")
    return int(match.group(1)) if match else 0
