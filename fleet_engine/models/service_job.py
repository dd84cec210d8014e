# fleet_engine/models/service_job.py
from datetime import date, datetime
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

class JobStatus(str, Enum):
    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"

class JobPriority(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    URGENT = "URGENT"

TERMINAL_STATUSES = frozenset({JobStatus.COMPLETED, JobStatus.CANCELLED})

# Only forward edges; nothing leaves a terminal state
ALLOWED_TRANSITIONS = {
    JobStatus.PENDING: frozenset({JobStatus.IN_PROGRESS, JobStatus.CANCELLED}),
    JobStatus.IN_PROGRESS: frozenset({JobStatus.COMPLETED, JobStatus.CANCELLED}),
    JobStatus.COMPLETED: frozenset(),
    JobStatus.CANCELLED: frozenset(),
}

class MechanicAssignmentModel(BaseModel):
    id: str
    job_id: str
    mechanic_id: str
    assigned_at: datetime
    accepted_at: Optional[datetime] = None
    accepted: bool = False
    notes: Optional[str] = None

class RequiredPartModel(BaseModel):
    id: str
    job_id: str
    part_name: str
    part_number: str = ""
    manufacturer: str = ""
    supplier: str = ""
    description: str = ""
    quantity: int = Field(gt=0)
    unit_price: float = Field(ge=0)
    ordered: bool = False
    received: bool = False

    @property
    def total_price(self) -> float:
        return self.quantity * self.unit_price

class ServiceJobModel(BaseModel):
    id: str = Field(default="", alias="_id")
    job_number: str
    title: str
    description: str
    instructions: str
    status: JobStatus = JobStatus.PENDING
    priority: JobPriority = JobPriority.MEDIUM
    vehicle_id: str
    vehicle_error_id: Optional[str] = None
    scheduled_date: date
    estimated_cost: float = Field(ge=0)
    actual_cost: Optional[float] = None
    completion_notes: Optional[str] = None
    created_at: datetime
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    assigned_mechanics: List[MechanicAssignmentModel] = Field(default_factory=list)
    required_parts: List[RequiredPartModel] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True)

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    @property
    def accepted_mechanics(self) -> List[MechanicAssignmentModel]:
        return [a for a in self.assigned_mechanics if a.accepted]

    @property
    def total_mechanics(self) -> int:
        return len(self.assigned_mechanics)

    @property
    def total_parts(self) -> int:
        return len(self.required_parts)

    @property
    def total_parts_cost(self) -> float:
        return sum(part.total_price for part in self.required_parts)

    @property
    def all_parts_received(self) -> bool:
        return all(part.received for part in self.required_parts)

    def find_assignment(self, mechanic_id: str) -> Optional[MechanicAssignmentModel]:
        for assignment in self.assigned_mechanics:
            if assignment.mechanic_id == mechanic_id:
                return assignment
        return None

    def find_part(self, part_id: str) -> Optional[RequiredPartModel]:
        for part in self.required_parts:
            if part.id == part_id:
                return part
        return None
