# fleet_engine/schemas/service_job.py
from datetime import date, datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator
from fleet_engine.models import JobPriority, JobStatus

class RequiredPartIn(BaseModel):
    part_name: str = Field(..., min_length=1)
    part_number: str = ""
    manufacturer: str = ""
    supplier: str = ""
    description: str = ""
    quantity: int = Field(..., gt=0, description="Number of units, must be positive")
    unit_price: float = Field(..., ge=0, description="Price per unit, cannot be negative")

class ServiceJobCreate(BaseModel):
    title: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    instructions: str = Field(..., min_length=1)
    priority: JobPriority = JobPriority.MEDIUM
    vehicle_id: str = Field(..., description="Vehicle the work is carried out on")
    vehicle_error_id: Optional[str] = Field(None, description="Reported fault that triggered the job")
    # Backdating is allowed for incidents that already happened
    scheduled_date: date
    estimated_cost: float = Field(..., ge=0)
    mechanic_ids: List[str] = Field(..., min_length=1)
    required_parts: List[RequiredPartIn] = Field(default_factory=list)

    @field_validator("title", "description", "instructions")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value.strip()

    @field_validator("mechanic_ids")
    @classmethod
    def unique_mechanics(cls, value: List[str]) -> List[str]:
        if len(set(value)) != len(value):
            raise ValueError("mechanic ids must be unique")
        return value

class ServiceJobUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = Field(None, min_length=1)
    instructions: Optional[str] = Field(None, min_length=1)
    priority: Optional[JobPriority] = None
    scheduled_date: Optional[date] = None
    estimated_cost: Optional[float] = Field(None, ge=0)

    @field_validator("title", "description", "instructions")
    @classmethod
    def not_blank(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            raise ValueError("must not be blank")
        return value.strip() if value is not None else value

class MechanicAssign(BaseModel):
    mechanic_ids: List[str] = Field(..., min_length=1)

    @field_validator("mechanic_ids")
    @classmethod
    def unique_mechanics(cls, value: List[str]) -> List[str]:
        if len(set(value)) != len(value):
            raise ValueError("mechanic ids must be unique")
        return value

class AssignmentDecision(BaseModel):
    mechanic_id: str
    notes: Optional[str] = None

class WorkflowUpdate(BaseModel):
    mechanic_id: str
    notes: str

class JobCompletion(BaseModel):
    completion_notes: Optional[str] = None
    actual_cost: Optional[float] = Field(None, ge=0, description="Defaults to the estimated cost")

class MechanicAssignmentOut(BaseModel):
    id: str
    mechanic_id: str
    assigned_at: datetime
    accepted_at: Optional[datetime] = None
    accepted: bool
    notes: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)

class RequiredPartOut(BaseModel):
    id: str
    part_name: str
    part_number: str
    manufacturer: str
    supplier: str
    description: str
    quantity: int
    unit_price: float
    total_price: float
    ordered: bool
    received: bool

    model_config = ConfigDict(from_attributes=True)

class ServiceJobOut(BaseModel):
    id: str
    job_number: str
    title: str
    description: str
    instructions: str
    status: JobStatus
    priority: JobPriority
    vehicle_id: str
    vehicle_error_id: Optional[str] = None
    scheduled_date: date
    estimated_cost: float
    actual_cost: Optional[float] = None
    completion_notes: Optional[str] = None
    created_at: datetime
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    assigned_mechanics: List[MechanicAssignmentOut]
    required_parts: List[RequiredPartOut]
    total_mechanics: int
    total_parts: int
    total_parts_cost: float
    all_parts_received: bool

    model_config = ConfigDict(from_attributes=True)
