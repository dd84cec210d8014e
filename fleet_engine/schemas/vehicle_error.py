# fleet_engine/schemas/vehicle_error.py
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field
from fleet_engine.models import ErrorSeverity, ErrorStatus

class VehicleErrorBase(BaseModel):
    error_code: str = Field(..., min_length=1)
    title: str = ""
    description: str = ""
    subsystem: str = ""
    severity: ErrorSeverity = ErrorSeverity.LOW

class VehicleErrorCreate(VehicleErrorBase):
    pass

class VehicleErrorOut(VehicleErrorBase):
    id: str
    vehicle_id: str
    status: ErrorStatus
    resolved: bool
    reported_at: datetime
    resolved_at: Optional[datetime] = None
    service_job_id: Optional[str] = None

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)
