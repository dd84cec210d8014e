# fleet_engine/models/vehicle_error.py
from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

class ErrorSeverity(str, Enum):
    LOW = "LOW"
    MODERATE = "MODERATE"
    CRITICAL = "CRITICAL"

class ErrorStatus(str, Enum):
    PENDING = "PENDING"
    IN_SERVICE = "IN_SERVICE"
    RESOLVED = "RESOLVED"

class VehicleErrorModel(BaseModel):
    id: str = Field(default="", alias="_id")
    vehicle_id: str
    error_code: str
    title: str = ""
    description: str = ""
    subsystem: str = ""
    severity: ErrorSeverity = ErrorSeverity.LOW
    status: ErrorStatus = ErrorStatus.PENDING
    resolved: bool = False
    reported_at: datetime
    resolved_at: Optional[datetime] = None
    # Job currently working on the fault, kept after resolution as the resolving job
    service_job_id: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True)
