# fleet_engine/schemas/driver.py
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

class DriverBase(BaseModel):
    email: str = Field(..., min_length=3)
    full_name: Optional[str] = None

class DriverCreate(DriverBase):
    available: bool = True

class DriverAvailability(BaseModel):
    available: bool

class DriverOut(DriverBase):
    id: str
    available: bool
    vehicle_id: Optional[str] = None

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)
