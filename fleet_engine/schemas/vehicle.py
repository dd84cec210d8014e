# fleet_engine/schemas/vehicle.py
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field
from fleet_engine.models import VehicleStatus

class VehicleBase(BaseModel):
    plate_number: str = Field(..., min_length=1)
    manufacturer: str = ""
    model: str = ""
    year: Optional[int] = None
    status: VehicleStatus = VehicleStatus.ACTIVE
    current_mileage: float = Field(0, ge=0)
    service_mileage: float = Field(0, ge=0)

class VehicleCreate(VehicleBase):
    pass

class VehicleOut(VehicleBase):
    id: str
    driver_id: Optional[str] = None
    hub_id: Optional[str] = None

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)
