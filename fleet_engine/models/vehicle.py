# fleet_engine/models/vehicle.py
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

class VehicleStatus(str, Enum):
    ACTIVE = "ACTIVE"
    IN_SERVICE = "IN_SERVICE"
    INACTIVE = "INACTIVE"

class VehicleModel(BaseModel):
    id: str = Field(default="", alias="_id")
    plate_number: str
    manufacturer: str = ""
    model: str = ""
    year: Optional[int] = None
    status: VehicleStatus = VehicleStatus.ACTIVE
    current_mileage: float = 0
    service_mileage: float = 0
    # Links are owned by the resource registry
    driver_id: Optional[str] = None
    hub_id: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True)
