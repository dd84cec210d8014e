# fleet_engine/models/driver.py
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

class DriverModel(BaseModel):
    id: str = Field(default="", alias="_id")
    email: str
    full_name: Optional[str] = None
    available: bool = True
    vehicle_id: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True)
