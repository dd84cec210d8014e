# fleet_engine/models/hub.py
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

class HubModel(BaseModel):
    id: str = Field(default="", alias="_id")
    serial_number: str
    auth_key: str
    manufacturer: str = ""
    model_name: str = ""
    supplier_name: str = ""
    vehicle_id: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(populate_by_name=True, protected_namespaces=())
