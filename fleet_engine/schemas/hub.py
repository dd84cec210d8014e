# fleet_engine/schemas/hub.py
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

class HubBase(BaseModel):
    serial_number: str = Field(..., min_length=1)
    manufacturer: str = ""
    model_name: str = ""
    supplier_name: str = ""

    model_config = ConfigDict(protected_namespaces=())

class HubCreate(HubBase):
    auth_key: Optional[str] = Field(None, min_length=8, description="Generated when omitted")

class HubAssign(BaseModel):
    vehicle_id: str = Field(..., description="Vehicle the hub is attached to")

class HubOut(HubBase):
    id: str
    vehicle_id: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

class HubCreatedOut(HubOut):
    """Returned once, on registration. The only response carrying the auth key."""
    auth_key: str
