# fleet_engine/schemas/mechanic.py
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

class MechanicBase(BaseModel):
    email: str = Field(..., min_length=3)
    full_name: Optional[str] = None

class MechanicCreate(MechanicBase):
    pass

class MechanicOut(MechanicBase):
    id: str

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)
