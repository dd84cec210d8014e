# fleet_engine/models/mechanic.py
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

class MechanicModel(BaseModel):
    id: str = Field(default="", alias="_id")
    email: str
    full_name: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True)
