from __future__ import annotations
from datetime import datetime
from pydantic import BaseModel


class TechnicianRead(BaseModel):
    id: str
    name: str
    username: str
    email: str
    phone: str | None = None
    photo_url: str | None = None
    role: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class TechnicianSummary(BaseModel):
    id: str
    name: str
    email: str
    phone: str | None = None
    photo_url: str | None = None
    role: str

    model_config = {"from_attributes": True}
