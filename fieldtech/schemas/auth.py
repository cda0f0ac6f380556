from __future__ import annotations
from pydantic import BaseModel
from fieldtech.schemas.technician import TechnicianRead


class LoginRequest(BaseModel):
    username: str = ""
    password: str = ""


class LoginResult(BaseModel):
    token: str
    technician: TechnicianRead
