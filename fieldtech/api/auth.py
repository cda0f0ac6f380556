"""Auth API: technician login."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from fieldtech.dependencies import get_session_issuer
from fieldtech.schemas import ApiResponse, LoginRequest, LoginResult, TechnicianRead
from fieldtech.services.auth import SessionIssuer

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/login", response_model=ApiResponse[LoginResult])
async def login(
    body: LoginRequest,
    issuer: SessionIssuer = Depends(get_session_issuer),
):
    token, tech = await issuer.login(body.username, body.password)
    return ApiResponse[LoginResult](
        data=LoginResult(token=token, technician=TechnicianRead.model_validate(tech)),
    )
