"""Technician profile API."""

from __future__ import annotations

from fastapi import APIRouter

from fieldtech.dependencies import CurrentTechnician
from fieldtech.schemas import ApiResponse, TechnicianRead

router = APIRouter(prefix="/api/technicians", tags=["technicians"])


@router.get("/me", response_model=ApiResponse[TechnicianRead])
async def get_me(tech: CurrentTechnician):
    return ApiResponse[TechnicianRead](data=TechnicianRead.model_validate(tech))
