"""Central router that includes all sub-routers."""

from fastapi import APIRouter

from fieldtech.api.auth import router as auth_router
from fieldtech.api.technicians import router as technicians_router
from fieldtech.api.tickets import router as tickets_router
from fieldtech.api.qr import router as qr_router

api_router = APIRouter()
api_router.include_router(auth_router)
api_router.include_router(technicians_router)
api_router.include_router(tickets_router)
api_router.include_router(qr_router)


@api_router.get("/api/health", tags=["health"])
async def health():
    return {"success": True, "data": {"status": "ok"}}
