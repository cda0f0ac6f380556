"""FastAPI dependency providers for settings, services and the session."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, HTTPException, Request, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from fieldtech.config import Settings
from fieldtech.errors import UnauthenticatedError
from fieldtech.models import Technician
from fieldtech.services.auth import SessionIssuer
from fieldtech.tickets.service import TicketService

bearer_scheme = HTTPBearer(auto_error=False)


def _state(request: Request, name: str):
    value = getattr(request.app.state, name, None)
    if value is None:
        raise HTTPException(status_code=503, detail="Service is not configured")
    return value


def get_settings_dep(request: Request) -> Settings:
    return _state(request, "settings")


def get_session_issuer(request: Request) -> SessionIssuer:
    return _state(request, "session_issuer")


def get_ticket_service(request: Request) -> TicketService:
    return _state(request, "ticket_service")


async def require_technician(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Security(bearer_scheme)],
    issuer: SessionIssuer = Depends(get_session_issuer),
) -> Technician:
    """Require a valid bearer token. Returns the technician it belongs to."""
    if credentials is None or not credentials.credentials:
        raise UnauthenticatedError("Access token required")
    return await issuer.resolve(credentials.credentials)


CurrentTechnician = Annotated[Technician, Depends(require_technician)]
TicketServiceDep = Annotated[TicketService, Depends(get_ticket_service)]
SettingsDep = Annotated[Settings, Depends(get_settings_dep)]
