# weddingsite/core/security.py
# =================================================================================
# 🛡️ Dependencias de autorización
# ---------------------------------------------------------------------------------
# - require_owner: propietario de la plataforma (cabecera x-admin-key).
# - get_admin_event: pareja con Bearer JWT del propio evento, o el propietario.
# =================================================================================

import os
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from fastapi.security.api_key import APIKeyHeader
from loguru import logger
from sqlalchemy.orm import Session

from weddingsite import models
from weddingsite.auth import verify_access_token
from weddingsite.db import get_db

ADMIN_API_KEY = os.getenv("ADMIN_API_KEY", "")
_api_key_header = APIKeyHeader(name="x-admin-key", auto_error=False)
_bearer = HTTPBearer(auto_error=False)


def _is_owner_key(api_key: Optional[str]) -> bool:
    return bool(ADMIN_API_KEY) and api_key == ADMIN_API_KEY


def require_owner(api_key: str = Depends(_api_key_header)) -> None:
    if not _is_owner_key(api_key):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing admin key",
        )


def get_admin_event(
    event_id: str,
    api_key: Optional[str] = Depends(_api_key_header),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
    db: Session = Depends(get_db),
) -> models.Event:
    """Devuelve el evento de la ruta si el llamante puede administrarlo; 401/403/404 si no."""
    if not _is_owner_key(api_key):
        payload = verify_access_token(credentials.credentials) if credentials else None
        if not payload:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid or missing credentials",
                headers={"WWW-Authenticate": "Bearer"},
            )
        if payload.get("sub") != event_id:
            logger.warning("Token de evento {} usado contra evento {}", payload.get("sub"), event_id)
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not allowed for this event")

    event = db.get(models.Event, event_id)
    if not event:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Event not found")
    return event
