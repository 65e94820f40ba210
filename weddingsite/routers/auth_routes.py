# weddingsite/routers/auth_routes.py

# =================================================================================
# 🔐 Router de autenticación de la pareja (Magic Link)
# ---------------------------------------------------------------------------------
# - POST /api/auth/request-access: si el email coincide con el owner_email del evento
#   se envía un enlace mágico. La respuesta es SIEMPRE neutra (no revela si existe).
# - POST /api/auth/magic-login: canjea el token mágico por un access token del evento.
# =================================================================================

import os
import time

from fastapi import APIRouter, Depends, HTTPException, Request, status
from jose import JWTError
from loguru import logger
from sqlalchemy.orm import Session

from weddingsite import auth, mailer, models, schemas
from weddingsite.core.responses import request_lang
from weddingsite.crud import events_crud
from weddingsite.db import get_db
from weddingsite.rate_limit import client_ip, get_limits_from_env, is_allowed
from weddingsite.utils.i18n import resolve_lang, translate

router = APIRouter(prefix="/api/auth", tags=["auth"])

REQUEST_MAX, REQUEST_WINDOW = get_limits_from_env("REQUEST_RL", default_max=3, default_window=120)
LOGIN_MAX, LOGIN_WINDOW = get_limits_from_env("LOGIN_RL", default_max=5, default_window=60)

PUBLIC_SITE_URL = os.getenv("PUBLIC_SITE_URL", "http://localhost:8501").rstrip("/")


# =================================================================================
# ✉️ REQUEST-ACCESS
# =================================================================================
@router.post("/request-access")
def request_access(
    payload: schemas.RequestAccessPayload,
    request: Request,
    db: Session = Depends(get_db),
):
    lang = resolve_lang(payload.lang, request.headers.get("accept-language"), email=payload.email)

    if not is_allowed(f"request_access:{client_ip(request)}", REQUEST_MAX, REQUEST_WINDOW):
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail=translate("rate.limited", lang),
            headers={"Retry-After": str(REQUEST_WINDOW)},
        )

    start_time = time.monotonic()
    email_in = (payload.email or "").strip().lower()
    event = events_crud.get_by_slug(db, payload.slug)
    owner = ((event.owner_email if event else None) or "").strip().lower()
    matched = bool(event) and bool(owner) and owner == email_in
    elapsed = int((time.monotonic() - start_time) * 1000)

    if matched:
        logger.info("AUTH/ACCESS → match | slug='{}' | email='{}' | t={}ms", event.slug, mailer.mask_email(email_in), elapsed)
        token = auth.create_magic_token(event_id=event.id, email=email_in)
        magic_url = f"{PUBLIC_SITE_URL}/admin/magic?token={token}"
        try:
            mailer.send_magic_link_email(
                to_email=email_in,
                magic_url=magic_url,
                event_title=event.title,
                lang=lang,
                minutes=auth.MAGIC_LINK_EXPIRE_MINUTES,
                event_date=event.date,
            )
        except Exception as e:
            logger.exception("AUTH/ACCESS → error enviando magic link: {}", e)
    else:
        logger.warning(
            "AUTH/ACCESS → SIN MATCH | slug='{}' | email='{}' | t={}ms",
            payload.slug, mailer.mask_email(email_in), elapsed,
        )

    return {
        "ok": True,
        "message": translate("auth.request_access.neutral", lang),
        "expires_in_sec": auth.MAGIC_LINK_EXPIRE_MINUTES * 60,
    }


# =================================================================================
# 🔓 MAGIC-LOGIN
# =================================================================================
@router.post("/magic-login", response_model=schemas.CoupleToken)
def magic_login(
    payload: schemas.MagicLoginPayload,
    request: Request,
    db: Session = Depends(get_db),
):
    lang = request_lang(request)
    if not is_allowed(f"magic_login:{client_ip(request)}", LOGIN_MAX, LOGIN_WINDOW):
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail=translate("rate.limited", lang),
            headers={"Retry-After": str(LOGIN_WINDOW)},
        )

    invalid = HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=translate("auth.invalid_token", lang))
    try:
        data = auth.decode_magic_token(payload.token)
    except (JWTError, ValueError):
        raise invalid

    event = db.get(models.Event, data["sub"])
    # El dueño pudo cambiar entre la emisión y el canje.
    if not event or (event.owner_email or "").strip().lower() != (data.get("email") or "").lower():
        raise invalid

    logger.info("AUTH/LOGIN → acceso concedido | slug='{}'", event.slug)
    return {
        "access_token": auth.create_access_token(event.id, extra={"slug": event.slug}),
        "token_type": "bearer",
        "event_id": event.id,
        "slug": event.slug,
    }
