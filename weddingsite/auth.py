# weddingsite/auth.py  # Módulo de autenticación (JWT).

# =================================================================================
# 🔐 MÓDULO DE AUTENTICACIÓN (JWT)
# ---------------------------------------------------------------------------------
# - Token 'magic': viaja por email, corto, lleva event_id (sub) + email del dueño.
# - Token 'access': sesión del panel de la pareja, sub = event_id.
# - Usa python-jose (jose.jwt) para firmar/decodificar.
# =================================================================================

# 🐍 Importaciones
import os
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import JWTError, jwt

# ⚙️ Configuración de seguridad (desde .env con defaults de desarrollo)
SECRET_KEY = os.getenv("SECRET_KEY", "dev_secret")
ALGORITHM = os.getenv("ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "1440"))
MAGIC_LINK_EXPIRE_MINUTES = int(os.getenv("MAGIC_LINK_EXPIRE_MINUTES", "15"))

if not SECRET_KEY:
    raise ValueError("SECRET_KEY no está configurado.")
if not ALGORITHM:
    raise ValueError("ALGORITHM no está configurado.")


def _encode(payload: Dict[str, Any]) -> str:
    return jwt.encode(payload, SECRET_KEY, algorithm=ALGORITHM)


def _timed_payload(minutes: int) -> Dict[str, Any]:
    now = datetime.now(timezone.utc)
    exp = now + timedelta(minutes=minutes)
    return {
        "iat": int(now.timestamp()),
        "exp": int(exp.timestamp()),
    }


# =================================================================================
# ✨ CREACIÓN DE TOKENS
# =================================================================================
def create_access_token(event_id: str, extra: Optional[Dict[str, Any]] = None) -> str:
    """Crea un token de sesión (tipo 'access') para el panel de un evento."""
    payload = _timed_payload(ACCESS_TOKEN_EXPIRE_MINUTES)
    payload.update({"sub": event_id, "type": "access"})
    if extra:
        payload.update(extra)
    return _encode(payload)


def create_magic_token(event_id: str, email: str) -> str:
    """Crea un token corto de tipo 'magic' para el login por enlace."""
    payload = _timed_payload(MAGIC_LINK_EXPIRE_MINUTES)
    payload.update({"sub": event_id, "type": "magic", "email": email})
    return _encode(payload)


# =================================================================================
# 🔎 DECODIFICACIÓN/VERIFICACIÓN
# =================================================================================
def _decode_typed(token: str, expected_type: str) -> Dict[str, Any]:
    data = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    if data.get("type") != expected_type:
        raise ValueError(f"Invalid token type for {expected_type} token")
    if not data.get("sub"):
        raise ValueError("Token without subject")
    return data


def decode_access_token(token: str) -> Dict[str, Any]:
    """Decodifica un token 'access'. Lanza JWTError/ValueError si no es válido."""
    return _decode_typed(token, "access")


def decode_magic_token(token: str) -> Dict[str, Any]:
    """Decodifica un token 'magic'. Lanza JWTError/ValueError si no es válido."""
    return _decode_typed(token, "magic")


def verify_access_token(token: str) -> Optional[dict]:
    """Devuelve el payload de un token 'access' válido o None."""
    try:
        return decode_access_token(token)
    except (JWTError, ValueError):
        return None
