# weddingsite/rate_limit.py

# =================================================================================
# 🚦 Rate limit ligero en memoria
# ---------------------------------------------------------------------------------
# - Ventana deslizante en memoria por clave (IP + ruta [+ slug]).
# - Pensado para un único proceso uvicorn; con varias instancias hace falta un
#   limitador compartido delante (reverse-proxy).
# - <PREFIX>_MAX <= 0 desactiva el límite.
# =================================================================================

import os
import time
from collections import deque
from typing import Dict

from fastapi import Request
from loguru import logger

# Estructura en memoria: clave → deque de timestamps (segundos)
_BUCKETS: Dict[str, deque] = {}


def _now() -> float:
    return time.time()


def is_allowed(key: str, max_req: int, window_s: int) -> bool:
    """Devuelve True si la acción está permitida para 'key' según (max_req/window_s)."""
    if max_req <= 0:
        return True

    bucket = _BUCKETS.get(key)
    if bucket is None:
        bucket = deque()
        _BUCKETS[key] = bucket

    now = _now()
    cutoff = now - window_s
    while bucket and bucket[0] <= cutoff:
        bucket.popleft()

    if len(bucket) >= max_req:
        logger.warning("Rate limit hit for key='{}' ({}/{} in {}s)", key, len(bucket), max_req, window_s)
        return False

    bucket.append(now)
    return True


def get_limits_from_env(prefix: str, default_max: int, default_window: int) -> tuple[int, int]:
    """Lee {prefix}_MAX y {prefix}_WINDOW (segundos) del entorno; aplica defaults si faltan o no son enteros."""
    try:
        max_req = int(os.getenv(f"{prefix}_MAX", str(default_max)))
        window = int(os.getenv(f"{prefix}_WINDOW", str(default_window)))
    except ValueError:
        max_req, window = default_max, default_window
    return max_req, window


def client_ip(request: Request) -> str:
    """IP del cliente considerando X-Forwarded-For (primer salto)."""
    xff = request.headers.get("x-forwarded-for")
    if xff:
        return xff.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def reset() -> None:
    """Vacía todos los contadores (útil en tests)."""
    _BUCKETS.clear()
