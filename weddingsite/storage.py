# weddingsite/storage.py
# =================================================================================
# 🗃️ Almacenamiento de archivos (fotos del photo booth, imágenes de tickets)
# ---------------------------------------------------------------------------------
# Guarda bajo STORAGE_DIR/<bucket>/<path> y expone PUBLIC_MEDIA_URL/<bucket>/<path>.
# main.py monta STORAGE_DIR en /media con StaticFiles.
# =================================================================================

import os
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from loguru import logger

STORAGE_DIR = Path(os.getenv("STORAGE_DIR", "media")).resolve()
PUBLIC_MEDIA_URL = os.getenv("PUBLIC_MEDIA_URL", "/media").rstrip("/")
MAX_UPLOAD_MB = int(os.getenv("MAX_UPLOAD_MB", "8"))

IMAGE_EXTENSIONS = {".png", ".jpg", ".jpeg", ".webp"}
CONTENT_TYPE_EXTENSIONS = {
    "image/png": ".png",
    "image/jpeg": ".jpg",
    "image/webp": ".webp",
}

BUCKET_PHOTOS = "photos"
BUCKET_TICKETS = "tickets"


class StorageError(Exception):
    """Error de validación del archivo subido (message_key = clave i18n)."""

    def __init__(self, message_key: str, **params):
        super().__init__(message_key)
        self.message_key = message_key
        self.params = params


def max_upload_bytes() -> int:
    return MAX_UPLOAD_MB * 1024 * 1024


def resolve_extension(filename: Optional[str], content_type: Optional[str]) -> str:
    """Extensión permitida a partir del nombre o, si no trae, del content-type."""
    ext = Path(filename or "").suffix.lower()
    if not ext and content_type:
        ext = CONTENT_TYPE_EXTENSIONS.get(content_type.lower(), "")
    if ext not in IMAGE_EXTENSIONS:
        raise StorageError("upload.invalid_type")
    return ext


def _safe_path(bucket: str, rel_path: str) -> Path:
    base = (STORAGE_DIR / bucket).resolve()
    target = (base / rel_path).resolve()
    if base != target and base not in target.parents:
        raise StorageError("upload.invalid_type")
    return target


def public_url(bucket: str, rel_path: str) -> str:
    return f"{PUBLIC_MEDIA_URL}/{bucket}/{rel_path}"


def save_bytes(bucket: str, rel_path: str, content: bytes) -> str:
    """Escribe el archivo (sobrescribe si existe) y devuelve su URL pública."""
    if len(content) > max_upload_bytes():
        raise StorageError("upload.too_large", mb=MAX_UPLOAD_MB)
    target = _safe_path(bucket, rel_path)
    target.parent.mkdir(parents=True, exist_ok=True)
    with open(target, "wb") as f:
        f.write(content)
    logger.info("Archivo guardado → {}/{} ({} bytes)", bucket, rel_path, len(content))
    return public_url(bucket, rel_path)


def list_files(bucket: str, prefix: str) -> List[dict]:
    """Lista los archivos de <bucket>/<prefix>, más recientes primero."""
    folder = _safe_path(bucket, prefix)
    if not folder.is_dir():
        return []
    items = []
    for p in folder.iterdir():
        if not p.is_file():
            continue
        rel = f"{prefix.rstrip('/')}/{p.name}"
        mtime = datetime.fromtimestamp(p.stat().st_mtime, tz=timezone.utc).replace(tzinfo=None)
        items.append({"path": rel, "url": public_url(bucket, rel), "created_at": mtime})
    items.sort(key=lambda x: x["created_at"], reverse=True)
    return items


def delete_file(bucket: str, rel_path: str) -> bool:
    """Borra un archivo; False si no existía."""
    target = _safe_path(bucket, rel_path)
    if not target.is_file():
        return False
    target.unlink()
    logger.info("Archivo borrado → {}/{}", bucket, rel_path)
    return True


def delete_prefix(bucket: str, prefix: str) -> int:
    """Borra todos los archivos bajo <bucket>/<prefix> (al eliminar un evento)."""
    removed = 0
    for item in list_files(bucket, prefix):
        if delete_file(bucket, item["path"]):
            removed += 1
    return removed
