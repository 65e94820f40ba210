# weddingsite/meta.py  # Router de metadatos para los front-ends.

from typing import Dict

from fastapi import APIRouter

from weddingsite import storage
from weddingsite.utils.i18n import DEFAULT_LANG, SUPPORTED_LANGS

router = APIRouter(prefix="/api/meta", tags=["meta"])


@router.get("/health")
def health() -> Dict[str, str]:
    return {"status": "ok"}


@router.get("/options")
def get_meta_options() -> Dict[str, object]:
    """Catálogos neutros para que los front-ends traduzcan con t()."""
    return {
        "languages": sorted(SUPPORTED_LANGS),
        "default_lang": DEFAULT_LANG,
        "rsvp_status_filters": ["all", "attending", "declined"],
        "upload_extensions": sorted(ext.lstrip(".") for ext in storage.IMAGE_EXTENSIONS),
        "max_upload_mb": storage.MAX_UPLOAD_MB,
    }
