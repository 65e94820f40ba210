# weddingsite/core/responses.py
# =================================================================================
# 🧾 Traducción de errores de dominio a respuestas HTTP
# - Público: JSONResponse {"error": "<mensaje localizado>"}.
# - Paneles: HTTPException(detail="<mensaje>") al estilo FastAPI.
# =================================================================================

from typing import Optional

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse

from weddingsite.crud.errors import DomainError
from weddingsite.utils.i18n import resolve_lang, translate


def request_lang(request: Request, payload_lang: Optional[str] = None) -> str:
    """Idioma del llamante: lang explícito > Accept-Language > DEFAULT_LANG."""
    return resolve_lang(
        payload_lang or request.query_params.get("lang"),
        request.headers.get("accept-language"),
    )


def error_json(status_code: int, key: str, lang: str, **params) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": translate(key, lang, **params)})


def domain_error_json(exc: DomainError, lang: str) -> JSONResponse:
    return error_json(exc.status_code, exc.message_key, lang, **exc.params)


def domain_http_exception(exc: DomainError, lang: str = "pt") -> HTTPException:
    return HTTPException(status_code=exc.status_code, detail=translate(exc.message_key, lang, **exc.params))
