# weddingsite/main.py

# ================================================================
# 🧱 MODO MANTENIMIENTO (Control temporal desde variable de entorno)
# ================================================================

import os

# Con MAINTENANCE_MODE=1 se levanta una app mínima que responde 503 a todo.
if os.getenv("MAINTENANCE_MODE") == "1":
    from fastapi import FastAPI
    from fastapi.responses import JSONResponse
    from loguru import logger

    app = FastAPI(title="API em manutenção")

    @app.api_route("/{path:path}", methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"])
    async def maintenance_page(path: str):
        """Responde a cualquier ruta y método con mensaje neutro de mantenimiento."""
        return JSONResponse(
            status_code=503,
            content={
                "status": "offline",
                "error": "🌙 O site está em manutenção. Volte mais tarde.",
            },
        )

    logger.warning("🚧 API arrancada en MODO MANTENIMIENTO. Todos los endpoints reales están desactivados.")

else:
    # ================================================================
    # 🚀 APP NORMAL
    # ================================================================
    from contextlib import asynccontextmanager
    from pathlib import Path

    from dotenv import load_dotenv
    from fastapi import FastAPI, Request
    from fastapi.encoders import jsonable_encoder
    from fastapi.exceptions import RequestValidationError
    from fastapi.middleware.cors import CORSMiddleware
    from fastapi.responses import JSONResponse
    from fastapi.staticfiles import StaticFiles
    from loguru import logger

    # El .env se carga ANTES de importar módulos que leen os.getenv al importarse.
    env_path = Path(".") / ".env"
    load_dotenv(dotenv_path=env_path)

    logger.info(
        "[BOOT] DRY_RUN={} | EMAIL_PROVIDER={} | EMAIL_FROM={} | DEFAULT_LANG={}",
        os.getenv("DRY_RUN", "1"),
        os.getenv("EMAIL_PROVIDER", "sendgrid"),
        os.getenv("EMAIL_FROM"),
        os.getenv("DEFAULT_LANG", "pt"),
    )

    from weddingsite import meta, storage
    from weddingsite.db import log_db_path_on_startup
    from weddingsite.routers import admin, auth_routes, owner, public

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        log_db_path_on_startup()
        yield

    app = FastAPI(
        title="Wedding Site API",
        description="Backend multi-tenant de convites de casamento: RSVP, painel dos noivos e do proprietário",
        version="1.0.0",
        lifespan=lifespan,
    )

    _default_origins = "http://localhost:8501,http://127.0.0.1:8501,http://localhost:3000,http://127.0.0.1:3000"
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in os.getenv("CORS_ORIGINS", _default_origins).split(",") if o.strip()],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def _validation_error(request: Request, exc: RequestValidationError):
        """422 con {"error": primer mensaje, "detail": lista completa} para todos los clientes."""
        errors = exc.errors()
        first = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
        return JSONResponse(status_code=422, content={"error": first, "detail": jsonable_encoder(errors)})

    storage.STORAGE_DIR.mkdir(parents=True, exist_ok=True)
    app.mount("/media", StaticFiles(directory=str(storage.STORAGE_DIR)), name="media")

    app.include_router(public.router)
    app.include_router(auth_routes.router)
    app.include_router(admin.router)
    app.include_router(owner.router)
    app.include_router(meta.router)
