from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from backoffice.api.v1.router import router as api_v1_router
from backoffice.config.settings import settings
from backoffice.core.exceptions import BaseAppException
from backoffice.core.logging import get_logger, setup_logging
from backoffice.core.middleware import register_middlewares
from backoffice.db.init_db import init_db

logger = get_logger(__name__)


async def app_exception_handler(request: Request, exc: BaseAppException) -> JSONResponse:
    """Render application exceptions as {"error": {...}}."""
    logger.warning(
        f"{exc.error_code.value}: {exc.message}",
        extra={"path": request.url.path, "status_code": exc.status_code},
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def create_app() -> FastAPI:
    """
    Application factory for the FastAPI app.

    - Configures title, version, debug mode from Settings.
    - Registers CORS, core middleware and the application exception handler.
    - Includes the versioned API router under /api/v1.
    """
    setup_logging()

    app = FastAPI(
        title=settings.APP_NAME,
        debug=settings.DEBUG,
        version=settings.API_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS or ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_middlewares(app)

    app.add_exception_handler(BaseAppException, app_exception_handler)

    app.include_router(api_v1_router, prefix=settings.API_V1_STR)

    @app.on_event("startup")
    async def on_startup() -> None:
        if not settings.is_production():
            # Schema migrations are managed outside the app in production
            init_db()

    return app


app = create_app()
