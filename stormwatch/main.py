"""
Stormwatch — FastAPI Application.

Run: uvicorn stormwatch.main:app --host 0.0.0.0 --port 3000

Routes:
  - POST /api/v1/ingest              ← stations / gateways push readings here
  - GET  /api/v1/status/{station_id}
  - GET  /api/v1/stations
  - POST /api/v1/subscribe
  - POST /api/v1/verify-access
  - GET  / and /health               ← liveness
"""

from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from stormwatch.config import Settings, settings as default_settings
from stormwatch.exceptions import StormwatchError
from stormwatch.logging_config import configure_logging
from stormwatch.middleware.error_handler import ErrorHandlerMiddleware, stormwatch_error_response
from stormwatch.middleware.request_context import RequestContextMiddleware
from stormwatch.middleware.security_headers import SecurityHeadersMiddleware
from stormwatch.monitoring.clock import Clock
from stormwatch.monitoring.integrations import build_integrations
from stormwatch.monitoring.service import StormMonitorService
from stormwatch.services.subscribers import SubscriberStore

from stormwatch.api.routers.ingest import router as ingest_router
from stormwatch.api.routers.status import router as status_router
from stormwatch.api.routers.subscribe import router as subscribe_router
from stormwatch.auth.router import router as auth_router

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan — startup and shutdown."""
    cfg: Settings = app.state.settings
    logger.info("stormwatch_starting", version=cfg.app_version, environment=cfg.environment)
    if not cfg.api_key:
        logger.warning("api_key_not_set", msg="Ingest endpoint will reject every request")
    yield
    await app.state.monitor_service.aclose()
    logger.info("stormwatch_shutdown")


def create_app(
    app_settings: Optional[Settings] = None,
    service: Optional[StormMonitorService] = None,
    subscriber_store: Optional[SubscriberStore] = None,
    clock: Optional[Clock] = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    cfg = app_settings or default_settings

    subscriber_store = subscriber_store or SubscriberStore(cfg.subscribers_file)
    if service is None:
        service = StormMonitorService.from_settings(
            cfg,
            integrations=build_integrations(cfg, subscriber_store),
            clock=clock,
        )

    app = FastAPI(
        title=cfg.app_name,
        description=(
            "Rainfall intensity monitoring with IDF-based storm classification "
            "and debounced alerting."
        ),
        version=cfg.app_version,
        lifespan=lifespan,
        docs_url="/docs" if cfg.debug else None,
        redoc_url=None,
        openapi_tags=[
            {"name": "health", "description": "Liveness probe"},
            {"name": "ingest", "description": "Rainfall reading ingestion"},
            {"name": "status", "description": "Per-station storm status"},
            {"name": "subscribers", "description": "E-mail alert subscriptions"},
            {"name": "auth", "description": "Front-end access gate"},
        ],
    )
    app.state.settings = cfg
    app.state.monitor_service = service
    app.state.subscriber_store = subscriber_store

    # ── Middleware (last added = outermost) ───────────────────────────
    app.add_middleware(ErrorHandlerMiddleware)
    app.add_middleware(RequestContextMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ── Error shapes ──────────────────────────────────────────────────
    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        content = exc.detail if isinstance(exc.detail, dict) else {"error": exc.detail}
        return JSONResponse(status_code=exc.status_code, content=content, headers=exc.headers)

    app.add_exception_handler(StormwatchError, stormwatch_error_response)

    # ── Routes ────────────────────────────────────────────────────────
    app.include_router(ingest_router)
    app.include_router(status_router)
    app.include_router(subscribe_router)
    app.include_router(auth_router)

    @app.get("/", tags=["health"])
    @app.get("/health", tags=["health"])
    async def health():
        """Liveness probe — is the process alive?"""
        return {
            "status": "ok",
            "version": cfg.app_version,
            "service": "stormwatch",
        }

    return app


configure_logging()

# Application instance
app = create_app()
