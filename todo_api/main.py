# PURPOSE: build the FastAPI application.
# - create_app(settings) builds the AppContext (connection pool) once and attaches it to app.state.
# - Run with `todo-api` (serve()) or `uvicorn todo_api.main:create_app --factory`.

import logging
import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import CollectorRegistry
from prometheus_fastapi_instrumentator import Instrumentator
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from sqlalchemy import text

from .api.errors import register_exception_handlers
from .api.v1.router import api_router
from .config import Settings, settings as default_settings
from .logging_utils import setup_logging
from .rate_limit import limiter, _rate_limit_exceeded_handler
from .state import AppContext

logger = logging.getLogger(__name__)

tags_metadata = [
    {"name": "users", "description": "Registration: issue an API key for a new account."},
    {"name": "tasks", "description": "Task management: paged list and CRUD, scoped to the API key owner."},
]


def create_app(settings: Settings | None = None) -> FastAPI:
    """Application factory: one context (and connection pool) per app instance."""
    settings = settings or default_settings
    setup_logging(settings.LOG_LEVEL)
    context = AppContext.build(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """App startup/shutdown lifecycle."""
        logger.info("Serving todo API on %s", settings.bind_address)
        try:
            yield
        finally:
            # --- Shutdown ---
            context.close()

    app = FastAPI(
        title="Todo API",
        version="1.0.0",
        description=(
            "Multi-tenant to-do list API exposed under /v1. "
            f"Register at /v1/users/register and send the returned key in the {settings.API_KEY_HEADER} header."
        ),
        openapi_tags=tags_metadata,
        lifespan=lifespan,
    )
    app.state.context = context

    @app.get("/health")
    def health():
        """Simple healthcheck endpoint."""
        return {"status": "ok"}

    # --- Observability: liveness, readiness, metrics ---

    @app.get("/live")
    def live():
        return {"status": "live"}

    @app.get("/ready")
    def ready():
        try:
            with context.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return {"status": "ready"}
        except Exception as exc:
            raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="not ready") from exc

    # Versioned JSON API
    app.include_router(api_router)

    # Unified error handlers
    register_exception_handlers(app)

    # Rate limiting (global middleware + handler)
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    # Request ID + access log middleware
    @app.middleware("http")
    async def request_id_and_logging(request: Request, call_next):
        start = time.perf_counter()
        incoming = request.headers.get(settings.REQUEST_ID_HEADER)
        req_id = incoming or uuid.uuid4().hex
        request.state.request_id = req_id
        response = await call_next(request)
        response.headers.setdefault(settings.REQUEST_ID_HEADER, req_id)
        duration_ms = int((time.perf_counter() - start) * 1000)
        logging.getLogger("todo_api.request").info(
            "method=%s path=%s status=%s duration_ms=%s request_id=%s",
            request.method,
            request.url.path,
            getattr(response, "status_code", "-"),
            duration_ms,
            req_id,
        )
        return response

    # --- Security: CORS and basic hardening headers ---

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ALLOW_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def security_headers(request: Request, call_next):
        response = await call_next(request)
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("Referrer-Policy", "no-referrer")
        return response

    # Expose Prometheus metrics at /metrics (registry per app instance)
    Instrumentator(registry=CollectorRegistry()).instrument(app).expose(app, include_in_schema=False)

    return app


def serve() -> None:
    """Console entry point: run the API with uvicorn on SERVER_HOST:SERVER_PORT."""
    import uvicorn

    app = create_app(default_settings)
    uvicorn.run(app, host=default_settings.SERVER_HOST, port=default_settings.SERVER_PORT)
