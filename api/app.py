"""
FastAPI application factory.

Usage:
    python -m api.app                    # Dev server on port 8000
    TREASURY_API_BASE_URL=http://localhost:9000/api python -m api.app

OpenAPI docs available at http://localhost:8000/docs after starting.

Two route groups are mounted under /api:
  - pass-through proxies for the four upstream resources, returned verbatim
    with per-resource Cache-Control headers;
  - /api/views/* derived views computed from the periodic cache.

Structured JSON logging is enabled with APP_LOG_FORMAT=json and allowed CORS
origins come from APP_CORS_ORIGINS.
"""

import json
import logging
import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.models import ErrorResponse, HealthOut
from api.routes import upstream, views
from treasury.client import TreasuryClient
from treasury.resources import create_cache
from utils.cache import PeriodicCache
from utils.config import AppConfig

# ── Configuration ─────────────────────────────────────────────────────────────
_cfg = AppConfig.from_env()

# ── Structured JSON logging ───────────────────────────────────────────────────


class _JsonFormatter(logging.Formatter):
    """Emit log records as newline-delimited JSON."""

    def format(self, record: logging.LogRecord) -> str:
        data: dict = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in ("method", "path", "status", "duration_ms", "request_id"):
            if hasattr(record, key):
                data[key] = getattr(record, key)
        if record.exc_info:
            data["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(data)


_logger = logging.getLogger("treasury_api")
_handler = logging.StreamHandler()
if _cfg.log_format == "json":
    _handler.setFormatter(_JsonFormatter())
else:
    _handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")
    )
logging.basicConfig(handlers=[_handler], level=logging.INFO, force=True)

_SLOW_REQUEST_MS = 1000


def create_app(client: TreasuryClient | None = None,
               cache: PeriodicCache | None = None,
               start_timers: bool = True) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        client: Upstream client override (tests pass a fake).
        cache: Periodic cache override; built from *client* when omitted.
        start_timers: Arm the periodic refresh timers on startup.

    Returns:
        Configured FastAPI application instance.
    """
    client = client or TreasuryClient(_cfg)
    cache = cache or create_cache(client)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Arm refresh timers on startup; tear the cache down on shutdown."""
        if start_timers:
            cache.start()
            _logger.info("cache timers armed resources=%s", ",".join(cache.names))
        try:
            yield
        finally:
            cache.close()
            client.close()

    app = FastAPI(
        title="Cardano Treasury Explorer API",
        summary="Pass-through and derived views over the Cardano treasury API.",
        description=(
            "## Cardano Treasury Explorer API\n\n"
            "Mirrors the public Cardano treasury API and adds presentation-ready "
            "views for dashboards.\n\n"
            "### Key concepts\n"
            "- **TRSC** (Treasury Reserve Smart Contract) routes funds to projects.\n"
            "- **PSSC** (Project-Specific Smart Contract) holds one vendor's budget.\n"
            "- **Amounts** are in ADA (₳).\n\n"
            "### Data freshness\n"
            "Derived views read from an in-memory cache refreshed every "
            "1-10 minutes per resource. Responses carry `stale` and `error` "
            "fields so a failed refresh never hides the last good snapshot."
        ),
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_tags=[
            {
                "name": "upstream",
                "description": "Verbatim upstream payloads with CDN cache headers.",
            },
            {
                "name": "views",
                "description": "Stat cards, contract explorer, timeline, graph, treemap and calendar.",
            },
            {
                "name": "meta",
                "description": "Health check and cache status.",
            },
        ],
    )
    app.state.client = client
    app.state.cache = cache

    # ── CORS middleware ───────────────────────────────────────────────────────
    app.add_middleware(
        CORSMiddleware,
        allow_origins=_cfg.cors_origins,
        allow_credentials=False,
        allow_methods=["GET", "HEAD", "OPTIONS"],
        allow_headers=["*"],
    )

    # ── Request logging middleware ────────────────────────────────────────────
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Tag each request with an ID and log method, path, status and timing."""
        request_id = str(uuid.uuid4())[:8]
        start = time.monotonic()
        path = request.url.path

        response = await call_next(request)
        duration_ms = (time.monotonic() - start) * 1000
        response.headers["X-Request-ID"] = request_id

        if _cfg.log_format == "json":
            _logger.info(
                "request",
                extra={
                    "method": request.method,
                    "path": path,
                    "status": response.status_code,
                    "duration_ms": round(duration_ms, 1),
                    "request_id": request_id,
                },
            )
        else:
            _logger.info(
                "method=%s path=%s status=%d duration_ms=%.1f rid=%s",
                request.method, path, response.status_code, duration_ms, request_id,
            )
        if duration_ms > _SLOW_REQUEST_MS:
            _logger.warning(
                "slow_request method=%s path=%s duration_ms=%.1f",
                request.method, path, duration_ms,
            )
        return response

    # ── Error handling ────────────────────────────────────────────────────────
    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        """Catch unhandled exceptions and return JSON instead of HTML traceback."""
        _logger.exception("unhandled error path=%s", request.url.path)
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(
                error="Internal server error",
                detail=str(exc),
                status_code=500,
            ).model_dump(),
        )

    # ── Health check ──────────────────────────────────────────────────────────
    @app.get("/health", tags=["meta"], summary="Health check", response_model=HealthOut)
    def health():
        """Report per-resource cache state.

        Status is ``ok`` when every resource holds a value and its last
        refresh succeeded, ``degraded`` otherwise.  Never calls upstream.
        """
        resources = cache.stats()
        healthy = all(r["has_value"] and r["error"] is None for r in resources.values())
        return {
            "status": "ok" if healthy else "degraded",
            "upstream": client.base_url,
            "resources": resources,
        }

    # ── Register routers ──────────────────────────────────────────────────────
    prefix = "/api"
    app.include_router(upstream.router, prefix=prefix)
    app.include_router(views.router,    prefix=prefix)

    return app


# Singleton instance for uvicorn
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "api.app:app",
        host=_cfg.api_host,
        port=_cfg.api_port,
        reload=True,
        log_level="info",
    )
