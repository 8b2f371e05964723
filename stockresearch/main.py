"""FastAPI application for the stock research API.

Run with:
    python -m stockresearch.main
    # → http://localhost:8000/health
    # → http://localhost:8000/docs  (Swagger UI)
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from stockresearch.api.routes import router
from stockresearch.config import Settings, settings
from stockresearch.errors import ResearchError
from stockresearch.middleware.security import SecurityHeadersMiddleware, parse_cors_origins
from stockresearch.providers.client import ProviderClient
from stockresearch.schemas.common import ErrorBody, Health

logger = logging.getLogger("stockresearch.main")


def create_app(config: Settings = settings) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Stock research API starting (env=%s)", config.app_env)
        app.state.provider_client = ProviderClient(config)
        try:
            yield
        finally:
            await app.state.provider_client.aclose()
            logger.info("Stock research API shutting down")

    app = FastAPI(
        title="Stock Research API",
        description="Aggregated fundamentals, dividends, news and valuations from FMP, Finnhub, "
        "Alpha Vantage, CNN, API Ninjas and FRED.",
        version=config.app_version,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=parse_cors_origins(config.allowed_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(SecurityHeadersMiddleware, enabled=config.enable_security_headers)

    # ── Errors ────────────────────────────────────────────────────────────────

    @app.exception_handler(ResearchError)
    async def research_error_handler(request: Request, exc: ResearchError):
        return JSONResponse(
            ErrorBody(error=exc.error, details=exc.details).model_dump(),
            status_code=exc.status_code,
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            ErrorBody(error="Internal server error").model_dump(), status_code=500
        )

    # ── Health ────────────────────────────────────────────────────────────────

    @app.get("/health", response_model=Health)
    async def health():
        return Health(status="ok", version=config.app_version)

    app.include_router(router)
    return app


app = create_app()


# ── Run via uvicorn ───────────────────────────────────────────────────────────

if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    uvicorn.run(
        "stockresearch.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=(settings.app_env == "development"),
    )
