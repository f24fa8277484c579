from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from chatgate.adapters.base import TextProvider
from chatgate.adapters.gemini import GeminiClient
from chatgate.api.routes import router as api_router
from chatgate.core.config import GatewaySettings, load_settings
from chatgate.core.context import AppContext
from chatgate.core.errors import GatewayError
from chatgate.core.logging import setup_logging
from chatgate.core.registry import SessionRegistry

# Load .env before create_app reads settings from the environment
load_dotenv()

logger = logging.getLogger(__name__)


async def gateway_error_handler(request: Request, exc: GatewayError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    exc_str = "; ".join(
        f"{'.'.join(str(p) for p in e.get('loc', ()) if p != 'body')}: {e.get('msg')}"
        for e in exc.errors()
    )
    logger.warning("validation error | path=%s | error=%s", request.url.path, exc_str)
    return JSONResponse(status_code=400, content={"error": f"Invalid request: {exc_str}"})


def create_app(
    settings: Optional[GatewaySettings] = None,
    provider: Optional[TextProvider] = None,
    registry: Optional[SessionRegistry] = None,
) -> FastAPI:
    """
    Build the FastAPI app around one AppContext.

    Tests pass a fake `provider`; production gets a GeminiClient built from
    settings.
    """
    settings = settings or load_settings()
    setup_logging(settings.log_level)

    if provider is None:
        provider = GeminiClient(base_url=settings.base_url, timeout_s=settings.timeout_s)

    app = FastAPI(title="chatgate", version="0.1.0")
    app.state.ctx = AppContext.build(settings, provider, registry)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(GatewayError, gateway_error_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    app.include_router(api_router)

    # Optional browser client; mounted last so /api/* wins
    static_dir = Path(settings.static_dir)
    if static_dir.is_dir():
        app.mount("/", StaticFiles(directory=static_dir, html=True), name="static")
        logger.info("serving static client from %s", static_dir.resolve())

    return app


def main() -> None:
    """Console entry point. For uvicorn directly: `uvicorn --factory chatgate.app:create_app`."""
    import uvicorn

    app = create_app()
    settings = app.state.ctx.settings
    logger.info("Server running on port %s", settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":  # pragma: no cover
    main()
