"""
JWT signer - application entry point.

Run with ``uvicorn jwt_signer.main:create_app --factory``.
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from jwt_signer.config import Settings, settings as default_settings
from jwt_signer.logging_config import LoggingMiddleware, logger, setup_logging
from jwt_signer.middleware import JwtSignerMiddleware
from jwt_signer.routers.health_router import router as health_router
from jwt_signer.routers.token_router import router as token_router
from jwt_signer.signer import JwtSigner


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle manager."""
    logger.info("Application startup complete.")
    yield
    logger.info("Application shutdown complete.")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application.

    The signer is built before the app so that an invalid configuration
    stops the process instead of failing every request.

    Raises:
        ConfigurationError: If the signer configuration is invalid
    """
    settings = settings or default_settings
    signer = JwtSigner.from_settings(settings)

    app = FastAPI(
        title="JWT Signer",
        description="Issues a short-lived signed token for every request",
        version="0.1.0",
        root_path=settings.root_path,
        lifespan=lifespan,
    )
    app.state.published_name = signer.published_name
    app.state.redirect_url = settings.redirect_url

    # Middleware added last runs first.
    app.add_middleware(
        JwtSignerMiddleware,
        signer=signer,
        response_header=settings.response_header,
    )
    app.add_middleware(LoggingMiddleware)
    setup_logging(app, settings)

    app.include_router(health_router, tags=["Health"])
    app.include_router(token_router)

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        logger.error(f"HTTPException: {exc.detail}")
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})

    return app
