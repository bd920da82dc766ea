import json
import logging
import sys
import time
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, Request
from starlette.middleware.base import BaseHTTPMiddleware

from jwt_signer.config import Environment, Settings, settings as default_settings

# Configure logger
logger = logging.getLogger("jwt_signer")

# Request ID for correlating log entries from the same request
request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

# Attributes present on every LogRecord; anything else was passed via `extra`.
_RESERVED_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__
) | {"message", "asctime"}


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Middleware to add request ID to each request"""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        token = request_id_var.set(request_id)
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)
        response.headers["X-Request-ID"] = request_id
        return response


class JsonFormatter(logging.Formatter):
    """Custom JSON formatter for structured logging"""

    def __init__(self, environment: Environment = Environment.PRODUCTION):
        super().__init__()
        self.environment = environment

    def format(self, record: logging.LogRecord) -> str:
        log_record = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "environment": str(self.environment.value),
        }
        if request_id := request_id_var.get():
            log_record["request_id"] = request_id
        if record.exc_info:
            log_record["exception"] = self.formatException(record.exc_info)
        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and key not in log_record:
                log_record[key] = value
        return json.dumps(log_record, default=str)


def setup_logging(app: FastAPI, settings: Settings = default_settings) -> None:
    """Configure logging for the application"""
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    if root_logger.hasHandlers():
        root_logger.handlers.clear()

    if settings.is_production():
        formatter = JsonFormatter(settings.environment)
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(levelname)s - %(name)s - %(message)s"
        )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)
    root_logger.setLevel(log_level)

    logging.getLogger("jwt_signer").setLevel(log_level)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    app.add_middleware(RequestIdMiddleware)

    logger.info(
        f"Logging configured with level {settings.log_level} "
        f"and {'JSON' if settings.is_production() else 'plain text'} format"
    )


class LoggingMiddleware(BaseHTTPMiddleware):
    """Middleware to log request and response information"""

    async def dispatch(self, request: Request, call_next):
        if request.url.path in ["/health"]:
            return await call_next(request)

        start_time = time.time()

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(f"Request failed: {e}", exc_info=True)
            raise

        duration_ms = (time.time() - start_time) * 1000
        logger.info(
            "Request processed",
            extra={
                "request": {
                    "method": request.method,
                    "path": request.url.path,
                    "client_host": request.client.host if request.client else None,
                },
                "response": {
                    "status_code": response.status_code,
                    "duration_ms": round(duration_ms, 2),
                },
            },
        )
        return response
