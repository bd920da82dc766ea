"""
Middleware that issues a fresh token for every request.

The token is published into the request's replacer (``request.state.replacer``)
so that later stages, such as header injection or redirects, can reference it
through a placeholder.
"""

import logging
from typing import Optional

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from jwt_signer.errors import JwtSignerError
from jwt_signer.replacer import Replacer
from jwt_signer.signer import JwtSigner

logger = logging.getLogger(__name__)


def get_replacer(request: Request) -> Replacer:
    """Return the replacer for this request, creating it if no stage has yet."""
    repl = getattr(request.state, "replacer", None)
    if repl is None:
        repl = Replacer.for_request(request)
        request.state.replacer = repl
    return repl


class JwtSignerMiddleware(BaseHTTPMiddleware):
    def __init__(
        self,
        app: ASGIApp,
        signer: JwtSigner,
        response_header: Optional[str] = None,
        exclude_paths: tuple = ("/health",),
    ):
        super().__init__(app)
        self.signer = signer
        self.response_header = response_header
        self.exclude_paths = exclude_paths

    async def dispatch(self, request: Request, call_next):
        if request.url.path in self.exclude_paths:
            return await call_next(request)

        logger.debug(
            "Run",
            extra={"path": request.url.path, "query": request.url.query},
        )

        repl = get_replacer(request)
        try:
            token = self.signer.sign(repl)
        except JwtSignerError as e:
            logger.error(f"Token issuance failed: {e.message}")
            return JSONResponse(status_code=e.status_code, content={"detail": e.message})

        response = await call_next(request)
        if self.response_header:
            response.headers[self.response_header] = token
        return response
