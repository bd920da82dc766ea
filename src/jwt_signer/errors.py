"""
Exception hierarchy for the JWT signer.

Configuration problems are raised once, while the signer is being built.
Precondition and signing problems are raised per request and turned into an
error response by the middleware.
"""
from typing import Optional

from fastapi import status


class JwtSignerError(Exception):
    """Base exception for all signer errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)


class ConfigurationError(JwtSignerError):
    """Raised for a malformed claim template or signer configuration."""


class PreconditionError(JwtSignerError):
    """Raised when duration or secret cannot be resolved for a request."""


class SigningError(JwtSignerError):
    """Raised when the token cannot be signed."""
