"""
Health check router for the JWT signer.
"""
from fastapi import APIRouter, status
from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Health check response schema."""
    status: str


router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse, status_code=status.HTTP_200_OK)
async def health_check() -> HealthResponse:
    """
    Health check endpoint to verify service is running.

    Returns:
        HealthResponse: Object with status "ok" if service is healthy
    """
    return HealthResponse(status="ok")
