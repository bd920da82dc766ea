"""
Routes consuming the token issued by ``JwtSignerMiddleware``.
"""
from fastapi import APIRouter, HTTPException, Request, status
from fastapi.responses import RedirectResponse
from pydantic import BaseModel

from jwt_signer.middleware import get_replacer

router = APIRouter(tags=["Token"])


class TokenResponse(BaseModel):
    token: str


@router.get("/token", response_model=TokenResponse)
async def read_token(request: Request) -> TokenResponse:
    """Return the token issued for this request."""
    token = get_replacer(request).get(request.app.state.published_name)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="No token was issued for this request",
        )
    return TokenResponse(token=token)


@router.get("/redirect")
async def redirect(request: Request) -> RedirectResponse:
    """Redirect to the configured URL, with placeholders (e.g. the token) filled in."""
    redirect_url = request.app.state.redirect_url
    if not redirect_url:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="No redirect configured"
        )
    location = get_replacer(request).expand(redirect_url)
    return RedirectResponse(location, status_code=status.HTTP_302_FOUND)
