"""Self-issued bearer token login."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from auth_gateway.api.dependencies import get_bearer_issuer
from auth_gateway.auth.issuer import BearerTokenIssuer
from auth_gateway.auth.providers.exceptions import InvalidCredentialsError
from auth_gateway.core.exceptions import UnauthorizedException
from auth_gateway.schemas.auth import LoginRequest, TokenResponse


router = APIRouter(prefix="/jwt", tags=["jwt"])


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Log in and receive a bearer token",
    description="Checks the username/password against the Basic credential "
    "source and returns a signed token for the /jwt routes.",
)
async def login(
    credentials: LoginRequest,
    issuer: Annotated[BearerTokenIssuer, Depends(get_bearer_issuer)],
) -> TokenResponse:
    try:
        issued = await issuer.issue(credentials.username, credentials.password)
    except InvalidCredentialsError as e:
        raise UnauthorizedException(e.message, challenge="Bearer") from None
    return TokenResponse(token=issued.token, expires_in=issued.expires_in)
