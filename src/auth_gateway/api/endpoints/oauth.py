"""OAuth2 authorization code exchange."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Body, Depends, status

from auth_gateway.api.dependencies import get_code_exchanger
from auth_gateway.auth.issuer import OAuthCodeExchanger
from auth_gateway.auth.providers.exceptions import ExchangeFailedError, MissingCodeError
from auth_gateway.core.exceptions import AppException, BadRequestException
from auth_gateway.schemas.auth import OAuthCodeRequest, OAuthTokenResponse


router = APIRouter(prefix="/oAuth", tags=["oauth"])


@router.post(
    "/google",
    response_model=OAuthTokenResponse,
    summary="Exchange a Google authorization code",
    description="Trades a code from the Google popup flow for an access token "
    "usable on the /oAuth routes.",
)
async def exchange_google_code(
    exchanger: Annotated[OAuthCodeExchanger, Depends(get_code_exchanger)],
    payload: Annotated[OAuthCodeRequest | None, Body()] = None,
) -> OAuthTokenResponse:
    try:
        grant = await exchanger.exchange(payload.code if payload else None)
    except MissingCodeError as e:
        raise BadRequestException(e.message) from None
    except ExchangeFailedError as e:
        raise AppException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            error="EXCHANGE_FAILED",
            message=e.message,
        ) from None
    return OAuthTokenResponse(access_token=grant.access_token, expires_in=grant.expires_in)
