"""Self-issued bearer token verifier.

Tokens minted by ``BearerTokenIssuer`` are validated locally against the
server-held secret. No state is kept between requests.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from jose import jwt
from jose.exceptions import ExpiredSignatureError, JWTClaimsError, JWTError
from pydantic import ValidationError

from auth_gateway.auth.credentials import BearerCredential
from auth_gateway.auth.providers.exceptions import (
    ConfigurationError,
    MalformedTokenError,
    MissingCredentialsError,
    TokenExpiredError,
)
from auth_gateway.auth.providers.models import AuthScheme, BearerTokenClaims, Principal
from auth_gateway.observability.logging import get_logger


if TYPE_CHECKING:
    from auth_gateway.auth.credentials import RawCredential

logger = get_logger(__name__)

ACCESS_TOKEN_TYPE = "access"  # noqa: S105


class BearerTokenVerifier:
    """Validates signature, expiry and (optionally) issuer of a JWT.

    Attributes:
        secret_key: HMAC secret shared with the issuer.
        algorithm: JWT signing algorithm.
        issuer: Expected ``iss`` claim, or None to skip the check.
    """

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        issuer: str | None = None,
    ) -> None:
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.issuer = issuer

    @property
    def scheme(self) -> AuthScheme:
        return AuthScheme.BEARER

    async def verify(self, credential: RawCredential) -> Principal:
        if not isinstance(credential, BearerCredential):
            raise MissingCredentialsError

        claims = self.decode(credential.token)
        return Principal(
            scheme=AuthScheme.BEARER,
            subject=claims.sub,
            claims=claims.model_dump(exclude_none=True),
            issued_at=datetime.fromtimestamp(claims.iat, UTC),
            expires_at=datetime.fromtimestamp(claims.exp, UTC),
        )

    def decode(self, token: str) -> BearerTokenClaims:
        """Decode and validate a token.

        Raises:
            TokenExpiredError: If the token is past its ``exp``.
            MalformedTokenError: For any signature, structure or claim failure.
        """
        decode_kwargs: dict[str, Any] = {"algorithms": [self.algorithm]}
        if self.issuer:
            decode_kwargs["issuer"] = self.issuer

        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                options={"require_exp": True, "require_iat": True, "require_sub": True},
                **decode_kwargs,
            )
        except ExpiredSignatureError as e:
            raise TokenExpiredError from e
        except (JWTClaimsError, JWTError) as e:
            raise MalformedTokenError from e

        try:
            claims = BearerTokenClaims.model_validate(payload)
        except ValidationError as e:
            raise MalformedTokenError from e

        # jose accepts a token until one whole second past exp
        if claims.exp <= datetime.now(UTC).timestamp():
            raise TokenExpiredError
        if claims.type != ACCESS_TOKEN_TYPE:
            raise MalformedTokenError
        return claims

    async def initialize(self) -> None:
        if not self.secret_key:
            msg = "JWT secret key is not configured"
            raise ConfigurationError(msg)
        logger.info(
            "BearerTokenVerifier initialized",
            algorithm=self.algorithm,
            issuer_validation=self.issuer is not None,
        )

    async def shutdown(self) -> None:
        logger.debug("BearerTokenVerifier shutdown")
