"""Caller identification.

Resolves the request's bearer token into a Principal. Tokens are minted by
the identity provider; this module only verifies them and reads the
subject and role claims.
"""

from typing import Any

import structlog
from fastapi import Request
from jose import jwt
from jose.exceptions import JWTError

from app.domain.exceptions import UnauthorizedError
from app.domain.value_objects import Principal, Role
from app.infrastructure.config import settings

logger = structlog.get_logger()


def _parse_bearer(auth_header: str | None) -> str | None:
    """Extract the bearer token from the Authorization header.

    Accepts any casing for the scheme ("Bearer", "bearer", ...).
    """
    if not auth_header:
        return None

    parts = auth_header.strip().split(None, 1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None

    token = parts[1].strip()
    return token or None


def decode_token(token: str) -> dict[str, Any]:
    """Verify a token and return its claims.

    Raises:
        JWTError: If the signature, audience or expiry is invalid.
    """
    options = {"verify_aud": settings.jwt_audience is not None}
    return jwt.decode(
        token,
        settings.jwt_secret,
        algorithms=settings.jwt_algorithms_list,
        audience=settings.jwt_audience,
        options=options,
    )


def principal_from_claims(claims: dict[str, Any]) -> Principal:
    """Build a principal from verified claims.

    Raises:
        UnauthorizedError: If the token carries no subject.
    """
    subject = claims.get("sub")
    if not subject:
        raise UnauthorizedError("Token has no subject")
    return Principal(
        subject_id=str(subject),
        role=Role.from_claim(claims.get(settings.role_claim)),
    )


async def get_principal(request: Request) -> Principal:
    """Dependency returning the authenticated caller.

    Raises:
        UnauthorizedError: If the token is missing or invalid.
    """
    token = _parse_bearer(request.headers.get("Authorization"))
    if not token:
        raise UnauthorizedError("Missing bearer token")

    try:
        claims = decode_token(token)
    except JWTError as e:
        # Keep response generic; log retains details for operators.
        logger.info("Token validation failed", error=str(e))
        raise UnauthorizedError("Invalid token") from e

    principal = principal_from_claims(claims)
    structlog.contextvars.bind_contextvars(subject_id=principal.subject_id)
    return principal
