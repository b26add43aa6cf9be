"""Bearer-token authorization for role-restricted routes."""

from dataclasses import dataclass
from functools import lru_cache
from typing import Any

import jwt
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.core.config import settings
from app.core.exceptions import ForbiddenError, MalformedCredentialError, UnauthenticatedError
from app.core.logging import get_logger

logger = get_logger(__name__)

ROLE_CLAIM = "custom:role"

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class AuthenticatedUser:
    """Identity extracted from a bearer token."""

    id: str
    role: str


@lru_cache(maxsize=4)
def _jwks_client(jwks_url: str) -> jwt.PyJWKClient:
    return jwt.PyJWKClient(jwks_url)


def decode_claims(token: str) -> dict[str, Any]:
    """
    Decode the claims of a bearer token.

    Without a configured key set the signature is NOT verified and any
    well-formed token is accepted. Setting JWT_JWKS_URL switches to verifying
    the signature against the identity provider's published keys.

    Raises:
        MalformedCredentialError: If the token cannot be decoded
        UnauthenticatedError: If signature verification is enabled and fails

    """
    if not settings.JWT_JWKS_URL:
        try:
            return jwt.decode(token, options={"verify_signature": False})
        except jwt.PyJWTError as exc:
            logger.warning("Failed to decode token: %s", exc)
            raise MalformedCredentialError() from exc

    try:
        signing_key = _jwks_client(settings.JWT_JWKS_URL).get_signing_key_from_jwt(token)
        return jwt.decode(
            token,
            signing_key.key,
            algorithms=["RS256"],
            audience=settings.JWT_AUDIENCE,
            options={"verify_aud": settings.JWT_AUDIENCE is not None},
        )
    except jwt.InvalidSignatureError as exc:
        # Subclass of DecodeError, but a forged token is unauthenticated
        logger.warning("Rejected token signature: %s", exc)
        raise UnauthenticatedError("Could not validate credentials") from exc
    except jwt.DecodeError as exc:
        logger.warning("Failed to decode token: %s", exc)
        raise MalformedCredentialError() from exc
    except jwt.PyJWTError as exc:
        logger.warning("Rejected token: %s", exc)
        raise UnauthenticatedError("Could not validate credentials") from exc


def require_roles(*allowed_roles: str):
    """Build a dependency admitting only callers whose role claim is allowed."""
    allowed = {role.lower() for role in allowed_roles}

    def dependency(
        request: Request,
        credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    ) -> AuthenticatedUser:
        if credentials is None or not credentials.credentials:
            raise UnauthenticatedError()

        claims = decode_claims(credentials.credentials)
        user = AuthenticatedUser(
            id=str(claims.get("sub") or ""),
            role=str(claims.get(ROLE_CLAIM) or ""),
        )
        request.state.user = user

        if user.role.lower() not in allowed:
            logger.debug("Role %r denied, allowed: %s", user.role, sorted(allowed))
            raise ForbiddenError()
        return user

    return dependency


def ensure_same_user(user: AuthenticatedUser, cognito_id: str) -> None:
    """Reject a caller acting on a profile other than their own."""
    if user.id != cognito_id:
        logger.debug("User %r denied access to profile %r", user.id, cognito_id)
        raise ForbiddenError("Cannot access another user's profile")
