import logging
from datetime import UTC, datetime, timedelta

import jwt
from fastapi import Request

from backoffice.access.guard import require_principal
from backoffice.access.principal import Principal
from backoffice.core.config import settings

logger = logging.getLogger(__name__)


def issue_access_token(user_id: str, expires_in: timedelta | None = None) -> str:
    """Mint an access token for *user_id* signed with the configured secret."""
    if expires_in is None:
        expires_in = timedelta(minutes=settings.AUTH_TOKEN_TTL_MINUTES)
    now = datetime.now(UTC)
    payload = {
        "sub": user_id,
        "iat": now,
        "exp": now + expires_in,
    }
    return jwt.encode(payload, settings.AUTH_JWT_SECRET, algorithm=settings.AUTH_JWT_ALGORITHM)


def resolve_principal(authorization_header: str | None) -> Principal | None:
    """Resolve a Principal from an ``Authorization: Bearer <token>`` header.

    Returns None when the header is missing or malformed, or when the token
    fails verification. Callers decide whether absence is an error.
    """
    if not authorization_header:
        return None

    scheme, _, token = authorization_header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        logger.debug("Ignoring authorization header with unsupported scheme")
        return None

    try:
        payload = jwt.decode(
            token.strip(),
            settings.AUTH_JWT_SECRET,
            algorithms=[settings.AUTH_JWT_ALGORITHM],
            options={"require": ["sub", "exp"]},
        )
    except jwt.ExpiredSignatureError:
        logger.debug("Access token expired")
        return None
    except jwt.InvalidTokenError as exc:
        logger.debug("Access token rejected: %s", exc)
        return None

    subject = payload.get("sub")
    if not isinstance(subject, str) or not subject.strip():
        return None
    return Principal(user_id=subject)


def get_current_principal(request: Request) -> Principal | None:
    """FastAPI dependency: the caller's Principal, or None if unauthenticated."""
    return resolve_principal(request.headers.get("Authorization"))


def require_current_principal(request: Request) -> Principal:
    """FastAPI dependency that rejects unauthenticated requests before body parsing."""
    return require_principal(get_current_principal(request))
