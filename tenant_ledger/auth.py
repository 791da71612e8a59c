"""
Bearer token authentication.

Tokens are HS256 JWTs signed with JWT_SECRET. Authentication
is optional for most routes: an absent or invalid token just
leaves the request anonymous. Routes that change account state
require a valid token (see api.deps.require_user).
"""

import logging
from dataclasses import dataclass, field

import jwt

from tenant_ledger.config import get_settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthPayload:
    sub: str
    email: str | None = None
    # Default organization, used when the request has no org header
    org_id: str | None = None
    roles: list[str] = field(default_factory=list)


def bearer_token(header: str | None) -> str | None:
    if not header:
        return None
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def decode_token(token: str) -> AuthPayload | None:
    """Verify a token and return its payload, or None if it is not valid."""
    settings = get_settings()
    try:
        claims = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
        )
    except jwt.PyJWTError as e:
        logger.debug("Ignoring invalid bearer token: %s", e)
        return None

    if not claims.get("sub"):
        return None
    return AuthPayload(
        sub=str(claims["sub"]),
        email=claims.get("email"),
        org_id=claims.get("orgId"),
        roles=list(claims.get("roles") or []),
    )


def issue_token(
    sub: str,
    org_id: str | None = None,
    email: str | None = None,
    roles: list[str] | None = None,
) -> str:
    """Sign a token for the given subject."""
    settings = get_settings()
    claims = {"sub": sub}
    if org_id:
        claims["orgId"] = org_id
    if email:
        claims["email"] = email
    if roles:
        claims["roles"] = roles
    return jwt.encode(claims, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)
