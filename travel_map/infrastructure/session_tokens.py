"""Session Tokens — verification of identity-provider-issued session JWTs.

Invariants:
    - Tokens are HS256-signed with the shared auth secret; anything else is rejected
    - sub is the user id; tokens without sub fall back to the email claim
    - Expired or malformed tokens, and tokens with neither sub nor email,
      raise UnauthorizedError

Design Decisions:
    - PyJWT over hand-rolled HMAC: handles exp/iat/nbf validation and algorithm pinning
    - issue_session_token lives beside decode so dev tooling and tests mint
      tokens exactly the way the identity provider does
"""

import logging
from datetime import datetime, timedelta, timezone

import jwt

from travel_map.core.domain_types import SessionUser
from travel_map.core.errors import UnauthorizedError

logger = logging.getLogger(__name__)

DEFAULT_TOKEN_TTL = timedelta(days=30)


def decode_session_token(
    token: str, secret: str, algorithm: str = "HS256",
) -> SessionUser:
    """Verify a session token and return the user it asserts."""
    try:
        claims = jwt.decode(token, secret, algorithms=[algorithm])
    except jwt.ExpiredSignatureError:
        raise UnauthorizedError("Session expired")
    except jwt.InvalidTokenError as e:
        logger.info(f"Rejected session token: {e}")
        raise UnauthorizedError("Invalid session")

    user_id = claims.get("sub") or claims.get("email")
    if not user_id:
        raise UnauthorizedError("Invalid session")
    return SessionUser(
        id=str(user_id),
        email=claims.get("email"),
        name=claims.get("name"),
        image=claims.get("picture"),
    )


def issue_session_token(
    user: SessionUser, secret: str, algorithm: str = "HS256",
    ttl: timedelta = DEFAULT_TOKEN_TTL,
) -> str:
    """Mint a session token carrying user's identity claims."""
    now = datetime.now(timezone.utc)
    claims = {
        "sub": user.id,
        "email": user.email,
        "name": user.name,
        "picture": user.image,
        "iat": now,
        "exp": now + ttl,
    }
    return jwt.encode(
        {k: v for k, v in claims.items() if v is not None},
        secret, algorithm=algorithm,
    )
