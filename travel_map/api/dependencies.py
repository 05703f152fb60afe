"""Request Dependencies — resolve the session caller for route handlers.

Invariants:
    - The token is read from the session cookie first, then Authorization: Bearer
    - get_current_user raises UnauthorizedError (401) without a valid token
    - get_optional_user returns None for guests, including invalid tokens,
      so a stale cookie never locks a visitor out of public pages
"""

import logging

from fastapi import Depends, Request

from travel_map.config import Settings, get_settings
from travel_map.core.domain_types import SessionUser
from travel_map.core.errors import UnauthorizedError
from travel_map.infrastructure.session_tokens import decode_session_token

logger = logging.getLogger(__name__)


def _extract_token(request: Request, cookie_name: str) -> str | None:
    token = request.cookies.get(cookie_name)
    if token:
        return token
    header = request.headers.get("Authorization", "")
    scheme, _, credentials = header.partition(" ")
    if scheme.lower() == "bearer" and credentials:
        return credentials.strip()
    return None


async def get_current_user(
    request: Request, settings: Settings = Depends(get_settings),
) -> SessionUser:
    token = _extract_token(request, settings.session_cookie_name)
    if not token:
        raise UnauthorizedError()
    return decode_session_token(
        token, settings.auth_secret, settings.auth_algorithm,
    )


async def get_optional_user(
    request: Request, settings: Settings = Depends(get_settings),
) -> SessionUser | None:
    token = _extract_token(request, settings.session_cookie_name)
    if not token:
        return None
    try:
        return decode_session_token(
            token, settings.auth_secret, settings.auth_algorithm,
        )
    except UnauthorizedError as e:
        logger.info(f"Ignoring invalid session on public route: {e.message}")
        return None
