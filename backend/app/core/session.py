"""
Request identity and the session cookie.

The identity token travels either in an `Authorization: Bearer` header or in
the `auth` cookie; the header wins when both are present and valid.
"""

import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Literal, Optional

from fastapi import Request, Response
from fastapi.security.utils import get_authorization_scheme_param

from app.config import Settings, settings
from app.core.security import create_access_token, verify_access_token

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CookiePolicy:
    """Cookie attributes shared by the set and clear paths."""

    secure: bool
    samesite: Literal["lax", "none"]

    @classmethod
    def from_settings(cls, config: Settings) -> "CookiePolicy":
        # Browsers reject SameSite=None without Secure
        if config.is_production:
            return cls(secure=True, samesite="none")
        return cls(secure=False, samesite="lax")


cookie_policy = CookiePolicy.from_settings(settings)


def authorize_request(request: Request) -> Optional[str]:
    """Resolve the user id for an incoming request, or None if unauthenticated."""
    scheme, token = get_authorization_scheme_param(request.headers.get("Authorization"))
    if scheme.lower() == "bearer" and token:
        user_id = verify_access_token(token)
        if user_id:
            return user_id
        logger.debug("Bearer token rejected, falling back to cookie")

    token = request.cookies.get(settings.AUTH_COOKIE_NAME)
    if token:
        return verify_access_token(token)

    return None


def set_auth_cookie(
    response: Response, user_id: str, policy: Optional[CookiePolicy] = None
) -> Response:
    """Issue a fresh identity token and attach it as an HTTP-only cookie."""
    policy = policy or cookie_policy
    max_age = int(timedelta(days=settings.ACCESS_TOKEN_EXPIRE_DAYS).total_seconds())
    response.set_cookie(
        key=settings.AUTH_COOKIE_NAME,
        value=create_access_token(user_id),
        max_age=max_age,
        path="/",
        secure=policy.secure,
        httponly=True,
        samesite=policy.samesite,
    )
    return response


def clear_auth_cookie(response: Response, policy: Optional[CookiePolicy] = None) -> Response:
    """Expire the identity cookie. Attributes must match `set_auth_cookie`."""
    policy = policy or cookie_policy
    response.delete_cookie(
        key=settings.AUTH_COOKIE_NAME,
        path="/",
        secure=policy.secure,
        httponly=True,
        samesite=policy.samesite,
    )
    return response
