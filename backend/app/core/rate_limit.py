"""
Shared slowapi limiter.

Routes opt in with `@limiter.limit(...)` and must accept a `request: Request`
argument.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from app.config import settings

limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)
