"""
Shared API dependencies.
"""

from typing import Optional

from fastapi import Depends, HTTPException, Request, status

from app.config import settings
from app.core.session import authorize_request
from app.database import get_db
from app.models.user import User
from app.repositories import Database


def get_current_user_id(request: Request) -> Optional[str]:
    """Identity of the caller, or None when unauthenticated."""
    return authorize_request(request)


def require_user_id(user_id: Optional[str] = Depends(get_current_user_id)) -> str:
    """
    Identity of the caller; rejects unauthenticated requests with 401.
    """
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user_id


def is_admin(user: Optional[User]) -> bool:
    return user is not None and user.email in settings.admin_emails


def require_admin(
    user_id: str = Depends(require_user_id),
    db: Database = Depends(get_db),
) -> User:
    """
    The caller's user record, provided the caller's email is on the admin
    allow-list. 401 when unauthenticated, 403 otherwise.
    """
    user = db.users.get_one(user_id)
    if not is_admin(user):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Доступ запрещен. Требуются права администратора",
        )
    return user
