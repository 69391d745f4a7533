"""
Admin panel API endpoints.

Every endpoint except /check requires an email on the ADMIN_EMAILS allow-list.
"""

import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, status

from app.database import get_db
from app.dependencies import get_current_user_id, is_admin, require_admin
from app.models.user import User
from app.repositories import Database
from app.schemas import AdminCheckResponse, AdminUserList, SuccessResponse, UserPublic
from app.services.account_service import account_service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/users", response_model=AdminUserList)
async def list_users(
    admin: User = Depends(require_admin),
    db: Database = Depends(get_db),
) -> Any:
    """All users with their cart statistics."""
    users = db.users.get_all()
    return {
        "users": [
            {
                "id": user.id,
                "username": user.username,
                "email": user.email,
                "created_at": user.created_at,
                "cart_items_count": db.cart.get_count_for_user(user.id),
                "cart_total": db.cart.get_total_for_user(user.id),
            }
            for user in users
        ],
        "total": len(users),
    }


@router.delete("/users/{user_id}", response_model=SuccessResponse)
async def delete_user(
    user_id: str,
    admin: User = Depends(require_admin),
    db: Database = Depends(get_db),
) -> Any:
    """Delete a user with its cart and password."""
    if user_id == admin.id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Вы не можете удалить свой собственный аккаунт",
        )

    user = db.users.get_one(user_id)
    if not user or not await account_service.delete_account(db, user_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Пользователь не найден")

    logger.info(f"Admin {admin.id} deleted user {user_id}")
    return {"success": True, "message": f"Пользователь {user.email} успешно удален"}


@router.get("/check", response_model=AdminCheckResponse, response_model_exclude_none=True)
async def check(
    user_id: Optional[str] = Depends(get_current_user_id),
    db: Database = Depends(get_db),
) -> Any:
    """Tell the frontend whether to show the admin panel."""
    if not user_id:
        return AdminCheckResponse(is_admin=False, reason="Not authenticated")

    user = db.users.get_one(user_id)
    if not user:
        return AdminCheckResponse(is_admin=False, reason="User not found")

    if not is_admin(user):
        return AdminCheckResponse(is_admin=False)

    return AdminCheckResponse(is_admin=True, user=UserPublic.model_validate(user))
