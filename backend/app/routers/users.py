"""
API endpoints for the caller's own profile.
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Response, status

from app.core.exceptions import EmailAlreadyInUse
from app.core.session import clear_auth_cookie
from app.database import get_db
from app.dependencies import require_user_id
from app.repositories import Database
from app.schemas import (
    MessageResponse,
    PasswordChangeRequest,
    UserProfile,
    UserPublic,
    UserUpdateRequest,
)
from app.services.account_service import account_service

logger = logging.getLogger(__name__)

router = APIRouter()

USER_NOT_FOUND = "Пользователь не найден"


@router.get("/me", response_model=UserProfile)
async def read_me(
    user_id: str = Depends(require_user_id),
    db: Database = Depends(get_db),
) -> Any:
    """Get current user."""
    user = db.users.get_one(user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=USER_NOT_FOUND)
    return UserProfile.model_validate(user.model_dump())


@router.patch("/me", response_model=UserPublic)
async def update_me(
    update_data: UserUpdateRequest,
    user_id: str = Depends(require_user_id),
    db: Database = Depends(get_db),
) -> Any:
    """Update username and/or email."""
    try:
        user = await db.users.update(
            user_id,
            username=update_data.username,
            email=update_data.email,
            exclusive_email=True,
        )
    except EmailAlreadyInUse:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Этот email уже занят",
        )
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=USER_NOT_FOUND)
    return UserPublic.model_validate(user)


@router.patch("/me/password", response_model=MessageResponse)
async def change_password(
    data: PasswordChangeRequest,
    user_id: str = Depends(require_user_id),
    db: Database = Depends(get_db),
) -> Any:
    changed = await account_service.change_password(
        db, user_id, data.current_password, data.new_password
    )
    if not changed:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Неверный текущий пароль",
        )
    return {"message": "Пароль успешно изменен"}


@router.delete("/me", response_model=MessageResponse)
async def delete_me(
    response: Response,
    user_id: str = Depends(require_user_id),
    db: Database = Depends(get_db),
) -> Any:
    """Delete the account, its cart and its password, then end the session."""
    deleted = await account_service.delete_account(db, user_id)
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=USER_NOT_FOUND)

    clear_auth_cookie(response)
    return {"message": "Аккаунт и корзина успешно удалены"}
