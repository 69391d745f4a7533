"""
Authentication API endpoints.
"""

import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from fastapi.responses import JSONResponse

from app.core.exceptions import EmailAlreadyInUse
from app.core.rate_limit import limiter
from app.core.session import clear_auth_cookie, set_auth_cookie
from app.database import get_db
from app.dependencies import get_current_user_id
from app.repositories import Database
from app.schemas import (
    AuthCheckResponse,
    AuthUserResponse,
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    UserPublic,
)
from app.services.account_service import account_service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/register", response_model=AuthUserResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit("10/minute")
async def register(
    request: Request,
    response: Response,
    user_in: RegisterRequest,
    db: Database = Depends(get_db),
) -> Any:
    """
    Register a new user and log them in.
    """
    try:
        user = await account_service.register(
            db, username=user_in.username, email=user_in.email, password=user_in.password
        )
    except EmailAlreadyInUse:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Этот email уже занят",
        )

    set_auth_cookie(response, user.id)
    return {"user": UserPublic.model_validate(user)}


@router.post("/login", response_model=AuthUserResponse)
@limiter.limit("10/minute")
async def login(
    request: Request,
    response: Response,
    credentials: LoginRequest,
    db: Database = Depends(get_db),
) -> Any:
    """
    Check email and password and set the session cookie.
    """
    user = account_service.authenticate(db, credentials.email, credentials.password)
    if not user:
        logger.info("Login failed: invalid credentials")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Неверный email или пароль",
        )

    logger.info(f"User logged in: {user.id}")
    set_auth_cookie(response, user.id)
    return {"user": UserPublic.model_validate(user)}


@router.post("/logout", response_model=MessageResponse)
async def logout(response: Response) -> Any:
    clear_auth_cookie(response)
    return {"message": "Вы успешно вышли из системы"}


@router.get("/check", response_model=AuthCheckResponse)
async def check(
    user_id: Optional[str] = Depends(get_current_user_id),
    db: Database = Depends(get_db),
) -> Any:
    """
    Report whether the caller holds a valid session.
    """
    if not user_id:
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"isAuthenticated": False},
        )

    user = db.users.get_one(user_id)
    if not user:
        logger.warning(f"Token for unknown user {user_id}")
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"isAuthenticated": False},
        )

    return AuthCheckResponse(is_authenticated=True, user=UserPublic.model_validate(user))
