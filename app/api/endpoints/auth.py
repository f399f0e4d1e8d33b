import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from app.api.deps import get_user_service
from app.core.config import Settings, get_settings
from app.core.errors import AuthenticationError
from app.core.security import create_access_token, get_current_user
from app.db.database import get_session
from app.models.user import User
from app.schemas.user import MessageResponse, Token, UserLogin, UserResponse
from app.services.user import UserService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/login", response_model=Token)
def login(
    user_in: UserLogin,
    response: Response,
    session: Annotated[Session, Depends(get_session)],
    settings: Annotated[Settings, Depends(get_settings)],
    user_service: Annotated[UserService, Depends(get_user_service)],
) -> dict:
    """Login an admin user

    The token is returned in the body and also set as an HTTP-only cookie.
    """
    try:
        user = user_service.authenticate(user_in.mail_address, user_in.password)
    except AuthenticationError as e:
        logger.info("login failed: %s", e)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect mail address or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    # Update last login time
    user_service.update_last_logged_in_at(user)
    session.commit()

    access_token = create_access_token(data={"sub": user.mail_address}, settings=settings)
    response.set_cookie(
        key=settings.auth_cookie_name,
        value=access_token,
        max_age=settings.access_token_expire_minutes * 60,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="strict",
    )
    return {"access_token": access_token, "token_type": "bearer"}


@router.post("/logout", response_model=MessageResponse)
def logout(
    response: Response,
    settings: Annotated[Settings, Depends(get_settings)],
) -> dict:
    """Clear the auth cookie"""
    response.delete_cookie(
        key=settings.auth_cookie_name,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="strict",
    )
    return {"message": "successfully logged out"}


@router.get("/me", response_model=UserResponse)
def read_users_me(
    current_user: Annotated[User, Depends(get_current_user)]
) -> User:
    """Get the current admin user"""
    return current_user
