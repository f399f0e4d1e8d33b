from datetime import datetime, timedelta, UTC
from typing import Annotated, Optional
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session
from app.core.config import Settings, get_settings
from app.core.errors import UserNotFoundError
from app.db.database import get_session
from app.models.user import User
from app.repositories.user import UserRepository

# bcrypt only looks at the first 72 bytes of a password
MAX_PASSWORD_BYTES = 72

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# OAuth2; the token may also come from the auth cookie
optional_oauth2_scheme = OAuth2PasswordBearer(tokenUrl="api/v1/login", auto_error=False)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """验证密码"""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """生成密码哈希"""
    return pwd_context.hash(password)


def create_access_token(data: dict, settings: Settings, expires_delta: timedelta | None = None) -> str:
    """创建访问令牌"""
    to_encode = data.copy()
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.access_token_expire_minutes)
    to_encode.update({"exp": datetime.now(UTC) + expires_delta})
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def _token_from_request(request: Request, bearer_token: Optional[str], settings: Settings) -> Optional[str]:
    if bearer_token:
        return bearer_token
    return request.cookies.get(settings.auth_cookie_name)


def _user_from_token(token: str, session: Session, settings: Settings) -> Optional[User]:
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        return None
    mail_address: Optional[str] = payload.get("sub")
    if mail_address is None:
        return None
    try:
        return UserRepository(session).find_by_mail_address(mail_address)
    except UserNotFoundError:
        return None


def get_current_user(
    request: Request,
    token: Annotated[Optional[str], Depends(optional_oauth2_scheme)],
    session: Session = Depends(get_session),
    settings: Settings = Depends(get_settings),
) -> User:
    """获取当前用户 (admin only)"""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    token = _token_from_request(request, token, settings)
    if not token:
        raise credentials_exception
    user = _user_from_token(token, session, settings)
    if user is None:
        raise credentials_exception
    return user


def get_optional_current_user(
    request: Request,
    token: Annotated[Optional[str], Depends(optional_oauth2_scheme)],
    session: Session = Depends(get_session),
    settings: Settings = Depends(get_settings),
) -> User | None:
    """获取当前用户（可选）"""
    token = _token_from_request(request, token, settings)
    if not token:
        return None
    return _user_from_token(token, session, settings)
