import logging
from datetime import datetime, timedelta
from typing import Optional

from fastapi import Depends, HTTPException, Request, Response
from fastapi.security import OAuth2PasswordBearer
from jose import jwt, JWTError
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from devexchange.core.config import settings
from devexchange.core.database import get_db
from devexchange.models.trust_db.trust_db import ClassificationQuizRole, WebConnectRole
from devexchange.models.user_db.user_db import User

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/securewebsite/login", auto_error=False)


# Password hashing
def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password, hashed_password) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


# Token generation
def create_access_token(data: dict, expires_delta: timedelta = timedelta(minutes=15)):
    to_encode = data.copy()
    expire = datetime.utcnow() + expires_delta
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


# Token verification
def verify_token(token: str) -> dict:
    try:
        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
        return payload
    except JWTError:
        raise HTTPException(
            status_code=401,
            detail="Invalid or expired session",
            headers={"WWW-Authenticate": "Bearer"},
        )


# Session cookie
def set_session_cookie(response: Response, user_id: str, remember: bool = False):
    lifetime = timedelta(days=settings.SESSION_EXPIRE_DAYS)
    token = create_access_token({"sub": user_id, "remember": remember}, expires_delta=lifetime)
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        max_age=int(lifetime.total_seconds()) if remember else None,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="none",
        path="/",
    )
    return token


def clear_session_cookie(response: Response):
    response.delete_cookie(
        key=settings.SESSION_COOKIE_NAME,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="none",
        path="/",
    )


def _session_payload(request: Request, bearer: Optional[str]) -> Optional[dict]:
    token = request.cookies.get(settings.SESSION_COOKIE_NAME) or bearer
    if not token:
        return None
    return verify_token(token)


def get_session_user(
    request: Request,
    bearer: Optional[str] = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> User:
    """Resolve the signed-in user from the session cookie or a bearer token."""
    payload = _session_payload(request, bearer)
    if payload is None:
        raise HTTPException(status_code=401, detail="Not authenticated")

    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(status_code=401, detail="Invalid session payload")

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(status_code=401, detail="Invalid session")
    request.state.session_remember = bool(payload.get("remember"))
    return user


def get_current_user(
    request: Request,
    response: Response,
    user: User = Depends(get_session_user),
) -> User:
    # sliding expiration: every authenticated call pushes the expiry forward
    set_session_cookie(response, user.id, request.state.session_remember)
    return user


def get_current_user_optional(
    request: Request,
    bearer: Optional[str] = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> Optional[User]:
    try:
        payload = _session_payload(request, bearer)
    except HTTPException:
        return None
    if payload is None or not payload.get("sub"):
        return None
    return db.query(User).filter(User.id == payload["sub"]).first()


def require_admin(current_user: User = Depends(get_current_user)) -> User:
    if not current_user.is_admin:
        raise HTTPException(status_code=403, detail="Admin privileges required")
    return current_user


def require_trusted_classification_quiz(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> User:
    if current_user.is_admin:
        return current_user
    role = db.query(ClassificationQuizRole).filter(ClassificationQuizRole.user_id == current_user.id).first()
    if not role or not role.is_trusted_classification_quiz:
        logger.info("User %s denied classification quiz access", current_user.id)
        raise HTTPException(status_code=403, detail="Classification quiz trust required")
    return current_user


def require_trusted_web_connect(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> User:
    if current_user.is_admin:
        return current_user
    role = db.query(WebConnectRole).filter(WebConnectRole.user_id == current_user.id).first()
    if not role or not role.is_trusted_web_connect:
        logger.info("User %s denied web connect access", current_user.id)
        raise HTTPException(status_code=403, detail="Web connect trust required")
    return current_user


def ensure_owner_or_admin(owner_id: Optional[str], current_user: User, detail: str):
    if current_user.is_admin or (owner_id is not None and owner_id == current_user.id):
        return
    logger.info("User %s denied write on a resource owned by %s", current_user.id, owner_id)
    raise HTTPException(status_code=403, detail=detail)
