import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.orm import Session

from devexchange.core.database import get_db
from devexchange.core.security import (
    clear_session_cookie,
    get_current_user,
    get_current_user_optional,
    get_session_user,
    set_session_cookie,
)
from devexchange.models.trust_db.trust_crud import is_trusted_classification_quiz, is_trusted_web_connect
from devexchange.models.user_db.user_db import User
from devexchange.models.user_db.user_db_crud import (
    authenticate_user,
    create_user,
    get_user_by_email,
    get_user_by_username,
)
from devexchange.schemas.admin.admin_base import AdminFlag, UserIdOut
from devexchange.schemas.login.login_base import (
    LoginRequest,
    LoginResponse,
    LogoutResponse,
    RegisterResponse,
    VerificationResult,
)
from devexchange.schemas.users.user_base import UserCreate, UserLookupOut
from devexchange.services.verification import redeem_token

logger = logging.getLogger(__name__)

auth_router = APIRouter(prefix="/securewebsite", tags=["Auth"])


@auth_router.post("/register", response_model=RegisterResponse)
def register(user: UserCreate, db: Session = Depends(get_db)):
    if get_user_by_email(db, user.email):
        raise HTTPException(status_code=400, detail="Email already registered")
    if get_user_by_username(db, user.user_name):
        raise HTTPException(status_code=400, detail="Username already taken")

    db_user = create_user(db, user)
    return RegisterResponse(message="Registered Successfully.", user_id=db_user.id)


@auth_router.post("/login", response_model=LoginResponse)
def login(payload: LoginRequest, response: Response, db: Session = Depends(get_db)):
    user = authenticate_user(db, payload.email, payload.password)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid credentials")

    set_session_cookie(response, user.id, payload.remember)
    logger.info("User %s logged in", user.id)
    return LoginResponse(
        message="Login successful",
        user_id=user.id,
        is_admin=user.is_admin,
        is_trusted_web_connect=is_trusted_web_connect(db, user.id),
        is_trusted_classification_quiz=is_trusted_classification_quiz(db, user.id),
    )


@auth_router.get("/logout", response_model=LogoutResponse)
def logout(response: Response, current_user: User = Depends(get_session_user)):
    clear_session_cookie(response)
    logger.info("User %s logged out", current_user.id)
    return LogoutResponse(message="You are free to go!")


@auth_router.get("/CheckAdmin", response_model=AdminFlag)
def check_admin(current_user: User = Depends(get_current_user)):
    return AdminFlag(is_admin=current_user.is_admin)


@auth_router.get("/CheckUserReturnId", response_model=UserIdOut)
def check_user_return_id(current_user: Optional[User] = Depends(get_current_user_optional)):
    if not current_user:
        raise HTTPException(status_code=403, detail="Not signed in")
    return UserIdOut(user_id=current_user.id)


@auth_router.get("/user/byemail", response_model=UserLookupOut)
def find_user_by_email(email: Optional[str] = Query(None), db: Session = Depends(get_db)):
    if not email:
        raise HTTPException(status_code=400, detail="Email is required.")
    user = get_user_by_email(db, email)
    if not user:
        raise HTTPException(status_code=404, detail="User not found.")
    return UserLookupOut(user_id=user.id, email=user.email, user_name=user.user_name)


@auth_router.get("/verify-classification-quiz", response_model=VerificationResult)
def verify_classification_quiz(token: Optional[str] = Query(None), db: Session = Depends(get_db)):
    if redeem_token(db, "classification_quiz", token):
        return VerificationResult(
            message="You have already been verified for the Classification Quiz", already_verified=True
        )
    return VerificationResult(message="Successfully verified for Classification Quiz", already_verified=False)


@auth_router.get("/verify-web-connect", response_model=VerificationResult)
def verify_web_connect(token: Optional[str] = Query(None), db: Session = Depends(get_db)):
    if redeem_token(db, "web_connect", token):
        return VerificationResult(message="You have already been verified for Web Connect", already_verified=True)
    return VerificationResult(message="Successfully verified for Web Connections", already_verified=False)
