from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from devexchange.core.database import get_db
from devexchange.core.security import get_current_user, require_admin
from devexchange.models.trust_db import trust_crud
from devexchange.models.user_db.user_db import User
from devexchange.models.user_db.user_db_crud import get_all_users, get_user_by_id, set_admin_status
from devexchange.schemas.admin.admin_base import (
    AdminFlag,
    ClassificationQuizFlag,
    ClassificationQuizRoleOut,
    CreateRoleRequest,
    UpdateAdminRequest,
    UpdateClassificationTrustRequest,
    UpdateWebConnectTrustRequest,
    WebConnectFlag,
    WebConnectRoleOut,
)
from devexchange.schemas.common.camel_base import MessageOut
from devexchange.schemas.users.user_base import AdminUserOut

admin_router = APIRouter(prefix="/Admin", tags=["Admin"])


def _existing_user(db: Session, user_id: str) -> User:
    user = get_user_by_id(db, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found.")
    return user


@admin_router.get("/GetUsers", response_model=List[AdminUserOut])
def get_users(db: Session = Depends(get_db), _: User = Depends(require_admin)):
    return get_all_users(db)


@admin_router.post("/UpdateAdminStatus", response_model=MessageOut)
def update_admin_status(
    request: UpdateAdminRequest,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    if not set_admin_status(db, request.user_id, request.is_admin):
        raise HTTPException(status_code=404, detail="User not found.")
    return MessageOut(message="Admin status updated successfully.")


@admin_router.post("/UpdateIsTrustedWebConnectStatus", response_model=MessageOut)
def update_web_connect_status(
    request: UpdateWebConnectTrustRequest,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    if not trust_crud.set_web_connect_trust(db, request.user_id, request.is_trusted_web_connect):
        raise HTTPException(status_code=404, detail="Web connect role not found.")
    return MessageOut(message="Trusted status updated successfully.")


@admin_router.post("/UpdateIsTrustedClassificationUpload", response_model=MessageOut)
def update_classification_status(
    request: UpdateClassificationTrustRequest,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    if not trust_crud.set_classification_trust(db, request.user_id, request.is_trusted_classification_quiz):
        raise HTTPException(status_code=404, detail="Classification quiz role not found.")
    return MessageOut(message="Trusted status updated successfully.")


@admin_router.get("/IsAdmin/{user_id}", response_model=AdminFlag)
def is_admin(user_id: str, db: Session = Depends(get_db), _: User = Depends(require_admin)):
    return AdminFlag(is_admin=_existing_user(db, user_id).is_admin)


@admin_router.get("/IsTrustedWebConnect/{user_id}", response_model=WebConnectFlag)
def is_trusted_web_connect(user_id: str, db: Session = Depends(get_db), _: User = Depends(require_admin)):
    _existing_user(db, user_id)
    return WebConnectFlag(is_trusted_web_connect=trust_crud.is_trusted_web_connect(db, user_id))


@admin_router.get("/IsTrustedClassificationUpload/{user_id}", response_model=ClassificationQuizFlag)
def is_trusted_classification_upload(
    user_id: str,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    _existing_user(db, user_id)
    return ClassificationQuizFlag(
        is_trusted_classification_quiz=trust_crud.is_trusted_classification_quiz(db, user_id)
    )


@admin_router.get("/CheckIsTrustedWebConnect", response_model=WebConnectFlag)
def check_is_trusted_web_connect(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return WebConnectFlag(is_trusted_web_connect=trust_crud.is_trusted_web_connect(db, current_user.id))


@admin_router.get("/CheckIsTrustedClassificationUpload", response_model=ClassificationQuizFlag)
def check_is_trusted_classification_upload(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return ClassificationQuizFlag(
        is_trusted_classification_quiz=trust_crud.is_trusted_classification_quiz(db, current_user.id)
    )


@admin_router.get("/GetClassificationTrustedUsers", response_model=List[ClassificationQuizRoleOut])
def get_classification_trusted_users(db: Session = Depends(get_db), _: User = Depends(require_admin)):
    return trust_crud.list_classification_roles(db)


@admin_router.get("/GetWebConnectTrustedUsers", response_model=List[WebConnectRoleOut])
def get_web_connect_trusted_users(db: Session = Depends(get_db), _: User = Depends(require_admin)):
    return trust_crud.list_web_connect_roles(db)


@admin_router.post("/ClassificationQuizRole/Create", response_model=MessageOut)
def create_classification_role(
    request: CreateRoleRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if current_user.id != request.user_id and not current_user.is_admin:
        raise HTTPException(status_code=403, detail="Not allowed to create a role for another user")
    _existing_user(db, request.user_id)
    if trust_crud.get_classification_role(db, request.user_id):
        raise HTTPException(status_code=409, detail="Role already exists for this user")

    trust_crud.create_classification_role(db, request.user_id)
    return MessageOut(message="Classification quiz role created successfully")
