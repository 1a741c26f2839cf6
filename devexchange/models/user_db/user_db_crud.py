import logging
from datetime import datetime
from typing import List

from sqlalchemy.orm import Session

from devexchange.core.config import settings
from devexchange.core.security import hash_password, verify_password
from devexchange.models.user_db.user_db import User, UserCredential
from devexchange.schemas.users.user_base import UserCreate

logger = logging.getLogger(__name__)


def create_user(db: Session, user: UserCreate):
    admin_emails = {email.lower() for email in settings.ADMIN_EMAILS}
    db_user = User(
        email=user.email,
        user_name=user.user_name,
        name=user.name,
        is_admin=user.email.lower() in admin_emails,
    )
    db_user.credential = UserCredential(hashed_password=hash_password(user.password))
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    logger.info("Registered user %s (admin=%s)", db_user.id, db_user.is_admin)
    return db_user


def authenticate_user(db: Session, email: str, password: str):
    user = get_user_by_email(db, email)
    if not user or not user.credential:
        return None
    if not verify_password(password, user.credential.hashed_password):
        return None
    user.last_login = datetime.utcnow()
    db.commit()
    db.refresh(user)
    return user


def get_user_by_email(db: Session, email: str):
    return db.query(User).filter(User.email == email).first()


def get_user_by_username(db: Session, user_name: str):
    return db.query(User).filter(User.user_name == user_name).first()


def get_user_by_id(db: Session, user_id: str):
    return db.query(User).filter(User.id == user_id).first()


def get_all_users(db: Session) -> List[User]:
    return db.query(User).order_by(User.created_date).all()


def set_admin_status(db: Session, user_id: str, is_admin: bool):
    user = get_user_by_id(db, user_id)
    if not user:
        return None
    user.is_admin = is_admin
    db.commit()
    db.refresh(user)
    logger.info("Admin flag of user %s set to %s", user_id, is_admin)
    return user
