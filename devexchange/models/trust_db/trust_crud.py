import logging
import secrets
from datetime import datetime, timedelta
from typing import List

from sqlalchemy.orm import Session

from devexchange.models.trust_db.trust_db import (
    ClassificationQuizRole,
    ClassificationQuizVerification,
    WebConnectRole,
    WebConnectVerification,
)

logger = logging.getLogger(__name__)


# Roles
def get_classification_role(db: Session, user_id: str):
    return db.query(ClassificationQuizRole).filter(ClassificationQuizRole.user_id == user_id).first()


def get_web_connect_role(db: Session, user_id: str):
    return db.query(WebConnectRole).filter(WebConnectRole.user_id == user_id).first()


def is_trusted_classification_quiz(db: Session, user_id: str) -> bool:
    role = get_classification_role(db, user_id)
    return bool(role and role.is_trusted_classification_quiz)


def is_trusted_web_connect(db: Session, user_id: str) -> bool:
    role = get_web_connect_role(db, user_id)
    return bool(role and role.is_trusted_web_connect)


def list_classification_roles(db: Session) -> List[ClassificationQuizRole]:
    return db.query(ClassificationQuizRole).all()


def list_web_connect_roles(db: Session) -> List[WebConnectRole]:
    return db.query(WebConnectRole).all()


def create_classification_role(db: Session, user_id: str, trusted: bool = False):
    role = ClassificationQuizRole(user_id=user_id, is_trusted_classification_quiz=trusted)
    db.add(role)
    db.commit()
    db.refresh(role)
    logger.info("Classification quiz role created for user %s", user_id)
    return role


def create_web_connect_role(db: Session, user_id: str, trusted: bool = False):
    role = WebConnectRole(user_id=user_id, is_trusted_web_connect=trusted)
    db.add(role)
    db.commit()
    db.refresh(role)
    logger.info("Web connect role created for user %s", user_id)
    return role


def set_classification_trust(db: Session, user_id: str, trusted: bool):
    role = get_classification_role(db, user_id)
    if not role:
        return None
    role.is_trusted_classification_quiz = trusted
    db.commit()
    db.refresh(role)
    logger.info("Classification quiz trust of user %s set to %s", user_id, trusted)
    return role


def set_web_connect_trust(db: Session, user_id: str, trusted: bool):
    role = get_web_connect_role(db, user_id)
    if not role:
        return None
    role.is_trusted_web_connect = trusted
    db.commit()
    db.refresh(role)
    logger.info("Web connect trust of user %s set to %s", user_id, trusted)
    return role


# Verification tokens
# ``model`` is ClassificationQuizVerification or WebConnectVerification.
def get_verification_by_token(db: Session, model, token: str):
    return db.query(model).filter(model.token == token).first()


def get_pending_verification(db: Session, model, user_id: str, now: datetime = None):
    now = now or datetime.utcnow()
    return (
        db.query(model)
        .filter(model.user_id == user_id, model.verified_at.is_(None), model.expires_at > now)
        .order_by(model.expires_at.desc())
        .first()
    )


def create_verification(db: Session, model, user_id: str, ttl_hours: int):
    now = datetime.utcnow()
    verification = model(
        user_id=user_id,
        token=secrets.token_urlsafe(32),
        created_at=now,
        expires_at=now + timedelta(hours=ttl_hours),
    )
    db.add(verification)
    db.commit()
    db.refresh(verification)
    return verification


def delete_verification(db: Session, verification):
    db.delete(verification)
    db.commit()


VERIFICATION_MODELS = {
    "classification_quiz": (ClassificationQuizVerification, ClassificationQuizRole),
    "web_connect": (WebConnectVerification, WebConnectRole),
}
