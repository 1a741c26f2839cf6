"""Single-use verification tokens exchanged for trust-role grants.

Two kinds exist, ``classification_quiz`` and ``web_connect``. Requesting a
verification mails a link to the user; redeeming the link creates the
matching role row, untrusted until an admin flips the flag.
"""
import logging
from datetime import datetime

from sqlalchemy.orm import Session

from devexchange.core.config import settings
from devexchange.core.errors import BadRequestError, EmailSendError, NotFoundError
from devexchange.models.trust_db import trust_crud
from devexchange.models.user_db.user_db import User
from devexchange.models.user_db.user_db_crud import get_user_by_id
from devexchange.services import email

logger = logging.getLogger(__name__)

_LINKS = {
    "classification_quiz": ("verify-classification-quiz", "Classification Quiz"),
    "web_connect": ("verify-web-connect", "Web Connect"),
}


def _role_for(db: Session, role_model, user_id: str):
    return db.query(role_model).filter(role_model.user_id == user_id).first()


def format_remaining(expires_at: datetime, now: datetime = None) -> str:
    remaining = expires_at - (now or datetime.utcnow())
    total_minutes = max(int(remaining.total_seconds() // 60), 0)
    hours, minutes = divmod(total_minutes, 60)
    return f"{hours} hours and {minutes} minutes"


async def request_verification(db: Session, kind: str, user: User) -> dict:
    verification_model, role_model = trust_crud.VERIFICATION_MODELS[kind]
    path, feature = _LINKS[kind]

    if _role_for(db, role_model, user.id):
        return {
            "message": "You already have a verification request pending approval",
            "alreadyVerified": True,
        }

    pending = trust_crud.get_pending_verification(db, verification_model, user.id)
    if pending:
        return {
            "message": "Verification token already exists",
            "alreadyVerified": False,
            "expiresIn": format_remaining(pending.expires_at),
        }

    verification = trust_crud.create_verification(
        db, verification_model, user.id, settings.VERIFICATION_TOKEN_TTL_HOURS
    )
    link = f"{settings.WEB_URL.rstrip('/')}/{path}?token={verification.token}"
    try:
        await email.send_email(
            user.email, f"Verify Your {feature}", email.verification_email(user.user_name, feature, link)
        )
    except EmailSendError:
        trust_crud.delete_verification(db, verification)
        raise

    logger.info("Issued %s verification token for user %s", kind, user.id)
    return {"message": "Verification email sent successfully", "alreadyVerified": False}


def redeem_token(db: Session, kind: str, token: str) -> bool:
    """Consume ``token``; returns True when the role already existed."""
    verification_model, role_model = trust_crud.VERIFICATION_MODELS[kind]
    if not token:
        raise BadRequestError("Verification token is required")

    verification = trust_crud.get_verification_by_token(db, verification_model, token)
    if not verification or verification.is_expired():
        raise BadRequestError("Invalid or expired verification token")

    user_id = verification.user_id
    if not get_user_by_id(db, user_id):
        raise NotFoundError("User not found")

    already_verified = _role_for(db, role_model, user_id) is not None
    if not already_verified:
        db.add(role_model(user_id=user_id))
    db.delete(verification)
    db.commit()

    logger.info("Consumed %s verification token for user %s", kind, user_id)
    return already_verified
