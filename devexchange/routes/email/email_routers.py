from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from devexchange.core.database import get_db
from devexchange.core.security import get_current_user, require_admin
from devexchange.models.connection_db.connection_crud import get_connection
from devexchange.models.user_db.user_db import User
from devexchange.models.user_db.user_db_crud import get_user_by_id
from devexchange.schemas.common.camel_base import MessageOut
from devexchange.schemas.connection.connection_base import EmailRequest
from devexchange.schemas.login.login_base import VerificationResult
from devexchange.services import email
from devexchange.services.verification import request_verification

email_router = APIRouter(prefix="/WebsiteEmail", tags=["Email"])


def _connection_and_owner(db: Session, website_id: int):
    connection = get_connection(db, website_id)
    if not connection:
        raise HTTPException(status_code=404, detail="Website not found")
    owner = get_user_by_id(db, connection.user_id)
    if not owner:
        raise HTTPException(status_code=404, detail="User not found")
    return connection, owner


@email_router.post("/sendVerificationEmail", response_model=VerificationResult)
async def send_verification_email(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return await request_verification(db, "classification_quiz", current_user)


@email_router.post("/sendVerificationEmailWebConnect", response_model=VerificationResult)
async def send_verification_email_web_connect(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return await request_verification(db, "web_connect", current_user)


@email_router.post("/sendSubmissionConfirmation", response_model=MessageOut)
async def send_submission_confirmation(
    request: EmailRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    connection, owner = _connection_and_owner(db, request.website_id)
    if owner.id != current_user.id and not current_user.is_admin:
        raise HTTPException(status_code=403, detail="Not allowed to notify about this connection")

    await email.send_email(
        owner.email,
        "Website Connection Submission Received",
        email.submission_confirmation_email(owner.user_name, connection.title, connection.link),
    )
    return MessageOut(message="Confirmation email sent successfully")


@email_router.post("/sendApprovalNotification", response_model=MessageOut)
async def send_approval_notification(
    request: EmailRequest,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    connection, owner = _connection_and_owner(db, request.website_id)
    await email.send_email(
        owner.email,
        "Website Connection Approved",
        email.approval_email(owner.user_name, connection.title, connection.link),
    )
    return MessageOut(message="Approval notification sent successfully")


@email_router.post("/sendRemovalNotification", response_model=MessageOut)
async def send_removal_notification(
    request: EmailRequest,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    connection, owner = _connection_and_owner(db, request.website_id)
    await email.send_email(
        owner.email,
        "Website Connection Removed",
        email.removal_email(owner.user_name, connection.title),
    )
    return MessageOut(message="Removal notification sent successfully")
