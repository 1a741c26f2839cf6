from datetime import datetime, timedelta

from conftest import sign_in

from devexchange.core.errors import EmailSendError
from devexchange.models.trust_db import trust_crud
from devexchange.models.trust_db.trust_db import (
    ClassificationQuizRole,
    ClassificationQuizVerification,
    WebConnectRole,
    WebConnectVerification,
)
from devexchange.services import email


class TestRequestVerification:
    """Mailing of verification links"""

    def test_sends_link_with_token(self, client, db, member, sent_emails):
        sign_in(client, member["email"])

        response = client.post("/WebsiteEmail/sendVerificationEmail")

        assert response.status_code == 200
        assert response.json() == {
            "message": "Verification email sent successfully",
            "alreadyVerified": False,
            "expiresIn": None,
        }
        token = db.query(ClassificationQuizVerification).one().token
        assert len(sent_emails) == 1
        assert sent_emails[0]["to"] == member["email"]
        assert f"https://app.example.com/verify-classification-quiz?token={token}" in sent_emails[0]["html"]

    def test_pending_token_is_reported_not_resent(self, client, member, sent_emails):
        sign_in(client, member["email"])
        client.post("/WebsiteEmail/sendVerificationEmail")

        response = client.post("/WebsiteEmail/sendVerificationEmail")

        data = response.json()
        assert data["message"] == "Verification token already exists"
        assert data["alreadyVerified"] is False
        assert data["expiresIn"].endswith("minutes")
        assert len(sent_emails) == 1

    def test_existing_role_short_circuits(self, client, db, member, sent_emails):
        trust_crud.create_classification_role(db, member["id"])
        sign_in(client, member["email"])

        response = client.post("/WebsiteEmail/sendVerificationEmail")

        assert response.json()["alreadyVerified"] is True
        assert sent_emails == []

    def test_mail_failure_discards_token(self, client, db, member, monkeypatch):
        async def failing_send_email(to_email, subject, html_body):
            raise EmailSendError("Failed to send email: connection refused")

        monkeypatch.setattr(email, "send_email", failing_send_email)
        sign_in(client, member["email"])

        response = client.post("/WebsiteEmail/sendVerificationEmailWebConnect")

        assert response.status_code == 500
        assert response.json()["message"] == "Failed to send email: connection refused"
        assert db.query(WebConnectVerification).count() == 0

    def test_requires_session(self, client):
        assert client.post("/WebsiteEmail/sendVerificationEmail").status_code == 401


class TestRedeemToken:
    """Exchanging a token for a role"""

    def test_token_creates_untrusted_role(self, client, db, member):
        verification = trust_crud.create_verification(db, ClassificationQuizVerification, member["id"], 24)
        token = verification.token

        response = client.get("/securewebsite/verify-classification-quiz", params={"token": token})

        assert response.status_code == 200
        assert response.json()["alreadyVerified"] is False
        db.expire_all()
        role = db.query(ClassificationQuizRole).filter(ClassificationQuizRole.user_id == member["id"]).one()
        assert role.is_trusted_classification_quiz is False
        assert db.query(ClassificationQuizVerification).count() == 0

    def test_token_is_single_use(self, client, db, member):
        token = trust_crud.create_verification(db, WebConnectVerification, member["id"], 24).token

        first = client.get("/securewebsite/verify-web-connect", params={"token": token})
        second = client.get("/securewebsite/verify-web-connect", params={"token": token})

        assert first.status_code == 200
        assert second.status_code == 400
        db.expire_all()
        assert db.query(WebConnectRole).count() == 1

    def test_existing_role_reports_already_verified(self, client, db, member):
        trust_crud.create_web_connect_role(db, member["id"])
        token = trust_crud.create_verification(db, WebConnectVerification, member["id"], 24).token

        response = client.get("/securewebsite/verify-web-connect", params={"token": token})

        assert response.status_code == 200
        assert response.json()["alreadyVerified"] is True

    def test_expired_token_is_rejected_and_kept(self, client, db, member):
        verification = trust_crud.create_verification(db, ClassificationQuizVerification, member["id"], 24)
        verification.expires_at = datetime.utcnow() - timedelta(minutes=1)
        db.commit()
        token = verification.token

        response = client.get("/securewebsite/verify-classification-quiz", params={"token": token})

        assert response.status_code == 400
        assert response.json()["message"] == "Invalid or expired verification token"
        db.expire_all()
        assert db.query(ClassificationQuizVerification).count() == 1
        assert db.query(ClassificationQuizRole).count() == 0

    def test_missing_and_unknown_tokens(self, client):
        assert client.get("/securewebsite/verify-classification-quiz").status_code == 400
        response = client.get("/securewebsite/verify-web-connect", params={"token": "nope"})
        assert response.status_code == 400
