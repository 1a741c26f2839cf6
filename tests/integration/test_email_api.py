import pytest
from conftest import sign_in

from devexchange.core.errors import EmailSendError
from devexchange.models.connection_db.connection_crud import create_connection
from devexchange.models.category_db import category_crud
from devexchange.services import email

BASE = "/WebsiteEmail"


@pytest.fixture
def website(db, site_owner):
    connection = create_connection(
        db,
        site_owner["id"],
        title="My <Portfolio>",
        link="https://portfolio.example.com",
        description="Things I built",
    )
    return connection.id


class TestConnectionNotifications:
    """Mails about a website connection"""

    def test_owner_gets_submission_confirmation(self, client, site_owner, website, sent_emails):
        sign_in(client, site_owner["email"])

        response = client.post(f"{BASE}/sendSubmissionConfirmation", json={"websiteId": website})

        assert response.status_code == 200
        assert response.json() == {"message": "Confirmation email sent successfully"}
        assert sent_emails[0]["to"] == site_owner["email"]
        assert sent_emails[0]["subject"] == "Website Connection Submission Received"
        assert "My &lt;Portfolio&gt;" in sent_emails[0]["html"]

    def test_other_users_may_not_confirm(self, client, member, website, sent_emails):
        sign_in(client, member["email"])

        response = client.post(f"{BASE}/sendSubmissionConfirmation", json={"websiteId": website})

        assert response.status_code == 403
        assert sent_emails == []

    def test_approval_and_removal_are_admin_only(self, client, admin, member, site_owner, website, sent_emails):
        sign_in(client, member["email"])
        assert client.post(f"{BASE}/sendApprovalNotification", json={"websiteId": website}).status_code == 403

        sign_in(client, admin["email"])
        assert client.post(f"{BASE}/sendApprovalNotification", json={"websiteId": website}).status_code == 200
        assert client.post(f"{BASE}/sendRemovalNotification", json={"websiteId": website}).status_code == 200

        assert [mail["subject"] for mail in sent_emails] == [
            "Website Connection Approved",
            "Website Connection Removed",
        ]
        assert all(mail["to"] == site_owner["email"] for mail in sent_emails)

    def test_unknown_website(self, client, admin):
        sign_in(client, admin["email"])

        response = client.post(f"{BASE}/sendApprovalNotification", json={"websiteId": 999})

        assert response.status_code == 404
        assert response.json()["message"] == "Website not found"

    def test_send_failure_is_reported(self, client, admin, website, monkeypatch):
        async def failing_send_email(to_email, subject, html_body):
            raise EmailSendError("Failed to send email: timeout")

        monkeypatch.setattr(email, "send_email", failing_send_email)
        sign_in(client, admin["email"])

        response = client.post(f"{BASE}/sendRemovalNotification", json={"websiteId": website})

        assert response.status_code == 500
        assert response.json() == {"message": "Failed to send email: timeout"}


class TestErrorTranslation:
    """Failures that escape the routers"""

    def test_unexpected_error_is_generic(self, monkeypatch):
        from fastapi.testclient import TestClient

        from devexchange.main import app

        def broken_count(db):
            raise RuntimeError("database exploded")

        monkeypatch.setattr(category_crud, "count_categories", broken_count)
        client = TestClient(app, base_url="https://testserver", raise_server_exceptions=False)

        response = client.get("/categories/count")

        assert response.status_code == 500
        assert response.json() == {"message": "An unexpected error occurred. Please try again later."}

    def test_unknown_route(self, client):
        response = client.get("/no-such-route")

        assert response.status_code == 404
        assert response.json() == {"message": "Not Found"}
