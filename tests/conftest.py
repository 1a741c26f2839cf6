import os

# settings are read at import time, so the environment goes first
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET_KEY"] = "test-secret-key"
os.environ["ADMIN_EMAILS"] = '["admin@example.com"]'
os.environ["COOKIE_SECURE"] = "true"
os.environ["S3_BUCKET_NAME"] = "devexchange-test"
os.environ["S3_PUBLIC_BASE_URL"] = "https://cdn.example.com"
os.environ["WEB_URL"] = "https://app.example.com"

import pytest
from botocore.exceptions import ClientError
from fastapi.testclient import TestClient

from devexchange.core.database import Base, SessionLocal, engine, init_db
from devexchange.main import app
from devexchange.models.category_db.category_db import Category, Question, QuestionOption
from devexchange.models.image_db.image_db import ImageUpload
from devexchange.models.trust_db import trust_crud
from devexchange.services import email
from devexchange.services.storage import storage


class TestConfig:
    """Test configuration constants"""
    ADMIN_EMAIL = "admin@example.com"
    PASSWORD = "Secret123!"
    BASE_URL = "https://testserver"
    CDN_URL = "https://cdn.example.com"


class FakeS3Client:
    """In-memory stand-in for the boto3 S3 client"""

    def __init__(self):
        self.objects = {}

    def put_object(self, Bucket, Key, Body, ContentType, **kwargs):
        self.objects[(Bucket, Key)] = {"Body": Body, "ContentType": ContentType}
        return {"ETag": '"fake"'}

    def head_object(self, Bucket, Key):
        if (Bucket, Key) not in self.objects:
            raise ClientError({"Error": {"Code": "404", "Message": "Not Found"}}, "HeadObject")
        stored = self.objects[(Bucket, Key)]
        return {"ContentType": stored["ContentType"], "ContentLength": len(stored["Body"])}

    def delete_object(self, Bucket, Key):
        self.objects.pop((Bucket, Key), None)
        return {}

    def keys(self):
        return sorted(key for _, key in self.objects)


@pytest.fixture(autouse=True)
def database():
    """Fresh schema for every test"""
    init_db()
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def s3(monkeypatch):
    """Bucket contents kept in memory for the storage service"""
    client = FakeS3Client()
    monkeypatch.setattr(storage, "_s3_client", client)
    return client


@pytest.fixture(autouse=True)
def sent_emails(monkeypatch):
    """Capture outgoing mail instead of talking to an SMTP server"""
    outbox = []

    async def fake_send_email(to_email, subject, html_body):
        outbox.append({"to": to_email, "subject": subject, "html": html_body})

    monkeypatch.setattr(email, "send_email", fake_send_email)
    return outbox


@pytest.fixture
def db(database):
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture
def client():
    return TestClient(app, base_url=TestConfig.BASE_URL)


def register(client, email_address, user_name, password=TestConfig.PASSWORD, name="Test User"):
    response = client.post(
        "/securewebsite/register",
        json={"name": name, "email": email_address, "userName": user_name, "password": password},
    )
    assert response.status_code == 200, response.text
    return response.json()["userId"]


def sign_in(client, email_address, password=TestConfig.PASSWORD, remember=False):
    client.cookies.clear()
    response = client.post(
        "/securewebsite/login",
        json={"email": email_address, "password": password, "remember": remember},
    )
    assert response.status_code == 200, response.text
    return response


@pytest.fixture
def admin(client):
    user_id = register(client, TestConfig.ADMIN_EMAIL, "admin")
    return {"id": user_id, "email": TestConfig.ADMIN_EMAIL}


@pytest.fixture
def member(client):
    user_id = register(client, "member@example.com", "member")
    return {"id": user_id, "email": "member@example.com"}


@pytest.fixture
def quiz_author(client, db):
    """A user trusted to build classification quizzes"""
    user_id = register(client, "author@example.com", "author")
    trust_crud.create_classification_role(db, user_id, trusted=True)
    return {"id": user_id, "email": "author@example.com"}


@pytest.fixture
def other_author(client, db):
    """A second trusted quiz author who owns nothing yet"""
    user_id = register(client, "second-author@example.com", "second")
    trust_crud.create_classification_role(db, user_id, trusted=True)
    return {"id": user_id, "email": "second-author@example.com"}


@pytest.fixture
def site_owner(client, db):
    """A user trusted to publish website connections"""
    user_id = register(client, "owner@example.com", "owner")
    trust_crud.create_web_connect_role(db, user_id, trusted=True)
    return {"id": user_id, "email": "owner@example.com"}


def seed_quiz(db, user_id, category_name="Animals", config_link_id=1, image_names=("img1.jpg", "img2.jpg")):
    """Insert one category with two yes/no questions and its images"""
    category = Category(category_name=category_name, config_link_id=config_link_id, user_id=user_id)
    for key, text in (("is_cat", "Is it a cat?"), ("is_outdoor", "Is it outdoors?")):
        question = Question(question_key=key, question_text=text)
        question.options = [QuestionOption(option_text="Yes"), QuestionOption(option_text="No")]
        category.questions.append(question)
    db.add(category)

    folder = category_name.lower()
    images = {name: f"{TestConfig.CDN_URL}/UploadManager/{folder}/{name}" for name in image_names}
    for image_name, image_path in images.items():
        db.add(ImageUpload(
            image_name=image_name,
            folder_name=folder,
            image_path=image_path,
            config_link_id=config_link_id,
            group_id=1,
            user_id=user_id,
        ))
    db.commit()
    db.refresh(category)

    questions = []
    for question in category.questions:
        questions.append({
            "id": question.id,
            "key": question.question_key,
            "yes": question.options[0].id,
            "no": question.options[1].id,
        })
    return {
        "category_id": category.id,
        "category_name": category.category_name,
        "config_link_id": config_link_id,
        "questions": questions,
        "images": images,
    }
