from datetime import datetime

from sqlalchemy import Column, String, Boolean, Integer, DateTime, ForeignKey

from devexchange.core.database import Base


class ClassificationQuizRole(Base):
    __tablename__ = "classification_quiz_roles"

    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    is_trusted_classification_quiz = Column(Boolean, default=False, nullable=False)


class WebConnectRole(Base):
    __tablename__ = "web_connect_roles"

    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    is_trusted_web_connect = Column(Boolean, default=False, nullable=False)


class VerificationTokenMixin:
    id = Column(Integer, primary_key=True, index=True)
    token = Column(String(128), unique=True, nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    expires_at = Column(DateTime, nullable=False)
    verified_at = Column(DateTime, nullable=True)

    def is_expired(self, now: datetime = None) -> bool:
        return self.expires_at < (now or datetime.utcnow())


class ClassificationQuizVerification(VerificationTokenMixin, Base):
    __tablename__ = "classification_quiz_verifications"

    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)


class WebConnectVerification(VerificationTokenMixin, Base):
    __tablename__ = "web_connect_verifications"

    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
