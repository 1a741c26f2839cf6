import uuid
from datetime import datetime

from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from devexchange.core.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()), index=True)
    user_name = Column(String(256), unique=True, nullable=False)
    email = Column(String(256), unique=True, nullable=False, index=True)
    name = Column(String(50), nullable=False)
    is_admin = Column(Boolean, default=False, nullable=False)
    created_date = Column(DateTime, default=datetime.utcnow)
    modified_date = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    last_login = Column(DateTime, default=datetime.utcnow)

    credential = relationship(
        "UserCredential", back_populates="user", uselist=False, cascade="all, delete-orphan"
    )


class UserCredential(Base):
    """Password material kept apart from the profile record."""

    __tablename__ = "user_credentials"

    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    hashed_password = Column(String, nullable=False)

    user = relationship("User", back_populates="credential")
