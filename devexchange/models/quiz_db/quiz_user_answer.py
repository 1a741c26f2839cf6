from datetime import datetime

from sqlalchemy import Column, String, Boolean, Integer, DateTime, Index

from devexchange.core.database import Base

USER_ID_MAX_LENGTH = 64


class UserAnswer(Base):
    """One user's choice for one question on one image.

    Category, question and option ids are checked when the answer is
    submitted but carry no foreign keys, so deleting a category later leaves
    its answer history in place. ``user_id`` is either a registered user id
    or an anonymous ``session-...`` id.
    """

    __tablename__ = "user_answers"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(USER_ID_MAX_LENGTH), nullable=False, index=True)
    category_id = Column(Integer, nullable=False, index=True)
    category_name = Column(String(255), nullable=False)
    question_id = Column(Integer, nullable=False)
    question_key = Column(String(255), nullable=False)
    question_option_id = Column(Integer, nullable=False)
    image_name = Column(String(255), nullable=False)
    image_path = Column(String(1024), nullable=False)
    is_question_answered = Column(Boolean, default=False, nullable=False)
    is_image_answered = Column(Boolean, default=False, nullable=False)
    session_id = Column(String(64), nullable=True)
    created_date = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)

    __table_args__ = (
        Index("ix_user_answers_user_question_image", "user_id", "question_id", "image_name"),
    )
