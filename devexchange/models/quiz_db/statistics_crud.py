from datetime import datetime
from typing import List

from sqlalchemy import distinct, func
from sqlalchemy.orm import Session

from devexchange.models.category_db.category_db import Category, Question, QuestionOption
from devexchange.models.image_db.image_db import ImageUpload
from devexchange.models.quiz_db.quiz_user_answer import UserAnswer


def answers_for_image(db: Session, category_id: int, image_name: str) -> List[UserAnswer]:
    return (
        db.query(UserAnswer)
        .filter(UserAnswer.category_id == category_id, UserAnswer.image_name == image_name)
        .order_by(UserAnswer.id)
        .all()
    )


def answers_for_category(db: Session, category_id: int) -> List[UserAnswer]:
    return db.query(UserAnswer).filter(UserAnswer.category_id == category_id).order_by(UserAnswer.id).all()


def config_link_ids_for_user(db: Session, user_id: str) -> List[int]:
    rows = (
        db.query(distinct(Category.config_link_id))
        .filter(Category.user_id == user_id)
        .order_by(Category.config_link_id)
        .all()
    )
    return [row[0] for row in rows]


def answered_categories(db: Session, user_id: str):
    return (
        db.query(Category.config_link_id, Category.category_name)
        .join(UserAnswer, UserAnswer.category_id == Category.id)
        .filter(UserAnswer.user_id == user_id)
        .distinct()
        .order_by(Category.config_link_id, Category.category_name)
        .all()
    )


def config_report_rows(db: Session, config_link_ids: List[int]):
    """Answer rows joined with their category, image, question and option.

    Rows are sorted by config link, image name, image path, question id and
    option id. Each row carries its category id so the report can name a
    config link after its lowest category.
    """
    if not config_link_ids:
        return []
    return (
        db.query(
            Category.config_link_id,
            Category.id.label("category_id"),
            Category.category_name,
            ImageUpload.image_name,
            ImageUpload.image_path,
            Question.id.label("question_id"),
            Question.question_text,
            QuestionOption.id.label("option_id"),
            QuestionOption.option_text,
        )
        .join(UserAnswer, UserAnswer.category_id == Category.id)
        .join(ImageUpload, ImageUpload.image_path == UserAnswer.image_path)
        .join(Question, Question.id == UserAnswer.question_id)
        .join(QuestionOption, QuestionOption.id == UserAnswer.question_option_id)
        .filter(Category.config_link_id.in_(sorted(config_link_ids)))
        .order_by(
            Category.config_link_id,
            ImageUpload.image_name,
            ImageUpload.image_path,
            Question.id,
            QuestionOption.id,
            Category.id,
        )
        .all()
    )


def unique_users(db: Session, config_link_id: int, start: datetime, end: datetime) -> int:
    return (
        db.query(func.count(distinct(UserAnswer.user_id)))
        .join(Category, Category.id == UserAnswer.category_id)
        .filter(
            Category.config_link_id == config_link_id,
            UserAnswer.created_date >= start,
            UserAnswer.created_date < end,
        )
        .scalar()
    )
