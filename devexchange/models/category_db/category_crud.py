import logging
from datetime import datetime
from typing import List

from sqlalchemy import func
from sqlalchemy.orm import Session

from devexchange.core.database import commit_update
from devexchange.core.errors import BadRequestError
from devexchange.models.category_db.category_db import Category, Question, QuestionOption
from devexchange.models.image_db.image_db import ImageUpload
from devexchange.models.user_db.user_db import User
from devexchange.schemas.category.category_base import (
    CategoryCreate,
    CategoryUpdate,
    OptionBase,
    OptionCreate,
    OptionUpdate,
    QuestionCreate,
    QuestionUpdate,
)
from devexchange.schemas.category.full_category import FullCategory

logger = logging.getLogger(__name__)


# Existence helpers
def category_exists(db: Session, category_id: int) -> bool:
    return db.query(Category.id).filter(Category.id == category_id).first() is not None


def question_exists(db: Session, question_id: int) -> bool:
    return db.query(Question.id).filter(Question.id == question_id).first() is not None


# Categories
def get_category(db: Session, category_id: int):
    return db.query(Category).filter(Category.id == category_id).first()


def list_categories(db: Session) -> List[Category]:
    return db.query(Category).order_by(Category.id).all()


def count_categories(db: Session) -> int:
    return db.query(Category).count()


def list_categories_by_user(db: Session, user_id: str) -> List[Category]:
    return db.query(Category).filter(Category.user_id == user_id).order_by(Category.id).all()


def list_categories_by_featured(db: Session, is_featured: bool) -> List[Category]:
    return (
        db.query(Category)
        .filter(Category.is_featured == is_featured, Category.is_active.is_(True))
        .order_by(Category.id)
        .all()
    )


def list_categories_by_config_link(db: Session, config_link_id: int) -> List[Category]:
    return (
        db.query(Category)
        .filter(Category.config_link_id == config_link_id, Category.is_active.is_(True))
        .order_by(Category.id)
        .all()
    )


def get_newest_category_for_user(db: Session, user_id: str):
    return (
        db.query(Category)
        .filter(Category.user_id == user_id)
        .order_by(Category.created_date.desc(), Category.id.desc())
        .first()
    )


def next_config_link_id(db: Session) -> int:
    return (db.query(func.max(Category.config_link_id)).scalar() or 0) + 1


def create_category(db: Session, category: CategoryCreate, user_id: str = None):
    db_category = Category(
        category_name=category.category_name,
        created_date=category.created_date or datetime.utcnow(),
        config_link_id=category.config_link_id,
        user_id=user_id,
        is_active=category.is_active,
        is_featured=category.is_featured,
    )
    db.add(db_category)
    db.commit()
    db.refresh(db_category)
    logger.info("Created category %s (config link %s)", db_category.id, db_category.config_link_id)
    return db_category


def update_category(db: Session, category_id: int, updates: CategoryUpdate):
    category = get_category(db, category_id)
    if not category:
        return None

    # created_date and owner stay as stored
    category.category_name = updates.category_name
    category.config_link_id = updates.config_link_id
    category.is_active = updates.is_active
    category.is_featured = updates.is_featured

    if not commit_update(db, Category, category_id):
        return None
    db.refresh(category)
    return category


def delete_category(db: Session, category_id: int):
    category = get_category(db, category_id)
    if not category:
        return None
    db.delete(category)
    db.commit()
    logger.info("Deleted category %s with its questions and options", category_id)
    return category


def set_category_featured(db: Session, category_id: int, is_featured: bool):
    category = get_category(db, category_id)
    if not category:
        return None
    category.is_featured = is_featured
    db.commit()
    db.refresh(category)
    return category


def set_category_active(db: Session, category_id: int, is_active: bool):
    category = get_category(db, category_id)
    if not category:
        return None
    category.is_active = is_active
    db.commit()
    db.refresh(category)
    return category


# Questions
def get_question(db: Session, question_id: int):
    return db.query(Question).filter(Question.id == question_id).first()


def list_questions(db: Session, category_id: int) -> List[Question]:
    return db.query(Question).filter(Question.category_id == category_id).order_by(Question.id).all()


def create_question(db: Session, category_id: int, question: QuestionCreate):
    db_question = Question(
        question_key=question.question_key,
        question_text=question.question_text,
        category_id=category_id,
    )
    db_question.options = [QuestionOption(option_text=option.option_text) for option in question.options]
    db.add(db_question)
    db.commit()
    db.refresh(db_question)
    return db_question


def update_question(db: Session, question_id: int, updates: QuestionUpdate):
    question = get_question(db, question_id)
    if not question:
        return None

    question.question_key = updates.question_key
    question.question_text = updates.question_text
    question.category_id = updates.category_id

    if not commit_update(db, Question, question_id):
        return None
    db.refresh(question)
    return question


def update_question_text(db: Session, question_id: int, question_text: str):
    question = get_question(db, question_id)
    if not question:
        return None
    question.question_text = question_text
    if not commit_update(db, Question, question_id):
        return None
    db.refresh(question)
    return question


def delete_question(db: Session, question_id: int):
    question = get_question(db, question_id)
    if not question:
        return None
    db.delete(question)
    db.commit()
    return question


# Options
def get_option(db: Session, option_id: int):
    return db.query(QuestionOption).filter(QuestionOption.id == option_id).first()


def list_options(db: Session, question_id: int) -> List[QuestionOption]:
    return (
        db.query(QuestionOption)
        .filter(QuestionOption.question_id == question_id)
        .order_by(QuestionOption.id)
        .all()
    )


def create_option(db: Session, option: OptionCreate):
    db_option = QuestionOption(option_text=option.option_text, question_id=option.question_id)
    db.add(db_option)
    db.commit()
    db.refresh(db_option)
    return db_option


def add_options(db: Session, question_id: int, options: List[OptionBase]) -> List[QuestionOption]:
    db_options = [QuestionOption(option_text=option.option_text, question_id=question_id) for option in options]
    db.add_all(db_options)
    db.commit()
    for db_option in db_options:
        db.refresh(db_option)
    return db_options


def update_option(db: Session, option_id: int, updates: OptionUpdate):
    option = get_option(db, option_id)
    if not option:
        return None

    option.option_text = updates.option_text
    option.question_id = updates.question_id

    if not commit_update(db, QuestionOption, option_id):
        return None
    db.refresh(option)
    return option


def delete_option(db: Session, option_id: int):
    option = get_option(db, option_id)
    if not option:
        return None
    db.delete(option)
    db.commit()
    return option


# Full category upload
def create_full_category(db: Session, user_id: str, full_category: FullCategory) -> Category:
    """Create a category with its questions and options in one go.

    When the user already owns a category of the same name the questions are
    appended to it, provided none of their keys is already taken there.
    """
    category = (
        db.query(Category)
        .filter(Category.category_name == full_category.category_name, Category.user_id == user_id)
        .first()
    )

    if category:
        existing_keys = {question.question_key for question in category.questions}
        duplicates = [q.question_key for q in full_category.questions if q.question_key in existing_keys]
        if duplicates:
            raise BadRequestError(
                "The following question keys already exist, please change them and try again: "
                + ", ".join(duplicates)
            )
    else:
        category = Category(
            category_name=full_category.category_name,
            created_date=datetime.utcnow(),
            config_link_id=next_config_link_id(db),
            user_id=user_id,
            is_active=True,
            is_featured=False,
        )
        db.add(category)

    for question in full_category.questions:
        db_question = Question(question_key=question.question_key, question_text=question.question_text)
        db_question.options = [QuestionOption(option_text=option.option_text) for option in question.options]
        category.questions.append(db_question)

    db.commit()
    db.refresh(category)
    logger.info(
        "Full category %s uploaded by %s with %d questions",
        category.id, user_id, len(full_category.questions),
    )
    return category


# Catalogue of active categories
def list_catalogue(db: Session, featured_only: bool = False) -> dict:
    query = (
        db.query(Category, User.user_name)
        .outerjoin(User, User.id == Category.user_id)
        .filter(Category.is_active.is_(True))
    )
    if featured_only:
        query = query.filter(Category.is_featured.is_(True))
    rows = query.order_by(Category.id).all()

    config_link_ids = {category.config_link_id for category, _ in rows}
    cover_images = {}
    if config_link_ids:
        images = (
            db.query(ImageUpload)
            .filter(ImageUpload.config_link_id.in_(sorted(config_link_ids)), ImageUpload.is_active.is_(True))
            .order_by(ImageUpload.id)
            .all()
        )
        for image in images:
            cover_images.setdefault(image.config_link_id, image.image_path)

    owners = {}
    for category, user_name in rows:
        owner = owners.setdefault(
            category.user_id,
            {"userId": category.user_id, "userName": user_name or "Unknown User", "categories": []},
        )
        owner["categories"].append({
            "id": category.id,
            "categoryName": category.category_name,
            "configLinkId": category.config_link_id,
            "userId": category.user_id,
            "userName": user_name,
            "imagePath": cover_images.get(category.config_link_id),
        })

    return {
        "success": True,
        "categoriesByUser": list(owners.values()),
        "totalCategories": len(rows),
    }
