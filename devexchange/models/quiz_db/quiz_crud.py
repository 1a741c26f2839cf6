import logging
from typing import Dict

from sqlalchemy import distinct, func, select
from sqlalchemy.orm import Session

from devexchange.core.errors import BadRequestError, NotFoundError
from devexchange.models.category_db.category_db import Category, Question, QuestionOption
from devexchange.models.image_db.image_crud import list_images_by_config_link
from devexchange.models.quiz_db.quiz_user_answer import UserAnswer
from devexchange.schemas.quiz.quiz_base import ImageAnswersRequest

logger = logging.getLogger(__name__)

ANONYMOUS_PREFIX = "session-"


def build_quiz(db: Session, config_link_id: int):
    category = (
        db.query(Category)
        .filter(Category.config_link_id == config_link_id)
        .order_by(Category.id)
        .first()
    )
    if not category:
        return None
    return category, list_images_by_config_link(db, config_link_id)


def _answered_count(db: Session, user_id: str, image_name: str, category_id: int) -> int:
    category_questions = select(Question.id).where(Question.category_id == category_id)
    return (
        db.query(func.count(distinct(UserAnswer.question_id)))
        .filter(
            UserAnswer.user_id == user_id,
            UserAnswer.image_name == image_name,
            UserAnswer.is_question_answered.is_(True),
            UserAnswer.question_id.in_(category_questions),
        )
        .scalar()
    )


def submit_image_answers(db: Session, user_id: str, request: ImageAnswersRequest) -> dict:
    """Validate and upsert one user's answers for one image.

    Every reference is checked before anything is written, so a rejected
    batch leaves the table untouched. A question answered twice in the same
    batch keeps the last option.
    """
    category = db.query(Category).filter(Category.id == request.category_id).first()
    if not category:
        raise NotFoundError(f"Category with ID {request.category_id} not found")

    question_ids = list(dict.fromkeys(answer.question_id for answer in request.answers))
    questions = {
        question.id: question
        for question in db.query(Question)
        .filter(Question.id.in_(question_ids), Question.category_id == category.id)
        .all()
    }
    missing = [question_id for question_id in question_ids if question_id not in questions]
    if missing:
        raise BadRequestError(
            "Questions not found in category {}: {}".format(category.id, ", ".join(str(i) for i in missing))
        )

    option_owner = dict(
        db.query(QuestionOption.id, QuestionOption.question_id)
        .filter(QuestionOption.id.in_(sorted({answer.option_id for answer in request.answers})))
        .all()
    )
    selected: Dict[int, int] = {}
    for answer in request.answers:
        if option_owner.get(answer.option_id) != answer.question_id:
            raise BadRequestError(f"Option {answer.option_id} is not valid for question {answer.question_id}")
        selected[answer.question_id] = answer.option_id

    existing = {}
    for row in (
        db.query(UserAnswer)
        .filter(
            UserAnswer.user_id == user_id,
            UserAnswer.image_name == request.image_name,
            UserAnswer.question_id.in_(list(selected)),
        )
        .order_by(UserAnswer.id)
        .all()
    ):
        existing.setdefault(row.question_id, row)

    session_id = user_id if user_id.startswith(ANONYMOUS_PREFIX) else None
    for question_id, option_id in selected.items():
        row = existing.get(question_id)
        if row:
            row.question_option_id = option_id
            row.image_path = request.image_path
            row.is_question_answered = True
        else:
            question = questions[question_id]
            db.add(UserAnswer(
                user_id=user_id,
                category_id=category.id,
                category_name=category.category_name,
                question_id=question.id,
                question_key=question.question_key,
                question_option_id=option_id,
                image_name=request.image_name,
                image_path=request.image_path,
                is_question_answered=True,
                session_id=session_id,
            ))
    db.flush()

    total = db.query(Question).filter(Question.category_id == category.id).count()
    answered = _answered_count(db, user_id, request.image_name, category.id)
    complete = answered == total

    db.query(UserAnswer).filter(
        UserAnswer.user_id == user_id,
        UserAnswer.image_name == request.image_name,
        UserAnswer.category_id == category.id,
    ).update({UserAnswer.is_image_answered: complete}, synchronize_session=False)
    db.commit()

    logger.info(
        "User %s answered %d/%d questions of category %s on %s",
        user_id, answered, total, category.id, request.image_name,
    )
    return {
        "message": "Answers submitted successfully",
        "is_image_complete": complete,
        "answered_count": answered,
        "total_count": total,
        "user_id": user_id,
    }
