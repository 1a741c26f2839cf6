from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from devexchange.core.database import get_db
from devexchange.core.security import ensure_owner_or_admin, require_trusted_classification_quiz
from devexchange.models.category_db import category_crud
from devexchange.models.user_db.user_db import User
from devexchange.schemas.category.category_base import (
    CategoryCount,
    CategoryCreate,
    CategoryDetail,
    CategoryUpdate,
    OptionBase,
    OptionCreate,
    OptionOut,
    OptionUpdate,
    QuestionCreate,
    QuestionOut,
    QuestionTextUpdate,
    QuestionUpdate,
)

category_router = APIRouter(tags=["Categories"])

OWNER_REQUIRED = "You do not have permission to modify this category"


def _ensure_category_owner(category, current_user: User):
    ensure_owner_or_admin(category.user_id, current_user, OWNER_REQUIRED)


# Categories
@category_router.get("/categories", response_model=List[CategoryDetail])
def list_categories(db: Session = Depends(get_db)):
    return category_crud.list_categories(db)


@category_router.get("/categories/count", response_model=CategoryCount)
def count_categories(db: Session = Depends(get_db)):
    return CategoryCount(count=category_crud.count_categories(db))


@category_router.get("/categories/featured/{is_featured}", response_model=List[CategoryDetail])
def list_categories_by_featured(is_featured: bool, db: Session = Depends(get_db)):
    return category_crud.list_categories_by_featured(db, is_featured)


@category_router.get("/categories/configlink/{config_link_id}", response_model=List[CategoryDetail])
def list_categories_by_config_link(config_link_id: int, db: Session = Depends(get_db)):
    return category_crud.list_categories_by_config_link(db, config_link_id)


@category_router.get("/categories/user/{user_id}", response_model=List[CategoryDetail])
def list_categories_by_user(user_id: str, db: Session = Depends(get_db)):
    return category_crud.list_categories_by_user(db, user_id)


@category_router.get("/categories/{category_id}", response_model=CategoryDetail)
def get_category(category_id: int, db: Session = Depends(get_db)):
    category = category_crud.get_category(db, category_id)
    if not category:
        raise HTTPException(status_code=404, detail=f"Category with ID {category_id} not found")
    return category


@category_router.post("/categories", response_model=CategoryDetail, status_code=status.HTTP_201_CREATED)
def create_category(
    category_in: CategoryCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_trusted_classification_quiz),
):
    return category_crud.create_category(db, category_in, user_id=current_user.id)


@category_router.put("/categories/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def update_category(
    category_id: int,
    category_in: CategoryUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_trusted_classification_quiz),
):
    if category_id != category_in.id:
        raise HTTPException(status_code=400, detail="ID mismatch")
    category = category_crud.get_category(db, category_id)
    if not category:
        raise HTTPException(status_code=404, detail=f"Category with ID {category_id} not found")
    _ensure_category_owner(category, current_user)
    if not category_crud.update_category(db, category_id, category_in):
        raise HTTPException(status_code=404, detail=f"Category with ID {category_id} not found")
    return None


@category_router.delete("/categories/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_category(
    category_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_trusted_classification_quiz),
):
    category = category_crud.get_category(db, category_id)
    if not category:
        raise HTTPException(status_code=404, detail=f"Category with ID {category_id} not found")
    _ensure_category_owner(category, current_user)
    category_crud.delete_category(db, category_id)
    return None


# Questions
@category_router.get("/categories/{category_id}/questions", response_model=List[QuestionOut])
def list_questions(category_id: int, db: Session = Depends(get_db)):
    if not category_crud.category_exists(db, category_id):
        raise HTTPException(status_code=404, detail=f"Category with ID {category_id} not found")
    return category_crud.list_questions(db, category_id)


@category_router.post(
    "/categories/{category_id}/questions",
    response_model=QuestionOut,
    status_code=status.HTTP_201_CREATED,
)
def create_question(
    category_id: int,
    question_in: QuestionCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_trusted_classification_quiz),
):
    category = category_crud.get_category(db, category_id)
    if not category:
        raise HTTPException(status_code=400, detail=f"Category with ID {category_id} does not exist")
    _ensure_category_owner(category, current_user)
    return category_crud.create_question(db, category_id, question_in)


@category_router.get("/questions/{question_id}", response_model=QuestionOut)
def get_question(question_id: int, db: Session = Depends(get_db)):
    question = category_crud.get_question(db, question_id)
    if not question:
        raise HTTPException(status_code=404, detail=f"Question with ID {question_id} not found")
    return question


@category_router.put("/questions/{question_id}", status_code=status.HTTP_204_NO_CONTENT)
def update_question(
    question_id: int,
    question_in: QuestionUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_trusted_classification_quiz),
):
    if question_id != question_in.id:
        raise HTTPException(status_code=400, detail="ID mismatch")
    target = category_crud.get_category(db, question_in.category_id)
    if not target:
        raise HTTPException(status_code=400, detail=f"Category with ID {question_in.category_id} does not exist")
    question = category_crud.get_question(db, question_id)
    if not question:
        raise HTTPException(status_code=404, detail=f"Question with ID {question_id} not found")
    # moving a question needs both categories
    _ensure_category_owner(question.category, current_user)
    _ensure_category_owner(target, current_user)
    if not category_crud.update_question(db, question_id, question_in):
        raise HTTPException(status_code=404, detail=f"Question with ID {question_id} not found")
    return None


@category_router.put("/questions/{question_id}/text", response_model=QuestionOut)
def update_question_text(
    question_id: int,
    text_in: QuestionTextUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_trusted_classification_quiz),
):
    question = category_crud.get_question(db, question_id)
    if not question:
        raise HTTPException(status_code=404, detail=f"Question with ID {question_id} not found")
    _ensure_category_owner(question.category, current_user)
    question = category_crud.update_question_text(db, question_id, text_in.question_text)
    if not question:
        raise HTTPException(status_code=404, detail=f"Question with ID {question_id} not found")
    return question


@category_router.delete("/questions/{question_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_question(
    question_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_trusted_classification_quiz),
):
    question = category_crud.get_question(db, question_id)
    if not question:
        raise HTTPException(status_code=404, detail=f"Question with ID {question_id} not found")
    _ensure_category_owner(question.category, current_user)
    category_crud.delete_question(db, question_id)
    return None


# Options
@category_router.post("/options", response_model=OptionOut, status_code=status.HTTP_201_CREATED)
def create_option(
    option_in: OptionCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_trusted_classification_quiz),
):
    question = category_crud.get_question(db, option_in.question_id)
    if not question:
        raise HTTPException(status_code=400, detail=f"Question with ID {option_in.question_id} does not exist")
    _ensure_category_owner(question.category, current_user)
    return category_crud.create_option(db, option_in)


@category_router.get("/options/{option_id}", response_model=OptionOut)
def get_option(option_id: int, db: Session = Depends(get_db)):
    option = category_crud.get_option(db, option_id)
    if not option:
        raise HTTPException(status_code=404, detail=f"Option with ID {option_id} not found")
    return option


@category_router.put("/options/{option_id}", status_code=status.HTTP_204_NO_CONTENT)
def update_option(
    option_id: int,
    option_in: OptionUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_trusted_classification_quiz),
):
    if option_id != option_in.id:
        raise HTTPException(status_code=400, detail="ID mismatch")
    target = category_crud.get_question(db, option_in.question_id)
    if not target:
        raise HTTPException(status_code=400, detail=f"Question with ID {option_in.question_id} does not exist")
    option = category_crud.get_option(db, option_id)
    if not option:
        raise HTTPException(status_code=404, detail=f"Option with ID {option_id} not found")
    _ensure_category_owner(option.question.category, current_user)
    _ensure_category_owner(target.category, current_user)
    if not category_crud.update_option(db, option_id, option_in):
        raise HTTPException(status_code=404, detail=f"Option with ID {option_id} not found")
    return None


@category_router.delete("/options/{option_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_option(
    option_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_trusted_classification_quiz),
):
    option = category_crud.get_option(db, option_id)
    if not option:
        raise HTTPException(status_code=404, detail=f"Option with ID {option_id} not found")
    _ensure_category_owner(option.question.category, current_user)
    category_crud.delete_option(db, option_id)
    return None


@category_router.get("/questions/{question_id}/options", response_model=List[OptionOut])
def list_options(question_id: int, db: Session = Depends(get_db)):
    if not category_crud.question_exists(db, question_id):
        raise HTTPException(status_code=404, detail=f"Question with ID {question_id} not found")
    return category_crud.list_options(db, question_id)


@category_router.post(
    "/questions/{question_id}/options",
    response_model=List[OptionOut],
    status_code=status.HTTP_201_CREATED,
)
def add_options(
    question_id: int,
    options_in: List[OptionBase],
    db: Session = Depends(get_db),
    current_user: User = Depends(require_trusted_classification_quiz),
):
    question = category_crud.get_question(db, question_id)
    if not question:
        raise HTTPException(status_code=404, detail=f"Question with ID {question_id} not found")
    _ensure_category_owner(question.category, current_user)
    return category_crud.add_options(db, question_id, options_in)
