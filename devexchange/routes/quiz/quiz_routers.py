import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Response
from sqlalchemy.orm import Session

from devexchange.core.database import get_db
from devexchange.models.quiz_db.quiz_crud import ANONYMOUS_PREFIX, build_quiz, submit_image_answers
from devexchange.models.quiz_db.quiz_user_answer import USER_ID_MAX_LENGTH
from devexchange.schemas.category.category_base import QuestionOut
from devexchange.schemas.quiz.quiz_base import ImageAnswersRequest, ImageAnswersResult, QuizImage, QuizOut

quiz_router = APIRouter(prefix="/QuizCreationController", tags=["Quiz"])

USER_ID_HEADER = "userId"


def new_anonymous_id() -> str:
    return f"{ANONYMOUS_PREFIX}{uuid.uuid4().hex}"


@quiz_router.get("/CreateQuiz/{config_link_id}", response_model=QuizOut)
def create_quiz(config_link_id: int, db: Session = Depends(get_db)):
    quiz = build_quiz(db, config_link_id)
    if not quiz:
        raise HTTPException(status_code=404, detail="Category not found")

    category, images = quiz
    return QuizOut(
        category=category.category_name,
        category_id=category.id,
        questions=[QuestionOut.model_validate(question) for question in category.questions],
        images=[QuizImage(image_path=image.image_path, image_name=image.image_name) for image in images],
    )


@quiz_router.post("/SubmitImageAnswers", response_model=ImageAnswersResult)
def submit_answers(
    request: ImageAnswersRequest,
    response: Response,
    user_id: Optional[str] = Header(None, alias=USER_ID_HEADER),
    db: Session = Depends(get_db),
):
    if user_id and len(user_id) > USER_ID_MAX_LENGTH:
        raise HTTPException(status_code=400, detail=f"userId must be at most {USER_ID_MAX_LENGTH} characters")
    # the client echoes the minted id on the rest of the attempt
    effective_user_id = user_id or new_anonymous_id()
    result = submit_image_answers(db, effective_user_id, request)
    response.headers[USER_ID_HEADER] = effective_user_id
    return ImageAnswersResult(**result)
