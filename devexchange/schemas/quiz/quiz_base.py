from typing import List

from pydantic import Field

from devexchange.schemas.common.camel_base import CamelModel
from devexchange.schemas.category.category_base import QuestionOut


class AnswerSubmission(CamelModel):
    question_id: int
    option_id: int


class ImageAnswersRequest(CamelModel):
    image_name: str = Field(min_length=1)
    image_path: str = Field(min_length=1)
    category_id: int = Field(gt=0)
    answers: List[AnswerSubmission] = Field(min_length=1)


class ImageAnswersResult(CamelModel):
    message: str
    is_image_complete: bool
    answered_count: int
    total_count: int
    user_id: str


class QuizImage(CamelModel):
    image_path: str
    image_name: str


class QuizOut(CamelModel):
    category: str
    category_id: int
    questions: List[QuestionOut]
    images: List[QuizImage]
