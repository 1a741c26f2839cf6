from datetime import datetime
from typing import List, Optional

from pydantic import Field

from devexchange.schemas.common.camel_base import CamelModel


class OptionBase(CamelModel):
    option_text: str = Field(min_length=1)


class OptionCreate(OptionBase):
    question_id: int


class OptionUpdate(OptionCreate):
    id: int


class OptionOut(OptionCreate):
    id: int


class QuestionBase(CamelModel):
    question_key: str = Field(min_length=1, max_length=255)
    question_text: str = Field(min_length=1)


class QuestionCreate(QuestionBase):
    options: List[OptionBase] = []


class QuestionUpdate(QuestionBase):
    id: int
    category_id: int


class QuestionTextUpdate(CamelModel):
    question_text: str = Field(min_length=1)


class QuestionOut(QuestionBase):
    id: int
    category_id: int
    options: List[OptionOut] = []


class CategoryBase(CamelModel):
    category_name: str = Field(min_length=1, max_length=255)
    config_link_id: int = 0
    is_active: bool = True
    is_featured: bool = False


class CategoryCreate(CategoryBase):
    created_date: Optional[datetime] = None


class CategoryUpdate(CategoryBase):
    id: int


class CategoryOut(CategoryBase):
    id: int
    created_date: datetime
    user_id: Optional[str] = None


class CategoryDetail(CategoryOut):
    questions: List[QuestionOut] = []


class CategoryCount(CamelModel):
    count: int


class CategoryFeatureUpdate(CamelModel):
    category_id: int
    is_featured: bool


class CategoryActiveUpdate(CamelModel):
    category_id: int
    is_active: bool


class SuccessMessage(CamelModel):
    success: bool = True
    message: str
