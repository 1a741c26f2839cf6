from typing import List, Optional

from pydantic import Field

from devexchange.schemas.common.camel_base import CamelModel
from devexchange.schemas.category.category_base import OptionBase, QuestionBase


class FullQuestion(QuestionBase):
    options: List[OptionBase] = []


class FullCategory(CamelModel):
    category_name: str = Field(min_length=1, max_length=255)
    questions: List[FullQuestion] = []


class CategorySummary(CamelModel):
    id: int
    category_name: str


class FullCategoryResult(CamelModel):
    success: bool = True
    message: str
    category: CategorySummary


class CatalogueCategory(CamelModel):
    id: int
    category_name: str
    config_link_id: int
    user_id: Optional[str] = None
    user_name: Optional[str] = None
    image_path: Optional[str] = None


class CatalogueOwner(CamelModel):
    user_id: Optional[str] = None
    user_name: str
    categories: List[CatalogueCategory]


class CatalogueOut(CamelModel):
    success: bool = True
    categories_by_user: List[CatalogueOwner]
    total_categories: int
