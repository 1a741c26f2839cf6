from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field

from devexchange.schemas.common.camel_base import CamelModel


class UserCreate(CamelModel):
    name: str = Field(min_length=1, max_length=50)
    email: EmailStr
    user_name: str = Field(min_length=1, max_length=256)
    password: str = Field(min_length=1)


class AdminUserOut(CamelModel):
    id: str
    user_name: str
    email: str
    created_date: Optional[datetime] = None
    is_admin: bool


class UserLookupOut(CamelModel):
    user_id: str
    email: str
    user_name: str
