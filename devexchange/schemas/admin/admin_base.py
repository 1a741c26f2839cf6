from typing import Optional

from devexchange.schemas.common.camel_base import CamelModel


class UpdateAdminRequest(CamelModel):
    user_id: str
    is_admin: bool


class UpdateWebConnectTrustRequest(CamelModel):
    user_id: str
    is_trusted_web_connect: bool


class UpdateClassificationTrustRequest(CamelModel):
    user_id: str
    is_trusted_classification_quiz: bool


class CreateRoleRequest(CamelModel):
    user_id: str


class AdminFlag(CamelModel):
    is_admin: bool


class WebConnectFlag(CamelModel):
    is_trusted_web_connect: bool


class ClassificationQuizFlag(CamelModel):
    is_trusted_classification_quiz: bool


class WebConnectRoleOut(CamelModel):
    user_id: str
    is_trusted_web_connect: bool


class ClassificationQuizRoleOut(CamelModel):
    user_id: str
    is_trusted_classification_quiz: bool


class UserIdOut(CamelModel):
    user_id: Optional[str] = None
