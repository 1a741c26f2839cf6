from typing import Optional

from devexchange.schemas.common.camel_base import CamelModel


class LoginRequest(CamelModel):
    email: str
    password: str
    remember: bool = False


class LoginResponse(CamelModel):
    message: str
    user_id: str
    is_admin: bool
    is_trusted_web_connect: bool
    is_trusted_classification_quiz: bool


class RegisterResponse(CamelModel):
    message: str
    user_id: str


class LogoutResponse(CamelModel):
    message: str
    clear_local_storage: bool = True


class VerificationResult(CamelModel):
    message: str
    already_verified: bool
    expires_in: Optional[str] = None
