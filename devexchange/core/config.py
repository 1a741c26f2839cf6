from typing import List, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    APP_NAME: str = "DevExchange API"
    LOG_LEVEL: str = "INFO"

    # JWT / session cookie
    JWT_SECRET_KEY: str
    JWT_ALGORITHM: str = "HS256"
    SESSION_EXPIRE_DAYS: int = 30
    SESSION_COOKIE_NAME: str = "devexchange_session"
    COOKIE_SECURE: bool = True

    # Database
    DATABASE_URL: str
    DATABASE_ECHO: bool = False

    CORS_ORIGINS: List[str] = ["https://localhost:5173"]
    ADMIN_EMAILS: List[str] = []

    # Image storage (S3)
    S3_BUCKET_NAME: str = ""
    AWS_REGION: str = "us-east-1"
    AWS_ACCESS_KEY_ID: Optional[str] = None
    AWS_SECRET_ACCESS_KEY: Optional[str] = None
    S3_ENDPOINT_URL: Optional[str] = None
    S3_PUBLIC_BASE_URL: str = ""
    S3_OBJECT_ACL: Optional[str] = None

    # Verification links
    WEB_URL: str = "https://localhost:5173"
    VERIFICATION_TOKEN_TTL_HOURS: int = 24

    # email
    MAIL_FROM: Optional[str] = None
    MAIL_PASSWORD: Optional[str] = None
    MAIL_HOST: str = "smtp.gmail.com"
    MAIL_PORT: int = 587

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
