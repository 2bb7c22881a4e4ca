"""Application configuration via environment variables."""
from typing import Optional

from pydantic_settings import BaseSettings

INSECURE_DEFAULT_SECRET = "change-me-insecure-dev-secret"


class Settings(BaseSettings):
    """App settings loaded from .env or environment."""

    DATABASE_URL: str = "sqlite:///./journal.db"
    CORS_ORIGINS: str = "http://localhost:3000"
    LOG_LEVEL: str = "INFO"

    # Session tokens
    JWT_SECRET_KEY: str = INSECURE_DEFAULT_SECRET
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # Credentials and second factor
    BCRYPT_ROUNDS: int = 10
    VERIFICATION_CODE_TTL_MINUTES: int = 10

    # Verification code delivery: "log" or "smtp"
    NOTIFIER_BACKEND: str = "log"
    SMTP_HOST: str = "localhost"
    SMTP_PORT: int = 587
    SMTP_USERNAME: Optional[str] = None
    SMTP_PASSWORD: Optional[str] = None
    SMTP_SENDER: str = "journal@localhost"
    SMTP_USE_TLS: bool = True

    # Optional admin account created at startup
    ADMIN_EMAIL: Optional[str] = None
    ADMIN_PASSWORD: Optional[str] = None

    class Config:
        env_file = ".env"


settings = Settings()
