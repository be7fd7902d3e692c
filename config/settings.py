"""
Application settings loaded from environment variables.

Store URL, mail identity and signing secret have no defaults: the process
refuses to start when any of them is missing or blank.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # ── Required ─────────────────────────────────────────────────────────
    database_url: str = Field(..., min_length=1)
    mail_user: str = Field(..., min_length=1)
    mail_password: str = Field(..., min_length=1)
    secret_key: str = Field(..., min_length=1)

    # ── Server ───────────────────────────────────────────────────────────
    port: int = 3000
    host: str = "0.0.0.0"
    debug: bool = False
    cors_origins: list = ["*"]

    # ── Database ─────────────────────────────────────────────────────────
    db_pool_size: int = 10          # ignored for SQLite
    db_max_overflow: int = 20
    db_pool_recycle: int = 3600

    # ── Credentials & tokens ─────────────────────────────────────────────
    bcrypt_rounds: int = 10
    jwt_algorithm: str = "HS256"

    # ── Mail ─────────────────────────────────────────────────────────────
    mail_backend: str = "smtp"      # "smtp" | "console"
    mail_from: Optional[str] = None  # defaults to mail_user
    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = 465
    smtp_use_ssl: bool = True       # False → plain SMTP + STARTTLS
    smtp_timeout: float = 30.0

    model_config = {
        "env_file": ".env",
        "case_sensitive": False,
        "frozen": True,
        "extra": "ignore",
    }

    @property
    def sender_address(self) -> str:
        return self.mail_from or self.mail_user


@lru_cache
def get_settings() -> Settings:
    """Load settings once per process."""
    return Settings()
