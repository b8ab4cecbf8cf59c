from typing import Literal

from pydantic_settings import BaseSettings


class Config(BaseSettings):
    """Application configuration loaded from environment variables."""

    database_url: str
    host: str
    port: int
    debug: bool
    jwt_secret: str  # HS256 signing key for session tokens, at least 32 characters
    token_ttl_seconds: int = 24 * 60 * 60
    otp_ttl_seconds: int = 5 * 60
    password_hash_rounds: int = 10  # bcrypt cost of stored hashes, used for seeding and the missing-account check
    otp_backend: Literal["mongo", "memory"] = "mongo"  # "memory" only works with a single process
    cors_origins: list[str] = []
    # SMTP delivery of one-time passcodes
    smtp_host: str | None = None
    smtp_port: int = 587
    smtp_username: str | None = None
    smtp_password: str | None = None
    smtp_sender: str | None = None  # Defaults to smtp_username
    mail_app_name: str = "Classroll"
    # Administrator teacher created on startup when both email and password are set
    admin_email: str | None = None
    admin_password: str | None = None
    admin_name: str = "Default Admin"
    admin_contact_number: str = "9999999999"

    model_config = {
        "env_file": [".env"],
        "env_prefix": "CLASSROLL_",
        "extra": "ignore",
    }
