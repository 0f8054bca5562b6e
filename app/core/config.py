"""
Configuration module - loads all env vars using pydantic-settings.
This is the SINGLE SOURCE OF TRUTH for all config values.
"""

from functools import lru_cache
from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # MongoDB
    mongodb_uri: str = "mongodb://localhost:27017"
    mongodb_db: str = "careerhub"

    # JWT Auth
    jwt_secret_key: str = "change-this-secret"
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 60 * 24 * 7  # 7 days

    # Password hashing
    bcrypt_rounds: int = 10
    enforce_password_policy: bool = False

    # OTP
    otp_length: int = 6
    otp_expire_minutes: int = 5
    otp_resend_cooldown_seconds: int = 0  # 0 disables the cooldown

    # Mail (leave smtp_host empty to log OTPs to the console in development)
    smtp_host: str = ""
    smtp_port: int = 587
    smtp_username: str = ""
    smtp_password: str = ""
    smtp_use_tls: bool = True
    smtp_use_ssl: bool = False
    mail_from: str = "no-reply@careerhub.local"
    mail_from_name: str = "Career Hub"
    mail_timeout_seconds: float = 10.0

    # App
    cors_origins: List[str] = ["*"]
    debug: bool = True
    log_level: str = "INFO"

    @property
    def smtp_configured(self) -> bool:
        """True when enough SMTP settings are present to send real mail."""
        return bool(self.smtp_host)

    # Pydantic v2 config
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8"
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
