"""
App configuration - using pydantic settings for env vars
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """App settings - loads from .env file"""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    # basic app stuff
    app_name: str = Field(default="pastenote")
    app_version: str = Field(default="1.0.0")
    debug: bool = Field(default=False)  # set to True for dev

    # server config
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3000)
    reload: bool = Field(default=False)

    # DB settings
    database_url: str = Field(default="sqlite+aiosqlite:///./database.sqlite")
    database_echo: bool = Field(default=False)  # useful for debugging

    # view accounting
    stats_flush_interval_seconds: float = Field(
        default=10.0, gt=0, description="Seconds between view count flushes"
    )

    # note rules
    min_text_length: int = Field(default=10, description="Minimum length of a non-empty note")
    max_text_length: int = Field(default=50000, description="Maximum length of a note")
    fraud_view_threshold: int = Field(
        default=100, description="Views a note needs before link density is checked"
    )
    fraud_link_percent_threshold: int = Field(
        default=7, description="Link share of the text (percent) that marks a note as spam"
    )

    # captcha
    skip_captcha: bool = Field(default=False, description="Disable robot checks (dev only)")
    recaptcha_secret: str = Field(default="", description="reCAPTCHA server secret")
    recaptcha_verify_url: str = Field(
        default="https://www.google.com/recaptcha/api/siteverify"
    )
    recaptcha_timeout_seconds: float = Field(default=5.0)

    # page content
    ads_file: Optional[str] = Field(default=None, description="Markdown shown instead of ads-free notes")
    tos_file: str = Field(default="assets/TOS.md", description="Terms of service markdown")

    # abuse reports
    smtp_host: Optional[str] = Field(default=None, description="SMTP relay for report e-mails")
    smtp_port: int = Field(default=25)
    smtp_from: str = Field(default="pastenote@localhost")
    report_email_to: Optional[str] = Field(default=None, description="Where abuse reports go")

    # CORS
    cors_origins: list[str] = Field(
        default=["http://localhost:3000"], description="CORS allowed origins"
    )
    cors_allow_credentials: bool = Field(default=True, description="CORS allow credentials")

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_dir: str = Field(default="logs", description="Directory for rotating log files")
    log_to_file: bool = Field(default=True, description="Write rotating log files")

    # Environment
    environment: str = Field(default="development", description="Environment name")


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Get application settings."""
    return settings
