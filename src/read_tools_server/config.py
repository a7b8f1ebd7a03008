from typing import Literal, Optional

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


DEVELOPMENT_NONCE_SECRET = "read-tools-development-secret-change-me"


class Settings(BaseSettings):
    database_url: str = "sqlite+aiosqlite:///./read_tools.db"
    store_backend: Literal["memory", "database"] = "memory"
    create_tables: bool = True

    # One-time security token (nonce) signing
    nonce_secret: SecretStr = SecretStr(DEVELOPMENT_NONCE_SECRET)
    nonce_ttl_seconds: int = 43200  # 12 hours
    jwt_algo: str = "HS256"

    # Abuse protection
    rate_limiting_enabled: bool = True
    rate_limit_max_requests: int = 30
    rate_limit_window_seconds: int = 300

    # Transcript cache
    cache_ttl_seconds: int = 3600

    # When disabled, an empty transcript is an error instead of a
    # request for client-side extraction.
    frontend_extraction_enabled: bool = True
    content_selector: Optional[str] = None

    endpoint_url: str = "/read-aloud/content"
    ajax_action: str = "read_tools_get_content"
    locale: str = "en_US"

    # Localized labels handed to the page
    reading_text: str = "Reading..."
    pause_text: str = "Pause"
    resume_text: str = "Resume"
    error_text: str = "Error fetching content."
    unsupported_text: str = "Your browser does not support text-to-speech."

    log_level: str = "INFO"
    debug_logging: bool = False

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore"
    )

settings = Settings()
