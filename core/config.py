"""
core/config.py -- Centralized application configuration via pydantic-settings.

All environment variable reads for the job board happen here. No module should
call os.getenv() or os.environ.get() directly -- import get_settings() instead.

Design patterns used:
  Singleton via lru_cache: get_settings() instantiates Settings once at first
      call and returns the cached instance on every subsequent call. The
      signing secret is therefore read once at process start and is
      read-only afterwards.

  BaseSettings (pydantic-settings): Reads values from environment variables
      and an optional .env file automatically. Field names map to env var names
      (e.g. secret_key -> SECRET_KEY). Type coercion and validation are built in.

Security notes:
  SECRET_KEY ships with a compiled-in default so the service starts with no
  configuration at all. That default is public (it is in this file) and any
  token signed with it can be forged. A warning is logged whenever it is in
  effect; operators MUST set SECRET_KEY for any real deployment.

  SECRET_KEY shorter than 32 chars is rejected outright. JWT HS256 signing
  relies on key entropy -- a short key weakens it.

  The superuser pair (SUPERUSER_EMAIL / SUPERUSER_PASSWORD) is recognised only
  by the login operation and is never stored as a User record.

Layer rule: core/ is the kernel. This module may not import from api/,
auth/ or jobs/.
"""

import logging
from functools import lru_cache
from pathlib import Path

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger("jobboard.config")

INSECURE_DEFAULT_SECRET_KEY = "jobboard-insecure-default-secret-key-change-me"

_DEFAULT_DB_URL = f"sqlite:///{Path(__file__).resolve().parent.parent / 'jobboard.db'}"


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file.

    All fields have defaults so Settings() can be instantiated in test
    environments without a real .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ------------------------------------------------------------------
    # Core
    # ------------------------------------------------------------------

    debug: bool = False
    secret_key: str = INSECURE_DEFAULT_SECRET_KEY
    log_level: str = "INFO"

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------

    token_expire_seconds: int = Field(default=3600, gt=0)
    superuser_email: str = "admin@jobportal.com"
    superuser_password: str = "admin123"
    # bcrypt cost factor. Tests lower this to keep the suite fast.
    bcrypt_rounds: int = Field(default=12, ge=4, le=31)
    login_rate_limit: str = "10/minute"

    # ------------------------------------------------------------------
    # Storage
    # ------------------------------------------------------------------

    database_url: str = _DEFAULT_DB_URL

    # ------------------------------------------------------------------
    # HTTP
    # ------------------------------------------------------------------

    host: str = "0.0.0.0"  # noqa: S104 # nosec B104 -- container deployments bind all interfaces
    port: int = 10000
    cors_origins: list[str] = [
        "https://frontend-jobportal-wt9b.onrender.com",
        "http://localhost:3000",
    ]
    allowed_hosts: list[str] = ["*"]

    # ------------------------------------------------------------------
    # Validators
    # ------------------------------------------------------------------

    @model_validator(mode="after")
    def validate_secret_key(self) -> "Settings":
        """Reject short keys and warn loudly when the compiled-in key is used.

        The default key is left usable on purpose so a fresh checkout runs;
        it is a known weakness, not a production setting.
        """
        if len(self.secret_key) < 32:
            raise ValueError("SECRET_KEY must be at least 32 characters.")
        if self.secret_key == INSECURE_DEFAULT_SECRET_KEY:
            logger.warning(
                "WARNING: Using the compiled-in default SECRET_KEY. "
                "Tokens can be forged by anyone who has read the source. "
                "Set SECRET_KEY before deploying."
            )
        return self


@lru_cache
def get_settings() -> Settings:
    """Return the application Settings singleton.

    In tests: call get_settings.cache_clear() between test cases if you need
    to inject different environment variables.
    """
    return Settings()
