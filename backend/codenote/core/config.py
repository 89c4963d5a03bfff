"""Application configuration loaded from environment variables.

One ``Settings`` instance (``settings``) is built at import time from the
process environment and an optional ``.env`` file. Field names map to
upper-case variables, e.g. ``session_secret`` to ``SESSION_SECRET``.
"""

from typing import Literal

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Development defaults that must never reach production
# Security: enforced by Settings.check_production_security()
_INSECURE_DEFAULT_PASSWORD = "codenote_dev_password"  # nosec B105
_INSECURE_DEFAULT_SESSION_SECRET = "dev_secret_change_me"  # nosec B105

# 32 characters is the floor for a secret mixed into session tags
_MIN_SESSION_SECRET_LENGTH = 32


class Settings(BaseSettings):
    """Runtime configuration for the API, scripts, and migrations."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # PostgreSQL
    database_host: str = "localhost"
    database_port: int = 5432
    database_name: str = "codenote"
    database_user: str = "codenote_user"
    database_password: str = _INSECURE_DEFAULT_PASSWORD

    # HTTP server; 0.0.0.0 so the API is reachable inside a container
    api_host: str = "0.0.0.0"  # nosec B104
    api_port: int = 8000
    allowed_origins: list[str] = ["http://localhost:3000"]

    environment: str = "development"
    log_level: str = "INFO"

    # Session cookie. Every credential's tag depends on session_secret, so
    # rotating it signs out all users at once.
    session_secret: SecretStr = SecretStr(_INSECURE_DEFAULT_SESSION_SECRET)
    session_cookie_name: str = "session"
    session_cookie_secure: bool = False
    session_cookie_samesite: Literal["lax", "strict", "none"] = "lax"
    session_cookie_domain: str = ""

    # Outbound email (Resend)
    email_from: str = "noreply@codenote.app"
    resend_api_key: SecretStr = SecretStr("")

    # slowapi limit string for POST /auth/verify-code, e.g. "10/minute"
    rate_limit_verify_code: str = "10/minute"
    rate_limit_enabled: bool = True

    @property
    def database_url(self) -> str:
        """asyncpg URL used by the app, the scripts, and Alembic."""
        return (
            f"postgresql+asyncpg://{self.database_user}:{self.database_password}"
            f"@{self.database_host}:{self.database_port}/{self.database_name}"
        )

    def _check_cookie_policy(self) -> None:
        if self.session_cookie_samesite == "none" and not self.session_cookie_secure:
            msg = (
                "SESSION_COOKIE_SECURE must be true when SESSION_COOKIE_SAMESITE=none; "
                "browsers drop SameSite=None cookies that are not Secure."
            )
            raise ValueError(msg)

    def _check_cors(self) -> None:
        if "*" in self.allowed_origins:
            msg = (
                "ALLOWED_ORIGINS must not contain the '*' wildcard: the session "
                "cookie needs credentialed CORS, which forbids it."
            )
            raise ValueError(msg)

    def _check_production_secrets(self) -> None:
        if self.database_password == _INSECURE_DEFAULT_PASSWORD:
            msg = (
                "Cannot use default database password in production. "
                "Set DATABASE_PASSWORD."
            )
            raise ValueError(msg)

        secret = self.session_secret.get_secret_value()
        if not secret or secret == _INSECURE_DEFAULT_SESSION_SECRET:
            msg = (
                "SESSION_SECRET must be set in production. "
                'Generate one with: python -c "import secrets; '
                'print(secrets.token_hex(32))"'
            )
            raise ValueError(msg)
        if len(secret) < _MIN_SESSION_SECRET_LENGTH:
            msg = (
                f"SESSION_SECRET must be at least {_MIN_SESSION_SECRET_LENGTH} "
                "characters long."
            )
            raise ValueError(msg)

    @model_validator(mode="after")
    def check_production_security(self) -> "Settings":
        """Refuse configurations that would weaken the session cookie.

        Security: cookie and CORS rules apply in every environment; secret
        checks apply only when ENVIRONMENT=production.
        """
        self._check_cookie_policy()
        self._check_cors()
        if self.environment == "production":
            self._check_production_secrets()
        return self


settings = Settings()
