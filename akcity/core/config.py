import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

DEFAULT_SECRET = "change-me"


class Settings:
    """Centralised application configuration sourced from environment variables."""

    def __init__(self) -> None:
        load_dotenv()
        self.database_path = Path(os.getenv("DATABASE_PATH", "data/akcity.db")).resolve()
        self.jwt_secret = os.getenv("JWT_SECRET", DEFAULT_SECRET)
        self.jwt_refresh_secret = os.getenv("JWT_REFRESH_SECRET", DEFAULT_SECRET + "-refresh")
        self.jwt_access_exp_minutes = self._get_int("JWT_ACCESS_EXP_MINUTES", default=15)
        self.jwt_refresh_exp_days = self._get_int("JWT_REFRESH_EXP_DAYS", default=7)
        self.jwt_issuer = os.getenv("JWT_ISSUER", "akcity-api")
        self.jwt_audience = os.getenv("JWT_AUDIENCE", "akcity-client")
        self.bcrypt_rounds = self._get_int("BCRYPT_ROUNDS", default=12)
        self.auth_rate_limit_max = self._get_int("AUTH_RATE_LIMIT_MAX", default=5)
        self.auth_rate_limit_window_minutes = self._get_int("AUTH_RATE_LIMIT_WINDOW", default=15)
        self.smtp_host = os.getenv("SMTP_HOST", "")
        self.smtp_port = self._get_int("SMTP_PORT", default=587)
        self.smtp_username = os.getenv("SMTP_USERNAME", "")
        self.smtp_password = os.getenv("SMTP_PASSWORD", "")
        self.smtp_from_email = os.getenv("SMTP_FROM_EMAIL", "")
        self.frontend_base_url = os.getenv("FRONTEND_BASE_URL", "http://localhost:3000")
        origins = os.getenv("CORS_ALLOW_ORIGINS")
        if origins:
            self.cors_allow_origins = [item.strip() for item in origins.split(",") if item.strip()]
        else:
            self.cors_allow_origins = ["http://localhost:3000"]

    @property
    def uses_default_secrets(self) -> bool:
        return self.jwt_secret.startswith(DEFAULT_SECRET) or self.jwt_refresh_secret.startswith(DEFAULT_SECRET)

    @staticmethod
    def _get_int(key: str, default: Optional[int] = None) -> int:
        value = os.getenv(key)
        if value is None:
            if default is None:
                raise RuntimeError(f"Missing required environment variable: {key}")
            return default
        try:
            return int(value)
        except ValueError as exc:
            raise RuntimeError(f"Environment variable {key} must be an integer") from exc
