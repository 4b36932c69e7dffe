"""Environment-driven settings, read once at startup."""

from pathlib import Path

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parent.parent
_ENV_PATH = BASE_DIR / ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_ENV_PATH),
        env_ignore_empty=True,
        extra="ignore",
    )

    DEBUG: bool = True  # Set to False in production
    SECRET_KEY: SecretStr = SecretStr("insecure-development-key-change-me")
    ALLOWED_HOSTS: str = "*"  # comma separated

    # Database
    DB_ENGINE: str = "django.db.backends.sqlite3"
    DB_NAME: str = str(BASE_DIR / "db.sqlite3")
    DB_USER: str = ""
    DB_PASSWORD: SecretStr = SecretStr("")
    DB_HOST: str = ""
    DB_PORT: str = ""
    DB_TIMEOUT: int = 20  # seconds a SQLite writer waits for the lock

    # Mail
    EMAIL_BACKEND: str = "django.core.mail.backends.console.EmailBackend"
    DEFAULT_FROM_EMAIL: str = "Pearl Events <no-reply@pearlsevents.com>"
    MAIL_TO_ADMIN: str = "admin@pearlsevents.com"
    MAIL_TO_PROJECT_OWNER: str = ""
    FRONTEND_URL: str = "https://admin-pearlsevents.vercel.app"

    LOG_LEVEL: str = "INFO"
    BOOKINGS_PAGE_SIZE: int = 15

    @property
    def allowed_hosts(self) -> list[str]:
        return [host.strip() for host in self.ALLOWED_HOSTS.split(",") if host.strip()]


env = Settings()
