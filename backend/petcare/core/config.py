"""Module: config."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


# Centralized runtime configuration loaded from environment variables.
class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Primary SQLAlchemy connection string for the backend database.
    database_url: str = "sqlite:///./petcare.db"
    sql_echo: bool = False

    # Signing material for bearer tokens issued at login.
    jwt_secret: str = "change-me-dev-secret"
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60

    # SPA dev servers allowed to call the API.
    cors_origins: list[str] = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]

    log_level: str = "INFO"

    # Appointment workflow tuning.
    appointment_conflict_window_minutes: int = 30

    # Vaccinations due within this many days are classified as upcoming.
    vaccination_upcoming_window_days: int = 30

    # Notification inbox behaviour.
    notification_page_size: int = 50
    notification_recent_days: int = 7
    notification_retention_days: int = 90

    # Account created by the seed script so a fresh install has an admin.
    seed_admin_email: str = "admin@petcare.local"
    seed_admin_password: str = "Admin12345"
    seed_admin_full_name: str = "Clinic Administrator"


# Built once per process; callers pass the instance along explicitly.
@lru_cache
def get_settings() -> Settings:
    return Settings()
