from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List
import os

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    # Application
    APP_NAME: str = "Clinic Booking System"
    VERSION: str = "1.0.0"
    DEBUG: bool = False
    TESTING: bool = os.getenv("TESTING", "0").lower() in ("1", "true", "t", "yes", "y")
    LOG_LEVEL: str = "INFO"

    # Database - any SQLAlchemy URL, SQLite file by default
    DATABASE_URL: str = "sqlite:///./clinic_booking.db"

    # Security
    SECRET_KEY: str = "your-secret-key-change-this-in-production"
    ALGORITHM: str = "HS256"
    SESSION_TTL_HOURS: int = 24
    BCRYPT_ROUNDS: int = 12

    # Accept any non-empty password for an existing account. Compatibility
    # with the demo login flow only; never enable in production.
    AUTH_ACCEPT_ANY_PASSWORD: bool = False

    # Slot calendar
    SLOT_WINDOW_DAYS: int = 7
    SLOT_START_HOUR: int = 9
    SLOT_END_HOUR: int = 17
    SLOT_EXCLUDE_WEEKENDS: bool = True

    # Default administrator, created when the user set is empty
    SEED_ADMIN: bool = True
    DEFAULT_ADMIN_EMAIL: str = "admin@clinic.com"
    DEFAULT_ADMIN_NAME: str = "Dr. Admin"
    DEFAULT_ADMIN_PASSWORD: str = "change-me"

    # CORS
    ALLOWED_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:8080", "http://testserver"]

    @property
    def session_ttl_seconds(self) -> int:
        return self.SESSION_TTL_HOURS * 3600

# Create settings instance
settings = Settings()
