from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional
from decimal import Decimal

class Settings(BaseSettings):
    DATABASE_URL: Optional[str] = None
    ENV: str = "dev"

    # Demo mode: local JSON collections instead of the hosted database
    DEMO_MODE: bool = False
    DEMO_DATA_DIR: str = ".demo_data"

    # Billing
    DEFAULT_RATE_PER_UNIT: Decimal = Decimal("15")

    # Runs Base.metadata.create_all on startup (dev convenience, use alembic in prod)
    AUTO_CREATE_TABLES: bool = True

    LOG_LEVEL: str = "INFO"

    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
    ]

    # Google Sheets backup
    ENABLE_SHEETS_BACKUP: bool = False
    GOOGLE_SHEETS_CREDENTIALS_FILE: str = "google-credentials.json"
    GOOGLE_SHEETS_SPREADSHEET_ID: Optional[str] = None

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def database_url(self) -> Optional[str]:
        """DATABASE_URL with Heroku/Railway style postgres:// rewritten for SQLAlchemy."""
        url = self.DATABASE_URL
        if url and url.startswith("postgres://"):
            url = url.replace("postgres://", "postgresql://", 1)
        return url

    @property
    def is_production(self) -> bool:
        return self.ENV == "production"

    @property
    def is_demo_mode(self) -> bool:
        """
        Production only runs in demo mode when DEMO_MODE is explicitly set.
        Anywhere else a missing DATABASE_URL also falls back to demo mode.
        """
        if self.is_production:
            return self.DEMO_MODE
        return self.DEMO_MODE or not self.DATABASE_URL

settings = Settings()
