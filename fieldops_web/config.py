"""Configuration settings for Field Ops Web."""

from pathlib import Path
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings."""

    # Base paths
    base_dir: Path = Path(__file__).parent.parent
    storage_dir: Path = base_dir / "storage"

    @property
    def database_path(self) -> Path:
        return self.storage_dir / "fieldops_web.db"

    @property
    def database_url(self) -> str:
        return f"sqlite+aiosqlite:///{self.database_path}"

    # API settings
    api_v1_prefix: str = "/api/v1"

    # CORS settings
    cors_origins: list[str] = ["*"]

    log_level: str = "INFO"

    # Business-day timezone for follow-up cadence and "today" boundaries
    timezone: str = "America/Los_Angeles"

    # Calendar label for jobs with no assigned contractor
    default_contractor_name: str = "Compliance Matters"

    def ensure_directories(self) -> None:
        """Create storage directories if they don't exist."""
        self.storage_dir.mkdir(parents=True, exist_ok=True)

    class Config:
        env_prefix = "FIELDOPS_WEB_"


settings = Settings()
