from pydantic_settings import BaseSettings
from pydantic import Field
from typing import Optional


class Settings(BaseSettings):
    # Core
    app_name: str = Field(default="Field Hours API", alias="APP_NAME")

    # Server
    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=3001, alias="PORT")

    # Database
    database_url: str = Field(
        default="sqlite:///./database.db",
        alias="DATABASE_URL",
        description="SQLite file URL, e.g. sqlite:///./database.db",
    )
    auto_create_db: bool = Field(default=True, alias="AUTO_CREATE_DB")
    db_timeout_seconds: float = Field(default=5.0, alias="DB_TIMEOUT_SECONDS")

    # Backups
    backup_enabled: bool = Field(default=True, alias="BACKUP_ENABLED")
    backup_interval_hours: float = Field(default=24.0, alias="BACKUP_INTERVAL_HOURS")
    backup_dir: Optional[str] = Field(default=None, alias="BACKUP_DIR")
    backup_keep: int = Field(default=0, alias="BACKUP_KEEP")  # 0 keeps every snapshot

    # Landing page
    index_path: str = Field(default="index.html", alias="INDEX_PATH")

    # Rate limit
    rate_limit: str = Field(default="300/minute", alias="RATE_LIMIT")

    # Logging
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Metrics
    enable_metrics: bool = Field(default=True, alias="ENABLE_METRICS")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        populate_by_name = True


settings = Settings()
