from pydantic_settings import BaseSettings
from pydantic import Field
from pathlib import Path
from pydantic_settings import SettingsConfigDict

class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="allow",
    )

    # Settings store (single-row table holding the packet patterns)
    DATABASE_URL: str = Field(default="sqlite:///data/settings.db")

    # Log source
    LOGS_DIR: str = Field(default="logs")
    LOG_FILE_EXTENSIONS: set[str] = {"log"}
    LOG_LEVEL: str = Field(default="INFO")

    # Seed values for an empty settings store
    DEFAULT_ENABLE_PACKETS: bool = Field(default=True)
    DEFAULT_PACKET_START_PATTERN: str = Field(default="Received message on")
    DEFAULT_PACKET_END_PATTERN: str = Field(default="Processed OK")
    DEFAULT_PACKET_ID_PATTERN: str = Field(default="job_id=([a-zA-Z0-9_-]+)")
    DEFAULT_PACKET_STRATEGY: str = Field(default="counter")

    CORS_ORIGINS: list[str] = ["http://localhost:3000", "http://localhost:5173", "http://localhost:8000"]

settings = Settings()

def ensure_data_dir() -> Path | None:
    """Create the parent directory of a file-backed SQLite database."""
    prefix = "sqlite:///"
    if not settings.DATABASE_URL.startswith(prefix):
        return None
    db_path = settings.DATABASE_URL[len(prefix):]
    if not db_path or db_path == ":memory:":
        return None
    p = Path(db_path).parent
    p.mkdir(parents=True, exist_ok=True)
    return p
