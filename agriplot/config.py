import os
from pathlib import Path

class Settings:
    PROJECT_NAME: str = "AgriPlot Field Editor"
    PROJECT_VERSION: str = "1.0.0"

    # UPSTREAM (land-claim backend the field app talks to)
    UPSTREAM_API_URL: str = os.getenv("UPSTREAM_API_URL", "http://localhost:8080")
    UPSTREAM_TIMEOUT_SECONDS: float = float(os.getenv("UPSTREAM_TIMEOUT_SECONDS", "10"))

    # LOCAL STORAGE (offline submissions)
    DB_FILE: str = os.getenv("DB_FILE", "local_db.json")

    # EDITOR
    TAP_TOLERANCE_METERS: float = float(os.getenv("TAP_TOLERANCE_METERS", "10"))
    STRICT_OVERLAP: bool = os.getenv("STRICT_OVERLAP", "false").lower() in ("1", "true", "yes")
    SESSION_IDLE_TIMEOUT_SECONDS: float = float(os.getenv("SESSION_IDLE_TIMEOUT_SECONDS", "3600"))

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    BASE_DIR: Path = Path(__file__).resolve().parent.parent

settings = Settings()
