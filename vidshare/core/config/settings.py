# File: vidshare/core/config/settings.py

import os
import shutil
from pathlib import Path


class Settings:
    # --- Paths ---
    # vidshare/core/config/settings.py -> vidshare/core/config -> vidshare/core -> vidshare -> ROOT
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent.parent
    DATA_DIR: Path = Path(os.getenv("VIDSHARE_DATA_DIR", str(BASE_DIR / "data")))
    UPLOADS_DIR: Path = DATA_DIR / "uploads"
    RENDITIONS_DIR: Path = DATA_DIR / "renditions"
    # Scratch space for remux jobs. Every file in here belongs to exactly one job.
    WORK_DIR: Path = DATA_DIR / "work"

    # --- Database ---
    POSTGRES_USER: str = os.getenv("POSTGRES_USER", "postgres")
    POSTGRES_PASSWORD: str = os.getenv("POSTGRES_PASSWORD", "password")
    POSTGRES_SERVER: str = os.getenv("POSTGRES_SERVER", "localhost")
    POSTGRES_PORT: str = os.getenv("POSTGRES_PORT", "5432")
    POSTGRES_DB: str = os.getenv("POSTGRES_DB", "vidshare_db")

    @property
    def DATABASE_URL(self) -> str:
        # Only fallback to SQLite if explicitly requested.
        if os.getenv("USE_SQLITE", "false").lower() == "true":
            return os.getenv("SQLITE_URL", "sqlite:///./test_vidshare.db")

        return f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

    # --- External Tools ---
    # Auto-detect ffmpeg or use env var
    FFMPEG_BINARY: str = os.getenv("FFMPEG_BINARY_PATH", shutil.which("ffmpeg") or "ffmpeg")

    # --- YouTube ---
    YOUTUBE_API_KEY: str = os.getenv("YOUTUBE_API_KEY", "")
    YOUTUBE_API_URL: str = os.getenv("YOUTUBE_API_URL", "https://www.googleapis.com/youtube/v3")
    YOUTUBE_WATCH_URL: str = "https://www.youtube.com/watch?v={video_id}"

    # --- HTTP ---
    HTTP_TIMEOUT_SECONDS: float = float(os.getenv("HTTP_TIMEOUT_SECONDS", "30"))
    DOWNLOAD_CHUNK_BYTES: int = int(os.getenv("DOWNLOAD_CHUNK_BYTES", str(1024 * 1024)))
    CORS_ORIGINS: list = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

    # --- Transcoding ---
    # Heights rendered for every upload, e.g. "360,720"
    TRANSCODE_HEIGHTS: list = [int(h) for h in os.getenv("TRANSCODE_HEIGHTS", "360,720").split(",") if h.strip()]
    TRANSCODE_ON_UPLOAD: bool = os.getenv("TRANSCODE_ON_UPLOAD", "true").lower() == "true"

    # --- Logging ---
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    def ensure_dirs(self):
        """Creates necessary data directories if they don't exist."""
        self.DATA_DIR.mkdir(parents=True, exist_ok=True)
        self.UPLOADS_DIR.mkdir(parents=True, exist_ok=True)
        self.RENDITIONS_DIR.mkdir(parents=True, exist_ok=True)
        self.WORK_DIR.mkdir(parents=True, exist_ok=True)


settings = Settings()
