# notebox/shared/config.py
from pydantic import BaseModel
from pathlib import Path
import os

ROOT = Path(__file__).resolve().parents[2]   # project root
STORAGE_DIR = ROOT / "storage"

class Settings(BaseModel):
    ENV: str = os.getenv("ENV", "dev")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # SQLite file under ./storage/ unless overridden
    DATABASE_URL: str = os.getenv("DATABASE_URL", f"sqlite:///{(STORAGE_DIR / 'notebox.db').as_posix()}")

    # demo auth controls
    AUTH_DEMO: bool = os.getenv("AUTH_DEMO", "true").lower() == "true"
    DEMO_TOKEN: str = os.getenv("DEMO_TOKEN", "demo")
    DEMO_USER: str = os.getenv("DEMO_USER", "demo-user")

    # JWT settings (for real mode)
    JWT_KEY: str = os.getenv("JWT_KEY", "dev-secret")
    JWT_ALG: str = os.getenv("JWT_ALG", "HS256")
    JWT_ISS: str | None = os.getenv("JWT_ISS")
    JWT_AUD: str | None = os.getenv("JWT_AUD")
    JWT_EXPIRE_MIN: int = int(os.getenv("JWT_EXPIRE_MIN", "60"))

    # simulated latency of the summarizer, in seconds
    SUMMARY_DELAY_SECONDS: float = float(os.getenv("SUMMARY_DELAY_SECONDS", "1.5"))

    # per-owner stores kept by the HTTP layer; least recently used go first
    NOTE_STORE_CACHE_SIZE: int = int(os.getenv("NOTE_STORE_CACHE_SIZE", "1024"))

settings = Settings()
