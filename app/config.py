import os
from pathlib import Path

from dotenv import load_dotenv

ROOT_DIR = Path(__file__).resolve().parents[1]
load_dotenv(ROOT_DIR / ".env")


class Settings:
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./streakmate.db")
    AUTO_CREATE_SCHEMA: bool = os.getenv("AUTO_CREATE_SCHEMA", "0") == "1"
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").strip().upper()
    SESSION_TTL_DAYS: int = int(os.getenv("SESSION_TTL_DAYS", "30"))
    NUDGE_COOLDOWN_SECONDS: int = int(os.getenv("NUDGE_COOLDOWN_SECONDS", "900"))
    NUDGE_DAILY_LIMIT: int = int(os.getenv("NUDGE_DAILY_LIMIT", "10"))
    WEB_PUSH_VAPID_PUBLIC_KEY: str = os.getenv("WEB_PUSH_VAPID_PUBLIC_KEY", "").strip()
    WEB_PUSH_VAPID_PRIVATE_KEY: str = os.getenv("WEB_PUSH_VAPID_PRIVATE_KEY", "").strip()
    WEB_PUSH_VAPID_SUBJECT: str = os.getenv("WEB_PUSH_VAPID_SUBJECT", "").strip()
    CORS_ORIGINS: list[str] = [
        item.strip()
        for item in os.getenv("CORS_ORIGINS", "*").split(",")
        if item.strip()
    ]


settings = Settings()
