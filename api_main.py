import logging

from fastapi import FastAPI
from sqlalchemy import text
from fastapi.middleware.cors import CORSMiddleware

from app.api import router
from app.config import settings
from app.db import engine
from app.logging_config import configure_logging
from app.models import Base

logger = logging.getLogger(__name__)

app = FastAPI(title="Streakmate API", version="0.1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS if settings.CORS_ORIGINS else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(router)


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/health/live")
def health_live() -> dict[str, str]:
    return {"status": "alive"}


@app.get("/health/ready")
def health_ready() -> dict[str, str]:
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))
    return {"status": "ready"}


@app.on_event("startup")
def on_startup() -> None:
    configure_logging(settings.LOG_LEVEL)
    if settings.AUTO_CREATE_SCHEMA:
        logger.info("Creating missing tables")
        Base.metadata.create_all(bind=engine)
