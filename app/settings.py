import os
from pydantic import BaseModel
from functools import lru_cache
from dotenv import load_dotenv
load_dotenv()

class Settings(BaseModel):
    APP_NAME: str = os.getenv("APP_NAME", "Applicant Tracking Scoring API")
    ENV: str = os.getenv("ENV", "development")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///ats.sqlite3")
    OPENAI_API_KEY: str | None = os.getenv("OPENAI_API_KEY") or None
    OPENAI_MODEL: str = os.getenv("OPENAI_MODEL", "gpt-4.1-mini")
    OPENAI_BASE_URL: str = os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1")
    LLM_TIMEOUT: float = float(os.getenv("LLM_TIMEOUT", "60"))
    CV_FETCH_TIMEOUT: float = float(os.getenv("CV_FETCH_TIMEOUT", "10"))
    CV_TEXT_MAX_CHARS: int = int(os.getenv("CV_TEXT_MAX_CHARS", "20000"))
    BULK_SCORING_CONCURRENCY: int = int(os.getenv("BULK_SCORING_CONCURRENCY", "4"))
    HOST: str = os.getenv("HOST", "127.0.0.1")
    PORT: int = int(os.getenv("PORT", "8000"))

@lru_cache
def get_settings() -> Settings:
    return Settings()

settings = get_settings()
