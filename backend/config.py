# Runtime settings, read once from the environment (and .env) at startup
import os
from pathlib import Path
from typing import List

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict

from errors import ConfigError

DEFAULT_MODEL = "mistral-saba-24b"
DEFAULT_API_BASE_URL = "https://api.groq.com/openai/v1"
MAX_UPLOAD_BYTES = 10 * 1024 * 1024  # 10MB
# source checkout layout: backend/config.py next to frontend/index.html
FRONTEND_PAGE = Path(__file__).resolve().parent.parent / "frontend" / "index.html"


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    api_key: str
    model: str = DEFAULT_MODEL
    host: str = "0.0.0.0"
    port: int = 5000
    api_base_url: str = DEFAULT_API_BASE_URL
    backend_url: str = "http://localhost:5000"
    cors_origins: List[str] = ["http://localhost:3000"]
    uploads_dir: Path = Path("uploads")
    max_upload_bytes: int = MAX_UPLOAD_BYTES
    completion_timeout: float = 60.0
    strict_validation: bool = False
    log_level: str = "INFO"
    frontend_page: Path = FRONTEND_PAGE

    def key_preview(self) -> str:
        return f"{self.api_key[:5]}...{self.api_key[-4:]}"


def _number(name: str, default, cast):
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {raw!r}")


def _flag(name: str) -> bool:
    return os.getenv(name, "false").strip().lower() in ("1", "true", "yes", "on")


def load_settings() -> Settings:
    load_dotenv()
    api_key = (os.getenv("GROQ_API_KEY") or os.getenv("OPENAI_API_KEY") or "").strip()
    if not api_key:
        raise ConfigError(
            "GROQ_API_KEY is not set. Please set it in your .env and restart the server."
        )

    origins = os.getenv("CORS_ORIGINS", "http://localhost:3000")
    return Settings(
        api_key=api_key,
        model=os.getenv("GROQ_MODEL", DEFAULT_MODEL),
        host=os.getenv("HOST", "0.0.0.0"),
        port=_number("PORT", 5000, int),
        api_base_url=os.getenv("API_BASE_URL", DEFAULT_API_BASE_URL).rstrip("/"),
        backend_url=os.getenv("BACKEND_URL", "http://localhost:5000").rstrip("/"),
        cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
        uploads_dir=Path(os.getenv("UPLOADS_DIR", "uploads")),
        max_upload_bytes=_number("MAX_UPLOAD_BYTES", MAX_UPLOAD_BYTES, int),
        completion_timeout=_number("COMPLETION_TIMEOUT", 60.0, float),
        strict_validation=_flag("STRICT_MCQ_VALIDATION"),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        frontend_page=Path(os.getenv("FRONTEND_PAGE", str(FRONTEND_PAGE))),
    )
