"""
Application settings loaded from environment (.env via python-dotenv).
Passed explicitly into the translator, summarizer and text clients.
"""
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from utils.errors import ConfigError

load_dotenv()

DEFAULT_GEMINI_ENDPOINT = (
    "https://generativelanguage.googleapis.com/v1beta/models/gemini-2.0-flash:generateContent"
)
DEFAULT_GROQ_MODEL = "llama-3.3-70b-versatile"
DEFAULT_CORS_ORIGINS = ["http://localhost:4200"]


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from e


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from e


@dataclass(frozen=True)
class Settings:
    """Process-wide settings. Build with Settings.from_env() or directly in tests."""

    # LLM
    llm_provider: str = "gemini"
    google_api_key: Optional[str] = None
    gemini_endpoint: str = DEFAULT_GEMINI_ENDPOINT
    groq_api_key: Optional[str] = None
    groq_model: str = DEFAULT_GROQ_MODEL
    llm_timeout_seconds: float = 30.0
    llm_max_retries: int = 0
    llm_retry_initial_delay: float = 1.0
    llm_retry_backoff_factor: float = 2.0
    query_prompt_file: Optional[str] = None

    # MongoDB
    mongodb_uri: Optional[str] = None
    mongodb_db_name: str = "expenses"
    mongodb_collection: str = "expenses"
    mongodb_timeout_ms: int = 5000
    max_results: int = 1000

    # API / logging
    cors_origins: List[str] = field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        """Read settings from environment variables."""
        origins_raw = os.getenv("CORS_ORIGINS")
        if origins_raw:
            origins = [o.strip() for o in origins_raw.split(",") if o.strip()]
        else:
            origins = list(DEFAULT_CORS_ORIGINS)
        return cls(
            llm_provider=(os.getenv("LLM_PROVIDER") or "gemini").strip().lower(),
            google_api_key=os.getenv("GOOGLE_API_KEY"),
            gemini_endpoint=os.getenv("GEMINI_ENDPOINT", DEFAULT_GEMINI_ENDPOINT),
            groq_api_key=os.getenv("GROQ_API_KEY"),
            groq_model=os.getenv("GROQ_MODEL", DEFAULT_GROQ_MODEL),
            llm_timeout_seconds=_float_env("LLM_TIMEOUT_SECONDS", 30.0),
            llm_max_retries=_int_env("LLM_MAX_RETRIES", 0),
            llm_retry_initial_delay=_float_env("LLM_RETRY_INITIAL_DELAY", 1.0),
            llm_retry_backoff_factor=_float_env("LLM_RETRY_BACKOFF_FACTOR", 2.0),
            query_prompt_file=os.getenv("QUERY_PROMPT_FILE") or None,
            mongodb_uri=os.getenv("MONGODB_URI") or None,
            mongodb_db_name=os.getenv("MONGODB_DB_NAME", "expenses"),
            mongodb_collection=os.getenv("MONGODB_COLLECTION", "expenses"),
            mongodb_timeout_ms=_int_env("MONGODB_TIMEOUT_MS", 5000),
            max_results=_int_env("MAX_RESULTS", 1000),
            cors_origins=origins,
            log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
        )

    def load_query_prompt(self) -> str:
        """Translation prompt: QUERY_PROMPT_FILE contents when set, else the built-in prompt."""
        if self.query_prompt_file:
            path = Path(self.query_prompt_file)
            if not path.exists():
                raise ConfigError(f"Prompt file not found: {path}")
            return path.read_text(encoding="utf-8")
        from agents.prompts import QUERY_PROMPT
        return QUERY_PROMPT


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get or create the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings
