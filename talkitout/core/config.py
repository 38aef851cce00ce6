"""
Application configuration via pydantic-settings.

Loads values from .env file with sensible defaults for local development.
Use ``get_settings()`` to obtain the cached singleton instance.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """TalkItOut application settings loaded from environment / .env file.

    All settings can be overridden via environment variables or a `.env` file.
    Field names map directly to env var names (case-insensitive). API keys
    belong in the `.env` file, which is never committed.

    Attributes:
        llm_provider: Chat-completion backend ("openai", "claude" or "ollama").
        storage_backend: Object store for recordings and text ("local" or "http").
        database_url: Async SQLAlchemy connection string for SQLite.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # --- LLM Provider ---
    llm_provider: str = "openai"

    openai_api_key: str = ""
    openai_model: str = "gpt-3.5-turbo"
    openai_base_url: str = ""  # Empty = official endpoint

    claude_api_key: str = ""
    claude_model: str = "claude-sonnet-4-20250514"

    ollama_base_url: str = "http://localhost:11434"
    ollama_model: str = "llama3.2"

    # --- Classification ---
    classification_max_tokens: int = 100
    classification_timeout: float = 20.0  # Seconds before falling back to "Unknown"
    classification_max_attempts: int = 1  # 1 = single attempt, no retry

    # --- Object storage ---
    storage_backend: str = "local"
    storage_root: str = "data/objects"  # Used when storage_backend="local"
    storage_base_url: str = ""  # Used when storage_backend="http"
    storage_public_base_url: str = ""  # Locator prefix; empty + local backend = file:// URIs (development only)
    storage_token: str = ""  # Bearer token for the http backend
    upload_timeout: float = 60.0
    upload_max_attempts: int = 1

    # --- Capture ---
    recordings_dir: str = "data/recordings"
    audio_sample_rate: int = 16000
    microphone_permission: str = "undetermined"  # granted | denied | undetermined

    # --- Live transcription ---
    whisper_model: str = "base"  # tiny, base, small, medium, large-v3
    whisper_device: str = "cpu"
    whisper_compute_type: str = "int8"
    whisper_language: str = ""  # Empty = auto-detect
    transcription_chunk_seconds: float = 3.0

    # --- Application ---
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    log_level: str = "INFO"
    cors_origins: list[str] = ["http://localhost:3000"]

    # --- Storage ---
    database_url: str = "sqlite+aiosqlite:///data/talkitout.db"


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings singleton.

    Uses ``functools.lru_cache`` so the .env file is read only once.

    Returns:
        Settings: The application-wide configuration object.
    """
    return Settings()
