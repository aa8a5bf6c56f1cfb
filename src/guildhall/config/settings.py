from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_prefix="GUILDHALL_", extra="ignore")

    # Paths
    database_path: Path = Path("data") / "guildhall.db"

    # LLM Settings
    oracle_enabled: bool = True
    ollama_host: str = "http://localhost:11434"
    oracle_model: str = "mistral:7b"
    oracle_timeout: float = 8.0             # seconds per request
    oracle_max_retries: int = 1

    # Concurrency
    max_commit_retries: int = 3

    # Game Settings
    event_spawn_chance: float = 0.1

    # Logging
    log_level: str = "INFO"
    log_file: Path | None = None
    enable_color: bool = True

    # Server
    host: str = "0.0.0.0"
    port: int = 3001
    secret_key: str = "dev-secret-change-me"
    cors_allowed_origins: str = "*"         # comma-separated, or * for any


settings = Settings()
