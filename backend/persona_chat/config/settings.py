"""
Configuration Settings.
"""

from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Application settings."""

    # App info
    app_name: str = "Persona Chat"
    app_version: str = "1.0.0"
    debug: bool = True

    # Storage
    local_storage_path: str = "./data"
    sessions_key: str = "sessions.json"
    custom_personas_key: str = "custom_characters.json"

    # Session store
    max_sessions: int = 50
    storage_capacity_bytes: int = 5 * 1024 * 1024  # advisory budget, 5 MiB
    storage_warning_ratio: float = 0.8

    # LLM Provider settings
    llm_provider: str = "zhipu"  # "zhipu", "openai" or "volcengine"
    llm_api_key: Optional[str] = None
    llm_model: Optional[str] = None  # uses provider default if not set
    llm_base_url: Optional[str] = None  # uses provider default if not set
    llm_temperature: float = 0.8
    llm_max_tokens: int = 2000
    llm_timeout_seconds: float = 60.0
    chat_history_window: int = 6  # previous messages sent with each turn

    # CORS
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    # Logging configuration
    log_level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_file_path: str = "./logs/persona_chat.log"
    log_file_enabled: bool = True
    log_console_enabled: bool = True
    log_json_format: bool = True  # JSON format for files, human-readable for console
    log_file_max_bytes: int = 10 * 1024 * 1024
    log_file_backup_count: int = 5
    log_api_requests: bool = True  # Log every request with status and duration

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
