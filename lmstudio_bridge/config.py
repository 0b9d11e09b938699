"""
Configuration Management Module

Configures bridge parameters via environment variables or .env file.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_BASE_URL = "http://localhost:1234/v1"


class Settings(BaseSettings):
    """
    Bridge Configuration Class

    All configuration items can be overridden by environment variables, with names matching fields (uppercase).
    """

    # LM Studio Config
    # Base URL used when the provider options do not set one
    LMSTUDIO_API_BASE_URL: str = DEFAULT_BASE_URL
    # LM Studio does not check keys, but OpenAI-compatible servers expect the header
    LMSTUDIO_API_KEY: str = "lm-studio"

    # Debug Config
    # Logs raw and transformed request/response payloads when enabled
    DEBUG_LMSTUDIO: bool = False

    # HTTP Client Config
    # Request timeout (seconds)
    HTTP_TIMEOUT: int = 600

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get bridge configuration (Singleton)

    Returns:
        Settings: Bridge configuration instance
    """
    return Settings()
