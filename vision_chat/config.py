"""
Configuration management using pydantic-settings.
"""
import re
from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings

_KEY_SEPARATORS = re.compile(r"[;,\s]+")


def parse_key_list(raw: str, single: Optional[str] = None) -> list[str]:
    """
    Split a delimited key list and merge in a single fallback key.

    Separators are commas, semicolons and whitespace. `single` is appended
    only if it is not already present verbatim. Duplicates are dropped,
    first occurrence wins.
    """
    keys: list[str] = []
    for part in _KEY_SEPARATORS.split(raw or ""):
        part = part.strip()
        if part and part not in keys:
            keys.append(part)
    if single and single not in keys:
        keys.append(single)
    return keys


class Settings(BaseSettings):
    """Application settings from environment variables."""

    # Application
    app_env: str = "development"
    api_port: int = 8000
    api_host: str = "0.0.0.0"

    # Google Cloud Vision — separated list for rotation, single key still works
    vision_api_keys: str = ""
    vision_api_key: str = ""
    google_cloud_vision_api_key: str = ""
    vision_endpoint: str = "https://vision.googleapis.com/v1/images:annotate"

    # Image generation (OpenAI-compatible images API)
    image_api_keys: str = ""
    openai_api_key: str = ""
    image_endpoint: str = "https://api.openai.com/v1/images/generations"
    image_model: str = "dall-e-3"
    image_size: str = "1024x1024"

    # Outbound HTTP
    http_timeout: float = 30.0

    # Tracing
    opik_api_key: str = ""
    opik_workspace_name: str = ""

    # Logging
    log_level: str = "INFO"

    @property
    def vision_single_key(self) -> str:
        return self.vision_api_key or self.google_cloud_vision_api_key

    @property
    def vision_key_list(self) -> list[str]:
        """Parse VISION_API_KEYS, merging in VISION_API_KEY / GOOGLE_CLOUD_VISION_API_KEY."""
        raw = self.vision_api_keys or self.vision_single_key
        return parse_key_list(raw, self.vision_single_key)

    @property
    def image_key_list(self) -> list[str]:
        """Parse IMAGE_API_KEYS, merging in OPENAI_API_KEY."""
        raw = self.image_api_keys or self.openai_api_key
        return parse_key_list(raw, self.openai_api_key)

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"  # Ignore extra fields in .env


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Convenience access
settings = get_settings()
