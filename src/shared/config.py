"""
Application configuration using Pydantic Settings.
Loads from environment variables and .env file.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

# Values shipped in .env templates that must not count as a configured key
PLACEHOLDER_KEYS = {"your_gemini_api_key_here", "your_openai_api_key_here", "changeme"}

BACKENDS = ("auto", "gemini", "openai", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Backend selection: auto | gemini | openai | local
    analysis_backend: str = Field(
        default="auto",
        description="Analysis backend, resolved once when the analyzer is built",
    )

    # Google Gemini
    gemini_api_key: SecretStr = Field(default=SecretStr(""))
    gemini_model: str = Field(default="gemini-2.0-flash")

    # OpenAI / LLM
    openai_api_key: SecretStr = Field(default=SecretStr(""))
    openai_model: str = Field(default="gpt-4o-mini")

    # LLM call behaviour
    llm_temperature: float = Field(default=0.1)
    llm_max_tokens: int = Field(default=2048)
    llm_max_retries: int = Field(default=2, description="Retries after the first attempt")
    llm_retry_base_delay: float = Field(default=1.0, description="Seconds, doubled per retry")
    llm_timeout_seconds: float = Field(default=60.0)

    # Screening
    enable_comparative_ranking: bool = Field(default=True)
    recommend_threshold: int = Field(
        default=75, description="Minimum overall score counted as recommended"
    )
    skills_table_path: Optional[Path] = Field(
        default=None, description="Alternative YAML file for the skill tables"
    )

    # Reports
    report_output_dir: Path = Field(default=Path("./reports"))

    # Logging
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="text")

    @property
    def gemini_available(self) -> bool:
        """True when a usable Gemini key is configured."""
        return _usable_key(self.gemini_api_key)

    @property
    def openai_available(self) -> bool:
        """True when a usable OpenAI key is configured."""
        return _usable_key(self.openai_api_key)


def _usable_key(key: SecretStr) -> bool:
    value = key.get_secret_value().strip()
    return bool(value) and value.lower() not in PLACEHOLDER_KEYS


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
