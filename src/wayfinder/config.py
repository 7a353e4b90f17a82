"""
Configuration loading and validation for wayfinder.

Loads wayfinder.toml files and validates settings using Pydantic.
"""

import os
import tomllib
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator


class ProviderConfig(BaseModel):
    """Search/LLM provider configuration."""

    name: Literal["openai", "tavily"] = "openai"
    api_key_env: str = "OPENAI_API_KEY"
    base_url: str = "https://api.openai.com/v1"
    search_model: str = "gpt-4o-search-preview"
    completion_model: str = "gpt-4o"
    timeout_seconds: float = Field(default=120.0, gt=0)
    max_retries: int = Field(default=3, ge=1)
    backoff_seconds: float = Field(default=2.0, ge=0.0)
    # Only used when name == "tavily"; completions still go through OpenAI
    search_api_key_env: str = "TAVILY_API_KEY"
    search_depth: Literal["basic", "advanced"] = "advanced"


class RateLimitConfig(BaseModel):
    """Sliding-window limit on outbound provider calls."""

    max_requests: int = Field(default=10, ge=1)
    window_seconds: float = Field(default=60.0, gt=0)


class ExecutionConfig(BaseModel):
    """Per-step search and synthesis settings."""

    context_size: Literal["low", "medium", "high"] = "high"
    max_results: int = Field(default=8, ge=1)
    context_digest_results: int = Field(default=3, ge=0)
    context_digest_chars: int = Field(default=200, ge=0)
    max_sources: int = Field(default=20, ge=1)


class LoggingConfig(BaseModel):
    """Logging settings."""

    level: str = "INFO"
    file: Path | None = None

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


class WayfinderConfig(BaseModel):
    """Complete wayfinder configuration."""

    provider: ProviderConfig = Field(default_factory=ProviderConfig)
    rate_limit: RateLimitConfig = Field(default_factory=RateLimitConfig)
    execution: ExecutionConfig = Field(default_factory=ExecutionConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    def get_api_key(self) -> str:
        """
        Get the completion provider API key from the environment.

        Raises:
            ValueError: If the key is not set
        """
        api_key = os.environ.get(self.provider.api_key_env)
        if not api_key:
            raise ValueError(
                f"{self.provider.api_key_env} environment variable is required"
            )
        return api_key

    def get_search_api_key(self) -> str | None:
        """Get the dedicated search API key (Tavily), if one is configured."""
        if self.provider.name != "tavily":
            return None
        return os.environ.get(self.provider.search_api_key_env)


def load_config(config_path: Path | str) -> WayfinderConfig:
    """
    Load configuration from a TOML file.

    Args:
        config_path: Path to wayfinder.toml

    Returns:
        Validated WayfinderConfig

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config is invalid
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, "rb") as f:
        config_data = tomllib.load(f)

    try:
        config = WayfinderConfig(**config_data)
    except Exception as e:
        raise ValueError(f"Invalid configuration: {e}") from e

    return config


def create_default_config(output_path: Path, provider: str = "openai") -> None:
    """
    Write a wayfinder.toml with default settings.

    Args:
        output_path: Where to write wayfinder.toml
        provider: "openai" (search-preview model) or "tavily"
    """
    template = f'''[provider]
name = "{provider}"  # "openai" or "tavily"
api_key_env = "OPENAI_API_KEY"  # Used for planning and report generation
base_url = "https://api.openai.com/v1"
search_model = "gpt-4o-search-preview"
completion_model = "gpt-4o"
timeout_seconds = 120
max_retries = 3
backoff_seconds = 2.0  # Retry delay = backoff_seconds * 2^(attempt - 1)
search_api_key_env = "TAVILY_API_KEY"  # Only used by the tavily provider
search_depth = "advanced"

[rate_limit]
max_requests = 10
window_seconds = 60

[execution]
context_size = "high"  # low | medium | high
max_results = 8
context_digest_results = 3  # Results carried forward into later queries
context_digest_chars = 200
max_sources = 20

[logging]
level = "INFO"
'''

    output_path.write_text(template, encoding="utf-8")
