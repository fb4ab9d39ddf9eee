"""
Engine Configuration

Runtime settings for word resolution, inference, persistence and logging.
"""

import os
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class PersistMode(str, Enum):
    """How inference results are written to the profile store."""

    # ON CONFLICT DO NOTHING: curated entries are never replaced
    INSERT_IF_ABSENT = "insert_if_absent"
    # ON CONFLICT DO UPDATE: the newest inference result wins
    OVERWRITE = "overwrite"


class EngineConfig(BaseModel):
    """Emotion engine configuration."""

    # Database
    database_url: str = "sqlite+aiosqlite:///./circuit.db"
    database_pool_size: int = 5
    database_max_overflow: int = 10

    # Inference (OpenAI-compatible chat completions)
    inference_enabled: bool = True
    inference_api_key: Optional[str] = None
    inference_api_base: str = "https://api.deepseek.com/v1"
    inference_model: str = "deepseek-chat"
    inference_max_tokens: int = 800
    inference_timeout_seconds: float = 30.0

    # Resolution and aggregation
    max_inference_per_text: int = Field(default=3, ge=0)
    significance_threshold: float = Field(default=0.25, ge=0.0, le=1.0)
    persist_mode: PersistMode = PersistMode.INSERT_IF_ABSENT
    max_text_length: int = Field(default=10000, gt=0)

    # Analysis logging
    analysis_logging_enabled: bool = True
    log_queue_size: int = Field(default=1000, gt=0)

    # Logging
    log_level: str = "INFO"
    log_format: str = "pretty"

    @property
    def inference_configured(self) -> bool:
        """Whether unknown words can be sent to the inference service."""
        return self.inference_enabled and bool(self.inference_api_key)

    @classmethod
    def from_env(cls) -> "EngineConfig":
        """Load configuration from environment variables."""
        return cls(
            database_url=os.getenv(
                "DATABASE_URL",
                "sqlite+aiosqlite:///./circuit.db",
            ),
            database_pool_size=int(os.getenv("DATABASE_POOL_SIZE", "5")),
            database_max_overflow=int(os.getenv("DATABASE_MAX_OVERFLOW", "10")),
            inference_enabled=os.getenv("INFERENCE_ENABLED", "true").lower() == "true",
            inference_api_key=(
                os.getenv("INFERENCE_API_KEY") or os.getenv("DEEPSEEK_API_KEY")
            ),
            inference_api_base=os.getenv(
                "INFERENCE_API_BASE",
                "https://api.deepseek.com/v1",
            ),
            inference_model=os.getenv("INFERENCE_MODEL", "deepseek-chat"),
            inference_timeout_seconds=float(os.getenv("INFERENCE_TIMEOUT_SECONDS", "30")),
            max_inference_per_text=int(os.getenv("MAX_INFERENCE_PER_TEXT", "3")),
            significance_threshold=float(os.getenv("SIGNIFICANCE_THRESHOLD", "0.25")),
            persist_mode=PersistMode(os.getenv("PERSIST_MODE", "insert_if_absent")),
            max_text_length=int(os.getenv("MAX_TEXT_LENGTH", "10000")),
            analysis_logging_enabled=(
                os.getenv("ANALYSIS_LOGGING_ENABLED", "true").lower() == "true"
            ),
            log_queue_size=int(os.getenv("LOG_QUEUE_SIZE", "1000")),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_format=os.getenv(
                "LOG_FORMAT",
                "json" if os.getenv("ENVIRONMENT") == "production" else "pretty",
            ),
        )


__all__ = [
    "PersistMode",
    "EngineConfig",
]
