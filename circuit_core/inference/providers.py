"""
Inference Provider Implementations

OpenAI-compatible chat-completions client used to profile unknown words.
DeepSeek is the default endpoint; any compatible API works via ``api_base``.
"""

import time
from typing import Any, Dict, Optional

import httpx
import structlog

from ..config import EngineConfig
from ..emotion.base import EmotionalProfile, ProfileValidationError
from ..emotion.lexicon import extract_json_object, profile_from_payload
from .base import InferenceClient, InferenceConfig, build_word_prompt


logger = structlog.get_logger(__name__)


class ChatCompletionInferenceClient(InferenceClient):
    """Single-word profiling over ``POST {api_base}/chat/completions``."""

    name = "chat_completion"

    def __init__(
        self,
        config: Optional[InferenceConfig] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.config = config or InferenceConfig()
        self._client = http_client
        self._owns_client = http_client is None

        if not self.config.api_key:
            logger.warning("inference_api_key_missing", model=self.config.model)

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(
                    self.config.timeout_seconds,
                    connect=self.config.connect_timeout_seconds,
                ),
            )
        return self._client

    def _build_request(self, word: str) -> Dict[str, Any]:
        return {
            "model": self.config.model,
            "messages": [{"role": "user", "content": build_word_prompt(word)}],
            "temperature": self.config.temperature,
            "max_tokens": self.config.max_tokens,
        }

    async def analyze_word(self, word: str) -> Optional[EmotionalProfile]:
        """Profile one word; any failure yields None."""
        url = f"{self.config.api_base.rstrip('/')}/chat/completions"
        headers = {
            "Authorization": f"Bearer {self.config.api_key}",
            "Content-Type": "application/json",
        }

        start_time = time.time()
        try:
            response = await self._get_client().post(
                url,
                json=self._build_request(word),
                headers=headers,
            )
        except httpx.HTTPError as e:
            logger.warning("inference_request_failed", word=word, error=str(e))
            return None

        latency_ms = int((time.time() - start_time) * 1000)

        if not response.is_success:
            logger.warning(
                "inference_bad_status",
                word=word,
                status_code=response.status_code,
                latency_ms=latency_ms,
            )
            return None

        try:
            body = response.json()
            content = body["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            logger.warning("inference_malformed_response", word=word, error=str(e))
            return None

        if not isinstance(content, str):
            logger.warning("inference_malformed_response", word=word, error="content is not text")
            return None

        payload = extract_json_object(content)
        if payload is None:
            logger.warning("inference_unparseable_content", word=word)
            return None

        try:
            profile = profile_from_payload(payload)
        except ProfileValidationError as e:
            logger.warning("inference_invalid_profile", word=word, error=str(e))
            return None

        logger.info(
            "inference_word_profiled",
            word=word,
            emotion=profile.dominant_emotion,
            confidence=round(profile.confidence, 4),
            latency_ms=latency_ms,
        )
        return profile

    async def aclose(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
        self._client = None


def create_inference_client(config: EngineConfig) -> Optional[InferenceClient]:
    """
    Build the configured inference client.

    Returns None when inference is disabled or no API key is set; unknown
    words are then simply never resolved.
    """
    if not config.inference_configured:
        logger.info("inference_disabled")
        return None

    return ChatCompletionInferenceClient(
        InferenceConfig(
            api_key=config.inference_api_key,
            api_base=config.inference_api_base,
            model=config.inference_model,
            max_tokens=config.inference_max_tokens,
            timeout_seconds=config.inference_timeout_seconds,
        )
    )


__all__ = [
    "ChatCompletionInferenceClient",
    "create_inference_client",
]
