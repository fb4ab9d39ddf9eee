"""
Inference Client Base

Contract for the external service that produces an emotional profile for a
single unknown word, plus the prompt shared by chat-completion providers.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from ..emotion.base import EmotionalProfile


@dataclass
class InferenceConfig:
    """Settings for a chat-completion inference provider."""

    api_key: Optional[str] = None
    api_base: str = "https://api.deepseek.com/v1"
    model: str = "deepseek-chat"
    # Zero temperature keeps repeated calls for one word reproducible
    temperature: float = 0.0
    max_tokens: int = 800
    timeout_seconds: float = 30.0
    connect_timeout_seconds: float = 10.0


class InferenceClient(ABC):
    """
    Resolves one word to an emotional profile.

    ``analyze_word`` never raises for network errors, non-success statuses
    or malformed output; it returns ``None`` and the word stays unresolved.
    """

    name: str = "inference"

    @abstractmethod
    async def analyze_word(self, word: str) -> Optional[EmotionalProfile]:
        """Return the word's profile, or None on any failure."""
        pass

    async def aclose(self) -> None:
        """Release network resources."""
        return None


def build_word_prompt(word: str) -> str:
    """Prompt asking for a strict JSON profile of one word."""
    return f"""Analyze the word "{word}" for its emotional connotations and psychological impact.

GOAL: Create ACCURATE and DISTINCTIVE emotion predictions that clearly differentiate between emotions.

Think deeply about:
1. What emotions does this word typically evoke in people?
2. Is it positive, negative, or neutral in feeling (valence)?
3. How energetic or calm does it make people feel (arousal)?
4. Does it convey power/control or submission (dominance)?
5. What is the overall sentiment and strength?

EMOTION ASSIGNMENT RULES:
- BE DECISIVE: If a word has emotional content, make it CLEAR in the probabilities
- NEUTRAL words (pronouns, articles, prepositions): Use equal probabilities (0.125 each)
- EMOTIONAL words: Give the primary emotion 0.4-0.7, secondary 0.1-0.3, others 0.01-0.05
- STRONG emotional words: Primary emotion should be 0.6+
- MODERATE emotional words: Primary emotion should be 0.4-0.6
- WEAK emotional words: Primary emotion should be 0.25-0.4

Based on your analysis, provide the emotion data in this exact JSON format:

{{
  "emotion_probs": {{
    "joy": 0.125,
    "trust": 0.125,
    "anticipation": 0.125,
    "surprise": 0.125,
    "anger": 0.125,
    "fear": 0.125,
    "sadness": 0.125,
    "disgust": 0.125
  }},
  "vad": {{
    "valence": 0.5,
    "arousal": 0.5,
    "dominance": 0.5
  }},
  "sentiment": {{
    "polarity": "neutral",
    "strength": 0.5
  }}
}}

Rules:
- emotion_probs must sum to 1.0
- vad values: 0.0 to 1.0 (valence: negative to positive, arousal: calm to energetic, dominance: submissive to dominant)
- polarity is one of "positive", "negative", "neutral"
- Return ONLY the JSON, no explanation"""


__all__ = [
    "InferenceConfig",
    "InferenceClient",
    "build_word_prompt",
]
