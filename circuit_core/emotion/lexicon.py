"""Tokenization, word significance and profile payload parsing."""

import json
import math
import re
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional

from .base import (
    CATEGORY_ORDER,
    PROBABILITY_TOLERANCE,
    VAD,
    EmotionalProfile,
    ProfileValidationError,
    Sentiment,
    SentimentPolarity,
)


# Words that carry no emotional signal on their own: pronouns, articles,
# auxiliaries, modals, prepositions, conjunctions, demonstratives and
# question words.
STOP_WORDS = frozenset({
    "i", "me", "my", "mine", "myself",
    "you", "your", "yours", "yourself",
    "he", "she", "it", "his", "her", "its", "him", "himself", "herself", "itself",
    "we", "us", "our", "ours", "ourselves",
    "they", "them", "their", "theirs", "themselves",
    "am", "is", "are", "was", "were", "be", "been", "being",
    "have", "has", "had", "having",
    "do", "does", "did", "doing",
    "will", "would", "shall", "should", "may", "might", "can", "could",
    "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for", "of", "with", "by",
    "this", "that", "these", "those",
    "what", "where", "when", "why", "how", "who", "which",
})

MIN_SIGNIFICANT_LENGTH = 3

# Lexicon extras carried through seed files untouched.
METADATA_KEYS = ("pos", "social_axes", "toxicity", "dynamics")

_NON_WORD = re.compile(r"[\W_]+", re.UNICODE)
_FENCE = re.compile(r"^```[a-zA-Z0-9_-]*\s*\n?(.*?)\n?```\s*$", re.DOTALL)
_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")


@dataclass(frozen=True)
class Token:
    """A whitespace-delimited token and its normalized form."""

    text: str
    normalized: str


def normalize_word(word: str) -> str:
    """Lower-case and strip every non-word character."""
    return _NON_WORD.sub("", word.lower())


def tokenize(text: str) -> List[Token]:
    """
    Split text on whitespace and normalize each token.

    Tokens that are empty after stripping are dropped entirely, so they are
    never resolved and never counted.
    """
    tokens = []
    for raw in text.split():
        normalized = normalize_word(raw)
        if len(normalized) < 1:
            continue
        tokens.append(Token(text=raw, normalized=normalized))
    return tokens


def is_emotionally_significant(word: str) -> bool:
    """Whether an unknown word is worth an inference call."""
    word = word.lower()
    if word in STOP_WORDS:
        return False
    if len(word) < MIN_SIGNIFICANT_LENGTH:
        return False
    if word.isdigit():
        return False
    return True


# =============================================================================
# Payload Parsing
# =============================================================================


def strip_code_fences(raw: str) -> str:
    """Unwrap a response wrapped in ``` or ```json fences."""
    content = raw.strip()
    match = _FENCE.match(content)
    if match:
        return match.group(1).strip()
    return content


def extract_json_object(raw: str) -> Optional[dict]:
    """Parse a JSON object from model output, tolerating fences and chatter."""
    content = strip_code_fences(raw)
    try:
        parsed = json.loads(content)
    except json.JSONDecodeError:
        match = _JSON_OBJECT.search(content)
        if not match:
            return None
        try:
            parsed = json.loads(match.group(0))
        except json.JSONDecodeError:
            return None
    return parsed if isinstance(parsed, dict) else None


def _coerce_float(value: Any, name: str) -> float:
    if isinstance(value, bool):
        raise ProfileValidationError(f"{name} must be numeric, got bool")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ProfileValidationError(f"{name} must be numeric, got {value!r}")
    if math.isnan(number) or math.isinf(number):
        raise ProfileValidationError(f"{name} must be finite")
    return number


def _unit_or_default(block: Mapping[str, Any], key: str, default: float = 0.5) -> float:
    if key not in block or block[key] is None:
        return default
    return max(0.0, min(1.0, _coerce_float(block[key], key)))


def profile_from_payload(data: Any) -> EmotionalProfile:
    """
    Build an EmotionalProfile from an untrusted payload.

    Accepts the wire shape ``{"emotion_probs": {...}, "vad": {...},
    "sentiment": {...}}``. Missing categories count as 0.0 and a positive
    sum that misses 1.0 is renormalized. VAD and strength default to 0.5 and
    are clamped; an unknown polarity becomes neutral.

    Raises:
        ProfileValidationError: if the payload cannot describe a profile
    """
    if not isinstance(data, Mapping):
        raise ProfileValidationError("Profile payload must be an object")

    probs = data.get("emotion_probs", data.get("emotions"))
    if not isinstance(probs, Mapping):
        raise ProfileValidationError("Profile payload has no emotion_probs object")

    emotions = {}
    for category in CATEGORY_ORDER:
        value = _coerce_float(probs.get(category, 0.0), category)
        if value < 0.0:
            raise ProfileValidationError(f"Probability for {category!r} is negative")
        emotions[category] = value

    total = sum(emotions.values())
    if total <= 0.0:
        raise ProfileValidationError("Emotion probabilities sum to zero")
    if abs(total - 1.0) > PROBABILITY_TOLERANCE or any(v > 1.0 for v in emotions.values()):
        emotions = {category: value / total for category, value in emotions.items()}

    vad_block = data.get("vad") or {}
    if not isinstance(vad_block, Mapping):
        raise ProfileValidationError("vad must be an object")
    vad = VAD(
        valence=_unit_or_default(vad_block, "valence"),
        arousal=_unit_or_default(vad_block, "arousal"),
        dominance=_unit_or_default(vad_block, "dominance"),
    )

    sentiment_block = data.get("sentiment") or {}
    if not isinstance(sentiment_block, Mapping):
        raise ProfileValidationError("sentiment must be an object")
    raw_polarity = str(sentiment_block.get("polarity", "neutral")).lower()
    try:
        polarity = SentimentPolarity(raw_polarity)
    except ValueError:
        polarity = SentimentPolarity.NEUTRAL
    sentiment = Sentiment(
        polarity=polarity,
        strength=_unit_or_default(sentiment_block, "strength"),
    )

    metadata = {}
    extra = data.get("metadata")
    if isinstance(extra, Mapping):
        metadata.update(extra)
    for key in METADATA_KEYS:
        if key in data:
            metadata[key] = data[key]

    return EmotionalProfile(
        emotions=emotions,
        vad=vad,
        sentiment=sentiment,
        metadata=metadata,
    )


__all__ = [
    "STOP_WORDS",
    "MIN_SIGNIFICANT_LENGTH",
    "Token",
    "normalize_word",
    "tokenize",
    "is_emotionally_significant",
    "strip_code_fences",
    "extract_json_object",
    "profile_from_payload",
]
