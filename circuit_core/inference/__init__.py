"""
Word inference clients.
"""

from .base import InferenceClient, InferenceConfig, build_word_prompt
from .providers import ChatCompletionInferenceClient, create_inference_client

__all__ = [
    "InferenceClient",
    "InferenceConfig",
    "build_word_prompt",
    "ChatCompletionInferenceClient",
    "create_inference_client",
]
