"""LLM provider implementations for content generation."""

from .base import GenerationProvider, HTTPProvider, ProviderError
from .factory import available_providers, create_provider
from .gemini import GeminiProvider
from .openai_compatible import OpenAICompatibleProvider

__all__ = [
    "GenerationProvider",
    "HTTPProvider",
    "ProviderError",
    "GeminiProvider",
    "OpenAICompatibleProvider",
    "create_provider",
    "available_providers",
]
