"""Provider registry: maps config names to provider classes."""

from __future__ import annotations

import logging

from ...config import (
    GenerationConfig,
    LoggingConfig,
    ProviderConfig,
    get_api_key,
    provider_key,
    resolve_provider_defaults,
)
from .base import GenerationProvider
from .gemini import GeminiProvider
from .openai_compatible import OpenAICompatibleProvider


_PROVIDERS: dict[str, type[GenerationProvider]] = {
    "gemini": GeminiProvider,
    "openai": OpenAICompatibleProvider,
    "openai_compatible": OpenAICompatibleProvider,
}


def available_providers() -> list[str]:
    return sorted(_PROVIDERS)


def create_provider(
    provider_cfg: ProviderConfig,
    generation_cfg: GenerationConfig,
    log_cfg: LoggingConfig,
    llm_logger: logging.Logger | None,
) -> GenerationProvider:
    """Instantiate the provider named in ``provider_cfg``.

    An unset model or base URL takes the named provider's default.

    Raises:
        ValueError: For unknown provider names or a missing API key
    """
    provider_cls = _PROVIDERS.get(provider_key(provider_cfg.name))
    if provider_cls is None:
        raise ValueError(
            f"Unsupported provider: {provider_cfg.name}. Supported: {', '.join(available_providers())}"
        )
    resolved = resolve_provider_defaults(provider_cfg)
    return provider_cls(resolved, generation_cfg, get_api_key(resolved), log_cfg, llm_logger)
