"""
Configuration management using YAML files and dataclasses.

This module defines all configuration dataclasses and provides loading
from YAML files with defaults. Configuration sections:
- ProviderConfig: Text-generation provider settings
- GenerationConfig: Per-group generation request settings
- GroupingConfig: Topic consolidation settings
- StorageConfig: Blob storage and metadata store settings
- LoggingConfig: Logging behavior
- LangfuseConfig: Langfuse tracing settings
- AppConfig: Root configuration container
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
import os
from typing import Any

import yaml


@dataclass
class ProviderConfig:
    """Configuration for pluggable LLM providers.

    Attributes:
        name: Provider name ("openai", "openai_compatible" or "gemini")
        model: Model identifier (provider default when unset)
        base_url: Base URL for the provider API (provider default when unset)
        api_key: Optional inline API key (overrides env var)
        api_key_env: Environment variable holding the API key
        trust_env: Whether to respect system proxy settings for API requests
        timeout_seconds: Deadline for a single provider call
    """

    name: str = "openai"
    model: str | None = None
    base_url: str | None = None
    api_key: str | None = None
    api_key_env: str | None = None
    trust_env: bool = True
    timeout_seconds: float = 60.0


@dataclass
class GenerationConfig:
    """Configuration for per-group content generation.

    Attributes:
        temperature: Sampling temperature for analysis requests
        max_output_tokens: Output length ceiling for analysis requests
        min_words: Minimum analysis length requested in the prompt
        pacing_seconds: Delay inserted after every provider call
        concurrency: Number of parallel workers (1 keeps calls sequential)
        detection_max_chars: Characters of document text sent for topic detection
    """

    temperature: float = 0.7
    max_output_tokens: int = 3000
    min_words: int = 800
    pacing_seconds: float = 0.15
    concurrency: int = 1
    detection_max_chars: int = 4000


@dataclass
class GroupingConfig:
    """Configuration for topic consolidation.

    Attributes:
        similarity_threshold: Keyword Jaccard similarity above which topics merge
        merge_on_content_type: Whether a shared content type alone merges topics
    """

    similarity_threshold: float = 0.6
    merge_on_content_type: bool = True


@dataclass
class StorageConfig:
    """Configuration for artifact storage.

    Attributes:
        backend: "local" for filesystem storage, "supabase" for Supabase
        local_root: Root directory for the local backend
        bucket: Storage bucket that holds generated artifacts
        supabase_url: Supabase project URL (falls back to SUPABASE_URL)
        supabase_key: Service role key (falls back to SUPABASE_SERVICE_ROLE_KEY)
        public_base_url: Optional URL prefix used for local download links
        timeout_seconds: HTTP timeout for storage requests
    """

    backend: str = "local"
    local_root: str = "data"
    bucket: str = "document-processing"
    supabase_url: str | None = None
    supabase_key: str | None = None
    public_base_url: str | None = None
    timeout_seconds: float = 30.0


@dataclass
class LoggingConfig:
    """Run and LLM log settings.

    ``format`` is ``jsonl`` or ``plain`` for the run log file. The LLM log
    is always JSON lines; ``llm_log_detail`` set to ``prompt_response``
    adds the prompt next to the response, and ``llm_log_redaction`` is one
    of ``none``, ``redact_content`` or ``redact_contacts``.
    """

    level: str = "INFO"
    console: bool = True
    file: bool = True
    format: str = "jsonl"
    filename: str = "run.jsonl"
    llm_log_enabled: bool = True
    llm_log_detail: str = "response_only"
    llm_log_redaction: str = "redact_contacts"
    llm_log_file: str = "llm.jsonl"


@dataclass
class LangfuseConfig:
    """Langfuse tracing settings.

    Keys and host fall back to the ``LANGFUSE_*`` environment variables.
    Span payloads are redacted with ``redaction`` and cut at
    ``max_text_chars``.
    """

    enabled: bool = False
    public_key: str | None = None
    secret_key: str | None = None
    host: str | None = None
    environment: str | None = None
    release: str | None = None
    redaction: str = "redact_contacts"
    max_text_chars: int = 20000


@dataclass
class AppConfig:
    """Root configuration container aggregating all config sections."""

    provider: ProviderConfig = field(default_factory=ProviderConfig)
    generation: GenerationConfig = field(default_factory=GenerationConfig)
    grouping: GroupingConfig = field(default_factory=GroupingConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    langfuse: LangfuseConfig = field(default_factory=LangfuseConfig)


_PROVIDER_KEY_ENV = {
    "gemini": "GOOGLE_API_KEY",
    "openai": "OPENAI_API_KEY",
    "openai_compatible": "OPENAI_API_KEY",
}

# (model, base_url) used when the config leaves them unset
_PROVIDER_DEFAULTS = {
    "gemini": ("gemini-2.5-flash", "https://generativelanguage.googleapis.com"),
    "openai": ("gpt-4.1-2025-04-14", "https://api.openai.com/v1"),
    "openai_compatible": ("gpt-4.1-2025-04-14", "https://api.openai.com/v1"),
}


def provider_key(name: str) -> str:
    """Canonical registry key for a provider name ("OpenAI-Compatible" -> "openai_compatible")."""
    return name.strip().lower().replace("-", "_")


def resolve_provider_defaults(cfg: ProviderConfig) -> ProviderConfig:
    """Return ``cfg`` with an unset model and base URL filled from the provider's defaults."""
    model, base_url = _PROVIDER_DEFAULTS.get(provider_key(cfg.name), _PROVIDER_DEFAULTS["openai"])
    return replace(cfg, model=cfg.model or model, base_url=cfg.base_url or base_url)


def load_config(path: str | None) -> AppConfig:
    """Load configuration from a YAML file over the built-in defaults.

    Each top-level mapping overrides the matching section field by field.
    Unknown sections and unknown keys inside a section are ignored.
    """
    raw: dict[str, Any] = {}
    if path:
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
        if not isinstance(raw, dict):
            raise ValueError(f"Config file {path} must contain a mapping")

    sections = {}
    for section in fields(AppConfig):
        section_cls = _SECTION_TYPES[section.name]
        overrides = raw.get(section.name)
        sections[section.name] = _build_section(section_cls, overrides if isinstance(overrides, dict) else {})
    sections["provider"] = resolve_provider_defaults(sections["provider"])
    return AppConfig(**sections)


_SECTION_TYPES: dict[str, type] = {
    "provider": ProviderConfig,
    "generation": GenerationConfig,
    "grouping": GroupingConfig,
    "storage": StorageConfig,
    "logging": LoggingConfig,
    "langfuse": LangfuseConfig,
}


def _build_section(section_cls: type, overrides: dict[str, Any]) -> Any:
    known = {f.name for f in fields(section_cls)}
    return section_cls(**{key: value for key, value in overrides.items() if key in known})


def get_api_key(cfg: ProviderConfig) -> str | None:
    """Resolve the provider key: inline value, ``api_key_env``, then the provider default."""
    if cfg.api_key:
        return cfg.api_key
    env_name = cfg.api_key_env or _PROVIDER_KEY_ENV.get(provider_key(cfg.name), "OPENAI_API_KEY")
    return os.getenv(env_name)


def get_supabase_url(cfg: StorageConfig) -> str | None:
    return cfg.supabase_url or os.getenv("SUPABASE_URL")


def get_supabase_key(cfg: StorageConfig) -> str | None:
    return cfg.supabase_key or os.getenv("SUPABASE_SERVICE_ROLE_KEY")
