"""Abstract interfaces for LLM-driven content generation."""

from __future__ import annotations

from abc import ABC, abstractmethod
import json
import logging
from typing import Any

import httpx

from ...config import GenerationConfig, LoggingConfig, ProviderConfig
from ...core.types import FileDescriptor, TopicGroup
from ...utils.logging import log_event, redact_text, truncate_text
from ..json_utils import parse_json_response
from ..prompts import (
    build_file_organization_prompt,
    build_generation_prompt,
    build_generation_system_prompt,
    build_topic_detection_prompt,
)
from ..tracing import record_span_error, set_span_output, start_span


JSON_TEMPERATURE = 0.3
JSON_MAX_TOKENS = 2000


class ProviderError(Exception):
    """A provider call that produced no usable text.

    Attributes:
        status: "provider_error", "timeout" or "parse_error"
    """

    def __init__(self, status: str, message: str) -> None:
        super().__init__(message)
        self.status = status

    def __str__(self) -> str:
        return f"{self.status}: {self.args[0]}"


class GenerationProvider(ABC):
    """Provider interface for topic analysis, topic detection and file categorization."""

    @abstractmethod
    def generate_analysis(
        self,
        group: TopicGroup,
        logger: logging.Logger | None = None,
    ) -> str:
        """Return generated analysis prose for a topic group.

        Raises:
            ProviderError: If the call fails, times out or returns no text
        """
        raise NotImplementedError

    @abstractmethod
    def detect_topics(
        self,
        text: str,
        logger: logging.Logger | None = None,
    ) -> dict[str, Any]:
        """Return the parsed topic detection JSON object for a document.

        Raises:
            ProviderError: If the call fails or the response is not JSON
        """
        raise NotImplementedError

    @abstractmethod
    def categorize_file(
        self,
        file: FileDescriptor,
        logger: logging.Logger | None = None,
    ) -> dict[str, Any]:
        """Return the parsed ``{category, tags}`` JSON object for a file.

        Raises:
            ProviderError: If the call fails or the response is not JSON
        """
        raise NotImplementedError


class HTTPProvider(GenerationProvider):
    """Common request flow for providers reached with one JSON POST per call.

    Subclasses build the vendor payloads, send them in ``_post`` and pull
    the generated text out of the response in ``_extract_text``. Every call
    is wrapped in a tracing span and recorded on the LLM logger.
    """

    label = "http"
    key_name = "API"

    def __init__(
        self,
        cfg: ProviderConfig,
        generation_cfg: GenerationConfig,
        api_key: str | None,
        log_cfg: LoggingConfig,
        llm_logger: logging.Logger | None,
    ):
        if not api_key:
            raise ValueError(f"Missing {self.key_name} key")
        self.cfg = cfg
        self.generation_cfg = generation_cfg
        self.api_key = api_key
        self.log_cfg = log_cfg
        self.llm_logger = llm_logger

    def generate_analysis(
        self,
        group: TopicGroup,
        logger: logging.Logger | None = None,
    ) -> str:
        prompt = build_generation_prompt(group, self.generation_cfg)
        payload = self._analysis_payload(build_generation_system_prompt(), prompt)
        content = self._complete("generate_analysis", payload, prompt, group.main_topic, logger)
        return content.strip()

    def detect_topics(
        self,
        text: str,
        logger: logging.Logger | None = None,
    ) -> dict[str, Any]:
        prompt = build_topic_detection_prompt(text, self.generation_cfg)
        return self._complete_json("detect_topics", prompt, "document", logger)

    def categorize_file(
        self,
        file: FileDescriptor,
        logger: logging.Logger | None = None,
    ) -> dict[str, Any]:
        prompt = build_file_organization_prompt(file)
        return self._complete_json("categorize_file", prompt, file.name, logger)

    def _complete_json(
        self,
        operation: str,
        prompt: str,
        subject: str,
        logger: logging.Logger | None,
    ) -> dict[str, Any]:
        content = self._complete(operation, self._json_payload(prompt), prompt, subject, logger)
        try:
            return parse_json_response(content)
        except json.JSONDecodeError as exc:
            self._log_exchange(operation, "parse_error", content, prompt, subject, logger)
            raise ProviderError("parse_error", str(exc)) from exc

    @abstractmethod
    def _analysis_payload(self, system_prompt: str, prompt: str) -> dict[str, Any]:
        raise NotImplementedError

    @abstractmethod
    def _json_payload(self, prompt: str) -> dict[str, Any]:
        raise NotImplementedError

    @abstractmethod
    def _post(self, payload: dict[str, Any]) -> Any:
        raise NotImplementedError

    @abstractmethod
    def _extract_text(self, data: Any) -> str:
        raise NotImplementedError

    def _client(self) -> httpx.Client:
        return httpx.Client(timeout=self.cfg.timeout_seconds, trust_env=self.cfg.trust_env)

    def _complete(
        self,
        operation: str,
        payload: dict[str, Any],
        prompt: str,
        subject: str,
        logger: logging.Logger | None,
    ) -> str:
        attributes = {"llm.model": self.cfg.model, "llm.provider": self.label, "topic": subject}
        with start_span(f"{self.label}.{operation}", kind="llm", input_value=prompt, attributes=attributes) as span:
            cause: Exception | None = None
            try:
                data = self._post(payload)
            except httpx.TimeoutException as exc:
                cause, failure = exc, ProviderError("timeout", str(exc) or "deadline exceeded")
            except httpx.HTTPError as exc:
                cause, failure = exc, ProviderError("provider_error", str(exc))
            except ValueError as exc:
                cause, failure = exc, ProviderError("parse_error", f"Response body is not JSON: {exc}")

            if cause is not None:
                record_span_error(span, cause)
                self._log_exchange(operation, failure.status, str(cause), prompt, subject, logger)
                raise failure from cause

            content = self._extract_text(data)
            if not content.strip():
                self._log_exchange(operation, "parse_error", json.dumps(data, default=str)[:2000], prompt, subject, logger)
                raise ProviderError("parse_error", "Response carries no generated text")

            set_span_output(span, content)
            self._log_exchange(operation, "ok", content, prompt, subject, logger)
            return content

    def _log_exchange(
        self,
        operation: str,
        status: str,
        content: str,
        prompt: str,
        subject: str,
        logger: logging.Logger | None = None,
    ) -> None:
        target = logger or self.llm_logger
        if target is None:
            return
        mode = self.log_cfg.llm_log_redaction
        fields: dict[str, Any] = {
            "event": f"llm_{operation}",
            "status": status,
            "provider": self.label,
            "model": self.cfg.model,
            "topic": subject,
        }
        if self.log_cfg.llm_log_detail == "prompt_response":
            fields["raw_prompt"] = truncate_text(redact_text(prompt, mode))
        fields["raw_response"] = truncate_text(redact_text(content, mode))
        log_event(target, "LLM exchange", **fields)
