"""OpenAI-compatible chat-completions provider."""

from __future__ import annotations

from typing import Any

from .base import JSON_MAX_TOKENS, JSON_TEMPERATURE, HTTPProvider


class OpenAICompatibleProvider(HTTPProvider):
    """Provider for any endpoint speaking the ``/chat/completions`` protocol."""

    label = "openai"
    key_name = "OpenAI API"

    def _analysis_payload(self, system_prompt: str, prompt: str) -> dict[str, Any]:
        return {
            "model": self.cfg.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": prompt},
            ],
            "temperature": self.generation_cfg.temperature,
            "max_tokens": self.generation_cfg.max_output_tokens,
        }

    def _json_payload(self, prompt: str) -> dict[str, Any]:
        return {
            "model": self.cfg.model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": JSON_TEMPERATURE,
            "max_tokens": JSON_MAX_TOKENS,
            "response_format": {"type": "json_object"},
        }

    def _post(self, payload: dict[str, Any]) -> Any:
        url = f"{self.cfg.base_url.rstrip('/')}/chat/completions"
        with self._client() as client:
            resp = client.post(url, headers={"Authorization": f"Bearer {self.api_key}"}, json=payload)
            resp.raise_for_status()
            return resp.json()

    def _extract_text(self, data: Any) -> str:
        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            return ""
        return content if isinstance(content, str) else ""
