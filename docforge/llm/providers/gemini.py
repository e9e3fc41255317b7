"""Google Gemini provider for topic analysis generation."""

from __future__ import annotations

from typing import Any

from .base import JSON_MAX_TOKENS, JSON_TEMPERATURE, HTTPProvider


class GeminiProvider(HTTPProvider):
    """Gemini ``generateContent`` backend.

    Thinking models return reasoning parts flagged with ``thought``; only
    the answer parts are used unless nothing else came back.
    """

    label = "gemini"
    key_name = "Google API"

    def _analysis_payload(self, system_prompt: str, prompt: str) -> dict[str, Any]:
        return {
            "systemInstruction": {"parts": [{"text": system_prompt}]},
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": self.generation_cfg.temperature,
                "maxOutputTokens": self.generation_cfg.max_output_tokens,
            },
        }

    def _json_payload(self, prompt: str) -> dict[str, Any]:
        return {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": JSON_TEMPERATURE,
                "maxOutputTokens": JSON_MAX_TOKENS,
                "responseMimeType": "application/json",
            },
        }

    def _post(self, payload: dict[str, Any]) -> Any:
        url = f"{self.cfg.base_url.rstrip('/')}/v1beta/models/{self.cfg.model}:generateContent"
        with self._client() as client:
            resp = client.post(url, params={"key": self.api_key}, json=payload)
            resp.raise_for_status()
            return resp.json()

    def _extract_text(self, data: Any) -> str:
        try:
            parts = data["candidates"][0]["content"]["parts"]
        except (KeyError, IndexError, TypeError):
            return ""
        if not isinstance(parts, list):
            return ""

        answer: list[str] = []
        thoughts: list[str] = []
        for part in parts:
            if not isinstance(part, dict) or not part.get("text"):
                continue
            (thoughts if part.get("thought") else answer).append(str(part["text"]))
        return "".join(answer or thoughts)
