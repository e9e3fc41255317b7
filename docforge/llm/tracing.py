"""
Optional Langfuse tracing.

Pipeline runs, stages and LLM calls are wrapped in ``start_span`` blocks.
When tracing is disabled, unconfigured or the SDK is missing, every helper
is a no-op and ``start_span`` yields ``None``. Tracing problems never
interrupt a run.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
import json
import os
import sys
from typing import Any, Iterator

from ..config import LangfuseConfig
from ..utils.logging import redact_text, truncate_text


@dataclass
class _TracingState:
    client: Any = None
    cfg: LangfuseConfig = field(default_factory=LangfuseConfig)


_state = _TracingState()


def setup_langfuse(cfg: LangfuseConfig) -> None:
    """Create the Langfuse client for this process, or disable tracing."""
    _state.cfg = cfg
    _state.client = _build_client(cfg) if cfg.enabled else None


def _build_client(cfg: LangfuseConfig) -> Any:
    public_key = cfg.public_key or os.getenv("LANGFUSE_PUBLIC_KEY")
    secret_key = cfg.secret_key or os.getenv("LANGFUSE_SECRET_KEY")
    if not (public_key and secret_key):
        return None
    try:
        from langfuse import Langfuse  # type: ignore
    except ImportError:
        return None
    return Langfuse(
        public_key=public_key,
        secret_key=secret_key,
        host=cfg.host or os.getenv("LANGFUSE_HOST"),
        environment=cfg.environment or os.getenv("LANGFUSE_ENVIRONMENT"),
        release=cfg.release or os.getenv("LANGFUSE_RELEASE"),
    )


def get_tracer() -> Any:
    return _state.client


@contextmanager
def start_span(
    name: str,
    kind: str,
    input_value: Any | None = None,
    attributes: dict[str, Any] | None = None,
) -> Iterator[Any | None]:
    client = _state.client
    if client is None:
        yield None
        return

    metadata = {key: _scalar(value) for key, value in (attributes or {}).items() if value is not None}
    metadata.setdefault("span.kind", kind)
    try:
        span_cm = client.start_as_current_span(name=name, input=_prepare(input_value), metadata=metadata)
        span = span_cm.__enter__()
    except Exception:  # noqa: BLE001
        yield None
        return

    try:
        yield span
    except BaseException:
        _exit_quietly(span_cm, *sys.exc_info())
        raise
    else:
        _exit_quietly(span_cm, None, None, None)


def set_span_output(span: Any | None, output_value: Any) -> None:
    payload = _prepare(output_value)
    if span is not None and payload is not None:
        _update_quietly(span, output=payload)


def record_span_error(span: Any | None, exc: BaseException) -> None:
    if span is not None:
        _update_quietly(span, level="ERROR", status_message=str(exc))


def flush() -> None:
    """Send buffered spans; call before the process exits."""
    client = _state.client
    if client is None:
        return
    try:
        client.flush()
    except Exception:  # noqa: BLE001
        return


def _prepare(value: Any) -> str | None:
    if value is None:
        return None
    text = value if isinstance(value, str) else json.dumps(value, ensure_ascii=False, default=str)
    return truncate_text(redact_text(text, _state.cfg.redaction), _state.cfg.max_text_chars)


def _scalar(value: Any) -> Any:
    return value if isinstance(value, (str, int, float, bool)) else str(value)


def _exit_quietly(span_cm: Any, *exc_info: Any) -> None:
    try:
        span_cm.__exit__(*exc_info)
    except Exception:  # noqa: BLE001
        return


def _update_quietly(span: Any, **fields: Any) -> None:
    try:
        span.update(**fields)
    except Exception:  # noqa: BLE001
        return
