"""Shared fixtures for llm-extract tests."""

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import pytest

EXTRACT_ENV_VARS = [
    "OPENAI_API_KEY",
    "LLM_EXTRACT_API_KEY",
    "OPENAI_MODEL",
    "OPENAI_BASE_URL",
    "LLM_EXTRACT_ENDPOINT_URL",
]

# =============================================================================
# Fake transport
# =============================================================================


@dataclass
class FakeTransport:
    """Transport double that replays scripted bodies and records each call.

    The last body is repeated once the script runs out.
    """

    bodies: list[dict[str, Any] | None]
    calls: list[tuple[str, dict[str, str], dict[str, Any]]] = field(
        default_factory=list
    )

    def send(
        self, url: str, headers: dict[str, str], payload: dict[str, Any]
    ) -> dict[str, Any] | None:
        self.calls.append((url, headers, payload))
        index = min(len(self.calls), len(self.bodies)) - 1
        return self.bodies[index]


@pytest.fixture
def make_transport() -> Callable[..., FakeTransport]:
    """Return a factory building a FakeTransport from scripted bodies."""

    def _make(*bodies: dict[str, Any] | None) -> FakeTransport:
        return FakeTransport(bodies=list(bodies))

    return _make


# =============================================================================
# Response envelopes
# =============================================================================


@pytest.fixture
def chat_body() -> Callable[[str], dict[str, Any]]:
    """Return a builder for chat-completions response envelopes."""

    def _build(content: str) -> dict[str, Any]:
        return {
            "id": "chatcmpl-test",
            "object": "chat.completion",
            "choices": [
                {
                    "index": 0,
                    "message": {"role": "assistant", "content": content},
                    "finish_reason": "stop",
                }
            ],
        }

    return _build


@pytest.fixture
def generate_body() -> Callable[[str], dict[str, Any]]:
    """Return a builder for completion-style (Ollama generate) envelopes."""

    def _build(content: str) -> dict[str, Any]:
        return {"model": "qwen2.5-coder:1.5b", "response": content, "done": True}

    return _build


# =============================================================================
# Environment
# =============================================================================


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove environment variables that configuration falls back to."""
    for var in EXTRACT_ENV_VARS:
        monkeypatch.delenv(var, raising=False)
