# sponsor_detector/llm/gemini.py
"""
Isolated LLM invocation via the Google Gen AI SDK.

One client is constructed at startup from AppConfig and injected into the
pipeline. No streaming, no retries: one prompt in, one text reply out.
"""

from __future__ import annotations

from typing import Protocol

from google import genai


DEFAULT_MODEL = "gemini-2.0-flash"


class CompletionError(RuntimeError):
    """Raised when the model call fails or returns no text."""


class CompletionClient(Protocol):
    def generate(self, prompt: str) -> str:
        ...


class GeminiClient:
    """Thin wrapper around genai.Client bound to a single model."""

    def __init__(self, api_key: str, model: str = DEFAULT_MODEL, client: genai.Client | None = None) -> None:
        self.model = model
        self._client = client or genai.Client(api_key=api_key)

    def generate(self, prompt: str) -> str:
        try:
            response = self._client.models.generate_content(model=self.model, contents=prompt)
        except Exception as exc:
            raise CompletionError(f"LLM call failed: {exc}") from exc

        text = response.text
        if text is None:
            raise CompletionError("LLM returned no text (response may have been blocked)")
        return text
