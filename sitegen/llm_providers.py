from __future__ import annotations

import logging
import os
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Tuple, Type

import requests

from sitegen.errors import UnsupportedProviderError, UpstreamError
from sitegen.llm_prompts import SYSTEM_PROMPT

log = logging.getLogger(__name__)

# Sampling is fixed server-side; callers cannot tune it.
TEMPERATURE = 0.7
MAX_OUTPUT_TOKENS = 8000

_timeout_raw = os.getenv("LLM_TIMEOUT_SECS", "").strip()
if _timeout_raw:
    try:
        LLM_TIMEOUT_SECS: Optional[float] = float(_timeout_raw)
    except ValueError:
        LLM_TIMEOUT_SECS = None
else:
    # Unset means the transport's own default
    LLM_TIMEOUT_SECS = None

OutboundRequest = Tuple[Dict[str, str], Dict[str, str], Dict[str, Any]]


def _dig(payload: Any, *path: Any) -> Any:
    """Walk dict keys / list indexes; None as soon as a step is missing."""
    cur = payload
    for step in path:
        if isinstance(step, int):
            if not isinstance(cur, list) or len(cur) <= step:
                return None
            cur = cur[step]
        else:
            if not isinstance(cur, dict):
                return None
            cur = cur.get(step)
        if cur is None:
            return None
    return cur


def _text_or_empty(value: Any) -> str:
    return value if isinstance(value, str) else ""


class ProviderAdapter(ABC):
    """One upstream LLM backend: fixed endpoint, fixed model.

    Subclasses describe the wire format (build_request / extract_text); the
    HTTP exchange and the error policy live here so every backend behaves the
    same way. `transport` is anything exposing a requests-style
    post(url, headers=, params=, json=, timeout=).
    """

    name: str = ""
    label: str = ""
    endpoint: str = ""
    model: str = ""

    def __init__(self, transport: Any = None, timeout: Optional[float] = None):
        self._transport = transport
        self._timeout = timeout if timeout is not None else LLM_TIMEOUT_SECS

    @abstractmethod
    def build_request(self, credential: str, instruction: str) -> OutboundRequest:
        """Return (headers, query params, JSON body) for one call."""

    @abstractmethod
    def extract_text(self, payload: Any) -> str:
        """Generated text at the provider's response path, "" when absent."""

    def invoke(self, credential: str, instruction: str) -> str:
        headers, params, body = self.build_request(credential, instruction)
        transport = self._transport if self._transport is not None else requests
        resp = transport.post(
            self.endpoint,
            headers=headers,
            params=params or None,
            json=body,
            timeout=self._timeout,
        )
        status = getattr(resp, "status_code", None)
        if not isinstance(status, int) or not 200 <= status < 300:
            log.debug("%s HTTP %s", self.label, status)
            raise UpstreamError(self.label, resp.text, status_code=status)
        text = self.extract_text(resp.json())
        if not text:
            log.info("%s returned no generated text", self.label)
        return text


class OpenAIAdapter(ProviderAdapter):
    name = "openai"
    label = "OpenAI"
    endpoint = "https://api.openai.com/v1/chat/completions"
    model = "gpt-4.1"

    def build_request(self, credential: str, instruction: str) -> OutboundRequest:
        headers = {
            "Authorization": f"Bearer {credential}",
            "Content-Type": "application/json",
        }
        body = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": instruction},
            ],
            "temperature": TEMPERATURE,
            "max_tokens": MAX_OUTPUT_TOKENS,
        }
        return headers, {}, body

    def extract_text(self, payload: Any) -> str:
        return _text_or_empty(_dig(payload, "choices", 0, "message", "content"))


class GeminiAdapter(ProviderAdapter):
    name = "gemini"
    label = "Gemini"
    model = "gemini-2.5-flash"
    endpoint = f"https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"

    def build_request(self, credential: str, instruction: str) -> OutboundRequest:
        body = {
            "contents": [{"parts": [{"text": instruction}]}],
            "generationConfig": {
                "temperature": TEMPERATURE,
                "maxOutputTokens": MAX_OUTPUT_TOKENS,
            },
        }
        return {"Content-Type": "application/json"}, {"key": credential}, body

    def extract_text(self, payload: Any) -> str:
        return _text_or_empty(_dig(payload, "candidates", 0, "content", "parts", 0, "text"))


class ClaudeAdapter(ProviderAdapter):
    name = "claude"
    label = "Claude"
    endpoint = "https://api.anthropic.com/v1/messages"
    model = "claude-opus-4-5"
    api_version = "2023-06-01"

    def build_request(self, credential: str, instruction: str) -> OutboundRequest:
        headers = {
            "x-api-key": credential,
            "Content-Type": "application/json",
            "anthropic-version": self.api_version,
        }
        body = {
            "model": self.model,
            "max_tokens": MAX_OUTPUT_TOKENS,
            "temperature": TEMPERATURE,
            "system": SYSTEM_PROMPT,
            "messages": [{"role": "user", "content": instruction}],
        }
        return headers, {}, body

    def extract_text(self, payload: Any) -> str:
        return _text_or_empty(_dig(payload, "content", 0, "text"))


PROVIDERS: Dict[str, Type[ProviderAdapter]] = {
    OpenAIAdapter.name: OpenAIAdapter,
    GeminiAdapter.name: GeminiAdapter,
    ClaudeAdapter.name: ClaudeAdapter,
}


def get_adapter(provider_id: Optional[str], transport: Any = None) -> ProviderAdapter:
    cls = PROVIDERS.get(provider_id or "")
    if cls is None:
        raise UnsupportedProviderError(provider_id)
    return cls(transport=transport)
