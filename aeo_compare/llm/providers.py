import json
import logging
from typing import Any, Dict, List, Optional, Protocol

import httpx

from ..exceptions import LLMProviderError

logger = logging.getLogger(__name__)

Messages = List[Dict[str, str]]


class LLMProvider(Protocol):
    name: str
    model: str

    async def complete(self, messages: Messages) -> str: ...


def _as_text(value: Any) -> str:
    return value if isinstance(value, str) else json.dumps(value)


def extract_content(payload: Any) -> str:
    """Pull the assistant text out of a completion payload. Always returns a str."""
    if isinstance(payload, dict):
        try:
            content = payload["choices"][0]["message"]["content"]
            if content:
                return _as_text(content)
        except (KeyError, IndexError, TypeError):
            pass
        try:
            text = payload["output"][0]["content"][0]["text"]
            if text:
                return _as_text(text)
        except (KeyError, IndexError, TypeError):
            pass
    return _as_text(payload)


class OpenRouterProvider:
    """Chat-completions client for the OpenRouter API."""

    name = "openrouter"

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = "https://openrouter.ai/api/v1",
        model: str = "openai/gpt-4-turbo",
        temperature: float = 0.25,
        max_tokens: int = 900,
        timeout: float = 60.0,
        referer: Optional[str] = None,
        title: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout = timeout
        self.referer = referer
        self.title = title
        self._transport = transport

    @classmethod
    def from_settings(cls, settings, transport: Optional[httpx.AsyncBaseTransport] = None) -> "OpenRouterProvider":
        return cls(
            api_key=settings.openrouter_api_key,
            base_url=settings.openrouter_base_url,
            model=settings.openrouter_model,
            temperature=settings.llm_temperature,
            max_tokens=settings.llm_max_tokens,
            timeout=settings.llm_timeout_seconds,
            referer=settings.openrouter_referer,
            title=settings.openrouter_title,
            transport=transport,
        )

    def _headers(self) -> Dict[str, str]:
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        if self.referer:
            headers["HTTP-Referer"] = self.referer
        if self.title:
            headers["X-Title"] = self.title
        return headers

    def build_payload(self, messages: Messages) -> Dict[str, Any]:
        return {
            "model": self.model,
            "messages": messages,
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }

    async def complete(self, messages: Messages) -> str:
        url = f"{self.base_url}/chat/completions"
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(url, headers=self._headers(), json=self.build_payload(messages))
        except httpx.HTTPError as e:
            raise LLMProviderError(self.name, f"request failed: {e}") from e

        if response.is_error:
            raise LLMProviderError(
                self.name,
                f"upstream returned HTTP {response.status_code}: {response.text[:500]}",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise LLMProviderError(self.name, "upstream returned a non-JSON body", status_code=response.status_code) from e

        logger.debug("OpenRouter completion received for model %s", self.model)
        return extract_content(payload)
