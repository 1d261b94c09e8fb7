import json

import httpx
import pytest

from aeo_compare.exceptions import LLMProviderError
from aeo_compare.llm.prompts import build_messages
from aeo_compare.llm.providers import OpenRouterProvider, extract_content

MESSAGES = build_messages("snippet one", "snippet two")


def make_provider(handler, **kwargs) -> OpenRouterProvider:
    return OpenRouterProvider(api_key="sk-or-test", transport=httpx.MockTransport(handler), **kwargs)


@pytest.mark.asyncio
class TestOpenRouterProvider:
    """Outbound request shape and failure handling against a mocked OpenRouter."""

    async def test_request_shape(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["headers"] = request.headers
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"choices": [{"message": {"content": "analysis"}}]})

        provider = make_provider(handler, referer="https://example.com", title="Snippet Compare")
        content = await provider.complete(MESSAGES)

        assert content == "analysis"
        assert seen["url"] == "https://openrouter.ai/api/v1/chat/completions"
        assert seen["headers"]["authorization"] == "Bearer sk-or-test"
        assert seen["headers"]["http-referer"] == "https://example.com"
        assert seen["headers"]["x-title"] == "Snippet Compare"
        assert seen["body"] == {
            "model": "openai/gpt-4-turbo",
            "messages": MESSAGES,
            "temperature": 0.25,
            "max_tokens": 900,
        }

    async def test_attribution_headers_optional(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["headers"] = request.headers
            return httpx.Response(200, json={"choices": [{"message": {"content": "ok"}}]})

        await make_provider(handler).complete(MESSAGES)
        assert "http-referer" not in seen["headers"]
        assert "x-title" not in seen["headers"]

    async def test_from_settings(self, settings):
        settings.openrouter_model = "anthropic/claude-3.5-sonnet"
        settings.llm_max_tokens = 1200
        provider = OpenRouterProvider.from_settings(settings)

        assert provider.api_key == "sk-or-test-key"
        assert provider.model == "anthropic/claude-3.5-sonnet"
        assert provider.max_tokens == 1200
        assert provider.base_url == "https://openrouter.ai/api/v1"

    async def test_non_2xx_raises(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(429, json={"error": {"message": "rate limited"}})

        with pytest.raises(LLMProviderError) as exc_info:
            await make_provider(handler).complete(MESSAGES)

        assert exc_info.value.status_code == 429
        assert "HTTP 429" in exc_info.value.error_message

    async def test_network_error_raises(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(LLMProviderError) as exc_info:
            await make_provider(handler).complete(MESSAGES)

        assert exc_info.value.status_code is None
        assert "connection refused" in exc_info.value.error_message

    async def test_multipart_content_returned_as_string(self):
        parts = [{"type": "text", "text": "hi"}]

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"choices": [{"message": {"content": parts}}]})

        content = await make_provider(handler).complete(MESSAGES)

        assert isinstance(content, str)
        assert json.loads(content) == parts

    async def test_non_json_body_raises(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>gateway</html>")

        with pytest.raises(LLMProviderError):
            await make_provider(handler).complete(MESSAGES)


class TestExtractContent:

    def test_chat_completion_shape(self):
        assert extract_content({"choices": [{"message": {"content": "hi"}}]}) == "hi"

    def test_output_shape(self):
        assert extract_content({"output": [{"content": [{"text": "from output"}]}]}) == "from output"

    def test_empty_choice_falls_through_to_output(self):
        payload = {"choices": [{"message": {"content": ""}}], "output": [{"content": [{"text": "x"}]}]}
        assert extract_content(payload) == "x"

    def test_non_string_output_text_is_serialized(self):
        assert extract_content({"output": [{"content": [{"text": {"value": 1}}]}]}) == '{"value": 1}'

    def test_string_payload(self):
        assert extract_content("bare string") == "bare string"

    def test_unknown_shape_is_serialized(self):
        assert extract_content({"id": "gen-1", "choices": []}) == '{"id": "gen-1", "choices": []}'
