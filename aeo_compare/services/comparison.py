import logging
import time
from dataclasses import dataclass

from ..config import Settings
from ..exceptions import MissingAPIKeyError
from ..llm.prompts import build_messages
from ..llm.providers import LLMProvider
from ..schemas import ComparisonRequest
from .normalizer import NormalizedResult, normalize

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ComparisonResult:
    normalized: NormalizedResult
    raw: str
    model: str


class ComparisonService:
    """Runs one snippet comparison against the configured LLM provider."""

    def __init__(self, settings: Settings, provider: LLMProvider):
        self.settings = settings
        self.provider = provider

    async def compare(self, request: ComparisonRequest) -> ComparisonResult:
        if not self.settings.has_api_key:
            raise MissingAPIKeyError()

        start_time = time.time()
        logger.info(
            "Comparing snippets via %s (model=%s, len_a=%d, len_b=%d)",
            self.provider.name, self.provider.model,
            len(request.snippet_a), len(request.snippet_b),
        )

        raw = await self.provider.complete(build_messages(request.snippet_a, request.snippet_b))
        normalized = normalize(raw, max_chars=self.settings.max_result_chars)

        elapsed_ms = int((time.time() - start_time) * 1000)
        logger.info(
            "Comparison finished in %dms (result_chars=%d, html=%s)",
            elapsed_ms, len(normalized.result_text), normalized.result_html is not None,
        )
        return ComparisonResult(normalized=normalized, raw=raw, model=self.provider.model)
