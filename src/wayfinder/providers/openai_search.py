"""
OpenAI adapter for wayfinder.

Talks to any OpenAI-compatible chat-completions endpoint over httpx. Web
search uses a search-enabled model (``web_search_options``); sources are
recovered from the ``url_citation`` annotations attached to the answer.
"""

import logging
import time
from typing import Any

import httpx

from ..models import SourceResult
from .base import (
    BaseSearchAdapter,
    ProviderAuthenticationError,
    ProviderError,
    make_source,
)
from .prompts import build_search_prompt
from .protocol import SearchOptions, SearchResponse

logger = logging.getLogger(__name__)


def extract_citation_sources(message: dict[str, Any]) -> list[SourceResult]:
    """
    Map ``url_citation`` annotations to source results.

    The cited span of the answer becomes the source content; scores decrease
    by 0.1 per position since the API does not rank citations.
    """
    content = message.get("content") or ""
    annotations = message.get("annotations") or []
    citations = [a for a in annotations if a.get("type") == "url_citation"]

    sources: list[SourceResult] = []
    for index, annotation in enumerate(citations):
        citation = annotation.get("url_citation") or {}
        start = citation.get("start_index") or 0
        end = citation.get("end_index") or len(content)
        sources.append(
            make_source(
                title=citation.get("title") or f"Source {index + 1}",
                url=citation.get("url") or "",
                content=content[start:end],
                score=1.0 - index * 0.1,
            )
        )

    return sources


class OpenAISearchAdapter(BaseSearchAdapter):
    """Adapter for the OpenAI API (search-preview model + chat completions)."""

    def __init__(
        self,
        api_key: str,
        search_model: str = "gpt-4o-search-preview",
        completion_model: str = "gpt-4o",
        base_url: str = "https://api.openai.com/v1",
        timeout: float = 120.0,
        max_retries: int = 3,
        backoff_seconds: float = 2.0,
        api_key_env: str = "OPENAI_API_KEY",
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(max_retries=max_retries, backoff_seconds=backoff_seconds)
        self.api_key = api_key
        self.search_model = search_model
        self.completion_model = completion_model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.api_key_env = api_key_env
        self._transport = transport

    @property
    def name(self) -> str:
        return f"openai:{self.search_model}"

    def _headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.api_key}"}

    async def _chat(self, payload: dict[str, Any]) -> dict[str, Any]:
        """POST one chat completion and return the first choice's message."""
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            response = await client.post(
                f"{self.base_url}/chat/completions",
                headers=self._headers(),
                json=payload,
            )

        if response.status_code in (401, 403):
            raise ProviderAuthenticationError(provider="OpenAI", api_key_env=self.api_key_env)
        if response.status_code != 200:
            raise ProviderError(f"OpenAI API error ({response.status_code}): {response.text[:500]}")

        try:
            return response.json()["choices"][0]["message"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise ProviderError(f"Malformed OpenAI response: {e}") from e

    async def search(self, query: str, options: SearchOptions | None = None) -> SearchResponse:
        options = options or SearchOptions()
        start = time.monotonic()

        try:
            message = await self._chat(
                {
                    "model": self.search_model,
                    "web_search_options": {"search_context_size": options.context_size},
                    "messages": [{"role": "user", "content": build_search_prompt(query)}],
                }
            )
        except httpx.HTTPError as e:
            raise ProviderError(f"Failed to search: {e}") from e

        sources = extract_citation_sources(message)
        if options.max_results is not None:
            sources = sources[: options.max_results]

        elapsed = time.monotonic() - start
        logger.info(f"Search via {self.name}: {len(sources)} sources for '{query[:50]}...'")

        return SearchResponse(
            query=query,
            answer=message.get("content") or "",
            sources=sources,
            response_time=elapsed,
        )

    async def complete(self, prompt: str, temperature: float = 0.7, max_tokens: int = 4000) -> str:
        try:
            message = await self._chat(
                {
                    "model": self.completion_model,
                    "messages": [{"role": "user", "content": prompt}],
                    "temperature": temperature,
                    "max_tokens": max_tokens,
                }
            )
        except httpx.HTTPError as e:
            raise ProviderError(f"Completion request failed: {e}") from e

        return message.get("content") or ""
