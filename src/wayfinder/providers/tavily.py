"""Tavily search adapter (completions delegated to another adapter)."""

import logging
import time
from typing import Any

from tavily import AsyncTavilyClient

from .base import BaseSearchAdapter, ProviderError, make_source
from .protocol import SearchOptions, SearchResponse

logger = logging.getLogger(__name__)


class TavilySearchAdapter(BaseSearchAdapter):
    """
    Tavily for web search, paired with a completion-capable adapter.

    Tavily only searches, so planning and report generation are forwarded to
    ``completions`` (normally an ``OpenAISearchAdapter``).
    """

    def __init__(
        self,
        api_key: str,
        completions: BaseSearchAdapter,
        search_depth: str = "advanced",
        max_retries: int = 3,
        backoff_seconds: float = 2.0,
        client: Any | None = None,
    ):
        super().__init__(max_retries=max_retries, backoff_seconds=backoff_seconds)
        self.client = client or AsyncTavilyClient(api_key=api_key)
        self.completions = completions
        self.search_depth = search_depth

    @property
    def name(self) -> str:
        return "tavily"

    async def search(self, query: str, options: SearchOptions | None = None) -> SearchResponse:
        options = options or SearchOptions()
        search_depth = "basic" if options.context_size == "low" else self.search_depth
        start = time.monotonic()

        try:
            response = await self.client.search(
                query=query,
                max_results=options.max_results or 5,
                search_depth=search_depth,
                include_answer=True,
            )
        except Exception as e:
            raise ProviderError(f"Tavily search failed: {e}") from e

        sources = [
            make_source(
                title=r.get("title"),
                url=r.get("url"),
                content=r.get("content"),
                score=r.get("score", 0.0),
                published_date=r.get("published_date"),
            )
            for r in response.get("results", [])
        ]

        logger.info(f"Search via tavily: {len(sources)} results for '{query[:50]}...'")

        return SearchResponse(
            query=query,
            answer=response.get("answer") or "",
            sources=sources,
            response_time=float(response.get("response_time") or time.monotonic() - start),
        )

    async def complete(self, prompt: str, temperature: float = 0.7, max_tokens: int = 4000) -> str:
        return await self.completions.complete(prompt, temperature=temperature, max_tokens=max_tokens)
