"""
Protocol definitions for search/LLM provider adapters.

The pipeline depends only on this interface, so tests and alternative
providers can be injected without touching the pipeline code.
"""

from dataclasses import dataclass, field
from typing import Literal, Protocol, runtime_checkable

from ..models import Priority, SourceResult

ContextSize = Literal["low", "medium", "high"]


@dataclass
class SearchOptions:
    """Options for a single web search."""

    context_size: ContextSize = "medium"
    max_results: int | None = None


@dataclass
class SearchResponse:
    """Normalized response of one web search."""

    query: str
    answer: str
    sources: list[SourceResult] = field(default_factory=list)
    response_time: float = 0.0


@dataclass
class PlannedStep:
    """A research step proposed by the language model."""

    title: str
    description: str
    priority: Priority
    estimated_duration: str


@runtime_checkable
class SearchAdapter(Protocol):
    """
    Protocol for provider adapters.

    Any backend that can run a web search and a plain text completion can
    drive a mission by implementing this protocol.
    """

    @property
    def name(self) -> str:
        """Human-readable provider name (e.g., 'openai:gpt-4o-search-preview')."""
        ...

    async def search(self, query: str, options: SearchOptions | None = None) -> SearchResponse:
        """Run one web search. Raises on any failure; never returns placeholder data."""
        ...

    async def search_with_retry(
        self,
        query: str,
        options: SearchOptions | None = None,
        max_retries: int | None = None,
    ) -> SearchResponse:
        """Run ``search`` with exponential backoff, re-raising the last error."""
        ...

    def optimize_query(self, step_text: str, context: str | None = None) -> str:
        """Turn a step description (plus accumulated findings) into a search query."""
        ...

    def process_results(self, response: SearchResponse) -> list[SourceResult]:
        """Map a search response to canonical source results."""
        ...

    async def generate_comprehensive_analysis(self, prompt: str) -> str:
        """Single completion returning a free-text report."""
        ...

    async def generate_research_steps(self, topic: str) -> list[PlannedStep]:
        """Single completion returning a parsed research plan."""
        ...
