"""
Base adapter utilities shared across all provider adapters.

Provides:
- Provider exception types
- Retry logic with exponential backoff
- Query optimization
- Result normalization
- Planning and report completions on top of a provider's ``complete``
"""

import logging
import re
from typing import Any

from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_not_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from ..models import SourceResult
from .prompts import build_planning_prompt
from .protocol import PlannedStep, SearchOptions, SearchResponse

logger = logging.getLogger(__name__)

FILLER_PATTERN = re.compile(r"\b(how to|what is|explain|research|find|about)\b", re.IGNORECASE)
MIN_QUERY_LENGTH = 3


class ProviderError(Exception):
    """Raised when a provider call fails or returns an unusable response."""


class ProviderAuthenticationError(ProviderError):
    """Raised when a provider rejects the configured credentials."""

    def __init__(self, provider: str, api_key_env: str):
        self.provider = provider
        self.api_key_env = api_key_env
        super().__init__(
            f"{provider} authentication failed. "
            f"Check that {api_key_env} is set to a valid API key."
        )


class ProviderConfigurationError(ProviderError):
    """Raised when an adapter cannot be constructed (missing or malformed credentials)."""


def make_source(
    title: Any,
    url: Any,
    content: Any,
    score: Any,
    published_date: Any = None,
) -> SourceResult:
    """Build a SourceResult from loosely-typed provider fields."""
    try:
        numeric_score = float(score)
    except (TypeError, ValueError):
        numeric_score = 0.0

    return SourceResult(
        title=str(title or ""),
        url=str(url or ""),
        content=str(content or ""),
        score=min(max(numeric_score, 0.0), 1.0),
        published_date=str(published_date) if published_date else None,
    )


class BaseSearchAdapter:
    """
    Base class with shared adapter behaviour.

    Subclasses implement ``search`` and ``complete``; everything else in the
    ``SearchAdapter`` protocol is provided here.
    """

    def __init__(self, max_retries: int = 3, backoff_seconds: float = 2.0):
        """
        Initialize base adapter.

        Args:
            max_retries: Attempts made by ``search_with_retry``
            backoff_seconds: Backoff multiplier; attempt n waits backoff * 2^(n-1)
        """
        self.max_retries = max_retries
        self.backoff_seconds = backoff_seconds

    @property
    def name(self) -> str:
        return type(self).__name__

    async def search(self, query: str, options: SearchOptions | None = None) -> SearchResponse:
        raise NotImplementedError

    async def complete(self, prompt: str, temperature: float = 0.7, max_tokens: int = 4000) -> str:
        raise NotImplementedError

    async def search_with_retry(
        self,
        query: str,
        options: SearchOptions | None = None,
        max_retries: int | None = None,
    ) -> SearchResponse:
        """
        Execute search with exponential backoff retry.

        Authentication failures are not retried.

        Raises:
            Last exception if all retries fail
        """
        attempts = max(1, self.max_retries if max_retries is None else max_retries)

        async for attempt in AsyncRetrying(
            retry=retry_if_not_exception_type(ProviderAuthenticationError),
            stop=stop_after_attempt(attempts),
            wait=wait_exponential(multiplier=self.backoff_seconds),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        ):
            with attempt:
                logger.debug(f"Search attempt {attempt.retry_state.attempt_number}/{attempts}")
                return await self.search(query, options)

        # reraise=True means the loop either returns or raises
        raise RuntimeError("Retry logic failed unexpectedly")

    def optimize_query(self, step_text: str, context: str | None = None) -> str:
        """
        Build a search query from a step description.

        Accumulated context is appended before filler phrases are stripped;
        if nothing useful is left the step text is used unchanged.
        """
        query = f"{step_text} {context}" if context else step_text
        query = FILLER_PATTERN.sub("", query)
        query = " ".join(query.split())

        if len(query) < MIN_QUERY_LENGTH:
            return step_text

        return query

    def process_results(self, response: SearchResponse) -> list[SourceResult]:
        """Canonical source list: entries without a URL are dropped, untitled ones numbered."""
        results: list[SourceResult] = []
        for index, source in enumerate(response.sources):
            if not source.url.strip():
                continue
            title = source.title.strip() or f"Source {index + 1}"
            results.append(source.model_copy(update={"title": title}))
        return results

    async def generate_comprehensive_analysis(self, prompt: str) -> str:
        """
        Single completion call returning a free-text report.

        Raises:
            ProviderError: If the completion fails or is empty
        """
        try:
            text = await self.complete(prompt, temperature=0.7, max_tokens=4000)
        except ProviderError:
            raise
        except Exception as e:
            raise ProviderError(f"Failed to generate comprehensive analysis: {e}") from e

        if not text or not text.strip():
            raise ProviderError("Failed to generate comprehensive analysis: empty completion")

        return text.strip()

    async def generate_research_steps(self, topic: str) -> list[PlannedStep]:
        """
        Ask the model for a research plan and parse it.

        Raises:
            ProviderError: If the completion fails
            StepPlanParseError: If the response cannot be parsed into steps
        """
        from .parsing import StepPlanParseError, parse_research_steps

        try:
            text = await self.complete(build_planning_prompt(topic), temperature=0.3, max_tokens=2000)
        except ProviderError:
            raise
        except Exception as e:
            raise ProviderError(f"Failed to generate research steps: {e}") from e

        try:
            return parse_research_steps(text)
        except StepPlanParseError as e:
            logger.warning(f"{type(e).__name__} while parsing research plan: {e}")
            logger.debug(f"Raw planning response: {text[:500]}")
            raise
