"""
Single research step execution.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..providers.protocol import SearchOptions

if TYPE_CHECKING:
    from ..models import Step
    from ..providers.protocol import SearchAdapter
    from .rate_limiter import RateLimiter

logger = logging.getLogger(__name__)


class StepExecutor:
    """
    Runs one step against the search provider.

    Failures are recorded on the step and re-raised; deciding whether the
    mission continues is the runner's job.
    """

    def __init__(
        self,
        adapter: SearchAdapter,
        rate_limiter: RateLimiter,
        options: SearchOptions | None = None,
    ):
        self.adapter = adapter
        self.rate_limiter = rate_limiter
        self.options = options or SearchOptions(context_size="high", max_results=8)

    async def execute_step(self, step: Step, context: str | None = None) -> Step:
        """
        Execute a single research step.

        Args:
            step: Pending step; mutated in place
            context: Findings accumulated by earlier steps

        Returns:
            The same step, now ``completed``

        Raises:
            Exception: Whatever the provider raised once retries are exhausted
        """
        step.mark_executing()

        try:
            await self.rate_limiter.wait_if_needed()

            step.query = self.adapter.optimize_query(step.description, context)
            logger.debug(f"Step '{step.title}' query: {step.query[:100]}")

            response = await self.adapter.search_with_retry(step.query, self.options)
            step.mark_completed(self.adapter.process_results(response))

        except Exception as e:
            step.mark_error(str(e) or type(e).__name__)
            raise

        logger.info(f"Step '{step.title}' completed with {len(step.results or [])} results")
        return step
