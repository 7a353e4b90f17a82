"""
Research step planning.

Planning is best-effort dynamic (one LLM call) with a guaranteed static
fallback: ``plan_steps`` never raises because of provider or parsing
failures, so mission creation cannot fail on planning alone.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..models import Priority, Step

if TYPE_CHECKING:
    from ..providers.protocol import PlannedStep, SearchAdapter

logger = logging.getLogger(__name__)

MAX_PLANNED_STEPS = 10

# (title, description template, priority, estimated duration).
# Priorities and durations are placeholder defaults.
FALLBACK_TEMPLATE: tuple[tuple[str, str, Priority, str], ...] = (
    (
        "Foundation Research",
        "Research basic information and overview of {topic}",
        "high",
        "1-2 hours",
    ),
    (
        "Detailed Analysis",
        "Conduct detailed analysis of key aspects of {topic}",
        "high",
        "2-3 hours",
    ),
    (
        "Current Status",
        "Research current status and recent developments related to {topic}",
        "medium",
        "1 hour",
    ),
    (
        "Expert Insights",
        "Gather expert opinions and insights on {topic}",
        "medium",
        "1-2 hours",
    ),
    (
        "Summary & Validation",
        "Validate findings and summarize key conclusions about {topic}",
        "low",
        "30 minutes",
    ),
)


def fallback_steps(topic: str) -> list[Step]:
    """The fixed five-step generic plan with ``topic`` interpolated."""
    return [
        Step(
            title=title,
            description=template.format(topic=topic),
            priority=priority,
            estimated_duration=duration,
            order=index,
        )
        for index, (title, template, priority, duration) in enumerate(FALLBACK_TEMPLATE)
    ]


class StepPlanner:
    """Turns a topic into an ordered list of pending research steps."""

    def __init__(self, adapter: SearchAdapter):
        self.adapter = adapter

    async def plan_steps(self, topic: str) -> list[Step]:
        """
        Plan research steps for a topic.

        Returns:
            Non-empty list of pending steps with sequential ``order``
        """
        try:
            planned = await self.adapter.generate_research_steps(topic)
            if not planned:
                raise ValueError("Planner returned no steps")
            steps = self._to_steps(planned)
        except Exception as e:
            logger.warning(f"Dynamic planning failed ({type(e).__name__}: {e}), using fallback plan")
            return fallback_steps(topic)

        logger.info(f"Planned {len(steps)} research steps")
        return steps

    def _to_steps(self, planned: list[PlannedStep]) -> list[Step]:
        if len(planned) > MAX_PLANNED_STEPS:
            logger.warning(f"Truncating plan from {len(planned)} to {MAX_PLANNED_STEPS} steps")

        steps = []
        for index, item in enumerate(planned[:MAX_PLANNED_STEPS]):
            if not item.title or not item.description:
                raise ValueError(f"Planned step {index} is missing a title or description")
            steps.append(
                Step(
                    title=item.title,
                    description=item.description,
                    priority=item.priority,
                    estimated_duration=item.estimated_duration,
                    order=index,
                )
            )
        return steps
