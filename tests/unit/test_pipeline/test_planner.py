"""Tests for step planning and its static fallback."""

import logging
from unittest.mock import AsyncMock

from wayfinder.pipeline.planner import FALLBACK_TEMPLATE, MAX_PLANNED_STEPS, StepPlanner, fallback_steps
from wayfinder.providers.parsing import NoJsonFound
from wayfinder.providers.protocol import PlannedStep

TOPIC = "Compare total cost of ownership of electric and gasoline cars"


def planned(n: int) -> list[PlannedStep]:
    return [
        PlannedStep(
            title=f"Step {i}",
            description=f"Investigate aspect {i}",
            priority="medium",
            estimated_duration="1 hour",
        )
        for i in range(n)
    ]


def make_planner(**mock_kwargs) -> StepPlanner:
    adapter = AsyncMock()
    adapter.generate_research_steps = AsyncMock(**mock_kwargs)
    return StepPlanner(adapter)


def test_fallback_has_five_steps_with_topic():
    steps = fallback_steps(TOPIC)

    assert [s.title for s in steps] == [
        "Foundation Research",
        "Detailed Analysis",
        "Current Status",
        "Expert Insights",
        "Summary & Validation",
    ]
    assert all(TOPIC in s.description for s in steps)
    assert [s.priority for s in steps] == ["high", "high", "medium", "medium", "low"]
    assert [s.order for s in steps] == [0, 1, 2, 3, 4]
    assert all(s.status == "pending" for s in steps)


def test_fallback_matches_template_length():
    assert len(fallback_steps("x")) == len(FALLBACK_TEMPLATE)


async def test_plan_steps_uses_model_plan():
    planner = make_planner(return_value=planned(3))

    steps = await planner.plan_steps(TOPIC)

    assert [s.title for s in steps] == ["Step 0", "Step 1", "Step 2"]
    assert [s.order for s in steps] == [0, 1, 2]
    assert all(s.status == "pending" and s.results is None for s in steps)
    planner.adapter.generate_research_steps.assert_awaited_once_with(TOPIC)


async def test_plan_steps_truncates_long_plans(caplog):
    planner = make_planner(return_value=planned(MAX_PLANNED_STEPS + 4))

    with caplog.at_level(logging.WARNING, logger="wayfinder.pipeline.planner"):
        steps = await planner.plan_steps(TOPIC)

    assert len(steps) == MAX_PLANNED_STEPS
    assert f"Truncating plan from {MAX_PLANNED_STEPS + 4}" in caplog.text


async def test_plan_steps_falls_back_on_parse_error():
    planner = make_planner(side_effect=NoJsonFound("garbage"))

    steps = await planner.plan_steps(TOPIC)

    assert [(s.title, s.description) for s in steps] == [
        (s.title, s.description) for s in fallback_steps(TOPIC)
    ]


async def test_plan_steps_falls_back_on_provider_failure():
    planner = make_planner(side_effect=ConnectionError("offline"))

    steps = await planner.plan_steps(TOPIC)

    assert len(steps) == 5
    assert steps[0].title == "Foundation Research"


async def test_plan_steps_falls_back_on_empty_plan():
    planner = make_planner(return_value=[])

    steps = await planner.plan_steps(TOPIC)

    assert len(steps) == 5
