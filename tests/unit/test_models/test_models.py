"""Tests for mission/step models and their status lifecycles."""

import pytest
from pydantic import ValidationError

from wayfinder.errors import InvalidStatusTransition
from wayfinder.models import Mission, ResearchResults, SourceResult, Step


def make_mission(**kwargs) -> Mission:
    return Mission(title="EV costs", description="Compare electric and gasoline cars", **kwargs)


def test_step_lifecycle():
    step = Step(title="Costs", description="Purchase prices")

    step.mark_executing()
    assert step.status == "executing"
    assert step.started_at is not None

    step.mark_completed([SourceResult(title="A", url="https://a.example")])
    assert step.status == "completed"
    assert len(step.results) == 1
    assert step.completed_at is not None


def test_step_cannot_complete_without_executing():
    step = Step(title="Costs", description="Purchase prices")

    with pytest.raises(InvalidStatusTransition):
        step.mark_completed([])


def test_completed_step_cannot_fail():
    step = Step(title="Costs", description="Purchase prices")
    step.mark_executing()
    step.mark_completed([])

    with pytest.raises(InvalidStatusTransition):
        step.mark_error("late failure")


def test_step_error_records_message():
    step = Step(title="Costs", description="Purchase prices")
    step.mark_executing()
    step.mark_error("timeout")

    assert step.status == "error"
    assert step.error == "timeout"


def test_source_score_is_bounded():
    with pytest.raises(ValidationError):
        SourceResult(title="A", url="https://a.example", score=1.5)


def test_mission_moves_forward():
    mission = make_mission()

    for status in ("planning", "researching", "completed"):
        mission.transition_to(status)

    assert mission.status == "completed"


@pytest.mark.parametrize(
    "start,target",
    [
        ("researching", "planning"),
        ("pending", "completed"),
        ("planning", "completed"),
        ("completed", "researching"),
        ("error", "researching"),
    ],
)
def test_invalid_mission_transitions(start, target):
    mission = make_mission(status=start)

    assert not mission.can_transition_to(target)
    with pytest.raises(InvalidStatusTransition):
        mission.transition_to(target)


@pytest.mark.parametrize("start", ["pending", "planning", "researching", "completed", "error"])
def test_any_status_can_fail(start):
    mission = make_mission(status=start)
    mission.transition_to("error")
    assert mission.status == "error"


def test_transition_touches_updated_at():
    mission = make_mission()
    before = mission.updated_at

    mission.transition_to("planning")

    assert mission.updated_at >= before


def test_completed_step_count():
    done = Step(title="A", description="a")
    done.mark_executing()
    done.mark_completed([])
    mission = make_mission(steps=[done, Step(title="B", description="b")])

    assert mission.completed_step_count == 1


def test_serializes_with_camel_case_aliases():
    results = ResearchResults(summary="s", completed_steps=1, total_steps=2)
    mission = make_mission(results=results)

    data = mission.model_dump(by_alias=True, mode="json")

    assert "createdAt" in data
    assert data["results"]["isGeneratingComprehensiveAnalysis"] is False
    assert data["results"]["keyFindings"] == []


def test_accepts_camel_case_input():
    step = Step.model_validate(
        {"title": "A", "description": "a", "estimatedDuration": "1 hour", "priority": "high"}
    )
    assert step.estimated_duration == "1 hour"
