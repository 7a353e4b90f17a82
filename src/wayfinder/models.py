"""
Data models for research missions.

This module defines the core data structures shared by the pipeline:
- SourceResult: One external web reference returned by a search
- Step: One planned unit of research work (one search topic)
- ResearchResults: Mission-level aggregate produced by the synthesizer
- Mission: One end-to-end research request and its accumulated state

Attributes are snake_case; ``model_dump(by_alias=True)`` produces the camelCase
shape consumed by UI clients.
"""

from datetime import datetime
from typing import Literal
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .errors import InvalidStatusTransition

MissionStatus = Literal["pending", "planning", "researching", "completed", "error"]
StepStatus = Literal["pending", "executing", "completed", "error"]
Priority = Literal["high", "medium", "low"]
SynthesisPhase = Literal["basic", "comprehensive", "degraded"]

_MISSION_ORDER: dict[str, int] = {
    "pending": 0,
    "planning": 1,
    "researching": 2,
    "completed": 3,
}


def generate_id() -> str:
    """Opaque unique identifier for missions and steps."""
    return uuid4().hex


class _Model(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_assignment=True,
    )


class SourceResult(_Model):
    """A single external reference returned by a search."""

    title: str
    url: str = Field(..., description="Natural dedup key across steps")
    content: str = ""
    score: float = Field(default=0.0, ge=0.0, le=1.0)
    published_date: str | None = None


class Step(_Model):
    """
    One unit of research work within a mission.

    ``query``, ``results`` and the timestamps stay unset until the step
    enters ``executing``.
    """

    id: str = Field(default_factory=generate_id)
    title: str
    description: str
    query: str | None = None
    status: StepStatus = "pending"
    priority: Priority | None = None
    estimated_duration: str | None = None
    order: int | None = None
    results: list[SourceResult] | None = None
    error: str | None = None
    started_at: datetime | None = None
    completed_at: datetime | None = None

    def mark_executing(self) -> None:
        if self.status != "pending":
            raise InvalidStatusTransition(self.status, "executing")
        self.status = "executing"
        self.started_at = datetime.now()

    def mark_completed(self, results: list[SourceResult]) -> None:
        if self.status != "executing":
            raise InvalidStatusTransition(self.status, "completed")
        self.results = results
        self.status = "completed"
        self.completed_at = datetime.now()

    def mark_error(self, message: str) -> None:
        if self.status not in ("pending", "executing"):
            raise InvalidStatusTransition(self.status, "error")
        self.status = "error"
        self.error = message
        self.completed_at = datetime.now()


class ResearchResults(_Model):
    """
    Mission-level aggregate.

    Each synthesis pass produces a new value tagged with ``phase``; the
    runner swaps it into the mission instead of mutating it in place.
    """

    summary: str
    key_findings: list[str] = Field(default_factory=list)
    sources: list[SourceResult] = Field(default_factory=list)
    recommendations: list[str] | None = None
    completed_steps: int = Field(default=0, ge=0)
    total_steps: int = Field(default=0, ge=0)
    is_generating_comprehensive_analysis: bool = False
    phase: SynthesisPhase = "basic"


class Mission(_Model):
    """A research mission: topic, planned steps and results."""

    id: str = Field(default_factory=generate_id)
    title: str
    description: str
    status: MissionStatus = "pending"
    steps: list[Step] = Field(default_factory=list)
    results: ResearchResults | None = None
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)

    @property
    def completed_step_count(self) -> int:
        return sum(1 for step in self.steps if step.status == "completed")

    def can_transition_to(self, target: MissionStatus) -> bool:
        """
        Check a status move against the mission lifecycle.

        Statuses only move forward along pending → planning → researching →
        completed. Any state may drop to error (repeating it is a no-op move),
        and only researching may reach completed.
        """
        if target == "error":
            return True
        if self.status in ("completed", "error"):
            return False
        if target == "completed":
            return self.status == "researching"
        return _MISSION_ORDER[target] > _MISSION_ORDER[self.status]

    def transition_to(self, target: MissionStatus) -> None:
        if not self.can_transition_to(target):
            raise InvalidStatusTransition(self.status, target)
        self.status = target
        self.touch()

    def touch(self) -> None:
        self.updated_at = datetime.now()


class AgentState(BaseModel):
    """Observable state of a research agent (one active mission at most)."""

    current_mission: Mission | None = None
    is_processing: bool = False
    error: str | None = None
    progress: float = Field(default=0.0, ge=0.0, le=100.0)


class MissionStatistics(BaseModel):
    """Aggregate statistics over all stored missions."""

    total_missions: int = 0
    completed_missions: int = 0
    average_steps: float = 0.0
    success_rate: float = 0.0
