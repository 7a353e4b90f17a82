"""
Research agent: mission lifecycle on top of the pipeline.

The agent owns the mission store and enforces that only one mission is in
active execution at a time. Planning is credited 5% of progress and step
execution the remaining 95%.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from ..errors import (
    InvalidStatusTransition,
    MissionAlreadyRunningError,
    MissionCancelledError,
    MissionValidationError,
)
from ..models import AgentState, Mission, MissionStatistics, Step
from ..store import MissionStore
from ..utils.logging import StructuredLogger
from .executor import StepExecutor
from .planner import StepPlanner
from .rate_limiter import RateLimiter
from .runner import MissionCallback, MissionRunner
from .synthesizer import ResultSynthesizer

if TYPE_CHECKING:
    from ..config import WayfinderConfig
    from ..providers.protocol import SearchAdapter

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[Mission, float], None]

PLANNING_PROGRESS = 5.0
TITLE_LENGTH = (3, 200)
DESCRIPTION_LENGTH = (10, 2000)


class ResearchAgent:
    """Creates, plans, runs and tracks research missions."""

    def __init__(
        self,
        planner: StepPlanner,
        runner: MissionRunner,
        store: MissionStore | None = None,
    ):
        self.planner = planner
        self.runner = runner
        self.store = store or MissionStore()
        self.state = AgentState()
        self._lock = asyncio.Lock()
        self._cancel_event = asyncio.Event()

    @classmethod
    def from_adapter(
        cls,
        adapter: SearchAdapter,
        config: WayfinderConfig | None = None,
        store: MissionStore | None = None,
    ) -> ResearchAgent:
        """Wire planner, executor, synthesizer and runner around one adapter."""
        from ..config import WayfinderConfig
        from ..providers.protocol import SearchOptions

        config = config or WayfinderConfig()
        execution = config.execution

        executor = StepExecutor(
            adapter=adapter,
            rate_limiter=RateLimiter(
                max_requests=config.rate_limit.max_requests,
                window_seconds=config.rate_limit.window_seconds,
            ),
            options=SearchOptions(
                context_size=execution.context_size,
                max_results=execution.max_results,
            ),
        )
        runner = MissionRunner(
            executor=executor,
            synthesizer=ResultSynthesizer(adapter, max_sources=execution.max_sources),
            digest_results=execution.context_digest_results,
            digest_chars=execution.context_digest_chars,
        )
        return cls(planner=StepPlanner(adapter), runner=runner, store=store)

    @classmethod
    def from_config(cls, config: WayfinderConfig) -> ResearchAgent:
        """
        Build an agent with the configured provider.

        Raises:
            ProviderConfigurationError: If provider credentials are missing
        """
        from ..providers.factory import create_adapter

        return cls.from_adapter(create_adapter(config), config)

    # ------------------------------------------------------------------
    # Mission creation
    # ------------------------------------------------------------------

    @staticmethod
    def validate_mission_input(title: str | None, description: str | None) -> list[str]:
        """Return human-readable validation errors (empty when valid)."""
        errors: list[str] = []
        title = (title or "").strip()
        description = (description or "").strip()

        if not title:
            errors.append("Mission title is required")
        elif len(title) < TITLE_LENGTH[0]:
            errors.append(f"Mission title must be at least {TITLE_LENGTH[0]} characters long")
        elif len(title) > TITLE_LENGTH[1]:
            errors.append(f"Mission title must be less than {TITLE_LENGTH[1]} characters")

        if not description:
            errors.append("Mission description is required")
        elif len(description) < DESCRIPTION_LENGTH[0]:
            errors.append(
                f"Mission description must be at least {DESCRIPTION_LENGTH[0]} characters long"
            )
        elif len(description) > DESCRIPTION_LENGTH[1]:
            errors.append(
                f"Mission description must be less than {DESCRIPTION_LENGTH[1]} characters"
            )

        return errors

    def create_mission(self, title: str, description: str) -> Mission:
        """
        Create and store a pending mission.

        Raises:
            MissionValidationError: If title or description are out of bounds
        """
        errors = self.validate_mission_input(title, description)
        if errors:
            raise MissionValidationError(errors)

        mission = Mission(title=title.strip(), description=description.strip())
        self.store.add(mission)
        logger.info(f"Created mission {mission.id}: {mission.title}")
        return mission

    async def create_plan(self, title: str, description: str) -> Mission:
        """Create a mission and plan its steps without executing them."""
        mission = self.create_mission(title, description)
        mission.transition_to("planning")
        mission.steps = await self.planner.plan_steps(mission.description)
        mission.touch()
        return mission

    def update_mission(
        self,
        mission_id: str,
        title: str | None = None,
        description: str | None = None,
        steps: list[Step] | None = None,
    ) -> Mission:
        """
        Edit a stored mission before it is researched.

        Raises:
            MissionNotFoundError: If the mission does not exist
            InvalidStatusTransition: If the mission is already running or finished
            MissionValidationError: If the new title/description are invalid
        """
        mission = self.store.require(mission_id)
        if self._is_active(mission_id):
            raise InvalidStatusTransition(mission.status, "planning")

        errors = self.validate_mission_input(
            title if title is not None else mission.title,
            description if description is not None else mission.description,
        )
        if errors:
            raise MissionValidationError(errors)

        return self.store.update(mission_id, title=title, description=description, steps=steps)

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    async def start_research(
        self,
        mission_id: str,
        on_progress: ProgressCallback | None = None,
        on_mission_update: MissionCallback | None = None,
    ) -> Mission:
        """
        Plan (if needed) and execute a stored mission.

        Returns as soon as basic results are available; the comprehensive
        report arrives later through ``on_mission_update``.

        Raises:
            MissionNotFoundError: If the mission does not exist
            MissionAlreadyRunningError: If another mission is in progress
            InvalidStatusTransition: If the mission was already researched
            MissionCancelledError: If ``cancel_research`` was called mid-run
        """
        mission = self.store.require(mission_id)

        if self._lock.locked():
            raise MissionAlreadyRunningError(
                self.state.current_mission.id if self.state.current_mission else None
            )
        if mission.status not in ("pending", "planning"):
            raise InvalidStatusTransition(mission.status, "researching")

        async with self._lock:
            log = StructuredLogger(__name__, mission_id=mission.id[:8])
            self._cancel_event.clear()
            self.state = AgentState(current_mission=mission, is_processing=True)

            def report(progress: float) -> None:
                self.state.progress = progress
                if on_progress is None:
                    return
                try:
                    on_progress(mission, progress)
                except Exception as e:
                    logger.warning(f"Progress callback failed: {e}")

            try:
                if mission.status == "pending":
                    mission.transition_to("planning")

                if not mission.steps:
                    mission.steps = await self.planner.plan_steps(mission.description)
                    mission.touch()
                log.info(f"Planned {len(mission.steps)} steps")
                report(PLANNING_PROGRESS)

                if self._cancel_event.is_set():
                    raise MissionCancelledError(mission.id)

                mission.transition_to("researching")

                await self.runner.execute_research_plan(
                    mission,
                    on_step_complete=lambda step, progress: report(
                        PLANNING_PROGRESS + progress * (100 - PLANNING_PROGRESS) / 100
                    ),
                    on_mission_update=on_mission_update,
                    cancel_event=self._cancel_event,
                )

                self.state.progress = 100.0
                return mission

            except Exception as e:
                log.error(f"Research mission failed: {e}")
                mission.transition_to("error")
                self.state.error = str(e)
                raise

            finally:
                self.state.is_processing = False
                self.state.current_mission = None

    def cancel_research(self) -> None:
        """
        Request cancellation of the active mission.

        The mission is marked ``error`` immediately; the runner stops before
        its next step. An in-flight provider call is not aborted.
        """
        mission = self.state.current_mission
        if mission is None:
            return

        self._cancel_event.set()
        mission.transition_to("error")
        self.state.error = "Research cancelled by user"
        self.state.progress = 0.0
        logger.info(f"Cancellation requested for mission {mission.id}")

    def delete_mission(self, mission_id: str) -> bool:
        """Remove a mission, cancelling it first if it is running."""
        if self._is_active(mission_id):
            self.cancel_research()
        return self.store.delete(mission_id)

    async def wait_for_background(self) -> None:
        """Wait for pending comprehensive-analysis tasks."""
        await self.runner.wait_for_background()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def _is_active(self, mission_id: str) -> bool:
        current = self.state.current_mission
        return self.state.is_processing and current is not None and current.id == mission_id

    def get_mission(self, mission_id: str) -> Mission | None:
        return self.store.get(mission_id)

    def get_all_missions(self) -> list[Mission]:
        return self.store.all()

    def search_missions(self, keyword: str) -> list[Mission]:
        return self.store.search(keyword)

    def get_state(self) -> AgentState:
        """Snapshot of the agent state (the mission reference is shared)."""
        return self.state.model_copy()

    def get_progress(self, mission_id: str) -> float:
        """Progress of a mission: live if it is running, 100 if completed, else 0."""
        if self._is_active(mission_id):
            return self.state.progress
        mission = self.store.get(mission_id)
        return 100.0 if mission is not None and mission.status == "completed" else 0.0

    def get_statistics(self) -> MissionStatistics:
        missions = self.store.all()
        if not missions:
            return MissionStatistics()

        completed = sum(1 for m in missions if m.status == "completed")
        total_steps = sum(len(m.steps) for m in missions)

        return MissionStatistics(
            total_missions=len(missions),
            completed_missions=completed,
            average_steps=total_steps / len(missions),
            success_rate=completed / len(missions) * 100,
        )
