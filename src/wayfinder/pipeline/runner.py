"""
Mission execution: drives the step executor across a mission's steps,
carries findings forward between steps and hands off to the synthesizer.

Steps run strictly in order because each query is built from the findings
of the steps before it.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from ..errors import MissionCancelledError
from ..providers.base import ProviderAuthenticationError
from ..utils.logging import StructuredLogger

if TYPE_CHECKING:
    from ..models import Mission, ResearchResults, Step
    from .executor import StepExecutor
    from .synthesizer import ResultSynthesizer

logger = logging.getLogger(__name__)

StepCallback = Callable[["Step", float], None]
MissionCallback = Callable[["Mission"], None]


class MissionRunner:
    """Executes a planned mission and produces its results."""

    def __init__(
        self,
        executor: StepExecutor,
        synthesizer: ResultSynthesizer,
        digest_results: int = 3,
        digest_chars: int = 200,
    ):
        """
        Initialize mission runner.

        Args:
            executor: Runs individual steps
            synthesizer: Produces basic and comprehensive results
            digest_results: Results per completed step carried into later queries
            digest_chars: Characters kept from each carried result
        """
        self.executor = executor
        self.synthesizer = synthesizer
        self.digest_results = digest_results
        self.digest_chars = digest_chars
        self._background: set[asyncio.Task[None]] = set()

    def summarize_step_results(self, step: Step) -> str:
        """Short extractive digest of a completed step's top results."""
        if not step.results:
            return ""

        return " ".join(
            result.content[: self.digest_chars]
            for result in step.results[: self.digest_results]
        ).strip()

    async def execute_research_plan(
        self,
        mission: Mission,
        on_step_complete: StepCallback | None = None,
        on_mission_update: MissionCallback | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> Mission:
        """
        Execute all steps of a mission in sequence.

        A failing step is left in ``error`` and the mission moves on; only
        rejected credentials abort the run. Once all steps have run the
        mission gets basic results and is marked ``completed``; the
        comprehensive report is generated in the background and announced
        through ``on_mission_update``.

        Args:
            mission: Mission in ``researching`` status with planned steps
            on_step_complete: Called with (step, progress percent) after every step
            on_mission_update: Called when the comprehensive phase finishes
            cancel_event: Checked between steps; when set, the run stops

        Returns:
            The same mission object, completed

        Raises:
            MissionCancelledError: If cancellation was requested
            ProviderAuthenticationError: If the provider rejects the credentials
        """
        log = StructuredLogger(__name__, mission_id=mission.id[:8])
        total = len(mission.steps)
        context = mission.description

        try:
            if mission.status in ("pending", "planning"):
                mission.transition_to("researching")

            for index, step in enumerate(mission.steps):
                if cancel_event is not None and cancel_event.is_set():
                    raise MissionCancelledError(mission.id)

                step_log = log.bind(step=index + 1)
                step_log.info(f"{step.title} ({index + 1}/{total})")

                try:
                    await self.executor.execute_step(step, context)
                except ProviderAuthenticationError:
                    raise
                except Exception as e:
                    step_log.error(f"Error executing step '{step.title}': {e}", exc_info=True)
                else:
                    digest = self.summarize_step_results(step)
                    if digest:
                        context = f"{context} {digest}"

                mission.touch()
                self._notify_step(on_step_complete, step, (index + 1) / total * 100)

            if cancel_event is not None and cancel_event.is_set():
                raise MissionCancelledError(mission.id)

            basic = self.synthesizer.generate_basic_results(mission)
            mission.results = basic
            mission.transition_to("completed")

        except MissionCancelledError:
            log.warning("Mission cancelled, skipping synthesis")
            mission.transition_to("error")
            raise
        except Exception:
            log.exception("Mission execution failed")
            mission.transition_to("error")
            raise

        log.info(
            f"Mission completed: {basic.completed_steps}/{basic.total_steps} steps, "
            f"{len(basic.sources)} sources"
        )

        task = asyncio.create_task(self._run_comprehensive_phase(mission, basic, on_mission_update))
        self._background.add(task)
        task.add_done_callback(self._background.discard)

        return mission

    def _notify_step(self, callback: StepCallback | None, step: Step, progress: float) -> None:
        if callback is None:
            return
        try:
            callback(step, progress)
        except Exception as e:
            logger.warning(f"Step progress callback failed: {e}")

    async def _run_comprehensive_phase(
        self,
        mission: Mission,
        basic: ResearchResults,
        on_mission_update: MissionCallback | None,
    ) -> None:
        results = await self.synthesizer.generate_comprehensive_summary(mission, basic)

        # Only replace the value this phase was derived from
        if mission.results == basic:
            mission.results = results
            mission.touch()
            logger.info(f"Comprehensive analysis finished for mission {mission.id} ({results.phase})")
        else:
            logger.warning(f"Mission {mission.id} results changed during synthesis, discarding")

        if on_mission_update:
            try:
                on_mission_update(mission)
            except Exception as e:
                logger.warning(f"Mission update callback failed: {e}")

    async def wait_for_background(self) -> None:
        """Wait for any comprehensive-analysis tasks still running."""
        if self._background:
            await asyncio.gather(*list(self._background), return_exceptions=True)
