"""
Two-phase mission result synthesis.

The fast phase builds a templated summary from the gathered sources with no
LLM involvement, so a mission always completes with something to show. The
comprehensive phase asks the LLM for a narrative report afterwards. Each
phase returns a new ResearchResults value tagged with its ``phase``; the
caller decides when to swap it into the mission.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..models import ResearchResults
from .prompts import ContentBlock, generate_analysis_prompt

if TYPE_CHECKING:
    from ..models import Mission, SourceResult, Step
    from ..providers.protocol import SearchAdapter

logger = logging.getLogger(__name__)

GENERATING_TRAILER = "Generating comprehensive analysis..."
FAILED_TRAILER = "Comprehensive analysis failed to generate. Using basic summary."

MIN_FINDING_CHARS = 50
MAX_FINDING_CHARS = 200
MIN_BLOCK_CHARS = 100


def dedupe_sources(sources: list[SourceResult]) -> list[SourceResult]:
    """Drop repeated URLs, keeping the first occurrence."""
    seen: set[str] = set()
    unique = []
    for source in sources:
        if source.url in seen:
            continue
        seen.add(source.url)
        unique.append(source)
    return unique


def extract_key_findings(steps: list[Step]) -> list[str]:
    """
    One finding per completed step: the first sentence of its top-scored
    result whose length falls in [50, 200] characters.
    """
    findings: list[str] = []

    for step in steps:
        if step.status != "completed" or not step.results:
            continue

        top = max(step.results, key=lambda r: r.score)
        sentence = next(
            (
                s.strip()
                for s in top.content.split(". ")
                if MIN_FINDING_CHARS <= len(s.strip()) <= MAX_FINDING_CHARS
            ),
            None,
        )
        if sentence:
            findings.append(f"{step.title}: {sentence}")

    return findings


def generate_recommendations(steps: list[Step]) -> list[str]:
    """Generic follow-up suggestions derived from which steps completed."""
    completed = [s for s in steps if s.status == "completed"]
    if not completed:
        return []

    recommendations = [
        "Review the comprehensive research findings above",
        "Cross-reference multiple sources for validation",
    ]
    if len(completed) >= 3:
        recommendations.append("Consider the expert opinions and case studies identified")
    if any("trend" in s.title.lower() for s in completed):
        recommendations.append("Monitor ongoing trends and developments in this area")

    return recommendations


def collect_content_blocks(steps: list[Step]) -> list[ContentBlock]:
    """Substantial content (> 100 chars) from completed steps, in step order."""
    return [
        ContentBlock(step=step.title, content=result.content, url=result.url)
        for step in steps
        if step.status == "completed" and step.results
        for result in step.results
        if len(result.content) > MIN_BLOCK_CHARS
    ]


class ResultSynthesizer:
    """Builds mission results in a fast phase and a comprehensive phase."""

    def __init__(self, adapter: SearchAdapter, max_sources: int = 20):
        self.adapter = adapter
        self.max_sources = max_sources

    def generate_basic_results(self, mission: Mission) -> ResearchResults:
        """
        Fast, deterministic results. Never calls the LLM.
        """
        all_sources = [r for step in mission.steps for r in (step.results or [])]
        key_findings = extract_key_findings(mission.steps)

        return ResearchResults(
            summary=self._basic_summary(mission, key_findings),
            key_findings=key_findings,
            sources=dedupe_sources(all_sources)[: self.max_sources],
            recommendations=generate_recommendations(mission.steps),
            completed_steps=mission.completed_step_count,
            total_steps=len(mission.steps),
            is_generating_comprehensive_analysis=True,
            phase="basic",
        )

    def _basic_summary(self, mission: Mission, key_findings: list[str]) -> str:
        summary = f"Research completed on: {mission.title}\n\n"
        summary += (
            f"Successfully completed {mission.completed_step_count} of "
            f"{len(mission.steps)} research steps.\n\n"
        )

        if key_findings:
            summary += "Key findings include:\n"
            for index, finding in enumerate(key_findings, 1):
                summary += f"{index}. {finding}\n"

        summary += f"\n{GENERATING_TRAILER}"
        return summary

    async def generate_comprehensive_summary(
        self,
        mission: Mission,
        basic: ResearchResults,
    ) -> ResearchResults:
        """
        Narrative report from the LLM. Never raises.

        Args:
            mission: Mission whose steps have finished
            basic: Fast-phase results the new value is derived from

        Returns:
            New results with the flag cleared: ``comprehensive`` on success,
            ``degraded`` (trailer replaced by a failure notice) otherwise
        """
        blocks = collect_content_blocks(mission.steps)

        if not blocks:
            logger.info("No substantial content gathered, skipping comprehensive analysis")
            return basic.model_copy(
                update={
                    "summary": (
                        f"Research completed on: {mission.title}\n\n"
                        "No significant findings were gathered from the research steps."
                    ),
                    "is_generating_comprehensive_analysis": False,
                    "phase": "comprehensive",
                }
            )

        prompt = generate_analysis_prompt(mission.title, mission.description, blocks)

        try:
            logger.info(f"Generating comprehensive analysis from {len(blocks)} content blocks")
            report = await self.adapter.generate_comprehensive_analysis(prompt)
        except Exception as e:
            logger.error(f"Comprehensive analysis failed: {e}", exc_info=True)
            return basic.model_copy(
                update={
                    "summary": basic.summary.replace(GENERATING_TRAILER, FAILED_TRAILER),
                    "is_generating_comprehensive_analysis": False,
                    "phase": "degraded",
                }
            )

        return basic.model_copy(
            update={
                "summary": report,
                "is_generating_comprehensive_analysis": False,
                "phase": "comprehensive",
            }
        )
