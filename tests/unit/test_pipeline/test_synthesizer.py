"""
Tests for two-phase result synthesis.

The fast phase is deterministic; the comprehensive phase is driven by a
mock adapter that returns a report or fails.
"""

from unittest.mock import AsyncMock

import pytest

from wayfinder.models import Mission, SourceResult, Step
from wayfinder.pipeline.prompts import ContentBlock, generate_analysis_prompt
from wayfinder.pipeline.synthesizer import (
    FAILED_TRAILER,
    GENERATING_TRAILER,
    ResultSynthesizer,
    collect_content_blocks,
    dedupe_sources,
    extract_key_findings,
    generate_recommendations,
)

LONG_SENTENCE = "Electric vehicles have lower running costs than gasoline cars in most markets"
LONG_CONTENT = f"{LONG_SENTENCE}. Maintenance is also cheaper because there are fewer moving parts."


def source(url: str, score: float = 0.5, content: str = "short") -> SourceResult:
    return SourceResult(title=url, url=url, content=content, score=score)


def completed_step(title: str, results: list[SourceResult]) -> Step:
    step = Step(title=title, description=f"Research {title}")
    step.mark_executing()
    step.mark_completed(results)
    return step


def failed_step(title: str) -> Step:
    step = Step(title=title, description=f"Research {title}")
    step.mark_error("boom")
    return step


def make_mission(steps: list[Step]) -> Mission:
    return Mission(
        title="EV vs gasoline",
        description="Compare electric and gasoline car ownership costs",
        status="researching",
        steps=steps,
    )


def make_synthesizer(report: str | None = "# Report", error: Exception | None = None):
    adapter = AsyncMock()
    adapter.generate_comprehensive_analysis = AsyncMock(return_value=report, side_effect=error)
    return ResultSynthesizer(adapter), adapter


# --- Helpers ---


def test_dedupe_sources_keeps_first_occurrence():
    first = source("https://a.example", score=0.9)
    sources = [first, source("https://b.example"), source("https://a.example", score=0.1)]

    unique = dedupe_sources(sources)

    assert [s.url for s in unique] == ["https://a.example", "https://b.example"]
    assert unique[0] is first


def test_key_finding_uses_top_scored_result():
    step = completed_step(
        "Running Costs",
        [
            source("https://low.example", 0.2, "A much less relevant sentence that is long enough to count here."),
            source("https://top.example", 0.9, LONG_CONTENT),
        ],
    )

    assert extract_key_findings([step]) == [f"Running Costs: {LONG_SENTENCE}"]


def test_key_finding_skips_sentences_outside_length_bounds():
    content = "Too short. " + "x" * 250 + ". " + LONG_SENTENCE
    step = completed_step("Costs", [source("https://a.example", 0.9, content)])

    assert extract_key_findings([step]) == [f"Costs: {LONG_SENTENCE}"]


def test_key_finding_absent_without_qualifying_sentence():
    step = completed_step("Costs", [source("https://a.example", 0.9, "Tiny. Also tiny.")])
    assert extract_key_findings([step]) == []


def test_recommendations_depend_on_completed_steps():
    assert generate_recommendations([failed_step("A")]) == []

    two = generate_recommendations([completed_step("A", []), completed_step("B", [])])
    assert two == [
        "Review the comprehensive research findings above",
        "Cross-reference multiple sources for validation",
    ]

    steps = [completed_step(t, []) for t in ("A", "B", "Market Trends")]
    recommendations = generate_recommendations(steps)
    assert "Consider the expert opinions and case studies identified" in recommendations
    assert "Monitor ongoing trends and developments in this area" in recommendations


def test_content_blocks_require_substantial_content():
    step = completed_step(
        "Costs",
        [source("https://a.example", content="short"), source("https://b.example", content="y" * 101)],
    )

    blocks = collect_content_blocks([step, failed_step("Other")])

    assert blocks == [ContentBlock(step="Costs", content="y" * 101, url="https://b.example")]


def test_analysis_prompt_lists_sources_and_sections():
    prompt = generate_analysis_prompt(
        "EV vs gasoline",
        "Compare costs",
        [ContentBlock(step="Costs", content="Data", url="https://a.example")],
    )

    assert "RESEARCH TOPIC: EV vs gasoline" in prompt
    assert "### Source 1 (Costs):\nData\nURL: https://a.example" in prompt
    for section in ("## Executive Summary", "## Key Findings", "## Areas for Further Research"):
        assert section in prompt


# --- Fast phase ---


def test_basic_results_dedupes_and_counts():
    steps = [
        completed_step("A", [source("https://a.example"), source("https://shared.example")]),
        completed_step("B", [source("https://shared.example"), source("https://b.example")]),
        failed_step("C"),
    ]
    synthesizer, adapter = make_synthesizer()

    results = synthesizer.generate_basic_results(make_mission(steps))

    assert [s.url for s in results.sources] == [
        "https://a.example",
        "https://shared.example",
        "https://b.example",
    ]
    assert results.completed_steps == 2
    assert results.total_steps == 3
    assert results.is_generating_comprehensive_analysis is True
    assert results.phase == "basic"
    assert "Successfully completed 2 of 3 research steps." in results.summary
    assert results.summary.endswith(GENERATING_TRAILER)
    adapter.generate_comprehensive_analysis.assert_not_called()


def test_basic_results_caps_sources():
    steps = [
        completed_step(f"Step {i}", [source(f"https://{i}-{j}.example") for j in range(8)])
        for i in range(4)
    ]
    synthesizer, _ = make_synthesizer()

    results = synthesizer.generate_basic_results(make_mission(steps))

    assert len(results.sources) == 20
    assert results.sources[0].url == "https://0-0.example"


def test_basic_results_with_no_completed_steps():
    synthesizer, _ = make_synthesizer()
    mission = make_mission([failed_step(t) for t in ("A", "B", "C")])

    results = synthesizer.generate_basic_results(mission)

    assert results.sources == []
    assert results.key_findings == []
    assert results.recommendations == []
    assert "Successfully completed 0 of 3" in results.summary
    assert "Key findings include:" not in results.summary


def test_basic_summary_lists_key_findings():
    mission = make_mission([completed_step("Costs", [source("https://a.example", 0.9, LONG_CONTENT)])])
    synthesizer, _ = make_synthesizer()

    summary = synthesizer.generate_basic_results(mission).summary

    assert summary.startswith("Research completed on: EV vs gasoline")
    assert f"Key findings include:\n1. Costs: {LONG_SENTENCE}\n" in summary


# --- Comprehensive phase ---


async def test_comprehensive_summary_replaces_summary():
    mission = make_mission([completed_step("Costs", [source("https://a.example", 0.9, LONG_CONTENT * 2)])])
    synthesizer, adapter = make_synthesizer(report="# Executive Summary\n\nEVs win.")
    basic = synthesizer.generate_basic_results(mission)

    results = await synthesizer.generate_comprehensive_summary(mission, basic)

    assert results is not basic
    assert results.summary == "# Executive Summary\n\nEVs win."
    assert results.phase == "comprehensive"
    assert results.is_generating_comprehensive_analysis is False
    assert results.sources == basic.sources
    # Derived values are new; the fast-phase value is untouched
    assert basic.phase == "basic"
    adapter.generate_comprehensive_analysis.assert_awaited_once()


async def test_comprehensive_summary_degrades_on_failure():
    mission = make_mission([completed_step("Costs", [source("https://a.example", 0.9, LONG_CONTENT * 2)])])
    synthesizer, _ = make_synthesizer(error=ConnectionError("LLM down"))
    basic = synthesizer.generate_basic_results(mission)

    results = await synthesizer.generate_comprehensive_summary(mission, basic)

    assert results.phase == "degraded"
    assert results.is_generating_comprehensive_analysis is False
    assert results.summary.endswith(FAILED_TRAILER)
    assert GENERATING_TRAILER not in results.summary
    assert results.summary.startswith("Research completed on: EV vs gasoline")


async def test_comprehensive_summary_without_content_skips_llm():
    mission = make_mission([completed_step("Costs", [source("https://a.example", content="short")])])
    synthesizer, adapter = make_synthesizer()
    basic = synthesizer.generate_basic_results(mission)

    results = await synthesizer.generate_comprehensive_summary(mission, basic)

    assert "No significant findings were gathered" in results.summary
    assert results.is_generating_comprehensive_analysis is False
    adapter.generate_comprehensive_analysis.assert_not_called()


@pytest.mark.parametrize("error", [RuntimeError("x"), ValueError("y")])
async def test_comprehensive_summary_never_raises(error):
    mission = make_mission([completed_step("Costs", [source("https://a.example", content="z" * 200)])])
    synthesizer, _ = make_synthesizer(error=error)

    results = await synthesizer.generate_comprehensive_summary(
        mission, synthesizer.generate_basic_results(mission)
    )

    assert results.phase == "degraded"
