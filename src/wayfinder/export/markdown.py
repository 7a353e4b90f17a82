"""
Markdown export for research missions.

Produces a human-readable report with:
- Mission header and status
- The current summary (basic or comprehensive)
- Key findings and recommendations
- Per-step outcomes
- Numbered source list
"""

from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..models import Mission, SourceResult, Step

_STEP_MARKERS = {
    "completed": "✓",
    "error": "✗",
    "executing": "…",
    "pending": "○",
}


def _format_source(source: "SourceResult", index: int) -> str:
    """Format single source citation."""
    date_str = f" ({source.published_date})" if source.published_date else ""
    return f"{index}. [{source.title}]({source.url}){date_str}"


def _format_step(step: "Step") -> str:
    marker = _STEP_MARKERS.get(step.status, "")
    line = f"- {marker} **{step.title}**"
    if step.status == "completed":
        count = len(step.results or [])
        line += f" ({count} source{'s' if count != 1 else ''})"
    elif step.status == "error" and step.error:
        line += f": {step.error}"
    return line + "\n"


def render_markdown(mission: "Mission", include_steps: bool = True) -> str:
    """
    Render a mission as markdown.

    Args:
        mission: Mission to render
        include_steps: Include the per-step outcome list

    Returns:
        Markdown string
    """
    lines = [f"# {mission.title}\n\n", f"{mission.description}\n\n"]

    results = mission.results
    lines.append(f"- Status: {mission.status}\n")
    if results:
        lines.append(f"- Steps completed: {results.completed_steps} of {results.total_steps}\n")
        lines.append(f"- Analysis: {results.phase}\n")
    lines.append(f"- Exported: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}\n\n")
    lines.append("---\n\n")

    if results:
        lines.append("## Summary\n\n")
        lines.append(f"{results.summary.strip()}\n\n")

        # The comprehensive report carries its own findings section
        if results.key_findings and results.phase != "comprehensive":
            lines.append("## Key Findings\n\n")
            for finding in results.key_findings:
                lines.append(f"- {finding}\n")
            lines.append("\n")

        if results.recommendations:
            lines.append("## Recommendations\n\n")
            for recommendation in results.recommendations:
                lines.append(f"- {recommendation}\n")
            lines.append("\n")

    if include_steps and mission.steps:
        lines.append("## Research Steps\n\n")
        for step in mission.steps:
            lines.append(_format_step(step))
        lines.append("\n")

    if results and results.sources:
        lines.append("## Sources\n\n")
        for i, source in enumerate(results.sources, 1):
            lines.append(f"{_format_source(source, i)}\n")

    return "".join(lines)


def export_to_markdown(
    mission: "Mission",
    output_path: str | Path,
    include_steps: bool = True,
) -> None:
    """Write ``render_markdown(mission)`` to a file."""
    output_file = Path(output_path)
    output_file.parent.mkdir(parents=True, exist_ok=True)
    output_file.write_text(render_markdown(mission, include_steps), encoding="utf-8")
