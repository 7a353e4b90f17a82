"""
JSON export for research missions.

Produces the camelCase mission object consumed by UIs: steps with their
results, aggregated sources, and the current synthesis phase.
"""

import json
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ..models import Mission


def mission_to_dict(mission: "Mission") -> dict[str, Any]:
    """Serialize a mission to a JSON-compatible dict with camelCase keys."""
    return mission.model_dump(by_alias=True, mode="json")


def export_to_json(
    mission: "Mission",
    output_path: str | Path,
    pretty: bool = True,
    include_metadata: bool = True,
) -> None:
    """
    Export a mission to a JSON file.

    Args:
        mission: Mission to export
        output_path: Output file path
        pretty: Pretty-print JSON with indentation
        include_metadata: Wrap the mission with export metadata

    Example output:
        {
            "metadata": {
                "exportedAt": "2024-01-15T10:30:00",
                "completedSteps": 4,
                "totalSteps": 5,
                "version": "0.1.0"
            },
            "mission": {
                "id": "3f2a...",
                "title": "EV vs gasoline",
                "status": "completed",
                "steps": [...],
                "results": {...}
            }
        }
    """
    from .. import __version__

    output_file = Path(output_path)
    data = mission_to_dict(mission)

    if include_metadata:
        export_data: dict[str, Any] = {
            "metadata": {
                "exportedAt": datetime.now().isoformat(),
                "completedSteps": mission.completed_step_count,
                "totalSteps": len(mission.steps),
                "version": __version__,
            },
            "mission": data,
        }
    else:
        export_data = data

    output_file.parent.mkdir(parents=True, exist_ok=True)
    with open(output_file, "w", encoding="utf-8") as f:
        if pretty:
            json.dump(export_data, f, indent=2, ensure_ascii=False)
        else:
            json.dump(export_data, f, ensure_ascii=False)
