"""Export functionality for research missions."""

from .json_export import export_to_json, mission_to_dict
from .markdown import export_to_markdown, render_markdown

__all__ = [
    "export_to_json",
    "mission_to_dict",
    "export_to_markdown",
    "render_markdown",
]
