"""
Parsing of LLM-generated research plans.

Models are asked for a bare JSON array but routinely wrap it in markdown
fences or surround it with prose. ``parse_research_steps`` strips that
wrapping and validates the payload; every way it can fail maps to a
distinct exception so callers (and logs) can tell garbage from a plan that
is merely incomplete.
"""

import json
import logging
import re
from typing import Any

from .base import ProviderError
from .protocol import PlannedStep

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("title", "description", "priority", "estimatedDuration")
VALID_PRIORITIES = ("high", "medium", "low")

_FENCED_BLOCK = re.compile(r"```(?:json)?\s*\n?([\s\S]*?)\n?```")
_FENCE_MARKER = re.compile(r"```[a-zA-Z]*\n?")


class StepPlanParseError(ProviderError):
    """Base class for research plan parsing failures."""


class EmptyPlanResponse(StepPlanParseError):
    """The model returned no text at all."""


class NoJsonFound(StepPlanParseError):
    """No bracketed JSON payload could be located in the response."""


class MalformedPlanJson(StepPlanParseError):
    """A payload was located but is not valid JSON."""


class PlanNotAnArray(StepPlanParseError):
    """The payload decoded to something other than a list."""


class EmptyPlan(StepPlanParseError):
    """The payload decoded to an empty list."""


class StepMissingFields(StepPlanParseError):
    """A step lacks one or more required fields."""

    def __init__(self, index: int, missing: list[str]):
        self.index = index
        self.missing = missing
        super().__init__(f"Step {index} missing required fields: {', '.join(missing)}")


class InvalidPriority(StepPlanParseError):
    """A step's priority is not high, medium or low."""

    def __init__(self, index: int, priority: Any):
        self.index = index
        self.priority = priority
        super().__init__(f"Step {index} has invalid priority: {priority!r}")


def strip_code_fences(text: str) -> str:
    """Return the contents of the first fenced block, or the text with stray fences removed."""
    cleaned = text.strip()
    if "```" not in cleaned:
        return cleaned

    match = _FENCED_BLOCK.search(cleaned)
    if match and match.group(1).strip():
        return match.group(1).strip()

    return _FENCE_MARKER.sub("", cleaned).replace("```", "").strip()


def extract_json_payload(text: str) -> str:
    """
    Slice from the first ``[`` or ``{`` to the last ``]`` or ``}``.

    Raises:
        NoJsonFound: If no such bracketed span exists
    """
    starts = [i for i in (text.find("["), text.find("{")) if i != -1]
    end = max(text.rfind("]"), text.rfind("}"))

    if not starts or end == -1 or min(starts) > end:
        raise NoJsonFound(f"No JSON payload found in response: {text[:100]!r}")

    return text[min(starts) : end + 1]


def parse_research_steps(text: str | None) -> list[PlannedStep]:
    """
    Parse a model response into planned steps.

    Args:
        text: Raw completion text

    Returns:
        Validated steps, in the order the model listed them

    Raises:
        StepPlanParseError: One of the named subclasses describing the failure
    """
    if not text or not text.strip():
        raise EmptyPlanResponse("Model returned an empty response")

    payload = extract_json_payload(strip_code_fences(text))

    try:
        data = json.loads(payload)
    except json.JSONDecodeError as e:
        raise MalformedPlanJson(f"Invalid JSON in research plan: {e}") from e

    if not isinstance(data, list):
        raise PlanNotAnArray(f"Response is not an array (got {type(data).__name__})")
    if not data:
        raise EmptyPlan("Response contained no steps")

    steps: list[PlannedStep] = []
    for index, item in enumerate(data):
        if not isinstance(item, dict):
            raise StepMissingFields(index, list(REQUIRED_FIELDS))

        missing = [f for f in REQUIRED_FIELDS if not str(item.get(f) or "").strip()]
        if missing:
            raise StepMissingFields(index, missing)

        priority = str(item["priority"]).strip().lower()
        if priority not in VALID_PRIORITIES:
            raise InvalidPriority(index, item["priority"])

        steps.append(
            PlannedStep(
                title=str(item["title"]).strip(),
                description=str(item["description"]).strip(),
                priority=priority,  # type: ignore[arg-type]
                estimated_duration=str(item["estimatedDuration"]).strip(),
            )
        )

    logger.debug(f"Parsed {len(steps)} research steps")
    return steps
