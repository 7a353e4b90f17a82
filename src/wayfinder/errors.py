"""
Mission-level exceptions for wayfinder.

Provider failures live in ``wayfinder.providers.base``; everything raised by
the mission store, runner and agent derives from ``WayfinderError``.
"""


class WayfinderError(Exception):
    """Base class for wayfinder errors."""


class MissionNotFoundError(WayfinderError, KeyError):
    """Raised when a mission id is not present in the store."""

    def __init__(self, mission_id: str):
        self.mission_id = mission_id
        super().__init__(f"Mission with ID {mission_id} not found")

    def __str__(self) -> str:
        return self.args[0]


class MissionAlreadyRunningError(WayfinderError, RuntimeError):
    """Raised when a mission start is requested while another is active."""

    def __init__(self, mission_id: str | None):
        self.mission_id = mission_id
        super().__init__("Another research mission is already in progress")


class MissionCancelledError(WayfinderError):
    """Raised by the runner when a cancel request is observed between steps."""

    def __init__(self, mission_id: str):
        self.mission_id = mission_id
        super().__init__("Research cancelled by user")


class InvalidStatusTransition(WayfinderError, ValueError):
    """Raised when a mission or step is moved to a status it cannot reach."""

    def __init__(self, current: str, target: str):
        self.current = current
        self.target = target
        super().__init__(f"Cannot transition from '{current}' to '{target}'")


class MissionValidationError(WayfinderError, ValueError):
    """Raised when mission title/description fail input validation."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__("Validation failed: " + "; ".join(errors))
