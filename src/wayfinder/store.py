"""
In-memory mission store keyed by mission id.

No durability: missions live as long as the process.
"""

import logging

from .errors import InvalidStatusTransition, MissionNotFoundError
from .models import Mission, Step

logger = logging.getLogger(__name__)


class MissionStore:
    """Dictionary-backed mission storage."""

    def __init__(self) -> None:
        self._missions: dict[str, Mission] = {}

    def __len__(self) -> int:
        return len(self._missions)

    def __contains__(self, mission_id: object) -> bool:
        return mission_id in self._missions

    def add(self, mission: Mission) -> Mission:
        if mission.id in self._missions:
            raise ValueError(f"Mission {mission.id} already exists")
        self._missions[mission.id] = mission
        return mission

    def set(self, mission: Mission) -> None:
        self._missions[mission.id] = mission

    def get(self, mission_id: str) -> Mission | None:
        return self._missions.get(mission_id)

    def require(self, mission_id: str) -> Mission:
        """Get a mission or raise MissionNotFoundError."""
        mission = self._missions.get(mission_id)
        if mission is None:
            raise MissionNotFoundError(mission_id)
        return mission

    def update(
        self,
        mission_id: str,
        title: str | None = None,
        description: str | None = None,
        steps: list[Step] | None = None,
    ) -> Mission:
        """
        Edit a mission that has not started researching.

        Replacement steps are reset to pending and renumbered in list order.

        Raises:
            MissionNotFoundError: If the mission does not exist
            InvalidStatusTransition: If the mission is researching or finished
        """
        mission = self.require(mission_id)
        if mission.status not in ("pending", "planning"):
            raise InvalidStatusTransition(mission.status, "planning")

        if title is not None:
            mission.title = title.strip()
        if description is not None:
            mission.description = description.strip()
        if steps is not None:
            mission.steps = [
                Step(
                    id=step.id,
                    title=step.title,
                    description=step.description,
                    priority=step.priority,
                    estimated_duration=step.estimated_duration,
                    order=index,
                )
                for index, step in enumerate(steps)
            ]

        mission.touch()
        return mission

    def delete(self, mission_id: str) -> bool:
        removed = self._missions.pop(mission_id, None)
        if removed is not None:
            logger.debug(f"Deleted mission {mission_id}")
        return removed is not None

    def all(self) -> list[Mission]:
        """All missions, newest first."""
        return sorted(self._missions.values(), key=lambda m: m.created_at, reverse=True)

    def search(self, keyword: str) -> list[Mission]:
        """Missions whose title or description contains ``keyword`` (case-insensitive)."""
        needle = keyword.lower()
        return [
            m for m in self.all()
            if needle in m.title.lower() or needle in m.description.lower()
        ]
