"""Backend interface for the task board."""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from datetime import date

from taskboard.models import (
    CascadeResult,
    Milestone,
    MilestonePatch,
    Project,
    ProjectPatch,
    ProjectView,
    Status,
    Task,
    TaskPatch,
)


class Backend(ABC):
    """Abstract base class for task board backends.

    This is the whole operation contract consumed by outer layers such as the CLI.
    Implementations raise ``taskboard.errors.BoardError`` subclasses on failure.
    """

    # Projects

    @abstractmethod
    def list_projects(self) -> list[ProjectView]:
        """List every project with its milestones and tasks, all in board order."""
        pass

    @abstractmethod
    def get_project(self, project_id: str) -> ProjectView:
        """Read one project with its milestones and tasks."""
        pass

    @abstractmethod
    def create_project(
        self,
        name: str,
        details: str | None = None,
        due_date: date | str | None = None,
        order: int | None = None,
    ) -> Project:
        """Create a project, appended to the board unless ``order`` is given."""
        pass

    @abstractmethod
    def update_project(self, project_id: str, patch: ProjectPatch) -> Project:
        """Apply a partial update to a project."""
        pass

    @abstractmethod
    def delete_project(self, project_id: str) -> CascadeResult:
        """Delete a project and all of its milestones and tasks."""
        pass

    @abstractmethod
    def reorder_projects(self, ordered_ids: Sequence[str]) -> None:
        """Give projects the order of ``ordered_ids``."""
        pass

    # Milestones

    @abstractmethod
    def get_milestone(self, milestone_id: str) -> Milestone:
        """Read one milestone."""
        pass

    @abstractmethod
    def create_milestone(
        self,
        project_id: str,
        name: str,
        details: str | None = None,
        due_date: date | str | None = None,
        order: int | None = None,
        status: Status | str = Status.NOT_STARTED,
    ) -> Milestone:
        """Create a milestone under a project."""
        pass

    @abstractmethod
    def update_milestone(self, milestone_id: str, patch: MilestonePatch) -> Milestone:
        """Apply a partial update to a milestone."""
        pass

    @abstractmethod
    def delete_milestone(self, milestone_id: str) -> CascadeResult:
        """Delete a milestone and all of its tasks."""
        pass

    @abstractmethod
    def reorder_milestones(self, project_id: str, ordered_ids: Sequence[str]) -> None:
        """Give the milestones of a project the order of ``ordered_ids``."""
        pass

    # Tasks

    @abstractmethod
    def get_task(self, task_id: str) -> Task:
        """Read one task."""
        pass

    @abstractmethod
    def create_task(
        self,
        milestone_id: str,
        name: str,
        details: str | None = None,
        due_date: date | str | None = None,
        order: int | None = None,
        completed: bool = False,
        status: Status | str | None = None,
    ) -> Task:
        """Create a task under a milestone."""
        pass

    @abstractmethod
    def update_task(self, task_id: str, patch: TaskPatch) -> Task:
        """Apply a partial update to a task."""
        pass

    @abstractmethod
    def delete_task(self, task_id: str) -> None:
        """Delete a task."""
        pass

    @abstractmethod
    def reorder_tasks(self, milestone_id: str, ordered_ids: Sequence[str]) -> None:
        """Give the tasks of a milestone the order of ``ordered_ids``."""
        pass

    @abstractmethod
    def move_task(self, task_id: str, new_milestone_id: str, new_order: int) -> Task:
        """Move a task to ``new_order`` inside ``new_milestone_id``."""
        pass
