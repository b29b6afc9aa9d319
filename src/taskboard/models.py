"""Data models for the task board."""

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any


class Status(str, Enum):
    """Workflow status shared by milestones and tasks."""

    NOT_STARTED = "Not Started"
    IN_PROGRESS = "In Progress"
    DEFERRED = "Deferred"
    BLOCKED = "Blocked"
    COMPLETE = "Complete"


class _Unset:
    """Marker for patch fields that were not supplied."""

    _instance = None

    def __new__(cls) -> "_Unset":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Project:
    """A top-level container of milestones."""

    id: str
    name: str
    details: str | None = None
    due_date: date | None = None
    order: int = 0
    created_at: datetime = field(default_factory=utcnow)


@dataclass
class Milestone:
    """An ordered step inside a project."""

    id: str
    project_id: str
    name: str
    details: str | None = None
    due_date: date | None = None
    status: Status = Status.NOT_STARTED
    order: int = 0
    created_at: datetime = field(default_factory=utcnow)


@dataclass
class Task:
    """An ordered unit of work inside a milestone."""

    id: str
    milestone_id: str
    name: str
    details: str | None = None
    due_date: date | None = None
    status: Status = Status.NOT_STARTED
    completed: bool = False
    order: int = 0
    created_at: datetime = field(default_factory=utcnow)


@dataclass
class ProjectPatch:
    """Partial update for a project. Fields left as UNSET are not touched."""

    name: Any = UNSET
    details: Any = UNSET
    due_date: Any = UNSET
    order: Any = UNSET

    def changes(self) -> dict[str, Any]:
        return _changes(self)


@dataclass
class MilestonePatch:
    """Partial update for a milestone. Fields left as UNSET are not touched."""

    name: Any = UNSET
    details: Any = UNSET
    due_date: Any = UNSET
    status: Any = UNSET
    order: Any = UNSET

    def changes(self) -> dict[str, Any]:
        return _changes(self)


@dataclass
class TaskPatch:
    """Partial update for a task. Fields left as UNSET are not touched.

    Moving a task to another milestone is not a patch; use ``move_task``.
    """

    name: Any = UNSET
    details: Any = UNSET
    due_date: Any = UNSET
    status: Any = UNSET
    completed: Any = UNSET
    order: Any = UNSET

    def changes(self) -> dict[str, Any]:
        return _changes(self)


def _changes(patch: Any) -> dict[str, Any]:
    return {name: value for name, value in vars(patch).items() if value is not UNSET}


@dataclass
class MilestoneView:
    """A milestone together with its tasks in display order."""

    milestone: Milestone
    tasks: list[Task] = field(default_factory=list)

    @property
    def total_tasks(self) -> int:
        return len(self.tasks)

    @property
    def completed_tasks(self) -> int:
        return sum(1 for task in self.tasks if task.completed)


@dataclass
class ProjectView:
    """A project together with its milestones (and their tasks) in display order."""

    project: Project
    milestones: list[MilestoneView] = field(default_factory=list)

    @property
    def total_tasks(self) -> int:
        return sum(view.total_tasks for view in self.milestones)

    @property
    def completed_tasks(self) -> int:
        return sum(view.completed_tasks for view in self.milestones)

    @property
    def progress(self) -> float:
        """Fraction of completed tasks, 0.0 when the project has no tasks."""
        total = self.total_tasks
        if total == 0:
            return 0.0
        return self.completed_tasks / total


@dataclass
class CascadeResult:
    """Ids removed by a cascading delete."""

    project_ids: list[str] = field(default_factory=list)
    milestone_ids: list[str] = field(default_factory=list)
    task_ids: list[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.project_ids) + len(self.milestone_ids) + len(self.task_ids)
