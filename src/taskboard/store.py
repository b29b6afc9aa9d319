"""Entity store: keyed record maps plus a parent -> children index.

The store holds no ordering logic. It only knows which records exist and which
parent each child belongs to, so sibling groups can be fetched without scanning
every record.
"""

import structlog

from taskboard.errors import NotFoundError
from taskboard.models import Milestone, Project, Task

logger = structlog.get_logger()


class EntityStore:
    """In-memory maps of projects, milestones and tasks."""

    def __init__(self) -> None:
        self.projects: dict[str, Project] = {}
        self.milestones: dict[str, Milestone] = {}
        self.tasks: dict[str, Task] = {}
        self._milestones_by_project: dict[str, set[str]] = {}
        self._tasks_by_milestone: dict[str, set[str]] = {}

    # Lookups

    def get_project(self, project_id: str) -> Project:
        try:
            return self.projects[project_id]
        except KeyError:
            raise NotFoundError("Project", project_id) from None

    def get_milestone(self, milestone_id: str) -> Milestone:
        try:
            return self.milestones[milestone_id]
        except KeyError:
            raise NotFoundError("Milestone", milestone_id) from None

    def get_task(self, task_id: str) -> Task:
        try:
            return self.tasks[task_id]
        except KeyError:
            raise NotFoundError("Task", task_id) from None

    def project_milestones(self, project_id: str) -> list[Milestone]:
        """Milestones of a project, in no particular order."""
        return [self.milestones[mid] for mid in self._milestones_by_project.get(project_id, ())]

    def milestone_tasks(self, milestone_id: str) -> list[Task]:
        """Tasks of a milestone, in no particular order."""
        return [self.tasks[tid] for tid in self._tasks_by_milestone.get(milestone_id, ())]

    # Mutations

    def add_project(self, project: Project) -> None:
        self.projects[project.id] = project
        self._milestones_by_project.setdefault(project.id, set())
        logger.debug("Project stored", project_id=project.id)

    def add_milestone(self, milestone: Milestone) -> None:
        self.milestones[milestone.id] = milestone
        self._milestones_by_project.setdefault(milestone.project_id, set()).add(milestone.id)
        self._tasks_by_milestone.setdefault(milestone.id, set())
        logger.debug("Milestone stored", milestone_id=milestone.id, project_id=milestone.project_id)

    def add_task(self, task: Task) -> None:
        self.tasks[task.id] = task
        self._tasks_by_milestone.setdefault(task.milestone_id, set()).add(task.id)
        logger.debug("Task stored", task_id=task.id, milestone_id=task.milestone_id)

    def reparent_task(self, task: Task, milestone_id: str) -> None:
        """Point a task at another milestone and keep the index in step."""
        self._tasks_by_milestone.get(task.milestone_id, set()).discard(task.id)
        task.milestone_id = milestone_id
        self._tasks_by_milestone.setdefault(milestone_id, set()).add(task.id)
        logger.debug("Task reparented", task_id=task.id, milestone_id=milestone_id)

    def remove_project(self, project_id: str) -> Project:
        project = self.projects.pop(project_id)
        self._milestones_by_project.pop(project_id, None)
        return project

    def remove_milestone(self, milestone_id: str) -> Milestone:
        milestone = self.milestones.pop(milestone_id)
        self._milestones_by_project.get(milestone.project_id, set()).discard(milestone_id)
        self._tasks_by_milestone.pop(milestone_id, None)
        return milestone

    def remove_task(self, task_id: str) -> Task:
        task = self.tasks.pop(task_id)
        self._tasks_by_milestone.get(task.milestone_id, set()).discard(task_id)
        return task

    def clear(self) -> None:
        self.projects.clear()
        self.milestones.clear()
        self.tasks.clear()
        self._milestones_by_project.clear()
        self._tasks_by_milestone.clear()

    def __len__(self) -> int:
        return len(self.projects) + len(self.milestones) + len(self.tasks)
