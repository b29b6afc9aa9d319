"""In-memory backend implementation."""

import threading
import uuid
from collections.abc import Sequence
from dataclasses import replace
from datetime import date
from typing import Any

import structlog

from taskboard.aggregator import build_board, build_project
from taskboard.backend import Backend
from taskboard.cascade import CascadeCoordinator
from taskboard.errors import InvalidReferenceError, ValidationError
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
from taskboard.ordering import OrderingEngine
from taskboard.store import EntityStore
from taskboard.validation import (
    check_completed,
    check_order,
    clean_details,
    clean_name,
    parse_due_date,
    parse_status,
)

logger = structlog.get_logger()


def resolve_task_state(
    status: Status,
    completed: bool,
    new_status: Status | None = None,
    new_completed: bool | None = None,
) -> tuple[Status, bool]:
    """Work out a task's (status, completed) pair after a change.

    ``completed`` is true exactly when the status is Complete. Changing one side
    updates the other; supplying both with different meanings is an error.
    """
    if new_status is not None and new_completed is not None:
        if (new_status == Status.COMPLETE) != new_completed:
            raise ValidationError(f"Status {new_status.value!r} conflicts with completed={new_completed}")
        return new_status, new_completed
    if new_status is not None:
        return new_status, new_status == Status.COMPLETE
    if new_completed is not None:
        if new_completed:
            return Status.COMPLETE, True
        if status == Status.COMPLETE:
            return Status.NOT_STARTED, False
        return status, False
    return status, completed


class MemoryBackend(Backend):
    """Backend keeping the whole board in process memory.

    All operations, reads included, run under one lock, so a sibling group is
    never seen half renumbered. Returned records are copies.
    """

    def __init__(self, strict: bool = True, store: EntityStore | None = None) -> None:
        """Initialize the in-memory backend.

        Args:
            strict: Keep every sibling group dense after each operation. When False,
                explicit orders are stored as given and deletes/moves leave gaps until
                the next reorder.
            store: Existing store to operate on (used when loading a snapshot)
        """
        self.store = store if store is not None else EntityStore()
        self.ordering = OrderingEngine(strict=strict)
        self.cascade = CascadeCoordinator(self.store)
        self._lock = threading.RLock()
        logger.debug("Memory backend initialized", strict=strict, entities=len(self.store))

    @property
    def strict(self) -> bool:
        return self.ordering.strict

    def _new_id(self) -> str:
        return uuid.uuid4().hex

    # Projects

    def list_projects(self) -> list[ProjectView]:
        with self._lock:
            return build_board(self.store)

    def get_project(self, project_id: str) -> ProjectView:
        with self._lock:
            return build_project(self.store, project_id)

    def create_project(
        self,
        name: str,
        details: str | None = None,
        due_date: date | str | None = None,
        order: int | None = None,
    ) -> Project:
        project = Project(
            id=self._new_id(),
            name=clean_name(name),
            details=clean_details(details),
            due_date=parse_due_date(due_date),
        )
        if order is not None:
            check_order(order)

        with self._lock:
            self.ordering.insert(list(self.store.projects.values()), project, order)
            self.store.add_project(project)
            logger.info("Project created", project_id=project.id, name=project.name, order=project.order)
            return replace(project)

    def update_project(self, project_id: str, patch: ProjectPatch) -> Project:
        with self._lock:
            project = self.store.get_project(project_id)
            changes = self._clean_common(patch.changes())
            order = changes.pop("order", None)

            for key, value in changes.items():
                setattr(project, key, value)
            if order is not None:
                self.ordering.reposition(list(self.store.projects.values()), project, order)

            logger.info("Project updated", project_id=project_id, fields=list(patch.changes()))
            return replace(project)

    def delete_project(self, project_id: str) -> CascadeResult:
        with self._lock:
            result = self.cascade.delete_project(project_id)
            self.ordering.remove(list(self.store.projects.values()))
            return result

    def reorder_projects(self, ordered_ids: Sequence[str]) -> None:
        with self._lock:
            self.ordering.reorder(list(self.store.projects.values()), ordered_ids)
            logger.info("Projects reordered", count=len(ordered_ids))

    # Milestones

    def get_milestone(self, milestone_id: str) -> Milestone:
        with self._lock:
            return replace(self.store.get_milestone(milestone_id))

    def create_milestone(
        self,
        project_id: str,
        name: str,
        details: str | None = None,
        due_date: date | str | None = None,
        order: int | None = None,
        status: Status | str = Status.NOT_STARTED,
    ) -> Milestone:
        milestone = Milestone(
            id=self._new_id(),
            project_id=project_id,
            name=clean_name(name),
            details=clean_details(details),
            due_date=parse_due_date(due_date),
            status=parse_status(status),
        )
        if order is not None:
            check_order(order)

        with self._lock:
            if project_id not in self.store.projects:
                raise InvalidReferenceError("Project", project_id)
            self.ordering.insert(self.store.project_milestones(project_id), milestone, order)
            self.store.add_milestone(milestone)
            logger.info(
                "Milestone created", milestone_id=milestone.id, project_id=project_id, order=milestone.order
            )
            return replace(milestone)

    def update_milestone(self, milestone_id: str, patch: MilestonePatch) -> Milestone:
        with self._lock:
            milestone = self.store.get_milestone(milestone_id)
            changes = self._clean_common(patch.changes())
            if "status" in changes:
                changes["status"] = parse_status(changes["status"])
            order = changes.pop("order", None)

            for key, value in changes.items():
                setattr(milestone, key, value)
            if order is not None:
                self.ordering.reposition(self.store.project_milestones(milestone.project_id), milestone, order)

            logger.info("Milestone updated", milestone_id=milestone_id, fields=list(patch.changes()))
            return replace(milestone)

    def delete_milestone(self, milestone_id: str) -> CascadeResult:
        with self._lock:
            project_id = self.store.get_milestone(milestone_id).project_id
            result = self.cascade.delete_milestone(milestone_id)
            self.ordering.remove(self.store.project_milestones(project_id))
            return result

    def reorder_milestones(self, project_id: str, ordered_ids: Sequence[str]) -> None:
        with self._lock:
            if project_id not in self.store.projects:
                raise InvalidReferenceError("Project", project_id)
            self.ordering.reorder(self.store.project_milestones(project_id), ordered_ids)
            logger.info("Milestones reordered", project_id=project_id, count=len(ordered_ids))

    # Tasks

    def get_task(self, task_id: str) -> Task:
        with self._lock:
            return replace(self.store.get_task(task_id))

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
        new_status = parse_status(status) if status is not None else None
        task_status, task_completed = resolve_task_state(
            Status.NOT_STARTED, False, new_status, check_completed(completed) or None
        )
        task = Task(
            id=self._new_id(),
            milestone_id=milestone_id,
            name=clean_name(name),
            details=clean_details(details),
            due_date=parse_due_date(due_date),
            status=task_status,
            completed=task_completed,
        )
        if order is not None:
            check_order(order)

        with self._lock:
            if milestone_id not in self.store.milestones:
                raise InvalidReferenceError("Milestone", milestone_id)
            self.ordering.insert(self.store.milestone_tasks(milestone_id), task, order)
            self.store.add_task(task)
            logger.info("Task created", task_id=task.id, milestone_id=milestone_id, order=task.order)
            return replace(task)

    def update_task(self, task_id: str, patch: TaskPatch) -> Task:
        with self._lock:
            task = self.store.get_task(task_id)
            changes = self._clean_common(patch.changes())
            new_status = parse_status(changes.pop("status")) if "status" in changes else None
            new_completed = check_completed(changes.pop("completed")) if "completed" in changes else None
            changes["status"], changes["completed"] = resolve_task_state(
                task.status, task.completed, new_status, new_completed
            )
            order = changes.pop("order", None)

            for key, value in changes.items():
                setattr(task, key, value)
            if order is not None:
                self.ordering.reposition(self.store.milestone_tasks(task.milestone_id), task, order)

            logger.info("Task updated", task_id=task_id, fields=list(patch.changes()))
            return replace(task)

    def delete_task(self, task_id: str) -> None:
        with self._lock:
            task = self.store.get_task(task_id)
            self.store.remove_task(task_id)
            self.ordering.remove(self.store.milestone_tasks(task.milestone_id))
            logger.info("Task deleted", task_id=task_id, milestone_id=task.milestone_id)

    def reorder_tasks(self, milestone_id: str, ordered_ids: Sequence[str]) -> None:
        with self._lock:
            if milestone_id not in self.store.milestones:
                raise InvalidReferenceError("Milestone", milestone_id)
            self.ordering.reorder(self.store.milestone_tasks(milestone_id), ordered_ids)
            logger.info("Tasks reordered", milestone_id=milestone_id, count=len(ordered_ids))

    def move_task(self, task_id: str, new_milestone_id: str, new_order: int) -> Task:
        check_order(new_order)
        with self._lock:
            task = self.store.get_task(task_id)
            if new_milestone_id not in self.store.milestones:
                raise InvalidReferenceError("Milestone", new_milestone_id)

            source_id = task.milestone_id
            if source_id == new_milestone_id:
                self.ordering.reposition(self.store.milestone_tasks(source_id), task, new_order)
            else:
                self.store.reparent_task(task, new_milestone_id)
                self.ordering.remove(self.store.milestone_tasks(source_id))
                siblings = [t for t in self.store.milestone_tasks(new_milestone_id) if t.id != task_id]
                self.ordering.insert(siblings, task, new_order)

            logger.info(
                "Task moved", task_id=task_id, source=source_id, target=new_milestone_id, order=task.order
            )
            return replace(task)

    def _clean_common(self, changes: dict[str, Any]) -> dict[str, Any]:
        """Validate the fields shared by all patches before anything is written."""
        cleaned = dict(changes)
        if "name" in cleaned:
            cleaned["name"] = clean_name(cleaned["name"])
        if "details" in cleaned:
            cleaned["details"] = clean_details(cleaned["details"])
        if "due_date" in cleaned:
            cleaned["due_date"] = parse_due_date(cleaned["due_date"])
        if "order" in cleaned:
            if cleaned["order"] is None:
                raise ValidationError("Order cannot be cleared")
            check_order(cleaned["order"])
        return cleaned
