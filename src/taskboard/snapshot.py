"""Board snapshots stored as YAML files.

A snapshot carries the board between CLI invocations. It is written whole to a
temporary file and then moved into place, so a reader never sees a partially
written board (for example one where a cascade delete was only half recorded).
"""

import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import structlog
import yaml

from taskboard.backends.memory import MemoryBackend, resolve_task_state
from taskboard.errors import SnapshotError
from taskboard.models import Milestone, Project, Status, Task
from taskboard.store import EntityStore
from taskboard.validation import (
    check_completed,
    check_order,
    clean_details,
    clean_name,
    format_due_date,
    parse_due_date,
    parse_status,
)

logger = structlog.get_logger()

SNAPSHOT_VERSION = 1


def project_to_dict(project: Project) -> dict[str, Any]:
    return {
        "id": project.id,
        "name": project.name,
        "details": project.details,
        "due_date": format_due_date(project.due_date),
        "order": project.order,
        "created_at": project.created_at.isoformat(),
    }


def milestone_to_dict(milestone: Milestone) -> dict[str, Any]:
    return {
        "id": milestone.id,
        "project_id": milestone.project_id,
        "name": milestone.name,
        "details": milestone.details,
        "due_date": format_due_date(milestone.due_date),
        "status": milestone.status.value,
        "order": milestone.order,
        "created_at": milestone.created_at.isoformat(),
    }


def task_to_dict(task: Task) -> dict[str, Any]:
    return {
        "id": task.id,
        "milestone_id": task.milestone_id,
        "name": task.name,
        "details": task.details,
        "due_date": format_due_date(task.due_date),
        "status": task.status.value,
        "completed": task.completed,
        "order": task.order,
        "created_at": task.created_at.isoformat(),
    }


def _parse_created_at(value: Any) -> datetime:
    # yaml.safe_load already turns unquoted timestamps into datetimes
    if not isinstance(value, datetime):
        value = datetime.fromisoformat(str(value))
    # Records without an offset were written as UTC
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


def _common_fields(data: dict[str, Any]) -> dict[str, Any]:
    return {
        "id": str(data["id"]),
        "name": clean_name(data["name"]),
        "details": clean_details(data.get("details")),
        "due_date": parse_due_date(_date_text(data.get("due_date"))),
        "order": check_order(data.get("order", 0)),
        "created_at": _parse_created_at(data["created_at"]),
    }


def _project_from_dict(data: dict[str, Any]) -> Project:
    return Project(**_common_fields(data))


def _milestone_from_dict(data: dict[str, Any]) -> Milestone:
    return Milestone(
        project_id=str(data["project_id"]),
        status=parse_status(data.get("status", "Not Started")),
        **_common_fields(data),
    )


def _task_from_dict(data: dict[str, Any]) -> Task:
    status = parse_status(data["status"]) if "status" in data else None
    completed = check_completed(data["completed"]) if "completed" in data else None
    status, completed = resolve_task_state(Status.NOT_STARTED, False, status, completed)
    return Task(
        milestone_id=str(data["milestone_id"]),
        status=status,
        completed=completed,
        **_common_fields(data),
    )


def _date_text(value: Any) -> Any:
    # Unquoted YYYY-MM-DD values come back from YAML as date objects already
    return value.isoformat() if hasattr(value, "isoformat") else value


def dump_board(backend: MemoryBackend) -> dict[str, Any]:
    """Flatten a backend's board into a plain dictionary."""
    projects, milestones, tasks = [], [], []
    for project_view in backend.list_projects():
        projects.append(project_to_dict(project_view.project))
        for milestone_view in project_view.milestones:
            milestones.append(milestone_to_dict(milestone_view.milestone))
            tasks.extend(task_to_dict(task) for task in milestone_view.tasks)
    return {"version": SNAPSHOT_VERSION, "projects": projects, "milestones": milestones, "tasks": tasks}


def _check_new_id(store: EntityStore, entity_id: str) -> None:
    if entity_id in store.projects or entity_id in store.milestones or entity_id in store.tasks:
        raise SnapshotError(f"Duplicate id in snapshot: {entity_id}")


def restore_board(data: dict[str, Any], strict: bool = True) -> MemoryBackend:
    """Rebuild a backend from a dictionary produced by ``dump_board``.

    Records go through the same checks as backend input. Ids must be unique
    across the whole board, every milestone must point at a loaded project and
    every task at a loaded milestone. In strict mode each sibling group is
    compacted after loading.
    """
    if not isinstance(data, dict):
        raise SnapshotError("Snapshot must be a mapping")
    version = data.get("version", SNAPSHOT_VERSION)
    if version != SNAPSHOT_VERSION:
        raise SnapshotError(f"Unsupported snapshot version: {version}")

    store = EntityStore()
    backend = MemoryBackend(strict=strict, store=store)
    try:
        for item in data.get("projects") or []:
            project = _project_from_dict(item)
            _check_new_id(store, project.id)
            store.add_project(project)
        for item in data.get("milestones") or []:
            milestone = _milestone_from_dict(item)
            _check_new_id(store, milestone.id)
            if milestone.project_id not in store.projects:
                raise SnapshotError(f"Milestone {milestone.id} references missing project {milestone.project_id}")
            store.add_milestone(milestone)
        for item in data.get("tasks") or []:
            task = _task_from_dict(item)
            _check_new_id(store, task.id)
            if task.milestone_id not in store.milestones:
                raise SnapshotError(f"Task {task.id} references missing milestone {task.milestone_id}")
            store.add_task(task)

        if strict:
            backend.ordering.compact(list(store.projects.values()))
            for project_id in store.projects:
                backend.ordering.compact(store.project_milestones(project_id))
            for milestone_id in store.milestones:
                backend.ordering.compact(store.milestone_tasks(milestone_id))
    except SnapshotError:
        raise
    except (KeyError, TypeError, ValueError) as e:
        raise SnapshotError(f"Malformed snapshot record: {e}") from e

    return backend


def save(backend: MemoryBackend, path: Path) -> None:
    """Write the board to ``path``, replacing any previous snapshot atomically."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    data = dump_board(backend)

    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w") as f:
            yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)
        os.replace(tmp_name, path)
    except OSError as e:
        logger.error("Failed to save snapshot", path=str(path), error=str(e))
        Path(tmp_name).unlink(missing_ok=True)
        raise SnapshotError(f"Failed to save snapshot to {path}: {e}") from e

    logger.debug("Snapshot saved", path=str(path), projects=len(data["projects"]))


def load(path: Path, strict: bool = True) -> MemoryBackend:
    """Load the board from ``path``. A missing file gives an empty board."""
    path = Path(path)
    if not path.exists():
        logger.debug("Snapshot does not exist, starting with an empty board", path=str(path))
        return MemoryBackend(strict=strict)

    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.error("Failed to load snapshot", path=str(path), error=str(e))
        raise SnapshotError(f"Failed to load snapshot from {path}: {e}") from e

    backend = restore_board(data, strict=strict)
    logger.debug("Snapshot loaded", path=str(path), entities=len(backend.store))
    return backend


def clear(path: Path) -> bool:
    """Remove the snapshot file. Returns False when there was nothing to remove."""
    path = Path(path)
    if not path.exists():
        return False
    path.unlink()
    logger.info("Snapshot cleared", path=str(path))
    return True
