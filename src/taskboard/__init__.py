"""Task Board - ordered projects, milestones and tasks."""

from taskboard.backend import Backend
from taskboard.backends import MemoryBackend
from taskboard.errors import BoardError, InvalidReferenceError, NotFoundError, SnapshotError, ValidationError
from taskboard.models import (
    UNSET,
    CascadeResult,
    Milestone,
    MilestonePatch,
    MilestoneView,
    Project,
    ProjectPatch,
    ProjectView,
    Status,
    Task,
    TaskPatch,
)

__all__ = [
    "UNSET",
    "Backend",
    "BoardError",
    "CascadeResult",
    "InvalidReferenceError",
    "MemoryBackend",
    "Milestone",
    "MilestonePatch",
    "MilestoneView",
    "NotFoundError",
    "Project",
    "ProjectPatch",
    "ProjectView",
    "SnapshotError",
    "Status",
    "Task",
    "TaskPatch",
    "ValidationError",
]
