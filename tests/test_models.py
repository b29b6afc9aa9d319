"""Tests for data models."""

from datetime import datetime, timezone

from taskboard.models import (
    UNSET,
    CascadeResult,
    Milestone,
    MilestoneView,
    Project,
    ProjectView,
    Status,
    Task,
    TaskPatch,
)


def test_project_creation() -> None:
    """Test project creation with defaults."""
    project = Project(id="p1", name="Launch")
    assert project.details is None
    assert project.due_date is None
    assert project.order == 0
    assert project.created_at.tzinfo == timezone.utc


def test_task_defaults() -> None:
    """Test task creation with defaults."""
    task = Task(id="t1", milestone_id="m1", name="Write docs")
    assert task.status == Status.NOT_STARTED
    assert task.completed is False


def test_status_values() -> None:
    """Test status enum carries display values."""
    assert [s.value for s in Status] == ["Not Started", "In Progress", "Deferred", "Blocked", "Complete"]


def test_patch_changes_only_set_fields() -> None:
    """Test that a patch reports only the fields that were supplied."""
    patch = TaskPatch(name="Renamed", due_date=None)
    assert patch.changes() == {"name": "Renamed", "due_date": None}
    assert TaskPatch().changes() == {}


def test_unset_is_falsy_singleton() -> None:
    """Test the UNSET marker."""
    assert not UNSET
    assert TaskPatch().name is UNSET
    assert repr(UNSET) == "UNSET"


def test_project_view_progress() -> None:
    """Test progress counters on nested views."""
    created = datetime(2024, 1, 1, tzinfo=timezone.utc)
    done = Task(id="t1", milestone_id="m1", name="a", completed=True, created_at=created)
    open_ = Task(id="t2", milestone_id="m1", name="b", created_at=created)
    other = Task(id="t3", milestone_id="m2", name="c", completed=True, created_at=created)
    view = ProjectView(
        project=Project(id="p1", name="P"),
        milestones=[
            MilestoneView(milestone=Milestone(id="m1", project_id="p1", name="M1"), tasks=[done, open_]),
            MilestoneView(milestone=Milestone(id="m2", project_id="p1", name="M2"), tasks=[other]),
        ],
    )
    assert view.total_tasks == 3
    assert view.completed_tasks == 2
    assert view.progress == 2 / 3


def test_empty_project_progress() -> None:
    """Test progress of a project without tasks."""
    assert ProjectView(project=Project(id="p1", name="P")).progress == 0.0


def test_cascade_result_total() -> None:
    """Test cascade result counting."""
    result = CascadeResult(project_ids=["p"], milestone_ids=["m1", "m2"], task_ids=["t1"])
    assert result.total == 4
