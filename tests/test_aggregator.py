"""Tests for the hierarchy aggregator."""

from datetime import datetime, timedelta, timezone

from taskboard.aggregator import build_board, build_project
from taskboard.models import Milestone, Project, Task
from taskboard.store import EntityStore

BASE = datetime(2024, 1, 1, tzinfo=timezone.utc)


def at(seconds: int) -> datetime:
    return BASE + timedelta(seconds=seconds)


def test_board_sorted_by_order_not_creation() -> None:
    """Test projects come back by order whatever the creation sequence."""
    store = EntityStore()
    store.add_project(Project(id="a", name="A", order=2, created_at=at(0)))
    store.add_project(Project(id="b", name="B", order=0, created_at=at(1)))
    store.add_project(Project(id="c", name="C", order=1, created_at=at(2)))

    board = build_board(store)
    assert [view.project.id for view in board] == ["b", "c", "a"]
    assert [view.project.order for view in board] == [0, 1, 2]


def test_each_level_sorted_independently() -> None:
    """Test task order does not depend on milestone order."""
    store = EntityStore()
    store.add_project(Project(id="p", name="P"))
    store.add_milestone(Milestone(id="m1", project_id="p", name="M1", order=1, created_at=at(0)))
    store.add_milestone(Milestone(id="m2", project_id="p", name="M2", order=0, created_at=at(1)))
    store.add_task(Task(id="t1", milestone_id="m1", name="T1", order=1, created_at=at(0)))
    store.add_task(Task(id="t2", milestone_id="m1", name="T2", order=0, created_at=at(1)))
    store.add_task(Task(id="t3", milestone_id="m2", name="T3", order=0, created_at=at(2)))

    view = build_project(store, "p")
    assert [m.milestone.id for m in view.milestones] == ["m2", "m1"]
    assert [t.id for t in view.milestones[1].tasks] == ["t2", "t1"]
    assert [t.id for t in view.milestones[0].tasks] == ["t3"]


def test_views_hold_copies() -> None:
    """Test that editing a view leaves the store untouched."""
    store = EntityStore()
    store.add_project(Project(id="p", name="P"))
    store.add_milestone(Milestone(id="m", project_id="p", name="M"))
    store.add_task(Task(id="t", milestone_id="m", name="T"))

    view = build_project(store, "p")
    view.project.name = "changed"
    view.milestones[0].tasks[0].order = 99
    assert store.get_project("p").name == "P"
    assert store.get_task("t").order == 0


def test_empty_board() -> None:
    """Test an empty store gives an empty board."""
    assert build_board(EntityStore()) == []
