"""Tests for the backend operation contract."""

import itertools

import pytest

from taskboard.backend import Backend
from taskboard.backends import MemoryBackend
from taskboard.errors import InvalidReferenceError, NotFoundError


@pytest.fixture
def backend() -> MemoryBackend:
    """Create a fresh strict backend for each test."""
    return MemoryBackend()


def task_ids(backend: Backend, project_id: str, milestone_index: int) -> list[str]:
    view = backend.get_project(project_id)
    return [task.id for task in view.milestones[milestone_index].tasks]


def test_backend_is_abstract() -> None:
    """Test the contract cannot be instantiated directly."""
    with pytest.raises(TypeError):
        Backend()  # type: ignore[abstract]


def test_memory_backend_implements_contract(backend: MemoryBackend) -> None:
    """Test the in-memory backend is a Backend."""
    assert isinstance(backend, Backend)


def test_append_order_for_every_level(backend: MemoryBackend) -> None:
    """Test new children without an explicit order go to the end."""
    projects = [backend.create_project(f"P{i}") for i in range(3)]
    assert [p.order for p in projects] == [0, 1, 2]

    milestones = [backend.create_milestone(projects[0].id, f"M{i}") for i in range(3)]
    assert [m.order for m in milestones] == [0, 1, 2]

    tasks = [backend.create_task(milestones[1].id, f"T{i}") for i in range(4)]
    assert [t.order for t in tasks] == [0, 1, 2, 3]

    # Counts are per parent
    assert backend.create_task(milestones[0].id, "Other").order == 0


def test_reorder_any_permutation_is_dense(backend: MemoryBackend) -> None:
    """Test every permutation of a group reads back in that order with orders 0..n-1."""
    project = backend.create_project("P")
    milestone = backend.create_milestone(project.id, "M")
    ids = [backend.create_task(milestone.id, f"T{i}").id for i in range(4)]

    for permutation in itertools.permutations(ids):
        backend.reorder_tasks(milestone.id, list(permutation))
        tasks = backend.get_project(project.id).milestones[0].tasks
        assert [t.id for t in tasks] == list(permutation)
        assert [t.order for t in tasks] == [0, 1, 2, 3]


def test_reorder_twice_gives_same_state(backend: MemoryBackend) -> None:
    """Test reorder is idempotent."""
    project = backend.create_project("P")
    ids = [backend.create_milestone(project.id, f"M{i}").id for i in range(3)]
    wanted = [ids[2], ids[0], ids[1]]

    backend.reorder_milestones(project.id, wanted)
    first = [(m.milestone.id, m.milestone.order) for m in backend.get_project(project.id).milestones]
    backend.reorder_milestones(project.id, wanted)
    second = [(m.milestone.id, m.milestone.order) for m in backend.get_project(project.id).milestones]
    assert first == second


def test_list_projects_sorted_by_order(backend: MemoryBackend) -> None:
    """Test listing follows project order rather than creation order."""
    a = backend.create_project("A")
    b = backend.create_project("B")
    c = backend.create_project("C")
    backend.reorder_projects([c.id, a.id, b.id])
    assert [view.project.name for view in backend.list_projects()] == ["C", "A", "B"]


def test_delete_project_cascades(backend: MemoryBackend) -> None:
    """Test nothing under a deleted project stays retrievable."""
    project = backend.create_project("P")
    other = backend.create_project("Other")
    m1 = backend.create_milestone(project.id, "M1")
    m2 = backend.create_milestone(project.id, "M2")
    t1 = backend.create_task(m1.id, "T1")
    t2 = backend.create_task(m2.id, "T2")
    kept = backend.create_task(backend.create_milestone(other.id, "K").id, "Kept")

    result = backend.delete_project(project.id)

    assert result.total == 5
    for getter, entity_id in [
        (backend.get_project, project.id),
        (backend.get_milestone, m1.id),
        (backend.get_milestone, m2.id),
        (backend.get_task, t1.id),
        (backend.get_task, t2.id),
    ]:
        with pytest.raises(NotFoundError):
            getter(entity_id)
    assert backend.get_task(kept.id).name == "Kept"


def test_move_transfers_parentage(backend: MemoryBackend) -> None:
    """Test a moved task lands in the new milestone at the requested position."""
    project = backend.create_project("P")
    m1 = backend.create_milestone(project.id, "M1")
    m2 = backend.create_milestone(project.id, "M2")
    moving = backend.create_task(m1.id, "Moving")
    existing = [backend.create_task(m2.id, f"E{i}").id for i in range(3)]

    moved = backend.move_task(moving.id, m2.id, 1)

    assert moved.milestone_id == m2.id
    assert backend.get_task(moving.id).milestone_id == m2.id
    assert task_ids(backend, project.id, 1) == [existing[0], moving.id, existing[1], existing[2]]
    assert task_ids(backend, project.id, 0) == []


def test_board_scenario(backend: MemoryBackend) -> None:
    """Test the reorder-then-move walkthrough on a fresh board."""
    a = backend.create_project("A")
    b = backend.create_project("B")
    assert (a.order, b.order) == (0, 1)

    m1 = backend.create_milestone(a.id, "M1")
    m2 = backend.create_milestone(a.id, "M2")
    backend.reorder_milestones(a.id, [m2.id, m1.id])
    milestones = backend.get_project(a.id).milestones
    assert [(m.milestone.id, m.milestone.order) for m in milestones] == [(m2.id, 0), (m1.id, 1)]

    t1 = backend.create_task(m1.id, "T1")
    assert t1.order == 0
    backend.move_task(t1.id, m2.id, 0)
    view = backend.get_project(a.id)
    assert [t.id for t in view.milestones[0].tasks] == [t1.id]
    assert view.milestones[1].tasks == []
    assert backend.get_task(t1.id).milestone_id == m2.id


def test_delete_milestone_scenario(backend: MemoryBackend) -> None:
    """Test deleting a milestone with two tasks leaves its sibling alone."""
    project = backend.create_project("A")
    m1 = backend.create_milestone(project.id, "M1")
    m2 = backend.create_milestone(project.id, "M2")
    doomed = [backend.create_task(m1.id, "T1"), backend.create_task(m1.id, "T2")]
    survivor = backend.create_task(m2.id, "T3")

    backend.delete_milestone(m1.id)

    for task in doomed:
        with pytest.raises(NotFoundError):
            backend.get_task(task.id)
    view = backend.get_project(project.id)
    assert [m.milestone.id for m in view.milestones] == [m2.id]
    assert view.milestones[0].milestone.order == 0
    assert [t.id for t in view.milestones[0].tasks] == [survivor.id]


def test_create_with_missing_parent(backend: MemoryBackend) -> None:
    """Test creates under unknown parents raise InvalidReferenceError."""
    with pytest.raises(InvalidReferenceError, match="Project"):
        backend.create_milestone("missing", "M")
    with pytest.raises(InvalidReferenceError, match="Milestone"):
        backend.create_task("missing", "T")


def test_operations_on_missing_ids(backend: MemoryBackend) -> None:
    """Test update, delete and move of unknown ids raise NotFoundError."""
    project = backend.create_project("P")
    milestone = backend.create_milestone(project.id, "M")

    with pytest.raises(NotFoundError):
        backend.delete_project("missing")
    with pytest.raises(NotFoundError):
        backend.delete_milestone("missing")
    with pytest.raises(NotFoundError):
        backend.delete_task("missing")
    with pytest.raises(NotFoundError):
        backend.move_task("missing", milestone.id, 0)
    with pytest.raises(NotFoundError):
        backend.get_project("missing")
