"""Task commands for the task board CLI."""

from cyclopts import App

from taskboard.models import UNSET, TaskPatch

task_app = App(name="task", help="Manage tasks of a milestone")


@task_app.command
def add(
    milestone_id: str,
    name: str,
    details: str | None = None,
    due: str | None = None,
    order: int | None = None,
    completed: bool = False,
    status: str | None = None,
) -> None:
    """Add a task to a milestone."""
    from taskboard.cli import open_board

    with open_board() as backend:
        task = backend.create_task(
            milestone_id, name, details=details, due_date=due, order=order, completed=completed, status=status
        )
    print(f"Created task {task.id}: {task.name} (order {task.order})")


@task_app.command
def update(
    task_id: str,
    name: str | None = None,
    details: str | None = None,
    due: str | None = None,
    status: str | None = None,
    completed: bool | None = None,
    order: int | None = None,
    clear_due: bool = False,
    clear_details: bool = False,
) -> None:
    """Update fields of a task. Use ``task move`` to change its milestone."""
    from taskboard.cli import open_board

    patch = TaskPatch(
        name=name if name is not None else UNSET,
        details=None if clear_details else (details if details is not None else UNSET),
        due_date=None if clear_due else (due if due is not None else UNSET),
        status=status if status is not None else UNSET,
        completed=completed if completed is not None else UNSET,
        order=order if order is not None else UNSET,
    )
    with open_board() as backend:
        task = backend.update_task(task_id, patch)
    print(f"Updated task {task.id}: {task.name} ({task.status.value})")


@task_app.command
def done(task_id: str, undo: bool = False) -> None:
    """Mark a task as completed, or back to open with --undo."""
    from taskboard.cli import open_board

    with open_board() as backend:
        task = backend.update_task(task_id, TaskPatch(completed=not undo))
    state = "completed" if task.completed else "reopened"
    print(f"Task {task.id} {state}")


@task_app.command
def delete(task_id: str) -> None:
    """Delete a task."""
    from taskboard.cli import open_board

    with open_board() as backend:
        backend.delete_task(task_id)
    print(f"Deleted task {task_id}")


@task_app.command
def reorder(milestone_id: str, *task_ids: str) -> None:
    """Put the tasks of a milestone in the given order."""
    from taskboard.cli import open_board

    with open_board() as backend:
        backend.reorder_tasks(milestone_id, list(task_ids))
    print(f"Reordered {len(task_ids)} task(s) in milestone {milestone_id}")


@task_app.command
def move(task_id: str, milestone_id: str, order: int = 0) -> None:
    """Move a task to another milestone (or another position in the same one)."""
    from taskboard.cli import open_board

    with open_board() as backend:
        task = backend.move_task(task_id, milestone_id, order)
    print(f"Moved task {task.id} to milestone {task.milestone_id} at position {task.order}")
