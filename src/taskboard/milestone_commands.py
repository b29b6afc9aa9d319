"""Milestone commands for the task board CLI."""

from cyclopts import App

from taskboard.models import UNSET, MilestonePatch

milestone_app = App(name="milestone", help="Manage milestones of a project")


@milestone_app.command
def add(
    project_id: str,
    name: str,
    details: str | None = None,
    due: str | None = None,
    order: int | None = None,
    status: str = "Not Started",
) -> None:
    """Add a milestone to a project.

    Args:
        project_id: Project that owns the milestone
        name: Milestone name
        details: Free-form description
        due: Due date as YYYY-MM-DD
        order: Position inside the project (appended when omitted)
        status: Not Started, In Progress, Deferred, Blocked or Complete
    """
    from taskboard.cli import open_board

    with open_board() as backend:
        milestone = backend.create_milestone(
            project_id, name, details=details, due_date=due, order=order, status=status
        )
    print(f"Created milestone {milestone.id}: {milestone.name} (order {milestone.order})")


@milestone_app.command
def update(
    milestone_id: str,
    name: str | None = None,
    details: str | None = None,
    due: str | None = None,
    status: str | None = None,
    order: int | None = None,
    clear_due: bool = False,
    clear_details: bool = False,
) -> None:
    """Update fields of a milestone."""
    from taskboard.cli import open_board

    patch = MilestonePatch(
        name=name if name is not None else UNSET,
        details=None if clear_details else (details if details is not None else UNSET),
        due_date=None if clear_due else (due if due is not None else UNSET),
        status=status if status is not None else UNSET,
        order=order if order is not None else UNSET,
    )
    with open_board() as backend:
        milestone = backend.update_milestone(milestone_id, patch)
    print(f"Updated milestone {milestone.id}: {milestone.name} ({milestone.status.value})")


@milestone_app.command
def delete(milestone_id: str) -> None:
    """Delete a milestone with all of its tasks."""
    from taskboard.cli import open_board

    with open_board() as backend:
        result = backend.delete_milestone(milestone_id)
    print(f"Deleted milestone {milestone_id} ({len(result.task_ids)} task(s))")


@milestone_app.command
def reorder(project_id: str, *milestone_ids: str) -> None:
    """Put the milestones of a project in the given order."""
    from taskboard.cli import open_board

    with open_board() as backend:
        backend.reorder_milestones(project_id, list(milestone_ids))
    print(f"Reordered {len(milestone_ids)} milestone(s) in project {project_id}")
