"""Project commands for the task board CLI."""

from cyclopts import App

from taskboard.models import UNSET, ProjectPatch

project_app = App(name="project", help="Manage projects")


@project_app.command
def add(
    name: str,
    details: str | None = None,
    due: str | None = None,
    order: int | None = None,
) -> None:
    """Add a project to the board.

    Args:
        name: Project name
        details: Free-form description
        due: Due date as YYYY-MM-DD
        order: Position on the board (appended when omitted)
    """
    from taskboard.cli import open_board

    with open_board() as backend:
        project = backend.create_project(name, details=details, due_date=due, order=order)
    print(f"Created project {project.id}: {project.name} (order {project.order})")


@project_app.command
def update(
    project_id: str,
    name: str | None = None,
    details: str | None = None,
    due: str | None = None,
    order: int | None = None,
    clear_due: bool = False,
    clear_details: bool = False,
) -> None:
    """Update fields of a project."""
    from taskboard.cli import open_board

    patch = ProjectPatch(
        name=name if name is not None else UNSET,
        details=None if clear_details else (details if details is not None else UNSET),
        due_date=None if clear_due else (due if due is not None else UNSET),
        order=order if order is not None else UNSET,
    )
    with open_board() as backend:
        project = backend.update_project(project_id, patch)
    print(f"Updated project {project.id}: {project.name}")


@project_app.command
def delete(project_id: str) -> None:
    """Delete a project with all of its milestones and tasks."""
    from taskboard.cli import open_board

    with open_board() as backend:
        result = backend.delete_project(project_id)
    print(
        f"Deleted project {project_id} "
        f"({len(result.milestone_ids)} milestone(s), {len(result.task_ids)} task(s))"
    )


@project_app.command
def reorder(*project_ids: str) -> None:
    """Put projects in the given order. Every project must be listed."""
    from taskboard.cli import open_board

    with open_board() as backend:
        backend.reorder_projects(list(project_ids))
    print(f"Reordered {len(project_ids)} project(s)")


@project_app.command
def show(project_id: str) -> None:
    """Show one project with its milestones and tasks."""
    from taskboard.cli import open_board, render_project

    with open_board(save=False) as backend:
        view = backend.get_project(project_id)
    print("\n".join(render_project(view)))
