"""CLI for the task board."""

import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Annotated, Literal

import structlog
from cyclopts import App, Parameter

from taskboard import snapshot
from taskboard.backends.memory import MemoryBackend
from taskboard.config import get_config
from taskboard.config_commands import config_app
from taskboard.milestone_commands import milestone_app
from taskboard.models import ProjectView, Task
from taskboard.project_commands import project_app
from taskboard.task_commands import task_app

logger = structlog.get_logger()

app = App(
    name="tb",
    help="Task Board - projects, milestones and tasks in order",
)

board_app = App(name="board", help="Show or reset the whole board")

app.command(project_app)
app.command(milestone_app)
app.command(task_app)
app.command(board_app)
app.command(config_app)


def configure_logging(log_level: str) -> None:
    """Configure structlog with the specified log level."""
    structlog.configure(wrapper_class=structlog.make_filtering_bound_logger(min_level=log_level.lower()))


@contextmanager
def open_board(save: bool = True) -> Iterator[MemoryBackend]:
    """Load the configured board snapshot and write it back if the block succeeds."""
    config = get_config()
    path = config.snapshot_path
    backend = snapshot.load(path, strict=config.strict_ordering)
    yield backend
    if save:
        snapshot.save(backend, path)


def format_task(task: Task) -> str:
    mark = "x" if task.completed else " "
    due = f" due {task.due_date.isoformat()}" if task.due_date else ""
    return f"[{mark}] {task.name} ({task.id}){due} - {task.status.value}"


def render_project(view: ProjectView) -> list[str]:
    """Render a project view as indented text lines."""
    project = view.project
    due = f" due {project.due_date.isoformat()}" if project.due_date else ""
    lines = [
        f"{project.order}. {project.name} ({project.id}){due}"
        f" - {view.completed_tasks}/{view.total_tasks} tasks ({view.progress:.0%})"
    ]
    if project.details:
        lines.append(f"   {project.details}")
    for milestone_view in view.milestones:
        milestone = milestone_view.milestone
        due = f" due {milestone.due_date.isoformat()}" if milestone.due_date else ""
        lines.append(f"   {milestone.order}. {milestone.name} ({milestone.id}){due} - {milestone.status.value}")
        for task in milestone_view.tasks:
            lines.append(f"      {task.order}. {format_task(task)}")
    return lines


@board_app.command
def show() -> None:
    """Show every project with its milestones and tasks."""
    with open_board(save=False) as backend:
        views = backend.list_projects()

    if not views:
        print("Board is empty")
        return

    for view in views:
        print("\n".join(render_project(view)))
        print()


@board_app.command
def clear() -> None:
    """Delete the board snapshot."""
    path = get_config().snapshot_path
    if snapshot.clear(path):
        print(f"Cleared board at {path}")
    else:
        print(f"No board at {path}")


@app.meta.default
def main(
    *tokens: Annotated[str, Parameter(show=False, allow_leading_hyphen=True)],
    log_level: Literal["debug", "info", "warning", "error", "critical"] = "critical",
) -> None:
    """Main entry point with global options."""
    configure_logging(log_level)
    try:
        app(tokens)
    except ValueError as e:
        # BoardError and config errors both derive from ValueError
        logger.error("Command failed", error=str(e))
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


def run() -> None:
    app.meta()


if __name__ == "__main__":
    run()
