"""Nested read views assembled from the flat entity store."""

from dataclasses import replace

from taskboard.models import MilestoneView, ProjectView
from taskboard.ordering import sorted_siblings
from taskboard.store import EntityStore


def build_milestone(store: EntityStore, milestone_id: str) -> MilestoneView:
    milestone = store.get_milestone(milestone_id)
    tasks = [replace(task) for task in sorted_siblings(store.milestone_tasks(milestone_id))]
    return MilestoneView(milestone=replace(milestone), tasks=tasks)


def build_project(store: EntityStore, project_id: str) -> ProjectView:
    """Build the view of one project, its milestones and their tasks.

    Each level is sorted on its own, so task order never depends on the order of
    the milestone that holds it. Records are copied so the view can be handed out
    freely.
    """
    project = store.get_project(project_id)
    milestones = [build_milestone(store, m.id) for m in sorted_siblings(store.project_milestones(project_id))]
    return ProjectView(project=replace(project), milestones=milestones)


def build_board(store: EntityStore) -> list[ProjectView]:
    """Build views of every project in board order."""
    return [build_project(store, project.id) for project in sorted_siblings(store.projects.values())]
