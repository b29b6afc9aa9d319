"""Cascading deletion of projects and milestones."""

import structlog

from taskboard.models import CascadeResult
from taskboard.store import EntityStore

logger = structlog.get_logger()


class CascadeCoordinator:
    """Removes a project or milestone together with everything beneath it.

    The whole set of descendants is collected before anything is removed, so a
    missing id fails the delete with the store untouched. Removal then goes
    bottom-up (tasks, milestones, the target) and cannot leave a child whose
    parent is gone.
    """

    def __init__(self, store: EntityStore) -> None:
        self.store = store

    def plan_project(self, project_id: str) -> CascadeResult:
        self.store.get_project(project_id)
        plan = CascadeResult(project_ids=[project_id])
        for milestone in self.store.project_milestones(project_id):
            plan.milestone_ids.append(milestone.id)
            plan.task_ids.extend(task.id for task in self.store.milestone_tasks(milestone.id))
        return plan

    def plan_milestone(self, milestone_id: str) -> CascadeResult:
        self.store.get_milestone(milestone_id)
        plan = CascadeResult(milestone_ids=[milestone_id])
        plan.task_ids.extend(task.id for task in self.store.milestone_tasks(milestone_id))
        return plan

    def delete_project(self, project_id: str) -> CascadeResult:
        plan = self.plan_project(project_id)
        self._apply(plan)
        logger.info(
            "Project deleted with descendants",
            project_id=project_id,
            milestones=len(plan.milestone_ids),
            tasks=len(plan.task_ids),
        )
        return plan

    def delete_milestone(self, milestone_id: str) -> CascadeResult:
        plan = self.plan_milestone(milestone_id)
        self._apply(plan)
        logger.info("Milestone deleted with descendants", milestone_id=milestone_id, tasks=len(plan.task_ids))
        return plan

    def _apply(self, plan: CascadeResult) -> None:
        for task_id in plan.task_ids:
            self.store.remove_task(task_id)
        for milestone_id in plan.milestone_ids:
            self.store.remove_milestone(milestone_id)
        for project_id in plan.project_ids:
            self.store.remove_project(project_id)
