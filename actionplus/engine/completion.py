"""Group completion tracking for ActionPlus.

A roadmap group (one sub-element, keyed by its reconstructed path) becomes
"all completed" when every task in it is done. The transition is recomputed
from task state on every call; nothing is remembered between calls, so
reopening the last task and completing it again fires the transition again.
Celebration timers and archival are up to the caller.
"""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel

from actionplus.models.task import Task


class TaskNotFoundError(LookupError):
    """Raised when a task id is not part of the given task list."""


class GroupCompletionState(BaseModel):
    """Completion state of one group after a change."""
    
    all_completed: bool
    just_completed: bool


def _all_completed(tasks: List[Task]) -> bool:
    return len(tasks) > 0 and all(task.is_completed for task in tasks)


def group_completion_state(
    tasks_in_group: List[Task],
    previous_tasks: Optional[List[Task]] = None,
) -> GroupCompletionState:
    """Compute whether a group is (and just became) fully completed.
    
    Args:
        tasks_in_group: Current tasks of the group
        previous_tasks: Tasks of the group before the triggering change;
            None means no prior state is known
        
    Returns:
        GroupCompletionState. An empty group is never completed.
    """
    all_completed = _all_completed(tasks_in_group)
    was_completed = _all_completed(previous_tasks) if previous_tasks is not None else False
    return GroupCompletionState(
        all_completed=all_completed,
        just_completed=all_completed and not was_completed,
    )


def set_task_completion(task: Task, completed: bool, now: Optional[datetime] = None) -> Task:
    """Return a copy of `task` with its completion state set."""
    now = now or datetime.utcnow()
    return task.model_copy(update={
        "is_completed": completed,
        "completed_at": now if completed else None,
        "updated_at": now,
    })


def toggle_task_completion(tasks: List[Task], task_id: str, now: Optional[datetime] = None) -> List[Task]:
    """Flip one task's completion state in a local projection.
    
    This is the tentative half of an optimistic update: the caller applies it,
    writes the change to the store, and rebuilds from the last confirmed rows
    if the write fails. The input list is not modified.
    
    Raises:
        TaskNotFoundError: If no task in `tasks` has `task_id`
    """
    if not any(task.id == task_id for task in tasks):
        raise TaskNotFoundError(f"Task {task_id} not found")
    
    return [
        set_task_completion(task, not task.is_completed, now) if task.id == task_id else task
        for task in tasks
    ]
