"""Task creation factory for ActionPlus.

This module centralizes task creation logic so that manually added tasks and
tasks generated from an AI roadmap get the same defaults.
"""

import uuid
from datetime import date, datetime
from typing import Optional

from actionplus.models.task import Task, TaskPriority


def normalize_group_path(group_path: Optional[str]) -> Optional[str]:
    """Strip surrounding whitespace; blank paths are stored as null."""
    if group_path is None:
        return None
    group_path = group_path.strip()
    return group_path or None


def create_task_base(
    user_id: str,
    title: str,
    description: Optional[str] = None,
    deadline: Optional[date] = None,
    group_path: Optional[str] = None,
    priority: Optional[TaskPriority] = None,
    estimated_hours: Optional[float] = None,
    now: Optional[datetime] = None,
    position: int = 0,
) -> Task:
    """Create an open task with defaults applied.
    
    Args:
        user_id: User ID who owns this task (required)
        title: Task title (required)
        description: Task description
        deadline: Task deadline (date-only)
        group_path: Encoded hierarchy path ("Goal: Element > SubElement")
        priority: Planner priority
        estimated_hours: Estimated effort in hours
        now: Creation timestamp (defaults to current UTC time)
        position: Order among tasks created in the same batch
        
    Returns:
        Task object with defaults applied
    """
    now = now or datetime.utcnow()
    
    return Task(
        id=str(uuid.uuid4()),
        user_id=user_id,
        title=title.strip(),
        description=description,
        deadline=deadline,
        is_completed=False,
        completed_at=None,
        created_at=now,
        updated_at=now,
        group_path=normalize_group_path(group_path),
        priority=priority,
        estimated_hours=estimated_hours,
        position=position,
    )
