"""Daily streak calculation for ActionPlus.

A streak is the number of consecutive calendar days, ending today or
yesterday, on which the user completed at least one task.
"""

from datetime import date, datetime, tzinfo
from typing import Iterable, Optional, Set
from pydantic import BaseModel, Field

from actionplus.models.task import Task
from actionplus.engine.dates import local_date, previous_day, resolve_timezone, today_in


class StreakState(BaseModel):
    """Streak summary for one user."""
    
    current_streak_days: int = Field(0, ge=0, description="Consecutive days with a completion")
    last_completed_on: Optional[date] = Field(None, description="Most recent day with a completion")


def completion_timestamp(task: Task) -> datetime:
    """When a completed task counts as done (completed_at, else created_at)."""
    return task.completed_at or task.created_at


def completed_dates(tasks: Iterable[Task], tz: Optional[tzinfo] = None) -> Set[date]:
    """Distinct local days on which at least one task was completed.
    
    Open tasks are ignored, so callers may pass an unfiltered task list.
    """
    tz = tz or resolve_timezone()
    return {local_date(completion_timestamp(task), tz) for task in tasks if task.is_completed}


def compute_streak(
    tasks: Iterable[Task],
    today: Optional[date] = None,
    tz: Optional[tzinfo] = None,
) -> int:
    """Count the current daily streak.
    
    The streak is anchored at today if there is a completion today, else at
    yesterday if there is one yesterday; otherwise it is broken (0). From the
    anchor it counts back one day at a time until the first day without a
    completion. The anchor day itself counts, so a single completion today
    yields 1.
    
    Args:
        tasks: Tasks of one user (completed ones are selected internally)
        today: Reference day (defaults to the current day in `tz`)
        tz: Timezone for day truncation (defaults to the configured one)
        
    Returns:
        Streak length in days (>= 0)
    """
    tz = tz or resolve_timezone()
    days = completed_dates(tasks, tz)
    if not days:
        return 0
    
    today = today or today_in(tz)
    if today in days:
        check_day = today
    elif previous_day(today) in days:
        check_day = previous_day(today)
    else:
        return 0
    
    streak = 0
    while check_day in days:
        streak += 1
        check_day = previous_day(check_day)
    return streak


def streak_state(
    tasks: Iterable[Task],
    today: Optional[date] = None,
    tz: Optional[tzinfo] = None,
) -> StreakState:
    """Build a StreakState from a user's tasks."""
    tz = tz or resolve_timezone()
    tasks = list(tasks)
    days = completed_dates(tasks, tz)
    return StreakState(
        current_streak_days=compute_streak(tasks, today=today, tz=tz),
        last_completed_on=max(days) if days else None,
    )
