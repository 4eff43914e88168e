"""Deadline classification and reminder deduplication for ActionPlus.

Open tasks with a deadline are classified at day granularity against "today":
past deadlines are overdue, today's deadlines are due today, later ones are
left alone. At most one reminder per (user, task, type) is drafted per
calendar day; the existing-notification check is delegated to the caller so
this module never talks to the store itself.
"""

import logging
from datetime import date, datetime, tzinfo
from enum import Enum
from typing import Callable, List, Optional, Union
from pydantic import BaseModel, Field

from actionplus.models.task import Task
from actionplus.models.notification import NotificationDraft, NotificationType
from actionplus.models.constants import (
    DEADLINE_TODAY_CONTENT,
    DEADLINE_OVERDUE_CONTENT,
    DEADLINE_SOON_DAYS,
)
from actionplus.engine.dates import as_date, days_between, resolve_timezone, start_of_day

logger = logging.getLogger(__name__)

# (task_id, notification type, since) -> whether a matching notification exists
ExistsLookup = Callable[[str, NotificationType, datetime], bool]

_CONTENT = {
    NotificationType.DEADLINE_TODAY: DEADLINE_TODAY_CONTENT,
    NotificationType.DEADLINE_OVERDUE: DEADLINE_OVERDUE_CONTENT,
}


class LookupFailure(BaseModel):
    """An existence check that raised; the task was skipped for this run."""
    
    task_id: str
    type: NotificationType
    error: str
    
    class Config:
        """Pydantic configuration."""
        use_enum_values = True


class DeadlineCheckResult(BaseModel):
    """Outcome of one deadline sweep."""
    
    drafts: List[NotificationDraft] = Field(default_factory=list)
    failures: List[LookupFailure] = Field(default_factory=list)


def classify_deadline(
    deadline: Union[date, datetime],
    today: date,
    tz: Optional[tzinfo] = None,
) -> Optional[NotificationType]:
    """Classify a deadline against today.
    
    Time-of-day is ignored: a deadline anywhere on today's calendar day is
    due today, never overdue.
    
    Returns:
        DEADLINE_OVERDUE, DEADLINE_TODAY, or None for future deadlines
    """
    deadline_day = as_date(deadline, tz)
    today = as_date(today, tz)
    if deadline_day < today:
        return NotificationType.DEADLINE_OVERDUE
    if deadline_day == today:
        return NotificationType.DEADLINE_TODAY
    return None


def check_deadlines(
    open_tasks: List[Task],
    exists_lookup: ExistsLookup,
    today: date,
    user_id: str,
    tz: Optional[tzinfo] = None,
) -> DeadlineCheckResult:
    """Draft deadline reminders that have not been sent today.
    
    Completed tasks and tasks without a deadline are skipped even if passed
    in. A lookup that raises is recorded as a failure and that task gets no
    draft (a missed reminder is preferred to a duplicate); the remaining tasks
    are still processed.
    
    Args:
        open_tasks: The user's open tasks
        exists_lookup: Returns True if a notification for (task_id, type)
            was created at or after `since`
        today: Reference day
        user_id: Recipient of the drafted notifications
        tz: Timezone defining the start of today
        
    Returns:
        DeadlineCheckResult with drafts in input order and any lookup failures
    """
    tz = tz or resolve_timezone()
    since = start_of_day(today, tz)
    result = DeadlineCheckResult()
    
    for task in open_tasks:
        if task.is_completed or task.deadline is None:
            continue
        
        notification_type = classify_deadline(task.deadline, today, tz)
        if notification_type is None:
            continue
        
        try:
            already_sent = exists_lookup(task.id, notification_type, since)
        except Exception as e:
            logger.warning(f"Notification lookup failed for task {task.id}: {type(e).__name__}: {str(e)}")
            result.failures.append(
                LookupFailure(task_id=task.id, type=notification_type, error=f"{type(e).__name__}: {str(e)}")
            )
            continue
        
        if already_sent:
            logger.debug(f"Skipping {notification_type.value} for task {task.id}: already sent today")
            continue
        
        result.drafts.append(
            NotificationDraft(
                user_id=user_id,
                type=notification_type,
                title=task.title,
                content=_CONTENT[notification_type],
                link_id=task.id,
            )
        )
    
    return result


class DeadlineStatus(str, Enum):
    """Display bucket for a task deadline."""
    NONE = "none"
    OVERDUE = "overdue"
    TODAY = "today"
    TOMORROW = "tomorrow"
    SOON = "soon"
    LATER = "later"


class DeadlineLabel(BaseModel):
    """Deadline display information for a task."""
    
    status: DeadlineStatus
    days_left: Optional[int] = None
    
    class Config:
        """Pydantic configuration."""
        use_enum_values = True


def deadline_label(
    deadline: Optional[Union[date, datetime]],
    today: date,
    tz: Optional[tzinfo] = None,
) -> DeadlineLabel:
    """Bucket a deadline for display ("today", "tomorrow", "N days left", ...)."""
    if deadline is None:
        return DeadlineLabel(status=DeadlineStatus.NONE)
    
    days_left = days_between(as_date(today, tz), as_date(deadline, tz))
    if days_left < 0:
        status = DeadlineStatus.OVERDUE
    elif days_left == 0:
        status = DeadlineStatus.TODAY
    elif days_left == 1:
        status = DeadlineStatus.TOMORROW
    elif days_left <= DEADLINE_SOON_DAYS:
        status = DeadlineStatus.SOON
    else:
        status = DeadlineStatus.LATER
    return DeadlineLabel(status=status, days_left=days_left)
