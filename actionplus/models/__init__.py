"""Data models for ActionPlus."""

from actionplus.models.task import Task, TaskPriority
from actionplus.models.hierarchy import GroupKey, GoalNode, ElementNode, SubElementNode
from actionplus.models.notification import Notification, NotificationDraft, NotificationType
from actionplus.models.profile import Profile

__all__ = [
    "Task",
    "TaskPriority",
    "GroupKey",
    "GoalNode",
    "ElementNode",
    "SubElementNode",
    "Notification",
    "NotificationDraft",
    "NotificationType",
    "Profile",
]
