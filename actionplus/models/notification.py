"""Notification data models for ActionPlus."""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class NotificationType(str, Enum):
    """Notification type enumeration."""
    LIKE = "like"
    COMMENT = "comment"
    FOLLOW = "follow"
    DEADLINE_TODAY = "deadline_today"
    DEADLINE_OVERDUE = "deadline_overdue"
    FOLLOWED_POST = "followed_post"
    FOLLOWED_TASK_COMPLETE = "followed_task_complete"


class Notification(BaseModel):
    """Stored notification row."""
    
    id: str = Field(..., description="Unique notification identifier")
    user_id: str = Field(..., description="Recipient user ID")
    actor_id: Optional[str] = Field(None, description="User who triggered the notification")
    type: NotificationType = Field(..., description="Notification type")
    title: Optional[str] = Field(None, description="Short title (task title for deadline reminders)")
    content: Optional[str] = Field(None, description="Notification body")
    link_id: Optional[str] = Field(None, description="Linked entity ID (task or post)")
    is_read: bool = Field(False, description="Whether the recipient has seen it")
    created_at: datetime = Field(default_factory=datetime.utcnow, description="Creation timestamp")
    
    class Config:
        """Pydantic configuration."""
        use_enum_values = True


class NotificationDraft(BaseModel):
    """Notification to be inserted by the caller."""
    
    user_id: str
    actor_id: Optional[str] = None
    type: NotificationType
    title: str
    content: str
    link_id: str
    is_read: bool = False
    
    class Config:
        """Pydantic configuration."""
        use_enum_values = True
