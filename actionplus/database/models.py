"""SQLAlchemy database models for ActionPlus."""

from datetime import datetime
import logging
from typing import Union, TypeVar, Type
import uuid
from sqlalchemy import Column, String, Integer, Float, Boolean, Date, DateTime, ForeignKey, Index

from actionplus.database.database import Base
from actionplus.models.task import TaskPriority
from actionplus.models.notification import NotificationType

logger = logging.getLogger(__name__)

T = TypeVar('T')


def enum_to_value(enum_obj: Union[str, T]) -> str:
    """Convert enum to string value (handles both enum and string).
    
    Args:
        enum_obj: Enum instance or string value
        
    Returns:
        String value of the enum, or the string itself if already a string
    """
    if hasattr(enum_obj, 'value'):
        return enum_obj.value
    return str(enum_obj)


def value_to_enum(value: str, enum_class: Type[T], default: T) -> T:
    """Convert string to enum with fallback to default.
    
    Args:
        value: String value to convert
        enum_class: Enum class to convert to
        default: Default enum value if conversion fails
        
    Returns:
        Enum instance, or default if conversion fails
    """
    if not value:
        return default
    try:
        return enum_class(value)
    except (ValueError, AttributeError):
        return default


class ProfileDB(Base):
    """Database model for Profile."""
    
    __tablename__ = "profiles"
    
    # Primary key (identity provider user ID)
    id = Column(String, primary_key=True)
    
    name = Column(String, nullable=False)
    bio = Column(String, nullable=True)
    goal = Column(String, nullable=True)
    avatar_url = Column(String, nullable=True)
    
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)
    
    def to_pydantic(self):
        """Convert database model to Pydantic model."""
        from actionplus.models.profile import Profile
        return Profile(
            id=self.id,
            name=self.name,
            bio=self.bio,
            goal=self.goal,
            avatar_url=self.avatar_url,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )


class TaskDB(Base):
    """Database model for Task."""
    
    __tablename__ = "tasks"
    
    # Primary key
    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    
    # User association
    user_id = Column(String, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    
    # Basic fields
    title = Column(String, nullable=False)
    description = Column(String, nullable=True)
    deadline = Column(Date, nullable=True, index=True)
    
    # Completion
    is_completed = Column(Boolean, nullable=False, default=False, index=True)
    completed_at = Column(DateTime, nullable=True)
    
    # Timestamps
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)
    
    # Roadmap placement ("Goal: Element > SubElement")
    group_path = Column(String, nullable=True, index=True)
    
    # Planner metadata
    priority = Column(String, nullable=True)
    estimated_hours = Column(Float, nullable=True)
    
    # Planner order within one roadmap import
    position = Column(Integer, nullable=False, default=0)
    
    def to_pydantic(self):
        """Convert database model to Pydantic model."""
        from actionplus.models.task import Task
        
        return Task(
            id=self.id,
            user_id=self.user_id,
            title=self.title,
            description=self.description,
            deadline=self.deadline,
            is_completed=bool(self.is_completed),
            completed_at=self.completed_at,
            created_at=self.created_at,
            updated_at=self.updated_at,
            group_path=self.group_path,
            priority=value_to_enum(self.priority, TaskPriority, None),
            estimated_hours=self.estimated_hours,
            position=self.position or 0,
        )
    
    @classmethod
    def from_pydantic(cls, task):
        """Create database model from Pydantic model."""
        return cls(
            id=task.id,
            user_id=task.user_id,
            title=task.title,
            description=task.description,
            deadline=task.deadline,
            is_completed=task.is_completed,
            completed_at=task.completed_at,
            created_at=task.created_at,
            updated_at=task.updated_at,
            group_path=task.group_path,
            priority=enum_to_value(task.priority) if task.priority else None,
            estimated_hours=task.estimated_hours,
            position=task.position,
        )


class NotificationDB(Base):
    """Database model for Notification."""
    
    __tablename__ = "notifications"
    __table_args__ = (
        # Serves the once-per-day deadline reminder check.
        Index("ix_notifications_dedupe", "user_id", "link_id", "type", "created_at"),
    )
    
    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    actor_id = Column(String, nullable=True)
    type = Column(String, nullable=False)
    title = Column(String, nullable=True)
    content = Column(String, nullable=True)
    link_id = Column(String, nullable=True)
    is_read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    
    def to_pydantic(self):
        """Convert database model to Pydantic model."""
        from actionplus.models.notification import Notification
        
        return Notification(
            id=self.id,
            user_id=self.user_id,
            actor_id=self.actor_id,
            type=self._notification_type(),
            title=self.title,
            content=self.content,
            link_id=self.link_id,
            is_read=bool(self.is_read),
            created_at=self.created_at,
        )
    
    def _notification_type(self) -> NotificationType:
        """Stored type as an enum; unknown values fall back to LIKE with a warning."""
        notification_type = value_to_enum(self.type, NotificationType, None)
        if notification_type is None:
            logger.warning(f"Notification {self.id} has unknown type {self.type!r}; showing it as a like")
            return NotificationType.LIKE
        return notification_type
    
    @classmethod
    def from_draft(cls, draft, created_at: datetime = None):
        """Create database model from a NotificationDraft."""
        return cls(
            id=str(uuid.uuid4()),
            user_id=draft.user_id,
            actor_id=draft.actor_id,
            type=enum_to_value(draft.type),
            title=draft.title,
            content=draft.content,
            link_id=draft.link_id,
            is_read=draft.is_read,
            created_at=created_at or datetime.utcnow(),
        )
