"""Repository for Notification database operations."""

import logging
from datetime import datetime, timezone
from typing import List
from sqlalchemy.orm import Session
from sqlalchemy import desc

from actionplus.models.notification import Notification, NotificationDraft, NotificationType
from actionplus.models.constants import NOTIFICATION_LIST_LIMIT
from actionplus.database.models import NotificationDB, enum_to_value

logger = logging.getLogger(__name__)


def _as_utc_naive(value: datetime) -> datetime:
    """Timestamps are stored as naive UTC."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


class NotificationRepository:
    """Repository for Notification database operations."""
    
    def __init__(self, db: Session):
        self.db = db
    
    def exists_since(self, user_id: str, link_id: str, notification_type: NotificationType, since: datetime) -> bool:
        """Whether a (user, link, type) notification was created at or after `since`."""
        row = self.db.query(NotificationDB.id).filter(
            NotificationDB.user_id == user_id,
            NotificationDB.link_id == link_id,
            NotificationDB.type == enum_to_value(notification_type),
            NotificationDB.created_at >= _as_utc_naive(since),
        ).first()
        return row is not None
    
    def create_many(self, drafts: List[NotificationDraft]) -> List[Notification]:
        """Insert drafted notifications in one transaction."""
        if not drafts:
            return []
        try:
            now = datetime.utcnow()
            notifications_db = [NotificationDB.from_draft(draft, created_at=now) for draft in drafts]
            self.db.add_all(notifications_db)
            self.db.commit()
            logger.debug(f"Created {len(notifications_db)} notifications")
            return [n.to_pydantic() for n in notifications_db]
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to create {len(drafts)} notifications: {type(e).__name__}: {str(e)}")
            raise
    
    def list_recent(self, user_id: str, limit: int = NOTIFICATION_LIST_LIMIT) -> List[Notification]:
        """Get the most recent notifications for a user (newest first)."""
        rows = self.db.query(NotificationDB).filter(
            NotificationDB.user_id == user_id,
        ).order_by(desc(NotificationDB.created_at), NotificationDB.id).limit(limit).all()
        return [row.to_pydantic() for row in rows]
    
    def unread_count(self, user_id: str) -> int:
        """Number of unread notifications for a user."""
        return self.db.query(NotificationDB).filter(
            NotificationDB.user_id == user_id,
            NotificationDB.is_read.is_(False),
        ).count()
    
    def mark_all_read(self, user_id: str) -> int:
        """Mark every unread notification of a user as read.
        
        Returns:
            Number of notifications updated
        """
        try:
            affected = (
                self.db.query(NotificationDB)
                .filter(
                    NotificationDB.user_id == user_id,
                    NotificationDB.is_read.is_(False),
                )
                .update({NotificationDB.is_read: True}, synchronize_session=False)
            )
            self.db.commit()
            logger.debug(f"Marked {affected} notifications read for user {user_id}")
            return int(affected)
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to mark notifications read for user {user_id}: {type(e).__name__}: {str(e)}")
            raise
