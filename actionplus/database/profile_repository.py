"""Repository for Profile database operations."""

import logging
from datetime import datetime
from typing import Optional
from sqlalchemy.orm import Session

from actionplus.models.profile import Profile
from actionplus.database.models import ProfileDB

logger = logging.getLogger(__name__)

DEFAULT_PROFILE_NAME = "Guest"


class ProfileRepository:
    """Repository for Profile database operations."""
    
    def __init__(self, db: Session):
        self.db = db
    
    def get(self, user_id: str) -> Optional[Profile]:
        """Get profile by user ID."""
        profile_db = self.db.query(ProfileDB).filter(ProfileDB.id == user_id).first()
        return profile_db.to_pydantic() if profile_db else None
    
    def get_or_create(self, user_id: str, name: Optional[str] = None) -> Profile:
        """Get a profile, creating a placeholder one on first access.
        
        Args:
            user_id: Identity provider user ID
            name: Display name for a newly created profile
            
        Returns:
            Existing or newly created Profile
        """
        profile_db = self.db.query(ProfileDB).filter(ProfileDB.id == user_id).first()
        if profile_db:
            return profile_db.to_pydantic()
        
        now = datetime.utcnow()
        try:
            profile_db = ProfileDB(
                id=user_id,
                name=name or DEFAULT_PROFILE_NAME,
                created_at=now,
                updated_at=now,
            )
            self.db.add(profile_db)
            self.db.commit()
            self.db.refresh(profile_db)
            logger.debug(f"Created profile {user_id}")
            return profile_db.to_pydantic()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to create profile {user_id}: {type(e).__name__}: {str(e)}")
            raise
    
    def set_goal(self, user_id: str, goal: str) -> Profile:
        """Update the headline goal shown on the profile."""
        profile_db = self.db.query(ProfileDB).filter(ProfileDB.id == user_id).first()
        if not profile_db:
            raise ValueError(f"Profile {user_id} not found")
        
        try:
            profile_db.goal = goal
            profile_db.updated_at = datetime.utcnow()
            self.db.commit()
            self.db.refresh(profile_db)
            logger.debug(f"Updated goal for profile {user_id}")
            return profile_db.to_pydantic()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to update profile {user_id}: {type(e).__name__}: {str(e)}")
            raise
