"""Profile data model for ActionPlus."""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class Profile(BaseModel):
    """Public profile of an ActionPlus user."""
    
    id: str = Field(..., description="User ID issued by the identity provider")
    name: str = Field(..., description="Display name")
    bio: Optional[str] = Field(None, description="Short bio")
    goal: Optional[str] = Field(None, description="Current headline goal")
    avatar_url: Optional[str] = Field(None, description="Avatar image URL")
    created_at: datetime = Field(..., description="Profile creation timestamp")
    updated_at: datetime = Field(..., description="Profile last update timestamp")
