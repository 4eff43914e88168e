"""Task data model for ActionPlus."""

from datetime import date, datetime
from typing import Optional
from enum import Enum
from pydantic import BaseModel, Field


class TaskPriority(str, Enum):
    """Task priority enumeration (as produced by the roadmap planner)."""
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class Task(BaseModel):
    """Canonical Task model."""
    
    id: str = Field(..., description="Unique task identifier (UUID v4)")
    user_id: str = Field(..., description="User ID who owns this task")
    title: str = Field(..., description="Task title")
    description: Optional[str] = Field(None, description="Task description")
    deadline: Optional[date] = Field(
        None,
        description="Task deadline (date-only; compared at day granularity)",
    )
    is_completed: bool = Field(False, description="Whether the task is completed")
    completed_at: Optional[datetime] = Field(
        None,
        description="Completion timestamp (falls back to created_at when absent)",
    )
    created_at: datetime = Field(..., description="Task creation timestamp")
    updated_at: datetime = Field(..., description="Task last update timestamp")
    group_path: Optional[str] = Field(
        None,
        description="Encoded hierarchy path, e.g. 'Goal: Element > SubElement'",
    )
    priority: Optional[TaskPriority] = Field(None, description="Planner priority")
    estimated_hours: Optional[float] = Field(None, ge=0.0, description="Estimated effort in hours")
    position: int = Field(
        0,
        ge=0,
        description="Order within one roadmap import; breaks ties between equal created_at",
    )
    
    class Config:
        """Pydantic configuration."""
        use_enum_values = True
