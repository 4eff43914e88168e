"""Roadmap hierarchy projection models.

These are rebuilt from task rows on every read and never persisted. The
counts are filled in by the builder so that they serialize with the tree.
"""

from typing import List
from pydantic import BaseModel, Field

from actionplus.models.task import Task


class GroupKey(BaseModel):
    """Composite goal / element / sub-element key of a task."""
    
    goal: str
    element: str
    sub_element: str
    
    class Config:
        """Pydantic configuration."""
        frozen = True


class SubElementNode(BaseModel):
    """Leaf grouping level; directly holds tasks."""
    
    name: str
    full_path: str = Field(..., description="Reconstructed group path used to target the original rows")
    tasks: List[Task] = Field(default_factory=list)
    total_count: int = Field(0, description="Number of tasks in this node")
    completed_count: int = Field(0, description="Number of completed tasks in this node")
    all_completed: bool = Field(False, description="True when the node has tasks and all are completed")


class ElementNode(BaseModel):
    """Second grouping level."""
    
    name: str
    sub_elements: List[SubElementNode] = Field(default_factory=list)
    total_count: int = 0
    completed_count: int = 0
    all_completed: bool = False


class GoalNode(BaseModel):
    """Top grouping level."""
    
    name: str
    elements: List[ElementNode] = Field(default_factory=list)
    total_count: int = 0
    completed_count: int = 0
    all_completed: bool = False
