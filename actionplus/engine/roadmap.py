"""AI roadmap import for ActionPlus.

The planner returns a goal broken down into elements and sub-elements:

    {"goal": "...", "children": [{"name": "...", "children": [{"name": "..."}]}]}

This module validates that response and turns each leaf into a task whose
group path places it in the roadmap hierarchy.
"""

import json
import logging
import re
from datetime import date, datetime
from typing import List, Optional
from pydantic import BaseModel, Field, ValidationError

from actionplus.models.task import Task
from actionplus.models.hierarchy import GroupKey
from actionplus.models.task_factory import create_task_base
from actionplus.models.constants import DEFAULT_SUB_ELEMENT_LABEL
from actionplus.engine.grouping import format_group_path

logger = logging.getLogger(__name__)

_CODE_FENCE = re.compile(r"```(?:json)?", re.IGNORECASE)


class RoadmapParseError(ValueError):
    """Raised when an AI roadmap response cannot be used."""


class RoadmapLeaf(BaseModel):
    name: str = Field(..., min_length=1)


class RoadmapElement(BaseModel):
    name: str = Field(..., min_length=1)
    children: List[RoadmapLeaf] = Field(default_factory=list)


class Roadmap(BaseModel):
    """Goal decomposition produced by the planner."""
    
    goal: str = Field(..., min_length=1)
    children: List[RoadmapElement] = Field(default_factory=list)


def parse_roadmap_response(text: str) -> Roadmap:
    """Parse a planner response, tolerating Markdown code fences.
    
    Args:
        text: Raw model output
        
    Returns:
        Validated Roadmap
        
    Raises:
        RoadmapParseError: If the text is not JSON or not roadmap-shaped
    """
    cleaned = _CODE_FENCE.sub("", text or "").strip()
    if not cleaned:
        raise RoadmapParseError("Empty roadmap response")
    
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        logger.warning(f"Roadmap response is not valid JSON: {str(e)}")
        raise RoadmapParseError(f"Invalid JSON: {str(e)}") from e
    
    if not isinstance(data, dict):
        raise RoadmapParseError("Roadmap must be a JSON object")
    
    try:
        return Roadmap(**data)
    except ValidationError as e:
        logger.warning(f"Roadmap response has unexpected shape: {str(e)}")
        raise RoadmapParseError(f"Invalid roadmap: {str(e)}") from e


def roadmap_to_tasks(
    roadmap: Roadmap,
    user_id: str,
    deadline: Optional[date] = None,
    now: Optional[datetime] = None,
) -> List[Task]:
    """Create one open task per roadmap leaf.
    
    Elements without children become a single task grouped under the element
    itself. Every task of one import shares `now`, so each gets its roadmap
    position; readers use it to keep the planner order.
    """
    now = now or datetime.utcnow()
    goal = roadmap.goal.strip()
    tasks: List[Task] = []
    
    for element in roadmap.children:
        element_name = element.name.strip()
        leaves = [leaf.name.strip() for leaf in element.children] or [None]
        for leaf_name in leaves:
            key = GroupKey(
                goal=goal,
                element=element_name,
                sub_element=leaf_name or DEFAULT_SUB_ELEMENT_LABEL,
            )
            tasks.append(
                create_task_base(
                    user_id=user_id,
                    title=leaf_name or element_name,
                    deadline=deadline,
                    group_path=format_group_path(key),
                    now=now,
                    position=len(tasks),
                )
            )
    
    logger.debug(f"Roadmap '{goal[:50]}' expanded into {len(tasks)} tasks")
    return tasks
