"""Roadmap hierarchy builder for ActionPlus.

Tasks carry their position in a roadmap as one encoded string,
`"Goal: Element > SubElement"`. This module parses that string into a
composite key, writes it back, and folds a flat task list into a
Goal → Element → SubElement tree.

Node order at every level is first-seen order of the input list; names are
matched exactly (no case folding). The builder is deterministic - same inputs
always produce the same tree.
"""

from typing import Dict, List, Optional

from actionplus.models.task import Task
from actionplus.models.hierarchy import GroupKey, GoalNode, ElementNode, SubElementNode
from actionplus.models.constants import (
    GOAL_SEPARATOR,
    ELEMENT_SEPARATOR,
    DEFAULT_GOAL_LABEL,
    DEFAULT_ELEMENT_LABEL,
    DEFAULT_SUB_ELEMENT_LABEL,
)


def parse_group_path(group_path: Optional[str]) -> GroupKey:
    """Parse an encoded group path into its three levels.
    
    Missing levels collapse to the default labels:
    - null/blank path -> ("Uncategorized", "Other", "General")
    - "Goal" -> ("Goal", "Other", "General")
    - "Goal: Element" -> ("Goal", "Element", "General")
    - "Goal: Element > Sub" -> ("Goal", "Element", "Sub")
    
    Only the first occurrence of each separator splits; anything after it
    stays part of the deeper level.
    
    Args:
        group_path: Encoded path (may be None)
        
    Returns:
        GroupKey for the path
    """
    if not group_path or not group_path.strip():
        return GroupKey(
            goal=DEFAULT_GOAL_LABEL,
            element=DEFAULT_ELEMENT_LABEL,
            sub_element=DEFAULT_SUB_ELEMENT_LABEL,
        )
    
    if GOAL_SEPARATOR not in group_path:
        return GroupKey(
            goal=group_path,
            element=DEFAULT_ELEMENT_LABEL,
            sub_element=DEFAULT_SUB_ELEMENT_LABEL,
        )
    
    goal, remainder = group_path.split(GOAL_SEPARATOR, 1)
    if ELEMENT_SEPARATOR in remainder:
        element, sub_element = remainder.split(ELEMENT_SEPARATOR, 1)
    else:
        element, sub_element = remainder, DEFAULT_SUB_ELEMENT_LABEL
    
    return GroupKey(goal=goal, element=element, sub_element=sub_element)


def format_group_path(key: GroupKey) -> str:
    """Write a composite key back to its encoded string form.
    
    Default trailing levels are omitted so that no default label leaks into
    the stored path: a key with the default sub-element yields
    "Goal: Element", and one with both defaults yields "Goal".
    """
    if key.sub_element != DEFAULT_SUB_ELEMENT_LABEL:
        return f"{key.goal}{GOAL_SEPARATOR}{key.element}{ELEMENT_SEPARATOR}{key.sub_element}"
    if key.element != DEFAULT_ELEMENT_LABEL:
        return f"{key.goal}{GOAL_SEPARATOR}{key.element}"
    return key.goal


def group_path_of(task: Task) -> str:
    """Reconstructed (canonical) group path of a task."""
    return format_group_path(parse_group_path(task.group_path))


def _tally(goals: List[GoalNode]) -> List[GoalNode]:
    """Fill in the task counts of every node, bottom-up."""
    for goal in goals:
        for element in goal.elements:
            for sub in element.sub_elements:
                sub.total_count = len(sub.tasks)
                sub.completed_count = sum(1 for task in sub.tasks if task.is_completed)
                sub.all_completed = sub.total_count > 0 and sub.completed_count == sub.total_count
            element.total_count = sum(sub.total_count for sub in element.sub_elements)
            element.completed_count = sum(sub.completed_count for sub in element.sub_elements)
            element.all_completed = element.total_count > 0 and element.completed_count == element.total_count
        goal.total_count = sum(element.total_count for element in goal.elements)
        goal.completed_count = sum(element.completed_count for element in goal.elements)
        goal.all_completed = goal.total_count > 0 and goal.completed_count == goal.total_count
    return goals


def build_hierarchy(tasks: List[Task]) -> List[GoalNode]:
    """Fold a flat task list into a Goal → Element → SubElement tree.
    
    Every task lands in exactly one sub-element node. Empty input yields an
    empty list.
    
    Args:
        tasks: Tasks in display order
        
    Returns:
        Goal nodes in first-seen order
    """
    goals: Dict[str, GoalNode] = {}
    elements: Dict[tuple, ElementNode] = {}
    sub_elements: Dict[GroupKey, SubElementNode] = {}
    
    for task in tasks:
        key = parse_group_path(task.group_path)
        
        goal_node = goals.get(key.goal)
        if goal_node is None:
            goal_node = GoalNode(name=key.goal)
            goals[key.goal] = goal_node
        
        element_node = elements.get((key.goal, key.element))
        if element_node is None:
            element_node = ElementNode(name=key.element)
            elements[(key.goal, key.element)] = element_node
            goal_node.elements.append(element_node)
        
        sub_node = sub_elements.get(key)
        if sub_node is None:
            sub_node = SubElementNode(name=key.sub_element, full_path=format_group_path(key))
            sub_elements[key] = sub_node
            element_node.sub_elements.append(sub_node)
        
        sub_node.tasks.append(task)
    
    return _tally(list(goals.values()))


def filter_hierarchy(goals: List[GoalNode], completed: bool) -> List[GoalNode]:
    """Keep only tasks with the given completion state.
    
    Nodes left without tasks are dropped; the input tree is not modified.
    """
    filtered: List[GoalNode] = []
    for goal in goals:
        kept_elements: List[ElementNode] = []
        for element in goal.elements:
            kept_subs = []
            for sub in element.sub_elements:
                tasks = [task for task in sub.tasks if task.is_completed == completed]
                if tasks:
                    kept_subs.append(SubElementNode(name=sub.name, full_path=sub.full_path, tasks=tasks))
            if kept_subs:
                kept_elements.append(ElementNode(name=element.name, sub_elements=kept_subs))
        if kept_elements:
            filtered.append(GoalNode(name=goal.name, elements=kept_elements))
    return _tally(filtered)


def tasks_in_group(tasks: List[Task], full_path: str) -> List[Task]:
    """Tasks whose reconstructed group path equals `full_path`."""
    return [task for task in tasks if group_path_of(task) == full_path]
