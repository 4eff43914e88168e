"""Roadmap/task hierarchy engine for ActionPlus."""

from actionplus.engine.grouping import (
    parse_group_path,
    format_group_path,
    build_hierarchy,
    filter_hierarchy,
    tasks_in_group,
)
from actionplus.engine.streak import compute_streak, streak_state, StreakState
from actionplus.engine.completion import (
    group_completion_state,
    toggle_task_completion,
    GroupCompletionState,
    TaskNotFoundError,
)
from actionplus.engine.deadlines import (
    check_deadlines,
    classify_deadline,
    deadline_label,
    DeadlineCheckResult,
)
from actionplus.engine.roadmap import parse_roadmap_response, roadmap_to_tasks, RoadmapParseError

__all__ = [
    "parse_group_path",
    "format_group_path",
    "build_hierarchy",
    "filter_hierarchy",
    "tasks_in_group",
    "compute_streak",
    "streak_state",
    "StreakState",
    "group_completion_state",
    "toggle_task_completion",
    "GroupCompletionState",
    "TaskNotFoundError",
    "check_deadlines",
    "classify_deadline",
    "deadline_label",
    "DeadlineCheckResult",
    "parse_roadmap_response",
    "roadmap_to_tasks",
    "RoadmapParseError",
]
