"""FastAPI web application for ActionPlus.

The routes here are the "caller" around the roadmap engine: they load task
and notification rows from the store, run the pure engine functions over
them, and write the results back.
"""

import logging
from datetime import date, datetime
from enum import Enum
from typing import List, Optional
from fastapi import Depends, FastAPI, HTTPException, Query
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from actionplus.database.database import get_db
from actionplus.database.repository import TaskRepository
from actionplus.database.notification_repository import NotificationRepository
from actionplus.database.profile_repository import ProfileRepository
from actionplus.models.task import Task, TaskPriority
from actionplus.models.hierarchy import GoalNode
from actionplus.models.notification import Notification
from actionplus.models.task_factory import create_task_base, normalize_group_path
from actionplus.models.constants import MARK_READ_DELAY_SECONDS
from actionplus.engine.dates import resolve_timezone, today_in
from actionplus.engine.grouping import build_hierarchy, filter_hierarchy, group_path_of, tasks_in_group
from actionplus.engine.streak import StreakState, streak_state
from actionplus.engine.completion import (
    GroupCompletionState,
    TaskNotFoundError,
    group_completion_state,
    toggle_task_completion,
)
from actionplus.engine.deadlines import LookupFailure, check_deadlines
from actionplus.engine.roadmap import RoadmapParseError, parse_roadmap_response, roadmap_to_tasks

logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="ActionPlus API",
    description="Goal roadmaps, task completion streaks and deadline reminders",
    version="0.1.0"
)


class RoadmapStatus(str, Enum):
    """Which tasks to include in the roadmap view."""
    TODO = "todo"
    DONE = "done"
    ALL = "all"


# Request models
class TaskCreateRequest(BaseModel):
    """Request body for creating a task."""
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    deadline: Optional[date] = None
    group_path: Optional[str] = None
    priority: Optional[TaskPriority] = None
    estimated_hours: Optional[float] = Field(None, ge=0.0)


class TaskUpdateRequest(BaseModel):
    """Request body for editing a task; only the fields sent are changed."""
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    deadline: Optional[date] = None
    group_path: Optional[str] = Field(None, description="New roadmap placement; blank moves the task to Uncategorized")
    priority: Optional[TaskPriority] = None
    estimated_hours: Optional[float] = Field(None, ge=0.0)


class RoadmapImportRequest(BaseModel):
    """Request body for importing a planner response."""
    response_text: str = Field(..., description="Raw planner output (JSON, optionally fenced)")
    deadline: Optional[date] = Field(None, description="Deadline applied to every generated task")


# Response models
class RoadmapResponse(BaseModel):
    """Response for the roadmap view."""
    goals: List[GoalNode]
    task_count: int


class ToggleResponse(BaseModel):
    """Response for a completion toggle."""
    task: Task
    group_path: str
    group: GroupCompletionState


class RoadmapImportResponse(BaseModel):
    """Response for a roadmap import."""
    goal: str
    created_count: int
    tasks: List[Task]


class DeadlineCheckResponse(BaseModel):
    """Response for a deadline reminder sweep."""
    created_count: int
    notifications: List[Notification]
    failures: List[LookupFailure]


class NotificationListResponse(BaseModel):
    """Response for the notification list."""
    notifications: List[Notification]
    unread_count: int
    mark_read_after_seconds: int = MARK_READ_DELAY_SECONDS


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy", "version": "0.1.0"}


@app.get("/users/{user_id}/roadmap", response_model=RoadmapResponse)
def get_roadmap(
    user_id: str,
    status: RoadmapStatus = Query(RoadmapStatus.ALL),
    db: Session = Depends(get_db),
):
    """Return the user's tasks as a goal → element → sub-element tree."""
    tasks = TaskRepository(db).get_all(user_id)
    goals = build_hierarchy(tasks)
    if status == RoadmapStatus.TODO:
        goals = filter_hierarchy(goals, completed=False)
    elif status == RoadmapStatus.DONE:
        goals = filter_hierarchy(goals, completed=True)
    return RoadmapResponse(goals=goals, task_count=sum(goal.total_count for goal in goals))


@app.post("/users/{user_id}/tasks", response_model=Task, status_code=201)
def create_task(user_id: str, request: TaskCreateRequest, db: Session = Depends(get_db)):
    """Create a task."""
    ProfileRepository(db).get_or_create(user_id)
    task = create_task_base(
        user_id=user_id,
        title=request.title,
        description=request.description,
        deadline=request.deadline,
        group_path=request.group_path,
        priority=request.priority,
        estimated_hours=request.estimated_hours,
    )
    try:
        return TaskRepository(db).create(task)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to create task: {str(e)}")


@app.post("/users/{user_id}/tasks/{task_id}/toggle", response_model=ToggleResponse)
def toggle_task(user_id: str, task_id: str, db: Session = Depends(get_db)):
    """Flip a task's completion state.
    
    The change is projected locally first, then written. If the write fails
    the projection is discarded and the error reported; the stored rows stay
    the source of truth.
    """
    repo = TaskRepository(db)
    snapshot = repo.get_all(user_id)
    try:
        projected = toggle_task_completion(snapshot, task_id)
    except TaskNotFoundError:
        raise HTTPException(status_code=404, detail="Task not found")
    
    target = next(task for task in projected if task.id == task_id)
    full_path = group_path_of(target)
    previous_group = tasks_in_group(snapshot, full_path)
    
    try:
        confirmed = repo.set_completed(user_id, task_id, target.is_completed)
    except Exception as e:
        logger.warning(f"Completion toggle for task {task_id} was not persisted")
        raise HTTPException(status_code=500, detail=f"Failed to update task: {str(e)}")
    
    current_group = [confirmed if task.id == task_id else task for task in previous_group]
    return ToggleResponse(
        task=confirmed,
        group_path=full_path,
        group=group_completion_state(current_group, previous_group),
    )


@app.patch("/users/{user_id}/tasks/{task_id}", response_model=Task)
def update_task(user_id: str, task_id: str, request: TaskUpdateRequest, db: Session = Depends(get_db)):
    """Edit a task's title, deadline, placement or planner metadata."""
    repo = TaskRepository(db)
    task = repo.get(user_id, task_id)
    if not task:
        raise HTTPException(status_code=404, detail="Task not found")
    
    updates = request.model_dump(exclude_unset=True)
    if "title" in updates:
        if updates["title"] is None or not updates["title"].strip():
            raise HTTPException(status_code=400, detail="Title must not be empty")
        updates["title"] = updates["title"].strip()
    if "group_path" in updates:
        updates["group_path"] = normalize_group_path(updates["group_path"])
    updates["updated_at"] = datetime.utcnow()
    
    try:
        return repo.update(task.model_copy(update=updates))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to update task: {str(e)}")


@app.delete("/users/{user_id}/tasks/{task_id}")
def delete_task(user_id: str, task_id: str, db: Session = Depends(get_db)):
    """Delete a task."""
    try:
        deleted = TaskRepository(db).delete(user_id, task_id)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to delete task: {str(e)}")
    if not deleted:
        raise HTTPException(status_code=404, detail="Task not found")
    return {"deleted": True}


@app.delete("/users/{user_id}/groups")
def delete_group(user_id: str, path: str = Query(..., min_length=1), db: Session = Depends(get_db)):
    """Delete every task of a roadmap group (identified by its reconstructed path)."""
    try:
        affected = TaskRepository(db).delete_group(user_id, path)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to delete group: {str(e)}")
    if affected == 0:
        raise HTTPException(status_code=404, detail="Group not found")
    return {"affected_count": affected}


@app.post("/users/{user_id}/roadmaps", response_model=RoadmapImportResponse, status_code=201)
def import_roadmap(user_id: str, request: RoadmapImportRequest, db: Session = Depends(get_db)):
    """Turn a planner response into tasks and set it as the profile goal."""
    try:
        roadmap = parse_roadmap_response(request.response_text)
    except RoadmapParseError as e:
        raise HTTPException(status_code=400, detail=str(e))
    
    tasks = roadmap_to_tasks(roadmap, user_id, deadline=request.deadline)
    if not tasks:
        raise HTTPException(status_code=400, detail="Roadmap has no elements")
    
    profiles = ProfileRepository(db)
    profiles.get_or_create(user_id)
    try:
        created = TaskRepository(db).create_many(tasks)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to save roadmap: {str(e)}")
    
    try:
        profiles.set_goal(user_id, roadmap.goal)
    except Exception as e:
        # Tasks are already committed; the import stands.
        logger.warning(f"Failed to update profile goal for user {user_id}: {str(e)}")
    
    return RoadmapImportResponse(goal=roadmap.goal, created_count=len(created), tasks=created)


@app.get("/users/{user_id}/streak", response_model=StreakState)
def get_streak(user_id: str, tz: Optional[str] = None, db: Session = Depends(get_db)):
    """Current daily completion streak."""
    tzinfo = resolve_timezone(tz)
    return streak_state(TaskRepository(db).get_completed(user_id), tz=tzinfo)


@app.post("/users/{user_id}/notifications/check-deadlines", response_model=DeadlineCheckResponse)
def check_deadline_notifications(user_id: str, tz: Optional[str] = None, db: Session = Depends(get_db)):
    """Create today's deadline reminders that have not been sent yet."""
    tzinfo = resolve_timezone(tz)
    notifications = NotificationRepository(db)
    open_tasks = TaskRepository(db).get_open_with_deadline(user_id)
    
    result = check_deadlines(
        open_tasks,
        lambda task_id, notification_type, since: notifications.exists_since(
            user_id, task_id, notification_type, since
        ),
        today=today_in(tzinfo),
        user_id=user_id,
        tz=tzinfo,
    )
    
    try:
        created = notifications.create_many(result.drafts)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to create notifications: {str(e)}")
    
    return DeadlineCheckResponse(
        created_count=len(created),
        notifications=created,
        failures=result.failures,
    )


@app.get("/users/{user_id}/notifications", response_model=NotificationListResponse)
def list_notifications(user_id: str, db: Session = Depends(get_db)):
    """Most recent notifications, newest first."""
    repo = NotificationRepository(db)
    return NotificationListResponse(
        notifications=repo.list_recent(user_id),
        unread_count=repo.unread_count(user_id),
    )


@app.post("/users/{user_id}/notifications/mark-read")
def mark_notifications_read(user_id: str, db: Session = Depends(get_db)):
    """Mark all of the user's notifications as read."""
    try:
        affected = NotificationRepository(db).mark_all_read(user_id)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to mark notifications read: {str(e)}")
    return {"affected_count": affected}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
