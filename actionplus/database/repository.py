"""Repository layer for database operations."""

import logging
from datetime import datetime
from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy import desc

from actionplus.models.task import Task
from actionplus.database.models import TaskDB, enum_to_value
from actionplus.engine.grouping import group_path_of

logger = logging.getLogger(__name__)


class TaskRepository:
    """Repository for Task database operations."""
    
    def __init__(self, db: Session):
        self.db = db
    
    def create(self, task: Task) -> Task:
        """Create a new task."""
        try:
            task_db = TaskDB.from_pydantic(task)
            self.db.add(task_db)
            self.db.commit()
            self.db.refresh(task_db)
            logger.debug(f"Created task {task.id}: {task.title[:50]}")
            return task_db.to_pydantic()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to create task {task.id}: {type(e).__name__}: {str(e)}")
            raise
    
    def create_many(self, tasks: List[Task]) -> List[Task]:
        """Create several tasks in one transaction (all or nothing)."""
        if not tasks:
            return []
        try:
            tasks_db = [TaskDB.from_pydantic(task) for task in tasks]
            self.db.add_all(tasks_db)
            self.db.commit()
            for task_db in tasks_db:
                self.db.refresh(task_db)
            logger.debug(f"Created {len(tasks_db)} tasks for user {tasks[0].user_id}")
            return [task_db.to_pydantic() for task_db in tasks_db]
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to create {len(tasks)} tasks: {type(e).__name__}: {str(e)}")
            raise
    
    def get(self, user_id: str, task_id: str) -> Optional[Task]:
        """Get task by ID for a specific user."""
        task_db = self.db.query(TaskDB).filter(
            TaskDB.id == task_id,
            TaskDB.user_id == user_id,
        ).first()
        return task_db.to_pydantic() if task_db else None
    
    def get_all(self, user_id: str) -> List[Task]:
        """Get all tasks for a user, newest first; one import keeps its roadmap order."""
        tasks_db = self.db.query(TaskDB).filter(
            TaskDB.user_id == user_id,
        ).order_by(desc(TaskDB.created_at), TaskDB.position, TaskDB.id).all()
        return [task_db.to_pydantic() for task_db in tasks_db]
    
    def get_completed(self, user_id: str) -> List[Task]:
        """Get completed tasks for a user (newest first)."""
        tasks_db = self.db.query(TaskDB).filter(
            TaskDB.user_id == user_id,
            TaskDB.is_completed.is_(True),
        ).order_by(desc(TaskDB.created_at), TaskDB.position, TaskDB.id).all()
        return [task_db.to_pydantic() for task_db in tasks_db]
    
    def get_open_with_deadline(self, user_id: str) -> List[Task]:
        """Get open tasks that have a deadline."""
        tasks_db = self.db.query(TaskDB).filter(
            TaskDB.user_id == user_id,
            TaskDB.is_completed.is_(False),
            TaskDB.deadline.isnot(None),
        ).order_by(TaskDB.created_at, TaskDB.position, TaskDB.id).all()
        return [task_db.to_pydantic() for task_db in tasks_db]
    
    def get_group(self, user_id: str, full_path: str) -> List[Task]:
        """Get the tasks whose reconstructed group path equals `full_path`.
        
        Matching happens on the reconstructed path, so rows stored with a
        non-canonical path (e.g. a trailing "> General") still match.
        """
        return [task for task in self.get_all(user_id) if group_path_of(task) == full_path]
    
    def set_completed(self, user_id: str, task_id: str, completed: bool) -> Task:
        """Mark a task completed or open."""
        task_db = self.db.query(TaskDB).filter(
            TaskDB.id == task_id,
            TaskDB.user_id == user_id,
        ).first()
        if not task_db:
            raise ValueError(f"Task {task_id} not found")
        
        now = datetime.utcnow()
        task_db.is_completed = completed
        task_db.completed_at = now if completed else None
        task_db.updated_at = now
        
        try:
            self.db.commit()
            self.db.refresh(task_db)
            logger.debug(f"Set task {task_id} completed={completed}")
            return task_db.to_pydantic()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to update task {task_id}: {type(e).__name__}: {str(e)}")
            raise
    
    def update(self, task: Task) -> Task:
        """Update an existing task (user_id must match task.user_id)."""
        task_db = self.db.query(TaskDB).filter(
            TaskDB.id == task.id,
            TaskDB.user_id == task.user_id,
        ).first()
        if not task_db:
            raise ValueError(f"Task {task.id} not found")
        
        task_db.title = task.title
        task_db.description = task.description
        task_db.deadline = task.deadline
        task_db.is_completed = task.is_completed
        task_db.completed_at = task.completed_at
        task_db.updated_at = task.updated_at
        task_db.group_path = task.group_path
        task_db.priority = enum_to_value(task.priority) if task.priority else None
        task_db.estimated_hours = task.estimated_hours
        
        try:
            self.db.commit()
            self.db.refresh(task_db)
            logger.debug(f"Updated task {task.id}: {task.title[:50]}")
            return task_db.to_pydantic()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to update task {task.id}: {type(e).__name__}: {str(e)}")
            raise
    
    def delete(self, user_id: str, task_id: str) -> bool:
        """Delete a task by ID for a specific user."""
        task_db = self.db.query(TaskDB).filter(
            TaskDB.id == task_id,
            TaskDB.user_id == user_id,
        ).first()
        if not task_db:
            return False
        
        try:
            self.db.delete(task_db)
            self.db.commit()
            logger.debug(f"Deleted task {task_id}")
            return True
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to delete task {task_id}: {type(e).__name__}: {str(e)}")
            raise
    
    def delete_group(self, user_id: str, full_path: str) -> int:
        """Delete every task of one roadmap group.
        
        Returns:
            Number of deleted tasks
        """
        task_ids = [task.id for task in self.get_group(user_id, full_path)]
        if not task_ids:
            return 0
        
        try:
            affected = (
                self.db.query(TaskDB)
                .filter(
                    TaskDB.user_id == user_id,
                    TaskDB.id.in_(task_ids),
                )
                .delete(synchronize_session=False)
            )
            self.db.commit()
            logger.debug(f"Deleted {affected} tasks in group '{full_path[:50]}' for user {user_id}")
            return int(affected)
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to delete group for user {user_id}: {type(e).__name__}: {str(e)}")
            raise
