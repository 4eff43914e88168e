"""Tests for TaskRepository CRUD operations."""

import pytest
from datetime import date, datetime, timedelta
import uuid

from actionplus.database.repository import TaskRepository
from actionplus.models.task import Task, TaskPriority


class TestTaskRepository:
    """Test TaskRepository CRUD operations."""
    
    def test_create_task(self, task_repository, sample_task, test_user_id):
        """Test creating a task."""
        created = task_repository.create(sample_task)
        
        assert created.id == sample_task.id
        assert created.title == sample_task.title
        assert created.is_completed is False
        assert created.user_id == test_user_id
    
    def test_create_preserves_fields(self, task_repository, make_task):
        task = make_task(
            deadline=date(2026, 3, 10),
            group_path="Learn Spanish: Grammar > Verb Tenses",
            priority=TaskPriority.HIGH,
            estimated_hours=1.5,
        )
        created = task_repository.create(task)
        
        assert created.deadline == date(2026, 3, 10)
        assert created.group_path == "Learn Spanish: Grammar > Verb Tenses"
        assert created.priority == TaskPriority.HIGH
        assert created.estimated_hours == 1.5
    
    def test_get_task_by_id(self, task_repository, sample_task, test_user_id):
        """Test retrieving a task by ID."""
        created = task_repository.create(sample_task)
        retrieved = task_repository.get(test_user_id, created.id)
        
        assert retrieved is not None
        assert retrieved.id == created.id
    
    def test_get_nonexistent_task(self, task_repository, test_user_id):
        """Test retrieving a nonexistent task returns None."""
        assert task_repository.get(test_user_id, "nonexistent-id") is None
    
    def test_get_other_users_task(self, task_repository, sample_task):
        task_repository.create(sample_task)
        assert task_repository.get("someone-else", sample_task.id) is None
    
    def test_create_many(self, task_repository, make_task, test_user_id):
        tasks = [make_task(title=f"Task {i}") for i in range(3)]
        created = task_repository.create_many(tasks)
        
        assert [t.title for t in created] == ["Task 0", "Task 1", "Task 2"]
        assert len(task_repository.get_all(test_user_id)) == 3
    
    def test_create_many_empty(self, task_repository):
        assert task_repository.create_many([]) == []
    
    def test_get_all_sorted_by_creation_date(self, task_repository, make_task, test_user_id):
        """Test that get_all() returns tasks sorted by creation date (newest first)."""
        now = datetime.utcnow()
        task1 = make_task(created_at=now, title="Task 1")
        task2 = make_task(created_at=now - timedelta(minutes=1), title="Task 2")
        task3 = make_task(created_at=now - timedelta(minutes=2), title="Task 3")
        
        # Create in reverse order
        task_repository.create(task3)
        task_repository.create(task2)
        task_repository.create(task1)
        
        assert [t.title for t in task_repository.get_all(test_user_id)] == ["Task 1", "Task 2", "Task 3"]
    
    def test_get_all_keeps_batch_order_for_equal_timestamps(self, task_repository, make_task, test_user_id):
        now = datetime.utcnow()
        batch = [make_task(created_at=now, title=f"Step {i}", position=i) for i in range(6)]
        
        task_repository.create_many(list(reversed(batch)))
        
        assert [t.title for t in task_repository.get_all(test_user_id)] == [f"Step {i}" for i in range(6)]
    
    def test_get_completed(self, task_repository, make_task, test_user_id):
        done = task_repository.create(make_task(is_completed=True, completed_at=datetime.utcnow()))
        task_repository.create(make_task())
        
        assert [t.id for t in task_repository.get_completed(test_user_id)] == [done.id]
    
    def test_get_open_with_deadline(self, task_repository, make_task, test_user_id):
        dated = task_repository.create(make_task(deadline=date(2026, 3, 10)))
        task_repository.create(make_task(deadline=None))
        task_repository.create(make_task(deadline=date(2026, 3, 10), is_completed=True))
        
        assert [t.id for t in task_repository.get_open_with_deadline(test_user_id)] == [dated.id]
    
    def test_set_completed(self, task_repository, sample_task, test_user_id):
        task_repository.create(sample_task)
        
        done = task_repository.set_completed(test_user_id, sample_task.id, True)
        assert done.is_completed is True
        assert done.completed_at is not None
        
        reopened = task_repository.set_completed(test_user_id, sample_task.id, False)
        assert reopened.is_completed is False
        assert reopened.completed_at is None
    
    def test_set_completed_nonexistent(self, task_repository, test_user_id):
        with pytest.raises(ValueError):
            task_repository.set_completed(test_user_id, "missing", True)
    
    def test_update_task(self, task_repository, sample_task):
        created = task_repository.create(sample_task)
        updated = task_repository.update(
            created.copy(update={"title": "Renamed", "group_path": "Run: Basics"})
        )
        
        assert updated.title == "Renamed"
        assert updated.group_path == "Run: Basics"
    
    def test_update_nonexistent(self, task_repository, sample_task):
        with pytest.raises(ValueError):
            task_repository.update(sample_task)
    
    def test_delete_task(self, task_repository, sample_task, test_user_id):
        task_repository.create(sample_task)
        
        assert task_repository.delete(test_user_id, sample_task.id) is True
        assert task_repository.get(test_user_id, sample_task.id) is None
        assert task_repository.delete(test_user_id, sample_task.id) is False
    
    def test_get_group_matches_reconstructed_path(self, task_repository, make_task, test_user_id):
        a = task_repository.create(make_task(group_path="Run: Basics"))
        b = task_repository.create(make_task(group_path="Run: Basics > General"))
        task_repository.create(make_task(group_path="Run: Basics > Pace"))
        
        ids = {t.id for t in task_repository.get_group(test_user_id, "Run: Basics")}
        assert ids == {a.id, b.id}
    
    def test_delete_group(self, task_repository, make_task, test_user_id):
        task_repository.create(make_task(group_path="Run: Basics"))
        task_repository.create(make_task(group_path="Run: Basics"))
        kept = task_repository.create(make_task(group_path="Run"))
        
        assert task_repository.delete_group(test_user_id, "Run: Basics") == 2
        assert [t.id for t in task_repository.get_all(test_user_id)] == [kept.id]
        assert task_repository.delete_group(test_user_id, "Run: Basics") == 0
