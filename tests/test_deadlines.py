"""Tests for deadline classification and reminder deduplication."""

import pytest
from datetime import date, datetime, timedelta, timezone

from actionplus.engine.deadlines import (
    DeadlineStatus,
    check_deadlines,
    classify_deadline,
    deadline_label,
)
from actionplus.models.notification import NotificationType


TODAY = date(2026, 3, 10)


class FakeNotificationStore:
    """In-memory stand-in for the notification table."""
    
    def __init__(self):
        self.rows = []  # (task_id, type, created_at)
        self.lookups = []
    
    def exists(self, task_id, notification_type, since):
        self.lookups.append((task_id, notification_type, since))
        return any(
            row_task == task_id and row_type == notification_type and created >= since
            for row_task, row_type, created in self.rows
        )
    
    def insert(self, drafts, created_at):
        for draft in drafts:
            self.rows.append((draft.link_id, NotificationType(draft.type), created_at))


class TestClassifyDeadline:
    """Test classify_deadline() day-granularity comparison."""
    
    def test_overdue(self):
        assert classify_deadline(TODAY - timedelta(days=1), TODAY) == NotificationType.DEADLINE_OVERDUE
    
    def test_today(self):
        assert classify_deadline(TODAY, TODAY) == NotificationType.DEADLINE_TODAY
    
    def test_future(self):
        assert classify_deadline(TODAY + timedelta(days=1), TODAY) is None
    
    @pytest.mark.parametrize("hour", [0, 9, 23])
    def test_same_day_any_time_is_today(self, hour, utc):
        deadline = datetime(2026, 3, 10, hour, 59, tzinfo=timezone.utc)
        late_now = datetime(2026, 3, 10, 23, 59, tzinfo=timezone.utc)
        
        assert classify_deadline(deadline, TODAY, utc) == NotificationType.DEADLINE_TODAY
        assert classify_deadline(deadline, late_now, utc) == NotificationType.DEADLINE_TODAY


class TestCheckDeadlines:
    """Test check_deadlines() drafting and deduplication."""
    
    def test_overdue_task_drafted_once(self, make_task, test_user_id, utc):
        task = make_task(title="Read chapter 3", deadline=TODAY - timedelta(days=2))
        store = FakeNotificationStore()
        
        first = check_deadlines([task], store.exists, TODAY, test_user_id, utc)
        assert len(first.drafts) == 1
        draft = first.drafts[0]
        assert draft.type == NotificationType.DEADLINE_OVERDUE
        assert draft.link_id == task.id
        assert draft.title == "Read chapter 3"
        assert draft.user_id == test_user_id
        assert draft.is_read is False
        
        store.insert(first.drafts, created_at=datetime(2026, 3, 10, 8, 0, tzinfo=timezone.utc))
        second = check_deadlines([task], store.exists, TODAY, test_user_id, utc)
        assert second.drafts == []
        assert second.failures == []
    
    def test_yesterdays_notification_does_not_suppress_today(self, make_task, test_user_id, utc):
        task = make_task(deadline=TODAY - timedelta(days=1))
        store = FakeNotificationStore()
        store.rows.append((task.id, NotificationType.DEADLINE_OVERDUE, datetime(2026, 3, 9, 23, 0, tzinfo=timezone.utc)))
        
        result = check_deadlines([task], store.exists, TODAY, test_user_id, utc)
        assert len(result.drafts) == 1
    
    def test_other_type_does_not_suppress(self, make_task, test_user_id, utc):
        """A 'due today' reminder sent earlier does not block the 'overdue' one."""
        task = make_task(deadline=TODAY - timedelta(days=1))
        store = FakeNotificationStore()
        store.rows.append((task.id, NotificationType.DEADLINE_TODAY, datetime(2026, 3, 10, 1, 0, tzinfo=timezone.utc)))
        
        result = check_deadlines([task], store.exists, TODAY, test_user_id, utc)
        assert [d.type for d in result.drafts] == [NotificationType.DEADLINE_OVERDUE]
    
    def test_lookup_window_starts_at_midnight(self, make_task, test_user_id, utc):
        task = make_task(deadline=TODAY)
        store = FakeNotificationStore()
        
        check_deadlines([task], store.exists, TODAY, test_user_id, utc)
        assert store.lookups == [(task.id, NotificationType.DEADLINE_TODAY, datetime(2026, 3, 10, tzinfo=utc))]
    
    def test_skips_future_completed_and_undated(self, make_task, test_user_id, utc):
        tasks = [
            make_task(deadline=TODAY + timedelta(days=3)),
            make_task(deadline=TODAY, is_completed=True),
            make_task(deadline=None),
        ]
        store = FakeNotificationStore()
        
        result = check_deadlines(tasks, store.exists, TODAY, test_user_id, utc)
        assert result.drafts == []
        assert store.lookups == []
    
    def test_drafts_keep_input_order(self, make_task, test_user_id, utc):
        tasks = [
            make_task(title="b", deadline=TODAY),
            make_task(title="a", deadline=TODAY - timedelta(days=5)),
            make_task(title="c", deadline=TODAY),
        ]
        result = check_deadlines(tasks, FakeNotificationStore().exists, TODAY, test_user_id, utc)
        assert [d.title for d in result.drafts] == ["b", "a", "c"]
    
    def test_lookup_failure_is_reported_and_processing_continues(self, make_task, test_user_id, utc):
        broken = make_task(title="broken", deadline=TODAY)
        healthy = make_task(title="healthy", deadline=TODAY)
        
        def lookup(task_id, notification_type, since):
            if task_id == broken.id:
                raise ConnectionError("store unavailable")
            return False
        
        result = check_deadlines([broken, healthy], lookup, TODAY, test_user_id, utc)
        assert [d.title for d in result.drafts] == ["healthy"]
        assert len(result.failures) == 1
        failure = result.failures[0]
        assert failure.task_id == broken.id
        assert failure.type == NotificationType.DEADLINE_TODAY
        assert "store unavailable" in failure.error
    
    def test_empty_input(self, test_user_id, utc):
        result = check_deadlines([], FakeNotificationStore().exists, TODAY, test_user_id, utc)
        assert result.drafts == []
        assert result.failures == []


class TestDeadlineLabel:
    """Test deadline_label() display buckets."""
    
    @pytest.mark.parametrize("offset,status", [
        (-1, DeadlineStatus.OVERDUE),
        (0, DeadlineStatus.TODAY),
        (1, DeadlineStatus.TOMORROW),
        (2, DeadlineStatus.SOON),
        (3, DeadlineStatus.SOON),
        (4, DeadlineStatus.LATER),
    ])
    def test_buckets(self, offset, status):
        label = deadline_label(TODAY + timedelta(days=offset), TODAY)
        assert label.status == status
        assert label.days_left == offset
    
    def test_no_deadline(self):
        label = deadline_label(None, TODAY)
        assert label.status == DeadlineStatus.NONE
        assert label.days_left is None
