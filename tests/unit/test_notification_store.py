"""
Unit tests for the notification feed
"""
import pytest

from maintenance_desk.models import NotificationType
from maintenance_desk.security.error_handler import NotFoundError, ValidationError


@pytest.mark.unit
def test_new_notifications_are_unread_and_first(notifications, clock):
    first = notifications.add({"title": "Ticket assigned", "message": "Sam will visit Tuesday"})
    clock.advance(minutes=1)
    second = notifications.add({"type": "warning", "title": "Urgent", "message": "Water leak in 3B"})

    assert notifications.notifications == (second, first)
    assert second.type == NotificationType.WARNING
    assert second.created_at == clock.now
    assert notifications.unread_count == 2


@pytest.mark.unit
def test_mark_as_read(notifications):
    first = notifications.add({"title": "A", "message": "a"})
    notifications.add({"title": "B", "message": "b"})

    read = notifications.mark_as_read(first.id)

    assert read.read is True
    assert notifications.unread_count == 1
    assert first.read is False


@pytest.mark.unit
def test_mark_unknown_notification(notifications):
    with pytest.raises(NotFoundError):
        notifications.mark_as_read("missing")


@pytest.mark.unit
def test_mark_all_and_clear(notifications):
    for index in range(3):
        notifications.add({"title": f"N{index}", "message": "m"})

    notifications.mark_all_as_read()
    assert notifications.unread_count == 0
    assert len(notifications) == 3

    notifications.clear()
    assert notifications.notifications == ()
    assert notifications.unread_count == 0


@pytest.mark.unit
def test_invalid_notifications_are_rejected(notifications):
    with pytest.raises(ValidationError):
        notifications.add({"title": " ", "message": "m"})
    with pytest.raises(ValidationError):
        notifications.add({"type": "critical", "title": "t", "message": "m"})

    assert len(notifications) == 0


@pytest.mark.unit
def test_snapshot_round_trip(notifications, clock):
    from maintenance_desk.store import NotificationStore

    notifications.add({"title": "A", "message": "a"})
    restored = NotificationStore(clock=clock)
    restored.load_snapshot(notifications.export_snapshot())

    assert restored.notifications[0].title == "A"
    assert restored.unread_count == 1
