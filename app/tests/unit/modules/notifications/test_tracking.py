"""Unit tests for read receipts and open tracking."""

from datetime import datetime
from unittest.mock import MagicMock

import pytest

from modules.notifications.models import NotificationPriority, NotificationType
from modules.notifications.tracking import TRANSPARENT_PIXEL, mark_read, track_open
from tests.factories import make_notification


@pytest.mark.unit
class TestTrackOpen:
    def test_marks_matching_notification_read(self, store):
        record = store.create(
            make_notification(type=NotificationType.EMAIL, metadata={"trackingId": "t-1"})
        )

        updated = track_open(store, "t-1")

        assert updated.id == record.id
        stored = store.get(record.id)
        assert stored.read is True
        datetime.fromisoformat(stored.metadata["readAt"])

    def test_unknown_tracking_id_changes_nothing(self):
        store = MagicMock()
        store.find.return_value = []

        assert track_open(store, "unknown") is None
        store.update.assert_not_called()

    def test_already_read_is_not_updated_again(self, store):
        store.create(make_notification(read=True, metadata={"trackingId": "t-1"}))

        assert track_open(store, "t-1").read is True

    def test_pixel_is_a_gif(self):
        assert TRANSPARENT_PIXEL.startswith(b"GIF89a")


@pytest.mark.unit
class TestMarkRead:
    def test_marks_only_unread_of_user(self, store):
        store.create(make_notification(user_id="u-1"))
        store.create(make_notification(user_id="u-1", read=True))
        store.create(make_notification(user_id="u-2"))

        assert mark_read(store, "u-1") == 1
        assert mark_read(store, "u-1") == 0

    def test_priority_and_ids_narrow_the_update(self, store):
        critical = store.create(
            make_notification(priority=NotificationPriority.CRITICAL)
        )
        standard = store.create(make_notification())
        other = store.create(make_notification())

        assert mark_read(store, "u-1", priority=NotificationPriority.CRITICAL) == 1
        assert mark_read(store, "u-1", notification_ids=[standard.id]) == 1
        assert store.get(critical.id).read is True
        assert store.get(other.id).read is False
