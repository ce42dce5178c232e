"""Unit tests for the in-memory notification store."""

from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest

from modules.notifications.models import (
    NotificationPriority,
    NotificationType,
    NotificationUpdate,
)
from modules.notifications.store import (
    InMemoryNotificationStore,
    NotificationFilter,
    NotificationNotFoundError,
)
from tests.factories import make_notification


def _ticking_clock(start=datetime(2024, 1, 1, tzinfo=timezone.utc)):
    """utc_now replacement returning strictly increasing timestamps."""
    state = {"now": start}

    def now():
        state["now"] = state["now"] + timedelta(seconds=1)
        return state["now"]

    return now


@pytest.fixture
def store():
    with patch("modules.notifications.store.utc_now", side_effect=_ticking_clock()):
        yield InMemoryNotificationStore()


@pytest.mark.unit
class TestInMemoryNotificationStore:
    def test_create_assigns_id_and_created_at(self, store):
        record = store.create(make_notification())

        assert record.id
        assert record.created_at is not None
        assert store.get(record.id) == record

    def test_records_are_copies(self, store):
        record = store.create(make_notification(metadata={"a": 1}))
        record.metadata["a"] = 2

        assert store.get(record.id).metadata == {"a": 1}

    def test_get_unknown_returns_none(self, store):
        assert store.get("missing") is None

    def test_find_filters_and_orders(self, store):
        first = store.create(make_notification(user_id="u-1"))
        second = store.create(
            make_notification(user_id="u-1", priority=NotificationPriority.CRITICAL)
        )
        store.create(make_notification(user_id="u-2"))

        newest = store.find(NotificationFilter(user_id="u-1"), newest_first=True)
        critical = store.find(
            NotificationFilter(user_id="u-1", priority=NotificationPriority.CRITICAL)
        )

        assert [n.id for n in newest] == [second.id, first.id]
        assert [n.id for n in critical] == [second.id]

    def test_find_paginates(self, store):
        ids = [store.create(make_notification()).id for _ in range(5)]

        page = store.find(NotificationFilter(), limit=2, offset=2)

        assert [n.id for n in page] == ids[2:4]
        assert store.count(NotificationFilter()) == 5

    def test_unsent_and_tracking_filters(self, store):
        sent = store.create(
            make_notification(
                type=NotificationType.RECOMMENDATION,
                sent_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
            )
        )
        pending = store.create(make_notification(type=NotificationType.RECOMMENDATION))
        tracked = store.create(make_notification(metadata={"trackingId": "t-1"}))

        unsent = store.find(
            NotificationFilter(type=NotificationType.RECOMMENDATION, unsent_only=True)
        )

        assert [n.id for n in unsent] == [pending.id]
        assert sent.id not in [n.id for n in unsent]
        assert store.find(NotificationFilter(tracking_id="t-1"))[0].id == tracked.id

    def test_ids_filter(self, store):
        a = store.create(make_notification())
        store.create(make_notification())

        assert [n.id for n in store.find(NotificationFilter(ids=[a.id]))] == [a.id]

    def test_update_applies_changes(self, store):
        record = store.create(make_notification())

        updated = store.update(
            record.id, NotificationUpdate(read=True, metadata={"readAt": "now"})
        )

        assert updated.read is True
        assert store.get(record.id).metadata["readAt"] == "now"

    def test_update_unknown_raises(self, store):
        with pytest.raises(NotificationNotFoundError):
            store.update("missing", NotificationUpdate(read=True))

    def test_clear(self, store):
        store.create(make_notification())
        store.clear()

        assert store.count(NotificationFilter()) == 0
