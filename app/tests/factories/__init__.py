from tests.factories.notifications import (
    FailingStore,
    FakeDirectory,
    FakeMailer,
    FakePublisher,
    make_notification,
    make_recommendations,
    make_record,
    make_user,
    make_users,
)

__all__ = [
    "FailingStore",
    "FakeDirectory",
    "FakeMailer",
    "FakePublisher",
    "make_notification",
    "make_recommendations",
    "make_record",
    "make_user",
    "make_users",
]
