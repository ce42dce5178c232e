import json
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

from infrastructure.operations import OperationResult
from integrations.users import User, UserDirectoryError
from modules.notifications.models import (
    Notification,
    NotificationPriority,
    NotificationType,
)


def make_user(
    user_id="u-1",
    email="user1@example.com",
    name="User One",
    preferences: Optional[Dict[str, Any]] = None,
    as_model=True,
):
    payload = {"_id": user_id, "email": email, "name": name}
    if preferences is not None:
        payload["preferences"] = preferences
    if as_model:
        return User.model_validate(payload)
    return payload


def make_users(n=3, prefix="", domain="example.com", as_model=True):
    return [
        make_user(
            user_id=f"{prefix}u-{i+1}",
            email=f"{prefix}user{i+1}@{domain}",
            name=f"User {i+1}",
            as_model=as_model,
        )
        for i in range(n)
    ]


def make_notification(
    user_id="u-1",
    type=NotificationType.ORDER_UPDATE,
    content=None,
    priority=NotificationPriority.STANDARD,
    email="user1@example.com",
    metadata=None,
    **kwargs,
) -> Notification:
    return Notification(
        user_id=user_id,
        type=type,
        content=content if content is not None else {"message": "hello"},
        priority=priority,
        email=email,
        metadata=metadata or {},
        **kwargs,
    )


def make_recommendations(n=2) -> List[Dict[str, Any]]:
    return [
        {
            "productId": f"p-{i+1}",
            "name": f"Product {i+1}",
            "category": "books",
            "price": 10 + i + 0.5,
        }
        for i in range(n)
    ]


def make_record(topic, value, partition=0, offset=0):
    """A bus record as returned by KafkaConsumer.poll."""
    if isinstance(value, (dict, list)):
        value = json.dumps(value).encode("utf-8")
    elif isinstance(value, str):
        value = value.encode("utf-8")
    return SimpleNamespace(
        topic=topic, partition=partition, offset=offset, value=value
    )


class FakeDirectory:
    """In-memory users service.

    ``failures`` maps a user id to the number of lookups that fail before
    the user resolves.
    """

    def __init__(self, users=None, failures=None):
        self.users = {u.id: u for u in (users or [])}
        self.failures = dict(failures or {})
        self.lookups: List[str] = []
        self.list_error: Optional[Exception] = None

    def add(self, user: User) -> User:
        self.users[user.id] = user
        return user

    def get_user(self, user_id: str) -> User:
        self.lookups.append(user_id)
        if self.failures.get(user_id, 0) > 0:
            self.failures[user_id] -= 1
            raise UserDirectoryError("users service unavailable")
        if user_id not in self.users:
            raise UserDirectoryError(f"User {user_id} not found in users service")
        return self.users[user_id]

    def list_users(self) -> List[User]:
        if self.list_error is not None:
            raise self.list_error
        return list(self.users.values())


class FakeMailer:
    """Records sent emails; returns queued results, success by default."""

    def __init__(self, results=None):
        self.sent = []
        self.results = list(results or [])

    def send(self, email):
        self.sent.append(email)
        if self.results:
            return self.results.pop(0)
        return OperationResult.success(data={"messageId": f"msg-{len(self.sent)}"})


class FakePublisher:
    def __init__(self, error: Optional[Exception] = None):
        self.published = []
        self.error = error
        self.closed = False

    def publish(self, topic, key, value):
        if self.error is not None:
            raise self.error
        self.published.append((topic, key, value))

    def close(self):
        self.closed = True


class FailingStore:
    """Wraps a store; ``create`` raises ``error`` for the first ``times`` calls."""

    def __init__(self, inner, times=1, error=None):
        self.inner = inner
        self.times = times
        self.error = error or RuntimeError("store unavailable")
        self.create_calls = 0

    def create(self, notification):
        self.create_calls += 1
        if self.create_calls <= self.times:
            raise self.error
        return self.inner.create(notification)

    def __getattr__(self, name):
        return getattr(self.inner, name)
