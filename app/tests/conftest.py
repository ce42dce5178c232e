"""Shared fixtures for the notification service tests.

Collaborators that talk to the network (users service, mailer, Kafka) are
replaced by the in-memory fakes from ``tests.factories``.
"""

import pytest

from infrastructure.configuration import Settings
from infrastructure.resilience.retry import RetryPolicy
from modules.notifications.dead_letter import DeadLetterEscalator
from modules.notifications.dispatcher import EmailDispatcher
from modules.notifications.store import InMemoryNotificationStore
from tests.factories import FakeDirectory, FakeMailer, FakePublisher, make_user


@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
def store():
    return InMemoryNotificationStore()


@pytest.fixture
def user():
    return make_user()


@pytest.fixture
def directory(user):
    return FakeDirectory(users=[user])


@pytest.fixture
def mailer():
    return FakeMailer()


@pytest.fixture
def publisher():
    return FakePublisher()


@pytest.fixture
def escalator(publisher):
    return DeadLetterEscalator(publisher, topic="dead-letter-queue")


@pytest.fixture
def dispatcher(directory, mailer):
    return EmailDispatcher(
        directory=directory,
        mailer=mailer,
        sender="notifications@example.com",
        service_url="http://notifications.test",
    )


@pytest.fixture
def sleeps():
    """Records requested backoff delays instead of sleeping."""
    return []


@pytest.fixture
def fake_sleep(sleeps):
    return sleeps.append


@pytest.fixture
def fast_policy():
    return RetryPolicy(max_retries=2, base_delay_ms=100)


@pytest.fixture
def processor_deps(store, directory, dispatcher, escalator, fast_policy, fake_sleep):
    return dict(
        store=store,
        directory=directory,
        dispatcher=dispatcher,
        escalator=escalator,
        policy=fast_policy,
        sleep=fake_sleep,
    )


@pytest.fixture
def pipeline(settings, store, directory, mailer, publisher, fake_sleep):
    """A pipeline built from fakes; consumers and jobs are never started."""
    from unittest.mock import MagicMock

    from modules.notifications.context import build_pipeline_context

    return build_pipeline_context(
        settings,
        store=store,
        directory=directory,
        mailer=mailer,
        publisher=publisher,
        consumer_factory=lambda spec: MagicMock(),
        sleep=fake_sleep,
    )


@pytest.fixture
def app(pipeline):
    from api.dependencies.rate_limits import limiter
    from server.server import create_app

    limiter.reset()
    application = create_app()
    application.state.pipeline = pipeline
    return application


@pytest.fixture
def client(app):
    from fastapi.testclient import TestClient

    with TestClient(app) as test_client:
        yield test_client
