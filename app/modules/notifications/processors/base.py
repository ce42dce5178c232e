"""Shared event processor machinery.

Every processor walks the same states::

    RECEIVED -> VALIDATING -> ENRICHING -> PERSISTING -> DISPATCHING -> DONE
                                  ^                                    |
                                  +------------- RETRY(n) <------------+
                                                    |
                                              DEAD_LETTERED

Validation failures are not retried. Any other failure is retried under the
family's RetryPolicy; once the policy is exhausted the message is dead
lettered exactly once, here, and the consumer group is told not to escalate
it again.
"""

import time
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from infrastructure.logging import get_module_logger
from infrastructure.resilience.retry import (
    RetryAttempt,
    RetryExhaustedError,
    RetryPolicy,
    run_with_retry,
)
from integrations.users import User, UserDirectoryClient
from modules.notifications.dead_letter import DeadLetterEscalator
from modules.notifications.dispatcher import (
    EmailDispatchError,
    EmailDispatcher,
    mark_dispatched,
)
from modules.notifications.models import MessageContext, Notification
from modules.notifications.store import NotificationStore

logger = get_module_logger()


class ProcessingState(Enum):
    RECEIVED = "received"
    VALIDATING = "validating"
    ENRICHING = "enriching"
    PERSISTING = "persisting"
    DISPATCHING = "dispatching"
    DONE = "done"
    RETRY = "retry"
    DEAD_LETTERED = "dead_lettered"


class ProcessingOutcome(Enum):
    """Result of processing one event.

    Values:
        HANDLED: Notification durably recorded
        SKIPPED: Nothing to record because the user opted out
        INVALID: Event failed validation, not retried, not escalated yet
        DEAD_LETTERED: Retries exhausted and the message already escalated
    """

    HANDLED = "handled"
    SKIPPED = "skipped"
    INVALID = "invalid"
    DEAD_LETTERED = "dead_lettered"

    @property
    def succeeded(self) -> bool:
        return self in (ProcessingOutcome.HANDLED, ProcessingOutcome.SKIPPED)


class EventValidationError(Exception):
    """Raised when an event is missing required fields or is malformed.

    Attributes:
        errors: Human readable validation failures
    """

    def __init__(self, errors: List[str]):
        super().__init__("; ".join(errors))
        self.errors = errors


def require_fields(event: Dict[str, Any], *fields: str) -> None:
    """Raise EventValidationError listing every missing or empty field."""
    missing = [f"Missing required field: {f}" for f in fields if not event.get(f)]
    if missing:
        raise EventValidationError(missing)


def require_objects(event: Dict[str, Any], *fields: str) -> None:
    """Raise EventValidationError for optional fields present but not objects."""
    malformed = [
        f"Field must be an object: {f}"
        for f in fields
        if event.get(f) is not None and not isinstance(event[f], dict)
    ]
    if malformed:
        raise EventValidationError(malformed)


class EventProcessor:
    """Base class for the per family processors.

    Subclasses set ``family`` and implement ``validate`` and ``execute``.

    Args:
        store: Notification store
        directory: Users service client
        dispatcher: Email dispatcher
        escalator: Dead letter escalator
        policy: Retry policy for this family
        sleep: Backoff sleep, injectable for tests
    """

    family: str = "event"

    def __init__(
        self,
        store: NotificationStore,
        directory: UserDirectoryClient,
        dispatcher: EmailDispatcher,
        escalator: DeadLetterEscalator,
        policy: RetryPolicy,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.store = store
        self.directory = directory
        self.dispatcher = dispatcher
        self.escalator = escalator
        self.policy = policy
        self.sleep = sleep
        self.log = logger.bind(processor=self.family)

    def validate(self, event: Dict[str, Any]) -> None:
        raise NotImplementedError

    def execute(
        self, event: Dict[str, Any], context: MessageContext, attempt: RetryAttempt
    ) -> ProcessingOutcome:
        raise NotImplementedError

    def process(self, event: Dict[str, Any], context: MessageContext) -> bool:
        """Process one event.

        Returns:
            True if a notification was recorded or correctly skipped
        """
        return self.handle(event, context).succeeded

    def handle(self, event: Dict[str, Any], context: MessageContext) -> ProcessingOutcome:
        """Process one event and report the detailed outcome."""
        self._transition(
            ProcessingState.RECEIVED,
            event_type=event.get("type") if isinstance(event, dict) else None,
        )
        self._transition(ProcessingState.VALIDATING)

        try:
            if not isinstance(event, dict):
                raise EventValidationError(["Event must be a JSON object"])
            self.validate(event)
        except EventValidationError as exc:
            self.log.warning("event_validation_failed", errors=exc.errors)
            return ProcessingOutcome.INVALID

        try:
            outcome = run_with_retry(
                lambda attempt: self._attempt(event, context, attempt),
                self.policy,
                sleep=self.sleep,
                operation_name=f"{self.family}_event",
            )
        except RetryExhaustedError as exc:
            self._transition(
                ProcessingState.DEAD_LETTERED,
                attempts=exc.attempts,
                error=str(exc.last_error),
            )
            self.escalator.handle_failed_message(
                context.topic, event, exc.last_error, context
            )
            return ProcessingOutcome.DEAD_LETTERED

        self._transition(ProcessingState.DONE, outcome=outcome.value)
        return outcome

    def _attempt(
        self, event: Dict[str, Any], context: MessageContext, attempt: RetryAttempt
    ) -> ProcessingOutcome:
        if attempt.retry_count:
            self._transition(
                ProcessingState.RETRY,
                retry_count=attempt.retry_count,
                last_error=attempt.last_error,
            )
        return self.execute(event, context, attempt)

    def _transition(self, state: ProcessingState, **fields: Any) -> None:
        self.log.debug("processor_state", state=state.value, **fields)

    def resolve_user(self, user_id: str) -> User:
        """Look the user up; failures propagate and are retried."""
        self._transition(ProcessingState.ENRICHING, user_id=user_id)
        return self.directory.get_user(user_id)

    def persist(self, notification: Notification) -> Notification:
        self._transition(ProcessingState.PERSISTING, type=notification.type.value)
        record = self.store.create(notification)
        self.log.info(
            "notification_persisted",
            notification_id=record.id,
            user_id=record.user_id,
            type=record.type.value,
        )
        return record

    def dispatch(
        self, record: Notification, subject: str, user: Optional[User] = None
    ) -> Notification:
        """Email the notification and record the confirmed dispatch.

        Dispatch failures are logged and swallowed; the notification stays
        recorded with ``email_sent`` False.
        """
        self._transition(ProcessingState.DISPATCHING, notification_id=record.id)

        if not record.email:
            self.log.info(
                "email_dispatch_skipped",
                notification_id=record.id,
                reason="no_email_address",
            )
            return record

        try:
            receipt = self.dispatcher.send(
                record.user_id, subject, record.type, record.content, user=user
            )
        except EmailDispatchError as exc:
            self.log.warning(
                "email_dispatch_failed",
                notification_id=record.id,
                error=str(exc),
                retryable=exc.retryable,
            )
            return record
        except Exception as exc:
            self.log.error(
                "email_dispatch_failed",
                notification_id=record.id,
                error=str(exc),
                exc_info=True,
            )
            return record

        try:
            return mark_dispatched(self.store, record, receipt)
        except Exception as exc:
            self.log.error(
                "email_status_update_failed",
                notification_id=record.id,
                error=str(exc),
                exc_info=True,
            )
            return record
