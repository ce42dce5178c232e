"""Priority consumer groups.

Two independent receive loops, one per consumer group:

- high priority: ``user-events`` and ``order-events``
- standard priority: ``product-events`` and ``recommendation-events``

Each loop handles one record at a time and commits its offset only after
the processor returns (success, skip or dead letter), so per partition
order is preserved and a crash replays the in-flight record.
"""

import json
import threading
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional

from kafka.errors import KafkaError

from infrastructure.configuration.infrastructure import KafkaSettings
from infrastructure.logging import bind_message_context, get_module_logger
from modules.notifications.dead_letter import DeadLetterEscalator
from modules.notifications.models import MessageContext
from modules.notifications.processors import EventProcessor, ProcessingOutcome

logger = get_module_logger()

USER_EVENTS = "user-events"
ORDER_EVENTS = "order-events"
PRODUCT_EVENTS = "product-events"
RECOMMENDATION_EVENTS = "recommendation-events"


@dataclass(frozen=True)
class ConsumerGroupSpec:
    """Static description of a consumer group.

    Attributes:
        name: Short name used in logs and thread names
        group_id: Kafka consumer group id
        topics: Subscribed topics
        session_timeout_ms: Group session timeout
        heartbeat_interval_ms: Heartbeat interval
        failure_reason: Dead letter reason when a processor reports failure
    """

    name: str
    group_id: str
    topics: tuple[str, ...]
    session_timeout_ms: int
    heartbeat_interval_ms: int
    failure_reason: str


def high_priority_spec(settings: KafkaSettings) -> ConsumerGroupSpec:
    return ConsumerGroupSpec(
        name="high-priority",
        group_id=settings.HIGH_PRIORITY_GROUP_ID,
        topics=(USER_EVENTS, ORDER_EVENTS),
        session_timeout_ms=settings.HIGH_PRIORITY_SESSION_TIMEOUT_MS,
        heartbeat_interval_ms=settings.HIGH_PRIORITY_HEARTBEAT_INTERVAL_MS,
        failure_reason="High Priority Event Processing Failed",
    )


def standard_priority_spec(settings: KafkaSettings) -> ConsumerGroupSpec:
    return ConsumerGroupSpec(
        name="standard-priority",
        group_id=settings.STANDARD_PRIORITY_GROUP_ID,
        topics=(PRODUCT_EVENTS, RECOMMENDATION_EVENTS),
        session_timeout_ms=settings.STANDARD_PRIORITY_SESSION_TIMEOUT_MS,
        heartbeat_interval_ms=settings.STANDARD_PRIORITY_HEARTBEAT_INTERVAL_MS,
        failure_reason="Standard Priority Event Processing Failed",
    )


class PriorityConsumerGroup:
    """Receive loop for one consumer group.

    Args:
        spec: Group description
        processors: Processor per subscribed topic
        escalator: Dead letter escalator for failures the processors did not
            escalate themselves
        consumer_factory: Returns a subscribed KafkaConsumer
        poll_timeout_ms: Poll timeout; bounds how long ``stop`` waits for an
            idle loop
    """

    def __init__(
        self,
        spec: ConsumerGroupSpec,
        processors: Mapping[str, EventProcessor],
        escalator: DeadLetterEscalator,
        consumer_factory: Callable[[], Any],
        poll_timeout_ms: int = 1000,
    ) -> None:
        missing = [t for t in spec.topics if t not in processors]
        if missing:
            raise ValueError(f"No processor registered for topics: {missing}")

        self.spec = spec
        self.processors = processors
        self.escalator = escalator
        self.consumer_factory = consumer_factory
        self.poll_timeout_ms = poll_timeout_ms
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self.log = logger.bind(consumer_group=spec.group_id)

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Create the consumer and start the receive loop thread."""
        if self.is_running:
            return
        self._stop_event.clear()
        consumer = self.consumer_factory()
        self._thread = threading.Thread(
            target=self.run,
            args=(consumer,),
            daemon=True,
            name=f"consumer-{self.spec.name}",
        )
        self._thread.start()
        self.log.info("consumer_group_started", topics=list(self.spec.topics))

    def stop(self, timeout: Optional[float] = None) -> None:
        """Signal the loop to stop after the in-flight record and wait for it."""
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout)
            if self._thread.is_alive():
                self.log.warning("consumer_group_stop_timeout", timeout=timeout)
                return
            self._thread = None
        self.log.info("consumer_group_stopped")

    def run(self, consumer: Any) -> None:
        """Poll, handle and commit until stopped, then close the consumer."""
        try:
            while not self._stop_event.is_set():
                try:
                    batches = consumer.poll(
                        timeout_ms=self.poll_timeout_ms, max_records=1
                    )
                except KafkaError as exc:
                    self.log.error("consumer_poll_failed", error=str(exc))
                    self._stop_event.wait(self.poll_timeout_ms / 1000.0)
                    continue

                for records in batches.values():
                    for record in records:
                        self.handle_record(record)
                        self._commit(consumer)
        finally:
            try:
                consumer.close()
            except KafkaError as exc:
                self.log.warning("consumer_close_failed", error=str(exc))

    def _commit(self, consumer: Any) -> None:
        try:
            consumer.commit()
        except KafkaError as exc:
            # Rebalanced away; the record is redelivered to the new owner
            self.log.warning("consumer_commit_failed", error=str(exc))

    def handle_record(self, record: Any) -> None:
        """Process one bus record. Never raises."""
        context = MessageContext(
            topic=record.topic,
            partition=record.partition,
            offset=record.offset,
            raw=record.value,
        )

        with bind_message_context(record.topic, record.partition, record.offset):
            if not record.value:
                self.log.warning("empty_message_dropped")
                return

            event = None
            try:
                event = json.loads(record.value)
                processor = self.processors[record.topic]
                outcome = processor.handle(event, context)
            except Exception as exc:
                self.log.error(
                    "message_processing_failed", error=str(exc), exc_info=True
                )
                self.escalator.handle_failed_message(record.topic, event, exc, context)
                return

            if outcome.succeeded or outcome == ProcessingOutcome.DEAD_LETTERED:
                self.log.info("message_processed", outcome=outcome.value)
                return

            self.log.warning("message_not_handled", outcome=outcome.value)
            self.escalator.handle_failed_message(
                record.topic, event, None, context, reason=self.spec.failure_reason
            )
