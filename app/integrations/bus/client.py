"""Kafka client construction.

Builds consumers for the priority consumer groups and a producer wrapper
used for dead lettering.

Consumers are created with auto-commit disabled and one in-flight request
per connection; offsets are committed by the receive loop once a record
has been handled.
"""

import threading
from typing import Iterable, Optional, Protocol

from kafka import KafkaConsumer, KafkaProducer

from infrastructure.configuration.infrastructure import KafkaSettings
from infrastructure.logging import get_module_logger

logger = get_module_logger()


class Publisher(Protocol):
    """Anything that can publish a keyed record to a topic."""

    def publish(self, topic: str, key: str, value: bytes) -> None: ...


def build_consumer(
    settings: KafkaSettings,
    group_id: str,
    topics: Iterable[str],
    session_timeout_ms: int,
    heartbeat_interval_ms: int,
) -> KafkaConsumer:
    """Create a subscribed consumer for one consumer group.

    Args:
        settings: Kafka settings (brokers, client id, offset reset)
        group_id: Consumer group id
        topics: Topics the group subscribes to
        session_timeout_ms: Group session timeout
        heartbeat_interval_ms: Heartbeat interval, below the session timeout

    Returns:
        KafkaConsumer subscribed to ``topics``
    """
    topics = list(topics)
    consumer = KafkaConsumer(
        bootstrap_servers=settings.broker_list,
        client_id=f"{settings.KAFKA_CLIENT_ID}-{group_id}",
        group_id=group_id,
        session_timeout_ms=session_timeout_ms,
        heartbeat_interval_ms=heartbeat_interval_ms,
        enable_auto_commit=False,
        auto_offset_reset=settings.KAFKA_AUTO_OFFSET_RESET,
        max_in_flight_requests_per_connection=1,
        max_poll_records=1,
    )
    consumer.subscribe(topics)
    logger.info("kafka_consumer_created", group_id=group_id, topics=topics)
    return consumer


class KafkaPublisher:
    """Thin synchronous wrapper over KafkaProducer.

    ``publish`` blocks until the broker acknowledges the record so callers
    know whether it landed. The producer connects on first use.

    Args:
        settings: Kafka settings
        producer: Optional preconfigured KafkaProducer
        send_timeout: Seconds to wait for the broker acknowledgement
    """

    def __init__(
        self,
        settings: KafkaSettings,
        producer: Optional[KafkaProducer] = None,
        send_timeout: float = 10.0,
    ) -> None:
        self.settings = settings
        self._producer = producer
        self._lock = threading.Lock()
        self.send_timeout = send_timeout

    @property
    def producer(self) -> KafkaProducer:
        producer = self._producer
        if producer is None:
            with self._lock:
                if self._producer is None:
                    self._producer = KafkaProducer(
                        bootstrap_servers=self.settings.broker_list,
                        client_id=f"{self.settings.KAFKA_CLIENT_ID}-producer",
                        acks="all",
                    )
                    logger.info(
                        "kafka_producer_created", brokers=self.settings.broker_list
                    )
                producer = self._producer
        return producer

    def publish(self, topic: str, key: str, value: bytes) -> None:
        future = self.producer.send(topic, key=key.encode("utf-8"), value=value)
        metadata = future.get(timeout=self.send_timeout)
        logger.debug(
            "kafka_record_published",
            topic=topic,
            key=key,
            partition=getattr(metadata, "partition", None),
            offset=getattr(metadata, "offset", None),
        )

    def close(self) -> None:
        with self._lock:
            if self._producer is None:
                return
            self._producer.flush()
            self._producer.close()
            self._producer = None
        logger.info("kafka_producer_closed")
