"""Pipeline context.

Builds and owns every component of the notification pipeline: store, users
service client, mailer, dispatcher, bus publisher, dead letter escalator,
processors, consumer groups and the batch job scheduler. Nothing is held in
module globals; tests build a context with fakes.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from infrastructure.configuration import Settings
from infrastructure.logging import get_module_logger
from infrastructure.resilience.retry import policies_from_settings
from integrations.bus import KafkaPublisher, Publisher, build_consumer
from integrations.mailer import Mailer, create_mailer
from integrations.users import UserDirectoryClient
from jobs.promotion_broadcaster import PromotionBroadcaster
from jobs.recommendation_flush import RecommendationFlush
from jobs.scheduled_tasks import BatchJobScheduler, ScheduledJob
from modules.notifications.consumers import (
    ORDER_EVENTS,
    PRODUCT_EVENTS,
    RECOMMENDATION_EVENTS,
    USER_EVENTS,
    ConsumerGroupSpec,
    PriorityConsumerGroup,
    high_priority_spec,
    standard_priority_spec,
)
from modules.notifications.dead_letter import DeadLetterEscalator
from modules.notifications.dispatcher import EmailDispatcher
from modules.notifications.factory import create_notification_store
from modules.notifications.processors import (
    EventProcessor,
    OrderEventProcessor,
    ProductEventProcessor,
    RecommendationEventProcessor,
    UserEventProcessor,
)
from modules.notifications.store import NotificationStore

logger = get_module_logger()


@dataclass
class PipelineContext:
    """Every long-lived component of the pipeline.

    ``start`` launches the consumer groups and the scheduler; ``stop`` shuts
    them down in reverse order, draining in-flight records before the
    publisher is flushed and closed.
    """

    settings: Settings
    store: NotificationStore
    directory: UserDirectoryClient
    mailer: Mailer
    dispatcher: EmailDispatcher
    publisher: Publisher
    escalator: DeadLetterEscalator
    processors: Dict[str, EventProcessor]
    consumer_groups: List[PriorityConsumerGroup] = field(default_factory=list)
    scheduler: Optional[BatchJobScheduler] = None
    promotion_broadcaster: Optional[PromotionBroadcaster] = None
    recommendation_flush: Optional[RecommendationFlush] = None
    drain_timeout: Optional[float] = None
    started: bool = False

    def start(self, consumers: bool = True, batch_jobs: bool = True) -> None:
        if self.started:
            return
        if consumers:
            for group in self.consumer_groups:
                group.start()
        if batch_jobs and self.scheduler is not None:
            self.scheduler.start()
        self.started = True
        logger.info(
            "pipeline_started",
            consumer_groups=[g.spec.group_id for g in self.consumer_groups] if consumers else [],
            batch_jobs=bool(batch_jobs and self.scheduler),
        )

    def stop(self, timeout: Optional[float] = None) -> None:
        """Stop the scheduler and consumer groups, then close the publisher.

        Args:
            timeout: Seconds to wait for each component; defaults to
                ``drain_timeout``, the longest retry chain an in-flight record
                can still run. None waits without bound.
        """
        if timeout is None:
            timeout = self.drain_timeout
        if self.scheduler is not None:
            self.scheduler.stop(timeout)
        for group in self.consumer_groups:
            group.stop(timeout)

        running = [g.spec.group_id for g in self.consumer_groups if g.is_running]
        close = getattr(self.publisher, "close", None)
        if running:
            # Running groups may still dead letter through the publisher
            logger.warning("publisher_close_skipped", consumer_groups=running)
        elif callable(close):
            try:
                close()
            except Exception as exc:
                logger.error("publisher_close_failed", error=str(exc), exc_info=True)

        self.started = False
        logger.info("pipeline_stopped")


def build_pipeline_context(
    settings: Settings,
    store: Optional[NotificationStore] = None,
    directory: Optional[UserDirectoryClient] = None,
    mailer: Optional[Mailer] = None,
    publisher: Optional[Publisher] = None,
    consumer_factory: Optional[Callable[[ConsumerGroupSpec], Any]] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> PipelineContext:
    """Build the pipeline from settings.

    Every external collaborator can be injected; anything not given is
    created from ``settings``.

    Args:
        settings: Application settings
        store: Notification store override
        directory: Users service client override
        mailer: Mailer override
        publisher: Bus publisher override
        consumer_factory: Returns a subscribed consumer for a group spec
        sleep: Backoff sleep used by the processors

    Returns:
        A PipelineContext, not yet started
    """
    store = store or create_notification_store(settings)
    directory = directory or UserDirectoryClient(
        base_url=settings.users.USERS_SERVICE_URL,
        timeout=settings.users.USERS_SERVICE_TIMEOUT_SECONDS,
    )
    mailer = mailer or create_mailer(settings.mailer)
    publisher = publisher or KafkaPublisher(settings.kafka)

    dispatcher = EmailDispatcher(
        directory=directory,
        mailer=mailer,
        sender=settings.mailer.SENDER_EMAIL,
        service_url=settings.server.NOTIFICATIONS_SERVICE_URL,
    )
    escalator = DeadLetterEscalator(publisher, topic=settings.kafka.DEAD_LETTER_TOPIC)

    policies = policies_from_settings(settings.retry)
    attempt_seconds = (
        settings.users.USERS_SERVICE_TIMEOUT_SECONDS
        + settings.mailer.SMTP_TIMEOUT_SECONDS
    )
    drain_timeout = max(
        policy.worst_case_seconds(attempt_seconds) for policy in policies.values()
    ) + settings.kafka.KAFKA_POLL_TIMEOUT_MS / 1000.0
    common = dict(
        store=store,
        directory=directory,
        dispatcher=dispatcher,
        escalator=escalator,
        sleep=sleep,
    )
    processors: Dict[str, EventProcessor] = {
        USER_EVENTS: UserEventProcessor(policy=policies["user"], **common),
        ORDER_EVENTS: OrderEventProcessor(policy=policies["order"], **common),
        PRODUCT_EVENTS: ProductEventProcessor(policy=policies["product"], **common),
        RECOMMENDATION_EVENTS: RecommendationEventProcessor(
            policy=policies["recommendation"], **common
        ),
    }

    def default_consumer_factory(spec: ConsumerGroupSpec) -> Any:
        return build_consumer(
            settings.kafka,
            group_id=spec.group_id,
            topics=spec.topics,
            session_timeout_ms=spec.session_timeout_ms,
            heartbeat_interval_ms=spec.heartbeat_interval_ms,
        )

    factory = consumer_factory or default_consumer_factory
    consumer_groups = [
        PriorityConsumerGroup(
            spec=spec,
            processors={topic: processors[topic] for topic in spec.topics},
            escalator=escalator,
            consumer_factory=lambda spec=spec: factory(spec),
            poll_timeout_ms=settings.kafka.KAFKA_POLL_TIMEOUT_MS,
        )
        for spec in (
            high_priority_spec(settings.kafka),
            standard_priority_spec(settings.kafka),
        )
    ]

    feature = settings.notifications
    promotion_broadcaster = PromotionBroadcaster(
        store=store,
        directory=directory,
        dispatcher=dispatcher,
        sample_size=feature.PROMOTION_SAMPLE_SIZE,
    )
    recommendation_flush = RecommendationFlush(
        store=store,
        directory=directory,
        dispatcher=dispatcher,
        limit=feature.RECOMMENDATION_FLUSH_LIMIT,
        concurrency=feature.RECOMMENDATION_FLUSH_CONCURRENCY,
    )
    scheduler = BatchJobScheduler(
        jobs=[
            ScheduledJob(
                name="promotion_broadcast",
                func=promotion_broadcaster.run,
                every_seconds=feature.PROMOTION_INTERVAL_SECONDS,
            ),
            ScheduledJob(
                name="recommendation_flush",
                func=recommendation_flush.run,
                every_seconds=feature.RECOMMENDATION_FLUSH_INTERVAL_SECONDS,
            ),
        ]
    )

    logger.info(
        "pipeline_context_built",
        store=type(store).__name__,
        mailer=type(mailer).__name__,
        dead_letter_topic=escalator.topic,
        drain_timeout=drain_timeout,
    )
    return PipelineContext(
        settings=settings,
        store=store,
        directory=directory,
        mailer=mailer,
        dispatcher=dispatcher,
        publisher=publisher,
        escalator=escalator,
        processors=processors,
        consumer_groups=consumer_groups,
        scheduler=scheduler,
        promotion_broadcaster=promotion_broadcaster,
        recommendation_flush=recommendation_flush,
        drain_timeout=drain_timeout,
    )
