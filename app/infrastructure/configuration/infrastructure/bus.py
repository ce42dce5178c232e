"""Message bus (Kafka) infrastructure settings."""

from pydantic import Field

from infrastructure.configuration.base import InfrastructureSettings


class KafkaSettings(InfrastructureSettings):
    """Kafka connection and consumer group configuration.

    Environment Variables:
        KAFKA_ENABLED: Start the consumer groups on boot (default: True)
        KAFKA_BROKERS: Comma separated bootstrap servers (default: localhost:9092)
        KAFKA_CLIENT_ID: Client id reported to the brokers (default: notifications)
        KAFKA_POLL_TIMEOUT_MS: Poll timeout used by the receive loops
        KAFKA_AUTO_OFFSET_RESET: Where a new group starts reading (default: latest)
        DEAD_LETTER_TOPIC: Topic receiving exhausted messages
        HIGH_PRIORITY_GROUP_ID: Group id for user and order events
        HIGH_PRIORITY_SESSION_TIMEOUT_MS: Session timeout for the high priority group
        HIGH_PRIORITY_HEARTBEAT_INTERVAL_MS: Heartbeat interval for the high priority group
        STANDARD_PRIORITY_GROUP_ID: Group id for product and recommendation events
        STANDARD_PRIORITY_SESSION_TIMEOUT_MS: Session timeout for the standard group
        STANDARD_PRIORITY_HEARTBEAT_INTERVAL_MS: Heartbeat interval for the standard group

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()

        brokers = settings.kafka.broker_list
        dlq_topic = settings.kafka.DEAD_LETTER_TOPIC
        ```
    """

    KAFKA_ENABLED: bool = Field(default=True, alias="KAFKA_ENABLED")
    KAFKA_BROKERS: str = Field(default="localhost:9092", alias="KAFKA_BROKERS")
    KAFKA_CLIENT_ID: str = Field(default="notifications", alias="KAFKA_CLIENT_ID")
    KAFKA_POLL_TIMEOUT_MS: int = Field(default=1000, alias="KAFKA_POLL_TIMEOUT_MS")
    KAFKA_AUTO_OFFSET_RESET: str = Field(
        default="latest", alias="KAFKA_AUTO_OFFSET_RESET"
    )
    DEAD_LETTER_TOPIC: str = Field(
        default="dead-letter-queue", alias="DEAD_LETTER_TOPIC"
    )

    HIGH_PRIORITY_GROUP_ID: str = Field(
        default="priority1-notification-group", alias="HIGH_PRIORITY_GROUP_ID"
    )
    HIGH_PRIORITY_SESSION_TIMEOUT_MS: int = Field(
        default=30000, alias="HIGH_PRIORITY_SESSION_TIMEOUT_MS"
    )
    HIGH_PRIORITY_HEARTBEAT_INTERVAL_MS: int = Field(
        default=3000, alias="HIGH_PRIORITY_HEARTBEAT_INTERVAL_MS"
    )

    STANDARD_PRIORITY_GROUP_ID: str = Field(
        default="priority2-notification-group", alias="STANDARD_PRIORITY_GROUP_ID"
    )
    STANDARD_PRIORITY_SESSION_TIMEOUT_MS: int = Field(
        default=45000, alias="STANDARD_PRIORITY_SESSION_TIMEOUT_MS"
    )
    STANDARD_PRIORITY_HEARTBEAT_INTERVAL_MS: int = Field(
        default=5000, alias="STANDARD_PRIORITY_HEARTBEAT_INTERVAL_MS"
    )

    @property
    def broker_list(self) -> list[str]:
        """Bootstrap servers as a list.

        Returns:
            Non-empty broker addresses parsed from KAFKA_BROKERS
        """
        return [b.strip() for b in self.KAFKA_BROKERS.split(",") if b.strip()]
