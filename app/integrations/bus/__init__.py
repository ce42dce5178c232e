"""Message bus (Kafka) integration."""

from integrations.bus.client import KafkaPublisher, Publisher, build_consumer

__all__ = ["KafkaPublisher", "Publisher", "build_consumer"]
