"""Per event family processors."""

from modules.notifications.processors.base import (
    EventProcessor,
    EventValidationError,
    ProcessingOutcome,
    ProcessingState,
)
from modules.notifications.processors.order import OrderEventProcessor
from modules.notifications.processors.product import ProductEventProcessor
from modules.notifications.processors.recommendation import (
    RecommendationEventProcessor,
)
from modules.notifications.processors.user import UserEventProcessor

__all__ = [
    "EventProcessor",
    "EventValidationError",
    "OrderEventProcessor",
    "ProcessingOutcome",
    "ProcessingState",
    "ProductEventProcessor",
    "RecommendationEventProcessor",
    "UserEventProcessor",
]
