from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict

from modules.notifications.models import NotificationPriority, NotificationType


class NotificationCreateRequest(BaseModel):
    """
    Payload for manually creating a notification.

    Fields are loosely typed so that every problem with the payload can be
    reported at once by ``validation_errors`` instead of failing on the first.
    """

    userId: str | None = None
    type: str | None = None
    content: Any = None
    priority: str | None = None
    metadata: Dict[str, Any] | None = None

    model_config = ConfigDict(extra="ignore")

    def validation_errors(self) -> List[str]:
        errors: List[str] = []
        if not self.userId:
            errors.append("User ID is required")
        if self.type not in [t.value for t in NotificationType]:
            errors.append("Invalid notification type")
        if self.content is None or (
            isinstance(self.content, str) and not self.content.strip()
        ):
            errors.append("Notification content is required")
        if self.priority and self.priority not in [
            p.value for p in NotificationPriority
        ]:
            errors.append("Invalid notification priority")
        return errors


class MarkReadRequest(BaseModel):
    priority: str | None = None
    notificationIds: Any = None

    model_config = ConfigDict(extra="ignore")

    def validation_errors(self) -> List[str]:
        errors: List[str] = []
        if self.notificationIds is not None and (
            not isinstance(self.notificationIds, list)
            or not all(isinstance(i, str) and i for i in self.notificationIds)
        ):
            errors.append("Invalid notification IDs provided")
        if self.priority and self.priority not in [
            p.value for p in NotificationPriority
        ]:
            errors.append("Invalid notification priority")
        return errors


class Pagination(BaseModel):
    total: int
    page: int
    limit: int
    totalPages: int


class NotificationListResponse(BaseModel):
    results: List[Dict[str, Any]]
    pagination: Pagination


class NotificationCreatedResponse(BaseModel):
    message: str
    notification: Dict[str, Any]
    trackingUrl: str | None = None


class MarkReadResponse(BaseModel):
    message: str
    updatedCount: int
