import math

from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse, Response

from api.dependencies.rate_limits import get_limiter
from infrastructure.logging import get_module_logger
from infrastructure.services import NotificationStoreDep, SettingsDep
from models.notifications import (
    MarkReadRequest,
    MarkReadResponse,
    NotificationCreateRequest,
    NotificationCreatedResponse,
    NotificationListResponse,
    Pagination,
)
from modules.notifications.dispatcher import new_tracking_id
from modules.notifications.models import (
    Notification,
    NotificationPriority,
    NotificationType,
)
from modules.notifications.store import NotificationFilter
from modules.notifications.templates import tracking_url
from modules.notifications.tracking import TRANSPARENT_PIXEL, mark_read, track_open

logger = get_module_logger()

router = APIRouter(prefix="/notifications", tags=["Notifications"])
limiter = get_limiter()

NO_CACHE_HEADERS = {
    "Cache-Control": "no-store, no-cache, must-revalidate, proxy-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}


@router.post("", status_code=201)
@limiter.limit("60/minute")
def create_notification(
    request: Request,  # pylint: disable=unused-argument
    payload: NotificationCreateRequest,
    store: NotificationStoreDep,
    settings: SettingsDep,
):
    """
    Create a notification manually.

    Email notifications get a tracking id so that opens can be recorded
    through the tracking pixel; the pixel URL is returned as ``trackingUrl``.
    """
    errors = payload.validation_errors()
    if errors:
        logger.info("notification_create_rejected", errors=errors)
        return JSONResponse(status_code=400, content={"errors": errors})

    notification_type = NotificationType(payload.type)
    metadata = dict(payload.metadata or {})
    tracking_id = None
    if notification_type == NotificationType.EMAIL:
        tracking_id = new_tracking_id()
        metadata["trackingId"] = tracking_id

    notification = store.create(
        Notification(
            user_id=payload.userId,
            type=notification_type,
            content=payload.content,
            priority=NotificationPriority(
                payload.priority or NotificationPriority.STANDARD.value
            ),
            metadata=metadata,
        )
    )
    logger.info(
        "notification_created",
        notification_id=notification.id,
        user_id=notification.user_id,
        type=notification.type.value,
    )

    response = NotificationCreatedResponse(
        message="Notification created successfully",
        notification=notification.model_dump(by_alias=True, mode="json"),
    ).model_dump()
    if tracking_id:
        response["trackingUrl"] = tracking_url(
            settings.server.NOTIFICATIONS_SERVICE_URL, tracking_id
        )
    return response


@router.get("/user/{user_id}", response_model=NotificationListResponse)
def list_user_notifications(
    user_id: str,
    store: NotificationStoreDep,
    priority: NotificationPriority | None = None,
    read: bool | None = None,
    limit: int = Query(default=50, ge=1),
    page: int = Query(default=1, ge=1),
):
    """Paginated notifications for a user, newest first."""
    criteria = NotificationFilter(user_id=user_id, priority=priority, read=read)
    total = store.count(criteria)
    notifications = store.find(
        criteria, limit=limit, offset=(page - 1) * limit, newest_first=True
    )
    return NotificationListResponse(
        results=[n.model_dump(by_alias=True, mode="json") for n in notifications],
        pagination=Pagination(
            total=total,
            page=page,
            limit=limit,
            totalPages=math.ceil(total / limit),
        ),
    )


@router.patch("/user/{user_id}/read", response_model=MarkReadResponse)
def mark_user_notifications_read(
    user_id: str,
    store: NotificationStoreDep,
    payload: MarkReadRequest | None = None,
):
    """Mark a user's unread notifications as read, optionally narrowed by priority or ids."""
    payload = payload or MarkReadRequest()
    errors = payload.validation_errors()
    if errors:
        return JSONResponse(status_code=400, content={"error": errors[0]})

    updated = mark_read(
        store,
        user_id,
        priority=NotificationPriority(payload.priority) if payload.priority else None,
        notification_ids=payload.notificationIds,
    )
    return MarkReadResponse(
        message="Notifications marked as read", updatedCount=updated
    )


@router.get("/track/{tracking_id}")
def track_email_open(tracking_id: str, store: NotificationStoreDep):
    """
    Email open tracking pixel.

    Always answers with the transparent GIF so that mail clients never show a
    broken image, whether or not the tracking id is known.
    """
    try:
        track_open(store, tracking_id)
    except Exception as e:  # pylint: disable=broad-except
        logger.exception("tracking_pixel_error", tracking_id=tracking_id, error=str(e))

    return Response(
        content=TRANSPARENT_PIXEL,
        media_type="image/gif",
        headers=NO_CACHE_HEADERS,
    )
