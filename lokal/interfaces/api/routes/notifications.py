"""Endpoints and websocket handler for user notifications."""

from __future__ import annotations

import logging

from fastapi import (
    APIRouter,
    Depends,
    HTTPException,
    Query,
    WebSocket,
    WebSocketDisconnect,
    status,
)

from lokal.application.use_cases.notifications import (
    NotificationService,
    cleanup_old_notifications,
    process_email_outbox,
    process_scheduled_notifications,
)
from lokal.domain.entities import (
    NotificationCategory,
    NotificationData,
    NotificationFilter,
    NotificationOrdering,
    UserProfile,
    category_for_type,
)
from lokal.infrastructure.database import SessionLocal
from lokal.infrastructure.notifications import notification_manager
from lokal.infrastructure.repositories import NotificationRepository
from lokal.interfaces.api.dependencies import (
    get_current_user,
    get_notification_service,
    require_admin,
    resolve_current_user,
)
from lokal.interfaces.api.errors import raise_for_result
from lokal.interfaces.api.schemas import (
    ApiResponse,
    JobResultRead,
    NotificationCreate,
    NotificationDeleteRead,
    NotificationIdsRequest,
    NotificationListRead,
    NotificationRead,
    NotificationUpdateRead,
    NotificationUpdateRequest,
    PaginationRead,
    UnreadCountRead,
)

router = APIRouter(prefix="/notifications", tags=["notifications"])
logger = logging.getLogger(__name__)


@router.get("", response_model=ApiResponse[NotificationListRead])
def list_notifications(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    filter_by: NotificationFilter = Query(NotificationFilter.ALL, alias="filter"),
    order_by: NotificationOrdering = Query(NotificationOrdering.CREATED_AT, alias="orderBy"),
    current_user: UserProfile = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service),
):
    """Return one page of the caller's notifications, newest first."""

    result = service.list_notifications(
        current_user.user_id,
        page=page,
        limit=limit,
        filter_by=filter_by,
        order_by=order_by,
    )
    raise_for_result(result, "Failed to fetch notifications")
    listing = result.value
    return ApiResponse(
        data=NotificationListRead(
            notifications=[NotificationRead.model_validate(n) for n in listing.notifications],
            pagination=PaginationRead(
                page=page, limit=limit, total=listing.count, has_more=listing.has_more
            ),
        )
    )


@router.get("/unread-count", response_model=ApiResponse[UnreadCountRead])
def unread_count(
    current_user: UserProfile = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service),
):
    result = service.unread_count(current_user.user_id)
    raise_for_result(result, "Failed to fetch unread count")
    return ApiResponse(data=UnreadCountRead(count=result.value))


@router.patch("", response_model=ApiResponse[NotificationUpdateRead])
def update_notifications(
    payload: NotificationUpdateRequest,
    current_user: UserProfile = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service),
):
    """Flip the read flag on the caller's notifications.

    Identifiers owned by someone else are ignored and do not count.
    """

    ids = payload.unique_ids()
    if payload.action == "read":
        result = service.mark_as_read(current_user.user_id, ids)
    else:
        result = service.mark_as_unread(current_user.user_id, ids)
    raise_for_result(result, "Failed to update notifications")
    return ApiResponse(
        data=NotificationUpdateRead(updated_count=result.value, action=payload.action)
    )


@router.delete("", response_model=ApiResponse[NotificationDeleteRead])
def delete_notifications(
    payload: NotificationIdsRequest,
    current_user: UserProfile = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service),
):
    result = service.delete_notifications(current_user.user_id, payload.unique_ids())
    raise_for_result(result, "Failed to delete notifications")
    return ApiResponse(data=NotificationDeleteRead(deleted_count=result.value))


@router.post(
    "",
    response_model=ApiResponse[NotificationRead],
    status_code=status.HTTP_201_CREATED,
)
def create_notification(
    payload: NotificationCreate,
    current_user: UserProfile = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service),
):
    """Create a notification.

    Administrators may target anyone; members may only create non-system
    notifications for themselves.
    """

    if not current_user.is_admin() and (
        payload.user_id != current_user.user_id
        or category_for_type(payload.type) == NotificationCategory.SYSTEM
    ):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")

    result = service.create_notification(NotificationData(**payload.model_dump()))
    raise_for_result(result, "Failed to create notification")
    return ApiResponse(data=NotificationRead.model_validate(result.value))


@router.post("/jobs/scheduled", response_model=ApiResponse[JobResultRead])
def run_scheduled_job(
    _: UserProfile = Depends(require_admin),
    service: NotificationService = Depends(get_notification_service),
):
    result = process_scheduled_notifications(service)
    raise_for_result(result, "Failed to process scheduled notifications")
    return ApiResponse(data=JobResultRead(job="scheduled", processed=result.value))


@router.post("/jobs/outbox", response_model=ApiResponse[JobResultRead])
def run_outbox_job(
    _: UserProfile = Depends(require_admin),
    service: NotificationService = Depends(get_notification_service),
):
    result = process_email_outbox(service)
    raise_for_result(result, "Failed to process email outbox")
    return ApiResponse(data=JobResultRead(job="outbox", processed=result.value))


@router.post("/jobs/cleanup", response_model=ApiResponse[JobResultRead])
def run_cleanup_job(
    _: UserProfile = Depends(require_admin),
    service: NotificationService = Depends(get_notification_service),
):
    result = cleanup_old_notifications(service)
    raise_for_result(result, "Failed to clean up notifications")
    return ApiResponse(data=JobResultRead(job="cleanup", processed=result.value))


@router.websocket("/ws")
async def notifications_websocket(websocket: WebSocket) -> None:
    """Push change signals to the authenticated member.

    The first message carries the current unread count; later messages are
    ``notifications.changed`` signals telling the client to re-fetch.
    """

    token = websocket.query_params.get("token")
    if not token:
        await websocket.close(code=1008)
        return

    session = SessionLocal()
    try:
        user = resolve_current_user(token, session)
        unread = NotificationRepository(session).count_unread(user.user_id)
    except HTTPException:
        await websocket.close(code=1008)
        return
    finally:
        session.close()

    await notification_manager.connect(user.user_id, websocket)
    try:
        await websocket.send_json({"type": "unread_count", "data": {"count": unread}})
        while True:
            message = await websocket.receive_json()
            if isinstance(message, dict) and message.get("type") == "ping":
                await websocket.send_json({"type": "pong"})
    except WebSocketDisconnect:
        logger.debug("Notification websocket closed for user %s", user.user_id)
    finally:
        notification_manager.disconnect(user.user_id, websocket)
