"""Endpoints for café activities, their attendance and comments."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from lokal.application.use_cases.activities import (
    ActivityNotFoundError,
    add_comment as add_comment_uc,
    cancel_activity as cancel_activity_uc,
    create_activity as create_activity_uc,
    get_activity,
    join_activity as join_activity_uc,
    leave_activity as leave_activity_uc,
    update_activity as update_activity_uc,
)
from lokal.application.use_cases.notifications import NotificationFanout
from lokal.domain.entities import UserProfile
from lokal.infrastructure.database import get_db
from lokal.interfaces.api.dependencies import (
    get_current_user,
    get_notification_fanout,
    require_admin,
)
from lokal.interfaces.api.errors import raise_for_result
from lokal.interfaces.api.schemas import (
    ActivityCancel,
    ActivityCreate,
    ActivityRead,
    ActivityUpdate,
    ApiResponse,
    AttendanceRead,
    CommentCreate,
    CommentRead,
    ReminderRead,
)

router = APIRouter(prefix="/activities", tags=["activities"])
logger = logging.getLogger(__name__)


def _translate(exc: Exception) -> HTTPException:
    if isinstance(exc, ActivityNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, PermissionError):
        return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc))
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


@router.post("", response_model=ApiResponse[ActivityRead], status_code=status.HTTP_201_CREATED)
def create_activity(
    payload: ActivityCreate,
    db: Session = Depends(get_db),
    current_user: UserProfile = Depends(require_admin),
    fanout: NotificationFanout = Depends(get_notification_fanout),
):
    """Publish an activity and announce it to subscribed members."""

    try:
        activity = create_activity_uc(
            db, current_user=current_user, fanout=fanout, **payload.model_dump()
        )
    except (ValueError, PermissionError) as exc:
        raise _translate(exc) from exc
    return ApiResponse(data=ActivityRead.model_validate(activity))


@router.get("/{activity_id}", response_model=ApiResponse[ActivityRead])
def read_activity(
    activity_id: str,
    db: Session = Depends(get_db),
    _: UserProfile = Depends(get_current_user),
):
    try:
        activity = get_activity(db, activity_id)
    except ActivityNotFoundError as exc:
        raise _translate(exc) from exc
    return ApiResponse(data=ActivityRead.model_validate(activity))


@router.patch("/{activity_id}", response_model=ApiResponse[ActivityRead])
def update_activity(
    activity_id: str,
    payload: ActivityUpdate,
    db: Session = Depends(get_db),
    current_user: UserProfile = Depends(get_current_user),
    fanout: NotificationFanout = Depends(get_notification_fanout),
):
    """Edit an activity; attendees hear about cancellations and key changes."""

    changes = payload.model_dump(exclude_unset=True)
    reason = changes.pop("cancellation_reason", None)
    try:
        activity = update_activity_uc(
            db,
            activity_id,
            current_user=current_user,
            changes=changes,
            cancellation_reason=reason,
            fanout=fanout,
        )
    except (ValueError, PermissionError) as exc:
        raise _translate(exc) from exc
    return ApiResponse(data=ActivityRead.model_validate(activity))


@router.delete("/{activity_id}", response_model=ApiResponse[ActivityRead])
def cancel_activity(
    activity_id: str,
    payload: ActivityCancel | None = None,
    db: Session = Depends(get_db),
    current_user: UserProfile = Depends(get_current_user),
    fanout: NotificationFanout = Depends(get_notification_fanout),
):
    try:
        activity = cancel_activity_uc(
            db,
            activity_id,
            current_user=current_user,
            reason=payload.reason if payload else None,
            fanout=fanout,
        )
    except (ValueError, PermissionError) as exc:
        raise _translate(exc) from exc
    return ApiResponse(data=ActivityRead.model_validate(activity))


@router.post("/{activity_id}/join", response_model=ApiResponse[AttendanceRead])
def join_activity(
    activity_id: str,
    db: Session = Depends(get_db),
    current_user: UserProfile = Depends(get_current_user),
):
    try:
        join_activity_uc(db, activity_id, current_user=current_user)
    except ValueError as exc:
        raise _translate(exc) from exc
    return ApiResponse(
        data=AttendanceRead(message="Successfully joined activity", activity_id=activity_id)
    )


@router.delete("/{activity_id}/join", response_model=ApiResponse[AttendanceRead])
def leave_activity(
    activity_id: str,
    db: Session = Depends(get_db),
    current_user: UserProfile = Depends(get_current_user),
):
    try:
        leave_activity_uc(db, activity_id, current_user=current_user)
    except ValueError as exc:
        raise _translate(exc) from exc
    return ApiResponse(
        data=AttendanceRead(message="Successfully left activity", activity_id=activity_id)
    )


@router.post(
    "/{activity_id}/comments",
    response_model=ApiResponse[CommentRead],
    status_code=status.HTTP_201_CREATED,
)
def comment_on_activity(
    activity_id: str,
    payload: CommentCreate,
    db: Session = Depends(get_db),
    current_user: UserProfile = Depends(get_current_user),
    fanout: NotificationFanout = Depends(get_notification_fanout),
):
    try:
        comment = add_comment_uc(
            db,
            activity_id,
            current_user=current_user,
            content=payload.content,
            fanout=fanout,
        )
    except ValueError as exc:
        raise _translate(exc) from exc
    return ApiResponse(data=CommentRead.model_validate(comment))


@router.post("/{activity_id}/reminders", response_model=ApiResponse[ReminderRead])
def send_reminders(
    activity_id: str,
    hours: int = Query(24),
    _: UserProfile = Depends(require_admin),
    fanout: NotificationFanout = Depends(get_notification_fanout),
):
    """Remind every attendee that the activity starts in ``hours`` hours."""

    if hours not in (24, 1):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="hours must be 24 or 1"
        )
    result = fanout.send_activity_reminders(activity_id, hours)
    raise_for_result(result, "Failed to send reminders")
    return ApiResponse(
        data=ReminderRead(
            activity_id=activity_id, hours_before_event=hours, notified=result.value
        )
    )
