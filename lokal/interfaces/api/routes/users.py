"""Endpoints for interactions between members."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from lokal.application.use_cases.notifications import NotificationFanout
from lokal.application.use_cases.users import follow_user as follow_user_uc
from lokal.domain.entities import UserProfile
from lokal.infrastructure.database import get_db
from lokal.interfaces.api.dependencies import get_current_user, get_notification_fanout
from lokal.interfaces.api.schemas import ApiResponse, FollowRead

router = APIRouter(prefix="/users", tags=["users"])


@router.post("/{user_id}/follow", response_model=ApiResponse[FollowRead])
def follow_user(
    user_id: str,
    db: Session = Depends(get_db),
    current_user: UserProfile = Depends(get_current_user),
    fanout: NotificationFanout = Depends(get_notification_fanout),
):
    """Follow ``user_id``; repeating the call is a no-op."""

    try:
        created = follow_user_uc(
            db, follower_id=current_user.user_id, followee_id=user_id, fanout=fanout
        )
    except LookupError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return ApiResponse(data=FollowRead(user_id=user_id, following=True, created=created))
