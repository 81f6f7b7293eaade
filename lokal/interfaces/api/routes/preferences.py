"""Endpoints for the caller's notification preferences."""

from __future__ import annotations

from dataclasses import replace

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from lokal.application.use_cases.notifications import get_preferences, update_preferences
from lokal.domain.entities import UserPreferences, UserProfile
from lokal.infrastructure.database import get_db
from lokal.interfaces.api.dependencies import get_current_user
from lokal.interfaces.api.errors import raise_for_result
from lokal.interfaces.api.schemas import ApiResponse, PreferencesRead, PreferencesUpdate

router = APIRouter(prefix="/preferences", tags=["preferences"])


@router.get("", response_model=ApiResponse[PreferencesRead])
def read_preferences(
    db: Session = Depends(get_db),
    current_user: UserProfile = Depends(get_current_user),
):
    """Return stored preferences, or the defaults when none were saved yet."""

    result = get_preferences(db, current_user.user_id)
    raise_for_result(result, "Failed to fetch preferences")
    preferences = result.value or UserPreferences(user_id=current_user.user_id)
    return ApiResponse(data=PreferencesRead.model_validate(preferences))


@router.put("", response_model=ApiResponse[PreferencesRead])
def write_preferences(
    payload: PreferencesUpdate,
    db: Session = Depends(get_db),
    current_user: UserProfile = Depends(get_current_user),
):
    current = get_preferences(db, current_user.user_id)
    raise_for_result(current, "Failed to fetch preferences")
    base = current.value or UserPreferences(user_id=current_user.user_id)
    changes = payload.model_dump(exclude_unset=True, exclude_none=True)

    result = update_preferences(db, replace(base, **changes))
    raise_for_result(result, "Failed to save preferences")
    return ApiResponse(data=PreferencesRead.model_validate(result.value))
