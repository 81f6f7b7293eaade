"""Persistence layer for member profiles and follow connections."""

from __future__ import annotations

from sqlalchemy.orm import Session

from lokal.domain.entities import UserProfile
from lokal.infrastructure.models import UserConnectionModel, UserProfileModel


class UserRepository:
    """Provide lookups over :class:`UserProfile` entities."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, user_id: str) -> UserProfile | None:
        model = self._get_model(user_id=user_id)
        return self._to_entity(model) if model else None

    def create(self, profile: UserProfile) -> UserProfile:
        model = UserProfileModel(
            user_id=profile.user_id,
            full_name=profile.full_name,
            email=profile.email,
            role=profile.role,
        )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def is_following(self, follower_id: str, followee_id: str) -> bool:
        return (
            self.session.query(UserConnectionModel.id)
            .filter(UserConnectionModel.user_id == follower_id)
            .filter(UserConnectionModel.connected_user_id == followee_id)
            .first()
            is not None
        )

    def add_follow(self, follower_id: str, followee_id: str) -> None:
        self.session.add(
            UserConnectionModel(
                user_id=follower_id,
                connected_user_id=followee_id,
                connection_type="follow",
            )
        )
        self.session.commit()

    def _get_model(self, **filters) -> UserProfileModel | None:
        return self.session.query(UserProfileModel).filter_by(**filters).first()

    @staticmethod
    def _to_entity(model: UserProfileModel) -> UserProfile:
        return UserProfile(
            id=model.id,
            user_id=model.user_id,
            full_name=model.full_name,
            email=model.email,
            role=model.role,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )


__all__ = ["UserRepository"]
