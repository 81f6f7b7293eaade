"""Utility script to register a member profile and print an access token."""

from __future__ import annotations

import argparse

from sqlalchemy.exc import SQLAlchemyError

from lokal.domain.entities import ROLE_ADMIN, ROLE_MEMBER, UserPreferences, UserProfile
from lokal.infrastructure.database import SessionLocal, initialize_database
from lokal.infrastructure.repositories import PreferencesRepository, UserRepository
from lokal.infrastructure.security import create_access_token


def parse_args() -> argparse.Namespace:
    """Parse command line arguments for member creation."""

    parser = argparse.ArgumentParser(
        description="Create a member profile for the Lokal API.",
    )
    parser.add_argument("user_id", help="Identifier issued by the identity provider")
    parser.add_argument("--name", default="Lokal Admin", help="Display name (default: Lokal Admin)")
    parser.add_argument("--email", default=None, help="Address used for notification emails")
    parser.add_argument(
        "--admin",
        action="store_true",
        help="Grant administrator privileges to the member.",
    )
    parser.add_argument(
        "--without-preferences",
        action="store_true",
        help="Do not create the default notification preferences row.",
    )
    return parser.parse_args()


def main() -> None:
    """Create a member using the provided command line arguments."""

    args = parse_args()
    initialize_database()

    session = SessionLocal()
    try:
        profile = UserRepository(session).create(
            UserProfile(
                user_id=args.user_id,
                full_name=args.name,
                email=args.email,
                role=ROLE_ADMIN if args.admin else ROLE_MEMBER,
            )
        )
        if not args.without_preferences:
            PreferencesRepository(session).upsert(UserPreferences(user_id=profile.user_id))
    except SQLAlchemyError as exc:
        session.rollback()
        raise SystemExit(f"Could not save the member: {exc}") from exc
    else:
        print(
            "Member created:\n"
            f"  User ID: {profile.user_id}\n"
            f"  Name: {profile.full_name}\n"
            f"  Role: {profile.role}\n"
            f"  Token: {create_access_token(profile.user_id)}"
        )
    finally:
        session.close()


if __name__ == "__main__":
    main()
