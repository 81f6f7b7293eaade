"""Run the periodic notification jobs from cron or a scheduler."""

from __future__ import annotations

import argparse
import logging

from lokal.application.use_cases.notifications import (
    NotificationFanout,
    NotificationService,
    cleanup_old_notifications,
    process_email_outbox,
    process_scheduled_notifications,
)
from lokal.config import get_settings
from lokal.infrastructure.database import SessionLocal, initialize_database

logger = logging.getLogger("lokal.jobs")

JOBS = ("scheduled", "outbox", "cleanup", "reminders")


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run Lokal notification jobs.")
    parser.add_argument("job", choices=JOBS, help="Job to execute")
    parser.add_argument(
        "--activity-id",
        help="Activity whose attendees receive reminders (required for 'reminders')",
    )
    parser.add_argument(
        "--hours",
        type=int,
        choices=(24, 1),
        default=24,
        help="Reminder lead time in hours (default: 24)",
    )
    parser.add_argument(
        "--batch-size",
        type=int,
        default=50,
        help="Maximum number of outbox tasks to deliver (default: 50)",
    )
    args = parser.parse_args()
    if args.job == "reminders" and not args.activity_id:
        parser.error("--activity-id is required for the reminders job")
    return args


def main() -> None:
    args = parse_args()
    logging.basicConfig(level=get_settings().log_level.upper())
    initialize_database()

    session = SessionLocal()
    try:
        service = NotificationService(session)
        if args.job == "scheduled":
            result = process_scheduled_notifications(service)
        elif args.job == "outbox":
            result = process_email_outbox(service, batch_size=args.batch_size)
        elif args.job == "cleanup":
            result = cleanup_old_notifications(service)
        else:
            result = NotificationFanout(service).send_activity_reminders(
                args.activity_id, args.hours
            )
    finally:
        session.close()

    if not result.ok:
        raise SystemExit(f"Job {args.job} failed: {result.error}")
    logger.info("Job %s finished: %s", args.job, result.value)


if __name__ == "__main__":
    main()
