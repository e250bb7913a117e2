"""Run one residence expiry sweep and print its summary."""

from __future__ import annotations

import argparse
import logging

from app.application.use_cases.residence import build_residence_expiry_service
from app.config import get_settings
from app.infrastructure.database import initialize_database


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the residence expiry check once.")
    parser.add_argument(
        "--user-id",
        type=int,
        default=None,
        help="Only check this user instead of every tracked resident",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    logging.basicConfig(level=get_settings().log_level.upper())

    initialize_database()
    service = build_residence_expiry_service()
    if args.user_id is None:
        report = service.run_sweep()
    else:
        report = service.run_sweep_for_person(args.user_id)

    if report.error:
        raise SystemExit(f"Residence check failed: {report.error}")

    for result in report.results:
        if result.skipped_reason:
            print(f"  user {result.user_id}: skipped ({result.skipped_reason})")
            continue
        tiers = ", ".join(tier.value for tier in result.tiers) or "-"
        print(
            f"  user {result.user_id}: {result.days_until_expiry} days, tiers: {tiers}, "
            f"notifications: {result.notifications_created}"
        )
    print(
        f"Evaluated {report.persons_evaluated}, skipped {report.persons_skipped}, "
        f"created {report.notifications_created} notifications, "
        f"{len(report.failures)} failures"
    )


if __name__ == "__main__":
    main()
