"""Command-line check that a member's follow counts agree with their follower lists."""
from __future__ import annotations

import argparse
import logging
from typing import Any

from sqlalchemy.orm import Session

from athlnet.database import SessionLocal
from athlnet.services import get_follow_stats
from athlnet.services.follow_service import list_follow_network
from athlnet.services.profile_service import get_profile, get_user_by_email

logger = logging.getLogger(__name__)


def follow_report(db: Session, email: str) -> dict[str, Any]:
    """Counts from three sources plus the problems found comparing them."""

    user = get_user_by_email(db, email)
    if user is None:
        raise SystemExit(f"No user with email '{email}'")
    stats = get_follow_stats(db, user_id=user.id)
    network = list_follow_network(db, user_id=user.id)
    profile = get_profile(db, user_id=user.id)

    follower_ids = {item["id"] for item in network["followers"]}
    following_ids = {item["id"] for item in network["following"]}

    problems: list[str] = []
    if stats.followers_count != len(follower_ids):
        problems.append(f"followers_count={stats.followers_count} but {len(follower_ids)} followers listed")
    if stats.following_count != len(following_ids):
        problems.append(f"following_count={stats.following_count} but {len(following_ids)} following listed")
    if set(profile["followers"]) != follower_ids:
        problems.append("profile followers differ from the follow table")
    if set(profile["following"]) != following_ids:
        problems.append("profile following differs from the follow table")
    if user.id in follower_ids or user.id in following_ids:
        problems.append("user follows themselves")

    return {
        "user_id": user.id,
        "followers_count": stats.followers_count,
        "following_count": stats.following_count,
        "mutual": len(follower_ids & following_ids),
        "problems": problems,
    }


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Verify follower and following lists for a member.")
    parser.add_argument("email", help="Email of the member to inspect.")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.INFO)

    with SessionLocal() as db:
        report = follow_report(db, args.email)

    print(
        f"User: {report['user_id']} | followers={report['followers_count']} | "
        f"following={report['following_count']} | mutual={report['mutual']}"
    )
    for problem in report["problems"]:
        logger.warning("Inconsistency: %s", problem)
    return 1 if report["problems"] else 0


if __name__ == "__main__":
    raise SystemExit(main())
