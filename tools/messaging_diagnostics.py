"""Command-line check of a member's conversations without going through HTTP."""
from __future__ import annotations

import argparse
import logging
from typing import Any

from fastapi import HTTPException
from sqlalchemy.orm import Session

from athlnet.database import SessionLocal
from athlnet.models import User
from athlnet.services import list_conversations, send_message
from athlnet.services.profile_service import get_user_by_email

logger = logging.getLogger(__name__)


def find_user(db: Session, email: str) -> User:
    user = get_user_by_email(db, email)
    if user is None:
        raise SystemExit(f"No user with email '{email}'")
    return user


def messaging_report(db: Session, email: str) -> dict[str, Any]:
    user = find_user(db, email)
    conversations = list_conversations(db, user=user)
    return {
        "user_id": user.id,
        "conversations": conversations,
        "unread_total": sum(item["unread_count"] for item in conversations),
    }


def send_test_message(db: Session, sender_email: str, recipient_email: str, content: str) -> dict[str, Any]:
    sender = find_user(db, sender_email)
    recipient = find_user(db, recipient_email)
    message = send_message(db, sender=sender, recipient_id=recipient.id, content=content)
    return {"id": message.id, "conversation_id": message.conversation_id}


def _print_report(report: dict[str, Any]) -> None:
    print(f"User: {report['user_id']} | conversations={len(report['conversations'])} | unread={report['unread_total']}")
    print("-" * 80)
    for item in report["conversations"]:
        other = item["other_user"]
        print(f"{item['id']} | with={other['display_name']} | unread={item['unread_count']} | last={item['last_message'] or '(none)'}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Inspect a member's conversations and unread counts.")
    parser.add_argument("email", help="Email of the member to inspect.")
    parser.add_argument("--send-to", help="Email of a second member to send a test message to.")
    parser.add_argument("--message", default="Diagnostics test message", help="Text of the test message (default: %(default)s).")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    with SessionLocal() as db:
        if args.send_to:
            try:
                sent = send_test_message(db, args.email, args.send_to, args.message)
            except HTTPException as exc:
                logger.error("Test message failed: %s", exc.detail)
                return 1
            print(f"Sent {sent['id']} in {sent['conversation_id']}")
        _print_report(messaging_report(db, args.email))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
