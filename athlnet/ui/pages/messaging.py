"""Two-pane messaging page: conversation list and the open thread."""
from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Form, HTTPException, Query, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.orm import Session

from athlnet.database import get_session
from athlnet.models import User
from athlnet.services import list_conversation_messages, list_conversations, mark_conversation_read, send_message
from athlnet.services.message_service import message_record
from athlnet.services.profile_service import user_summary
from athlnet.services.realtime import publish_conversation_event

from ..guards import require_page_user
from ..template_helpers import render_template

router = APIRouter()

MESSAGING_PATH = "/messaging"


@router.get(MESSAGING_PATH, response_class=HTMLResponse)
async def messaging(
    request: Request,
    with_user: UUID | None = Query(default=None, alias="with"),
    user: User = Depends(require_page_user),
    db: Session = Depends(get_session),
) -> HTMLResponse:
    thread = None
    if with_user is not None and with_user != user.id:
        thread = list_conversation_messages(db, viewer=user, other_user_id=with_user)
        if thread["messages"]:
            updated = mark_conversation_read(db, viewer=user, conversation_id=thread["conversation_id"])
            if updated:
                await publish_conversation_event(thread["conversation_id"], "messages_read", reader_id=str(user.id))

    return render_template(
        request,
        "messaging.html",
        {
            "page_title": "Messages",
            "active_nav": MESSAGING_PATH,
            "viewer": user_summary(user),
            "conversations": list_conversations(db, user=user),
            "thread": thread,
            "active_user_id": str(with_user) if thread else None,
        },
    )


@router.post(f"{MESSAGING_PATH}/send")
async def send_from_page(
    recipient_id: UUID = Form(...),
    content: str = Form(""),
    user: User = Depends(require_page_user),
    db: Session = Depends(get_session),
) -> RedirectResponse:
    target = f"{MESSAGING_PATH}?with={recipient_id}"
    try:
        message = send_message(db, sender=user, recipient_id=recipient_id, content=content)
    except HTTPException as exc:
        if exc.status_code != status.HTTP_422_UNPROCESSABLE_ENTITY:
            raise
        # Blank messages are ignored, the thread is shown again.
        return RedirectResponse(target, status_code=status.HTTP_303_SEE_OTHER)

    await publish_conversation_event(
        message.conversation_id, "message_created", message=message_record(message, sender=user)
    )
    return RedirectResponse(target, status_code=status.HTTP_303_SEE_OTHER)
