"""Direct messaging API routes."""
from __future__ import annotations

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, File, Query, UploadFile, status
from sqlalchemy.orm import Session

from ..database import get_session
from ..models import User
from ..schemas import (
    ConversationListResponse,
    ConversationSummary,
    ConversationThreadResponse,
    MarkReadResponse,
    MediaUploadResponse,
    MessageResponse,
    MessageSendRequest,
)
from ..services import (
    get_current_user,
    list_conversation_messages,
    list_conversations,
    mark_conversation_read,
    send_message,
)
from ..services.message_service import message_record, upload_message_attachment
from ..services.realtime import publish_conversation_event
from .uploads import await_upload, upload_response

router = APIRouter(prefix="/messages", tags=["messages"])

logger = logging.getLogger(__name__)


@router.post("/", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def send_message_endpoint(
    payload: MessageSendRequest,
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> MessageResponse:
    message = send_message(
        db,
        sender=current_user,
        recipient_id=payload.recipient_id,
        content=payload.content,
        media_url=payload.media_url,
        type_=payload.type,
    )
    record = message_record(message, sender=current_user)
    await publish_conversation_event(message.conversation_id, "message_created", message=record)
    return MessageResponse(**record)


@router.get("/conversations", response_model=ConversationListResponse)
async def list_conversations_endpoint(
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> ConversationListResponse:
    items = list_conversations(db, user=current_user)
    return ConversationListResponse(items=[ConversationSummary(**item) for item in items])


@router.get("/with/{user_id}", response_model=ConversationThreadResponse)
async def conversation_thread_endpoint(
    user_id: UUID,
    limit: int = Query(default=50, ge=1, le=200),
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> ConversationThreadResponse:
    thread = list_conversation_messages(db, viewer=current_user, other_user_id=user_id, limit=limit)
    return ConversationThreadResponse(
        conversation_id=thread["conversation_id"],
        other_user=thread["other_user"],
        messages=[MessageResponse(**item) for item in thread["messages"]],
    )


@router.post("/conversations/{conversation_id}/read", response_model=MarkReadResponse)
async def mark_read_endpoint(
    conversation_id: str,
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> MarkReadResponse:
    updated = mark_conversation_read(db, viewer=current_user, conversation_id=conversation_id)
    if updated:
        await publish_conversation_event(conversation_id, "messages_read", reader_id=str(current_user.id))
    return MarkReadResponse(conversation_id=conversation_id, updated=updated)


@router.post("/attachments", response_model=MediaUploadResponse)
async def upload_attachment_endpoint(
    file: UploadFile = File(...),
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> MediaUploadResponse:
    result = await await_upload(upload_message_attachment(file, db=db, user=current_user))
    return upload_response(result)


__all__ = ["router"]
