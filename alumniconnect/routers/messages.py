"""Direct message routes."""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from ..schemas import Message, MessageSendRequest, MessageThreadResponse, User
from ..services import Repository, compose_message, get_current_user, get_repository

router = APIRouter(prefix="/messages", tags=["messages"])


@router.get("/{partner_id}", response_model=MessageThreadResponse)
async def conversation_endpoint(
    partner_id: str,
    current_user: User = Depends(get_current_user),
    repository: Repository = Depends(get_repository),
) -> MessageThreadResponse:
    return MessageThreadResponse(partner_id=partner_id, items=repository.get_messages(current_user.id, partner_id))


@router.post("/", response_model=Message, status_code=status.HTTP_201_CREATED)
async def send_message_endpoint(
    payload: MessageSendRequest,
    current_user: User = Depends(get_current_user),
    repository: Repository = Depends(get_repository),
) -> Message:
    message = compose_message(
        sender_id=current_user.id,
        receiver_id=payload.receiver_id,
        content=payload.content,
        image_url=payload.image_url,
    )
    if message is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Message cannot be empty")
    if repository.get_user(payload.receiver_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return repository.send_message(message)
