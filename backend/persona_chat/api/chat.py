"""
Chat API endpoints - Send a message to a session's persona and continue
truncated replies.
"""

from fastapi import APIRouter, HTTPException, Depends, status

from ..exceptions import ChatServiceError, PersonaNotFoundError
from ..models import ChatReply, ChatRequest
from ..services import ChatService
from .dependencies import get_chat_service

router = APIRouter(prefix="/chat", tags=["chat"])


@router.post("/{session_id}", response_model=ChatReply)
async def send_message(
    session_id: str,
    body: ChatRequest,
    chat: ChatService = Depends(get_chat_service)
):
    """
    Send a user message and get the persona's reply.

    Returns:
        The reply and the updated session (possibly newly titled)
    """
    try:
        result = await chat.send_message(session_id, body.message, body.attached_image)
    except PersonaNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ChatServiceError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))

    if result is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Session not found: {session_id}")
    return result


@router.post("/{session_id}/continue/{message_id}", response_model=ChatReply)
async def continue_message(
    session_id: str,
    message_id: str,
    chat: ChatService = Depends(get_chat_service)
):
    """Continue a reply that was cut off; the message is extended in place."""
    try:
        result = await chat.continue_message(session_id, message_id)
    except PersonaNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ChatServiceError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))

    if result is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Message {message_id} not found in session {session_id}"
        )
    return result
