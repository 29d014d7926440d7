"""Idea Helper chat routes."""
from fastapi import APIRouter, HTTPException, Depends

from chat.services import ChatAssistant
from common.error_messages import InvalidStateError, get_error_response
from common.models import ChatMessagesResponse, ChatSendRequest
from studio.sessions import BookSession, get_book_session
from utils.logger import get_logger

logger = get_logger("chat")
router = APIRouter(prefix="/api/sessions", tags=["chat"])


def _messages_response(chat: ChatAssistant) -> ChatMessagesResponse:
    return ChatMessagesResponse(
        available=chat.available,
        is_loading=chat.is_loading,
        messages=chat.messages(),
    )


@router.post("/{session_id}/chat/open", response_model=ChatMessagesResponse)
def open_chat(session: BookSession = Depends(get_book_session)):
    """
    Open the Idea Helper panel.

    The chat session is created on first open. If that fails the panel
    still opens; `available` stays false and messages are ignored.
    """
    session.chat.open()
    return _messages_response(session.chat)


@router.get("/{session_id}/chat/messages", response_model=ChatMessagesResponse)
def list_messages(session: BookSession = Depends(get_book_session)):
    """Full transcript, oldest first."""
    return _messages_response(session.chat)


@router.post("/{session_id}/chat/messages", response_model=ChatMessagesResponse)
def send_message(req: ChatSendRequest, session: BookSession = Depends(get_book_session)):
    """Send one message and wait for the helper's reply."""
    try:
        reply = session.chat.send(req.text)
    except InvalidStateError as e:
        message, status_code = get_error_response(e.error_code)
        raise HTTPException(status_code=status_code, detail=message)

    if reply is None:
        logger.debug(f"Session {session.id}: chat message ignored")
    return _messages_response(session.chat)
