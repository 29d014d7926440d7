"""In-memory registry of book sessions."""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from threading import Lock
from typing import Any, Callable, Dict, Optional
from uuid import uuid4

from fastapi import Depends, HTTPException, Path

from chat.services import ChatAssistant, create_chat_session
from studio.controller import ColoringBookController, ImageGenerator, DocumentBuilder
from image.services import generate_coloring_book_images
from book.services import build_coloring_book
from common.error_messages import ErrorCode, get_error_response
from utils.logger import get_logger

logger = get_logger("studio.sessions")


@dataclass
class BookSession:
    """Everything one visitor owns: the book wizard and the Idea Helper."""
    id: str
    controller: ColoringBookController
    chat: ChatAssistant
    created_at: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())


class SessionStore:
    """Thread-safe map of session id -> BookSession. Nothing is persisted."""

    def __init__(
        self,
        image_generator: ImageGenerator = generate_coloring_book_images,
        document_builder: DocumentBuilder = build_coloring_book,
        chat_session_factory: Callable[[], Any] = create_chat_session,
    ):
        self._image_generator = image_generator
        self._document_builder = document_builder
        self._chat_session_factory = chat_session_factory
        self._lock = Lock()
        self._sessions: Dict[str, BookSession] = {}

    def create(self) -> BookSession:
        session = BookSession(
            id=str(uuid4()),
            controller=ColoringBookController(self._image_generator, self._document_builder),
            chat=ChatAssistant(self._chat_session_factory),
        )
        with self._lock:
            self._sessions[session.id] = session
        logger.info(f"Created book session {session.id}")
        return session

    def get(self, session_id: str) -> Optional[BookSession]:
        with self._lock:
            return self._sessions.get(session_id)

    def delete(self, session_id: str) -> BookSession:
        with self._lock:
            session = self._sessions.pop(session_id, None)
        if session is None:
            raise KeyError("session not found")
        logger.info(f"Closed book session {session_id}")
        return session

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)


session_store = SessionStore()


def get_session_store() -> SessionStore:
    """FastAPI dependency returning the application-wide session store."""
    return session_store


def get_book_session(
    session_id: str = Path(...),
    store: SessionStore = Depends(get_session_store),
) -> BookSession:
    """FastAPI dependency resolving the session id in the URL."""
    session = store.get(session_id)
    if session is None:
        message, status_code = get_error_response(ErrorCode.SESSION_NOT_FOUND)
        raise HTTPException(status_code=status_code, detail=message)
    return session
