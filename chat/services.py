"""Idea Helper chat services - Gemini chat integration."""
import time
from threading import Lock
from typing import Optional, List, Any, Callable
from uuid import uuid4

from google.genai import types

from config import Config
from common.genai_client import get_genai_client
from common.models import ChatMessage, ChatRole
from common.error_messages import ErrorCode, InvalidStateError
from utils.logger import get_logger

logger = get_logger("chat.services")

THEME_HELPER_INSTRUCTION = (
    "You are a helpful, creative assistant for a children's coloring book app. "
    "Help parents brainstorm fun, specific themes for their kids "
    "(e.g., 'Steampunk Cats' instead of just 'Cats'). Keep answers short and encouraging."
)

WELCOME_TEXT = "Hi! Need ideas for a coloring book theme?"
EMPTY_REPLY_FALLBACK = "I'm having trouble thinking right now. Try again!"
ERROR_REPLY_FALLBACK = "Sorry, I couldn't connect to my brain!"


def _now_ms() -> int:
    return int(time.time() * 1000)


def create_chat_session(client: Any = None) -> Any:
    """
    Create a Gemini chat session primed with the theme-helper persona.

    Raises:
        ValueError: if GEMINI_API_KEY is not set
    """
    if client is None:
        client = get_genai_client()
    logger.info(f"Creating chat session with model {Config.CHAT_MODEL}")
    return client.chats.create(
        model=Config.CHAT_MODEL,
        config=types.GenerateContentConfig(system_instruction=THEME_HELPER_INSTRUCTION),
    )


def send_chat_message(chat: Any, message: str) -> str:
    """
    Send one message and return the reply text.

    Never raises: service errors and empty replies become fixed fallback text.
    """
    try:
        response = chat.send_message(message)
        return getattr(response, "text", None) or EMPTY_REPLY_FALLBACK
    except Exception as e:
        logger.error(f"Chat message failed: {e}")
        return ERROR_REPLY_FALLBACK


class ChatAssistant:
    """Transcript and lazily-created chat session for one book session."""

    def __init__(self, session_factory: Callable[[], Any] = create_chat_session):
        self._session_factory = session_factory
        self._lock = Lock()
        self._chat: Any = None
        self._is_loading = False
        self._messages: List[ChatMessage] = [
            ChatMessage(id="welcome", role=ChatRole.MODEL, text=WELCOME_TEXT, timestamp=_now_ms())
        ]

    @property
    def available(self) -> bool:
        return self._chat is not None

    @property
    def is_loading(self) -> bool:
        return self._is_loading

    def messages(self) -> List[ChatMessage]:
        with self._lock:
            return list(self._messages)

    def open(self) -> bool:
        """Create the chat session on first open. Failures leave chat unavailable."""
        with self._lock:
            if self._chat is not None:
                return True
            try:
                self._chat = self._session_factory()
            except Exception as e:
                logger.error(f"Failed to init chat: {e}")
                return False
            return True

    def send(self, text: str) -> Optional[ChatMessage]:
        """
        Append the user's message and the helper's reply.

        Returns the reply, or None when the text is blank or no session exists.

        Raises:
            InvalidStateError: while a previous reply is still pending
        """
        if not text or not text.strip():
            return None

        with self._lock:
            if self._chat is None:
                logger.warning("Chat message ignored: no chat session")
                return None
            if self._is_loading:
                raise InvalidStateError(ErrorCode.CHAT_BUSY)
            self._is_loading = True
            chat = self._chat
            user_msg = ChatMessage(id=str(uuid4()), role=ChatRole.USER, text=text, timestamp=_now_ms())
            self._messages.append(user_msg)

        try:
            reply_text = send_chat_message(chat, user_msg.text)
            reply = ChatMessage(id=str(uuid4()), role=ChatRole.MODEL, text=reply_text, timestamp=_now_ms())
            with self._lock:
                self._messages.append(reply)
            return reply
        finally:
            self._is_loading = False
