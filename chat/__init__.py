"""Idea Helper chat module."""
from chat.services import (
    ChatAssistant,
    create_chat_session,
    send_chat_message,
    THEME_HELPER_INSTRUCTION,
    EMPTY_REPLY_FALLBACK,
    ERROR_REPLY_FALLBACK,
)

__all__ = [
    "ChatAssistant",
    "create_chat_session",
    "send_chat_message",
    "THEME_HELPER_INSTRUCTION",
    "EMPTY_REPLY_FALLBACK",
    "ERROR_REPLY_FALLBACK",
]
