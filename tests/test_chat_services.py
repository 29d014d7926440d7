import pytest

from config import Config
from chat.services import (
    ChatAssistant,
    EMPTY_REPLY_FALLBACK,
    ERROR_REPLY_FALLBACK,
    create_chat_session,
    send_chat_message,
)
from common.error_messages import InvalidStateError
from common.models import ChatRole

from conftest import FakeChat, FakeChatClient


def test_session_is_created_with_theme_helper_persona():
    chat_client = FakeChatClient()

    chat = create_chat_session(client=chat_client)

    created = chat_client.chats.created[0]
    assert chat is chat_client.chats.chat
    assert created.model == Config.CHAT_MODEL
    assert "Steampunk Cats" in str(created.config.system_instruction)


def test_send_returns_reply_text():
    assert send_chat_message(FakeChat(["Try Dinosaur Cowboys!"]), "ideas?") == "Try Dinosaur Cowboys!"


def test_empty_reply_becomes_fallback():
    assert send_chat_message(FakeChat([""]), "ideas?") == EMPTY_REPLY_FALLBACK


def test_service_error_becomes_apology():
    assert send_chat_message(FakeChat([TimeoutError("deadline")]), "ideas?") == ERROR_REPLY_FALLBACK


def test_assistant_starts_with_welcome_message():
    assistant = ChatAssistant(lambda: FakeChat())

    messages = assistant.messages()
    assert len(messages) == 1
    assert messages[0].role == ChatRole.MODEL
    assert messages[0].text == "Hi! Need ideas for a coloring book theme?"
    assert assistant.available is False


def test_session_is_created_once():
    created = []

    def factory():
        created.append(FakeChat())
        return created[-1]

    assistant = ChatAssistant(factory)
    assert assistant.open() is True
    assert assistant.open() is True
    assert len(created) == 1


def test_failed_session_creation_leaves_chat_silent():
    def factory():
        raise ValueError("API Key is missing")

    assistant = ChatAssistant(factory)

    assert assistant.open() is False
    assert assistant.send("ideas?") is None
    assert len(assistant.messages()) == 1


def test_exchange_appends_user_then_model_message():
    chat = FakeChat(["How about Steampunk Cats?"])
    assistant = ChatAssistant(lambda: chat)
    assistant.open()

    reply = assistant.send("something with cats")

    assert reply.text == "How about Steampunk Cats?"
    assert chat.sent == ["something with cats"]
    roles = [m.role for m in assistant.messages()]
    assert roles == [ChatRole.MODEL, ChatRole.USER, ChatRole.MODEL]
    assert assistant.is_loading is False


def test_service_error_keeps_session_usable():
    chat = FakeChat([ConnectionError("offline"), "Space Pirates!"])
    assistant = ChatAssistant(lambda: chat)
    assistant.open()

    first = assistant.send("ideas?")
    second = assistant.send("more ideas?")

    assert first.text == ERROR_REPLY_FALLBACK
    assert second.text == "Space Pirates!"
    assert len(assistant.messages()) == 5


@pytest.mark.parametrize("text", ["", "   "])
def test_blank_message_is_ignored(text):
    chat = FakeChat()
    assistant = ChatAssistant(lambda: chat)
    assistant.open()

    assert assistant.send(text) is None
    assert chat.sent == []


def test_second_send_while_waiting_is_rejected():
    nested_errors = []

    class SlowChat:
        def send_message(self, message):
            try:
                assistant.send("are you there?")
            except InvalidStateError as e:
                nested_errors.append(e)
            return FakeChat(["Here!"]).send_message(message)

    assistant = ChatAssistant(SlowChat)
    assistant.open()

    assert assistant.send("first").text == "Here!"
    assert len(nested_errors) == 1
