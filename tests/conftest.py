import os
import tempfile
from io import BytesIO
from types import SimpleNamespace

# Must be set before config.py is imported
os.environ.setdefault("GEMINI_API_KEY", "test-gemini-key")
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="dreamcolor-logs-"))

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from app import app
from chat.services import create_chat_session
from image.services import generate_coloring_book_images
from studio.sessions import SessionStore, get_session_store


def make_jpeg(color=(255, 255, 255), size=(60, 80)) -> bytes:
    buffer = BytesIO()
    Image.new("RGB", size, color).save(buffer, format="JPEG")
    return buffer.getvalue()


def images_response(payloads):
    """Shape of an Imagen response; None entries have no image bytes."""
    return SimpleNamespace(
        generated_images=[SimpleNamespace(image=SimpleNamespace(image_bytes=p)) for p in payloads]
    )


class FakeModels:
    def __init__(self, responses, events):
        self._responses = list(responses)
        self._events = events
        self.calls = []

    def generate_images(self, model, prompt, config):
        self.calls.append(SimpleNamespace(model=model, prompt=prompt, config=config))
        self._events.append(("request", len(self.calls)))
        outcome = self._responses.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return images_response(outcome)


class FakeImageClient:
    """Answers the three image stages in order with the queued outcomes."""

    def __init__(self, responses, events=None):
        self.events = events if events is not None else []
        self.models = FakeModels(responses, self.events)


class FakeChat:
    def __init__(self, replies=None):
        self.replies = list(replies or [])
        self.sent = []

    def send_message(self, message):
        self.sent.append(message)
        reply = self.replies.pop(0) if self.replies else "How about Steampunk Cats?"
        if isinstance(reply, Exception):
            raise reply
        return SimpleNamespace(text=reply)


class FakeChats:
    def __init__(self, chat):
        self.chat = chat
        self.created = []

    def create(self, model, config):
        self.created.append(SimpleNamespace(model=model, config=config))
        return self.chat


class FakeChatClient:
    def __init__(self, chat=None):
        self.chats = FakeChats(chat or FakeChat())


@pytest.fixture
def jpeg():
    return make_jpeg


@pytest.fixture
def full_book_responses():
    """Cover, a full batch of four pages, and the finale."""
    return [
        [make_jpeg((250, 120, 90))],
        [make_jpeg((10, 10, 10)), make_jpeg((20, 20, 20)), make_jpeg((30, 30, 30)), make_jpeg((40, 40, 40))],
        [make_jpeg((50, 50, 50))],
    ]


@pytest.fixture
def image_client(full_book_responses):
    return FakeImageClient(full_book_responses)


@pytest.fixture
def fake_chat():
    return FakeChat()


@pytest.fixture
def store(image_client, fake_chat):
    chat_client = FakeChatClient(fake_chat)
    return SessionStore(
        image_generator=lambda theme, child_name, on_progress: generate_coloring_book_images(
            theme, child_name, on_progress, client=image_client
        ),
        chat_session_factory=lambda: create_chat_session(client=chat_client),
    )


@pytest.fixture
def client(store):
    app.dependency_overrides[get_session_store] = lambda: store
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
