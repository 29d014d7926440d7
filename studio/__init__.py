"""Book wizard module."""
from studio.controller import ColoringBookController
from studio.sessions import BookSession, SessionStore, get_session_store, get_book_session, session_store

__all__ = [
    "ColoringBookController",
    "BookSession",
    "SessionStore",
    "get_session_store",
    "get_book_session",
    "session_store",
]
