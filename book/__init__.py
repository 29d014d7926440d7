"""Coloring book PDF module."""
from book.services import BookDocument, BookPage, book_filename, build_coloring_book, plan_book_pages

__all__ = [
    "BookDocument",
    "BookPage",
    "book_filename",
    "build_coloring_book",
    "plan_book_pages",
]
