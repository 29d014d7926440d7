"""Image generation module."""
from image.services import generate_coloring_book_images, request_images, ProgressCallback

__all__ = [
    "generate_coloring_book_images",
    "request_images",
    "ProgressCallback",
]
