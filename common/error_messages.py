"""
User-friendly error messages and status codes.

Every message a parent can see lives here so routes and services never
expose technical details of the AI service.
"""
from typing import Tuple, Optional
from enum import Enum


class ErrorCode(str, Enum):
    """Error codes for different types of failures."""

    # Validation Errors (400)
    MISSING_FIELD = "MISSING_FIELD"

    # Not Found Errors (404)
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    IMAGE_NOT_FOUND = "IMAGE_NOT_FOUND"

    # State Errors (409)
    GENERATION_IN_PROGRESS = "GENERATION_IN_PROGRESS"
    BOOK_NOT_READY = "BOOK_NOT_READY"
    BOOK_ALREADY_MADE = "BOOK_ALREADY_MADE"
    CHAT_BUSY = "CHAT_BUSY"

    # Generation Errors (500)
    BOOK_GENERATION_FAILED = "BOOK_GENERATION_FAILED"
    DOCUMENT_ASSEMBLY_FAILED = "DOCUMENT_ASSEMBLY_FAILED"

    # Generic Errors
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


ERROR_MESSAGES = {
    ErrorCode.MISSING_FIELD: "Please enter both your child's name and a theme idea.",
    ErrorCode.SESSION_NOT_FOUND: "We couldn't find your book session. Please start a new book.",
    ErrorCode.IMAGE_NOT_FOUND: "That picture is no longer available.",
    ErrorCode.GENERATION_IN_PROGRESS: "Your book is still being created. Please wait a moment.",
    ErrorCode.BOOK_NOT_READY: "Your book isn't ready yet.",
    ErrorCode.BOOK_ALREADY_MADE: "Your book is already finished. Start a new book to change it.",
    ErrorCode.CHAT_BUSY: "The Idea Helper is still thinking about your last message.",
    ErrorCode.BOOK_GENERATION_FAILED: "Oops! Something went wrong making the book. Please try again.",
    ErrorCode.DOCUMENT_ASSEMBLY_FAILED: "We couldn't put your PDF together. Please try downloading again.",
    ErrorCode.UNKNOWN_ERROR: "Something unexpected happened. Please try again.",
}


ERROR_STATUS_CODES = {
    ErrorCode.MISSING_FIELD: 400,
    ErrorCode.SESSION_NOT_FOUND: 404,
    ErrorCode.IMAGE_NOT_FOUND: 404,
    ErrorCode.GENERATION_IN_PROGRESS: 409,
    ErrorCode.BOOK_NOT_READY: 409,
    ErrorCode.BOOK_ALREADY_MADE: 409,
    ErrorCode.CHAT_BUSY: 409,
    ErrorCode.BOOK_GENERATION_FAILED: 500,
    ErrorCode.DOCUMENT_ASSEMBLY_FAILED: 500,
    ErrorCode.UNKNOWN_ERROR: 500,
}


class InvalidStateError(Exception):
    """Raised when an operation is not allowed in the current book step."""

    def __init__(self, error_code: ErrorCode, detail: Optional[str] = None):
        self.error_code = error_code
        self.detail = detail
        super().__init__(detail or ERROR_MESSAGES[error_code])


class DocumentAssemblyError(Exception):
    """Raised when the PDF could not be assembled."""


def get_error_message(error_code: ErrorCode) -> str:
    """Get the user-facing message for an error code."""
    return ERROR_MESSAGES.get(error_code, ERROR_MESSAGES[ErrorCode.UNKNOWN_ERROR])


def get_error_response(
    error_code: ErrorCode,
    custom_message: Optional[str] = None
) -> Tuple[str, int]:
    """
    Get user-friendly error message and HTTP status code.

    Args:
        error_code: The error code enum
        custom_message: Optional custom message to append to the standard message

    Returns:
        Tuple of (error_message, status_code)
    """
    message = get_error_message(error_code)
    status_code = ERROR_STATUS_CODES.get(error_code, 500)

    if custom_message:
        message = f"{message} {custom_message}"

    return message, status_code
