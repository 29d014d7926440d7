"""Book wizard routes."""
import re
from typing import Optional
from urllib.parse import quote

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Path, Response, status

from common.error_messages import (
    DocumentAssemblyError,
    ErrorCode,
    InvalidStateError,
    get_error_response,
)
from common.models import (
    ApplicationState,
    BookForm,
    GalleryItem,
    ImageVariant,
    StateResponse,
)
from studio.sessions import BookSession, SessionStore, get_book_session, get_session_store
from utils.logger import get_logger

logger = get_logger("studio")
router = APIRouter(prefix="/api/sessions", tags=["book"])

# Quotes, backslashes and control characters cannot appear in a quoted-string filename.
ASCII_FILENAME_UNSAFE = re.compile(r'["\\\x00-\x1f\x7f]')


def _http_error(error_code: ErrorCode) -> HTTPException:
    message, status_code = get_error_response(error_code)
    return HTTPException(status_code=status_code, detail=message)


def build_gallery(session_id: str, state: ApplicationState) -> list:
    """Gallery cards in book order, labelled the way the PDF numbers them."""
    gallery = []
    page_number = 0
    for image in state.images:
        if image.type == ImageVariant.COVER:
            label = "Cover Art"
        else:
            page_number += 1
            label = f"Page {page_number}"
        gallery.append(GalleryItem(
            id=image.id,
            type=image.type,
            label=label,
            image_url=f"/api/sessions/{session_id}/images/{image.id}",
        ))
    return gallery


def build_state_response(session: BookSession) -> StateResponse:
    state, status_message = session.controller.snapshot()
    return StateResponse(
        session_id=session.id,
        theme=state.theme,
        child_name=state.child_name,
        is_generating=state.is_generating,
        current_step=state.current_step,
        status_message=status_message,
        error=state.error,
        gallery=build_gallery(session.id, state),
    )


@router.post("", response_model=StateResponse, status_code=status.HTTP_201_CREATED)
def create_session(store: SessionStore = Depends(get_session_store)):
    """Start a new book session with an empty form."""
    session = store.create()
    return build_state_response(session)


@router.delete("/{session_id}")
def delete_session(session_id: str = Path(...), store: SessionStore = Depends(get_session_store)):
    """Forget a session and everything generated in it."""
    try:
        store.delete(session_id)
    except KeyError:
        raise _http_error(ErrorCode.SESSION_NOT_FOUND)
    return {"deleted": True, "session_id": session_id}


@router.get("/{session_id}/state", response_model=StateResponse)
def get_state(session: BookSession = Depends(get_book_session)):
    """Current step, progress text, error and gallery. Poll this while generating."""
    return build_state_response(session)


@router.put("/{session_id}/form", response_model=StateResponse)
def update_form(form: BookForm, session: BookSession = Depends(get_book_session)):
    """Save the child's name and theme typed so far."""
    try:
        session.controller.update_form(theme=form.theme, child_name=form.child_name)
    except InvalidStateError as e:
        raise _http_error(e.error_code)
    return build_state_response(session)


@router.post("/{session_id}/generate", response_model=StateResponse, status_code=status.HTTP_202_ACCEPTED)
def generate(
    background_tasks: BackgroundTasks,
    form: Optional[BookForm] = None,
    session: BookSession = Depends(get_book_session),
):
    """
    Start making the book.

    The image stages run in the background; poll /state for progress text
    and the final gallery.
    """
    form = form or BookForm()
    controller = session.controller
    refused = controller.try_begin_generation(theme=form.theme, child_name=form.child_name)
    if refused is not None:
        raise _http_error(refused)

    logger.info(f"Session {session.id}: generation started")
    background_tasks.add_task(controller.run_generation)
    return build_state_response(session)


@router.post("/{session_id}/reset", response_model=StateResponse)
def reset(session: BookSession = Depends(get_book_session)):
    """Discard the finished book and return to an empty form."""
    try:
        session.controller.reset()
    except InvalidStateError as e:
        raise _http_error(e.error_code)
    return build_state_response(session)


@router.get("/{session_id}/images/{image_id}")
def get_image(image_id: str = Path(...), session: BookSession = Depends(get_book_session)):
    """Raw JPEG bytes of one gallery picture."""
    try:
        image = session.controller.get_image(image_id)
    except KeyError:
        raise _http_error(ErrorCode.IMAGE_NOT_FOUND)
    return Response(content=image.image_bytes(), media_type="image/jpeg")


@router.get("/{session_id}/book")
def download_book(session: BookSession = Depends(get_book_session)):
    """Download the finished coloring book as a PDF attachment."""
    try:
        document = session.controller.request_download()
    except InvalidStateError as e:
        raise _http_error(e.error_code)
    except DocumentAssemblyError as e:
        logger.error(f"Session {session.id}: PDF download failed: {e}")
        raise _http_error(ErrorCode.DOCUMENT_ASSEMBLY_FAILED)

    return Response(
        content=document.content,
        media_type=document.media_type,
        headers={"Content-Disposition": content_disposition(document.filename)},
    )


def content_disposition(filename: str) -> str:
    """Attachment header with an ASCII fallback name and the RFC 5987 UTF-8 name."""
    ascii_name = filename.encode("ascii", "ignore").decode("ascii")
    ascii_name = ASCII_FILENAME_UNSAFE.sub("", ascii_name) or "Coloring_Book.pdf"
    return f"attachment; filename=\"{ascii_name}\"; filename*=UTF-8''{quote(filename)}"
