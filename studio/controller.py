"""Book wizard state machine: Input -> Generating -> Complete."""
from threading import Lock
from typing import Callable, List, Optional, Tuple

from book.services import BookDocument, build_coloring_book
from common.error_messages import ErrorCode, InvalidStateError, get_error_message
from common.models import ApplicationState, GeneratedImage, GenerationStep
from image.services import ProgressCallback, generate_coloring_book_images
from utils.logger import get_logger

logger = get_logger("studio.controller")

ImageGenerator = Callable[[str, str, ProgressCallback], List[GeneratedImage]]
DocumentBuilder = Callable[[List[GeneratedImage], str, str], BookDocument]


class ColoringBookController:
    """
    Owns the ApplicationState of one book session.

    All transitions go through this class. Reads return deep copies so
    callers never observe a half-applied transition.
    """

    def __init__(
        self,
        image_generator: ImageGenerator = generate_coloring_book_images,
        document_builder: DocumentBuilder = build_coloring_book,
    ):
        self._image_generator = image_generator
        self._document_builder = document_builder
        self._lock = Lock()
        self._state = ApplicationState()
        self._status_message = ""

    # ---------- reads ----------
    @property
    def state(self) -> ApplicationState:
        with self._lock:
            return self._state.model_copy(deep=True)

    @property
    def status_message(self) -> str:
        return self._status_message

    def snapshot(self) -> Tuple[ApplicationState, str]:
        """State and progress text read together."""
        with self._lock:
            return self._state.model_copy(deep=True), self._status_message

    def get_image(self, image_id: str) -> GeneratedImage:
        with self._lock:
            for image in self._state.images:
                if image.id == image_id:
                    return image
        raise KeyError("image not found")

    # ---------- transitions ----------
    def update_form(self, theme: Optional[str] = None, child_name: Optional[str] = None) -> ApplicationState:
        """Edit the form fields while the wizard is on the input step."""
        with self._lock:
            if self._state.is_generating:
                raise InvalidStateError(ErrorCode.GENERATION_IN_PROGRESS)
            if self._state.current_step != GenerationStep.INPUT:
                raise InvalidStateError(ErrorCode.BOOK_ALREADY_MADE)
            if theme is not None:
                self._state.theme = theme
            if child_name is not None:
                self._state.child_name = child_name
            return self._state.model_copy(deep=True)

    def begin_generation(self, theme: Optional[str] = None, child_name: Optional[str] = None) -> bool:
        """
        Validate the form and enter the generating step.

        Returns False (and changes nothing) when a field is blank or a run is
        already in progress.
        """
        return self.try_begin_generation(theme, child_name) is None

    def try_begin_generation(
        self, theme: Optional[str] = None, child_name: Optional[str] = None
    ) -> Optional[ErrorCode]:
        """Like begin_generation, but returns why nothing started (None when it did)."""
        with self._lock:
            if self._state.is_generating:
                logger.info("Generation request ignored: run already in progress")
                return ErrorCode.GENERATION_IN_PROGRESS

            theme = self._state.theme if theme is None else theme
            child_name = self._state.child_name if child_name is None else child_name
            if not theme.strip() or not child_name.strip():
                return ErrorCode.MISSING_FIELD

            self._state.theme = theme
            self._state.child_name = child_name
            self._state.is_generating = True
            self._state.current_step = GenerationStep.GENERATING
            self._state.error = None
            self._state.images = []
            self._status_message = ""
            return None

    def run_generation(self) -> ApplicationState:
        """Run the image stages for a begun generation and settle the state."""
        with self._lock:
            if not self._state.is_generating:
                raise InvalidStateError(ErrorCode.BOOK_NOT_READY, "No generation has been started")
            theme, child_name = self._state.theme, self._state.child_name

        try:
            images = self._image_generator(theme, child_name, self._on_progress)
            if not images:
                raise RuntimeError("Image service returned no images")
        except Exception as e:
            logger.error(f"Book generation failed for theme {theme!r}: {e}", exc_info=True)
            with self._lock:
                self._state.is_generating = False
                self._state.images = []
                self._state.error = get_error_message(ErrorCode.BOOK_GENERATION_FAILED)
                self._state.current_step = GenerationStep.INPUT
                return self._state.model_copy(deep=True)

        with self._lock:
            self._state.is_generating = False
            self._state.images = list(images)
            self._state.current_step = GenerationStep.COMPLETE
            logger.info(f"Book ready for {child_name!r}: {len(images)} image(s)")
            return self._state.model_copy(deep=True)

    def start_generation(self, theme: Optional[str] = None, child_name: Optional[str] = None) -> bool:
        """Begin and run a generation synchronously. Returns False if nothing started."""
        if not self.begin_generation(theme, child_name):
            return False
        self.run_generation()
        return True

    def reset(self) -> ApplicationState:
        """Start over with an empty form. Only allowed once the book is complete."""
        with self._lock:
            if self._state.current_step != GenerationStep.COMPLETE:
                raise InvalidStateError(ErrorCode.BOOK_NOT_READY, "Only a finished book can be reset")
            self._state = ApplicationState()
            self._status_message = ""
            return self._state.model_copy(deep=True)

    def request_download(self) -> BookDocument:
        """
        Assemble the PDF for the finished book. State is left untouched.

        Raises:
            InvalidStateError: unless the book is complete
            DocumentAssemblyError: if the PDF could not be built
        """
        with self._lock:
            if self._state.current_step != GenerationStep.COMPLETE:
                raise InvalidStateError(ErrorCode.BOOK_NOT_READY)
            images = list(self._state.images)
            theme, child_name = self._state.theme, self._state.child_name
        return self._document_builder(images, theme, child_name)

    def _on_progress(self, message: str) -> None:
        self._status_message = message
