import pytest

from book.services import BookDocument
from common.error_messages import ErrorCode, InvalidStateError
from common.models import ApplicationState, GeneratedImage, GenerationStep, ImageVariant
from studio.controller import ColoringBookController

from conftest import make_jpeg

THEME = "Space Dinosaurs eating Pizza"
GENERIC_ERROR = "Oops! Something went wrong making the book. Please try again."


def _book_images():
    cover = GeneratedImage.from_bytes("cover-1", make_jpeg(), ImageVariant.COVER, "cover")
    pages = [GeneratedImage.from_bytes(f"page-{i}", make_jpeg(), ImageVariant.PAGE, "page") for i in range(5)]
    return [cover] + pages


class RecordingGenerator:
    def __init__(self, result=None, error=None):
        self.result = result if result is not None else _book_images()
        self.error = error
        self.calls = []
        self.seen_status = []

    def __call__(self, theme, child_name, on_progress):
        self.calls.append((theme, child_name))
        on_progress("Designing a magical cover...")
        self.seen_status.append(self.controller.status_message)
        on_progress("Adding final touches...")
        if self.error:
            raise self.error
        return self.result


def _controller(generator=None, builder=None):
    generator = generator or RecordingGenerator()
    controller = ColoringBookController(image_generator=generator, document_builder=builder or (lambda *a: None))
    generator.controller = controller
    return controller, generator


def test_initial_state():
    controller, _ = _controller()

    assert controller.state == ApplicationState()
    assert controller.state.current_step == GenerationStep.INPUT
    assert controller.status_message == ""


@pytest.mark.parametrize("theme,child_name", [("", "Olivia"), (THEME, ""), ("   ", "Olivia")])
def test_blank_fields_are_a_no_op(theme, child_name):
    controller, generator = _controller()

    assert controller.start_generation(theme, child_name) is False
    assert generator.calls == []
    assert controller.state.current_step == GenerationStep.INPUT


def test_successful_run_completes_with_cover_first():
    controller, generator = _controller()

    assert controller.start_generation(THEME, "Olivia") is True

    state = controller.state
    assert generator.calls == [(THEME, "Olivia")]
    assert state.current_step == GenerationStep.COMPLETE
    assert state.is_generating is False
    assert state.error is None
    assert len(state.images) == 6
    assert state.images[0].type == ImageVariant.COVER
    assert all(img.type == ImageVariant.PAGE for img in state.images[1:])


def test_progress_text_is_overwritten_by_each_callback():
    controller, generator = _controller()

    controller.start_generation(THEME, "Olivia")

    assert generator.seen_status == ["Designing a magical cover..."]
    assert controller.status_message == "Adding final touches..."


def test_failed_run_returns_to_input_with_generic_error():
    controller, _ = _controller(RecordingGenerator(error=RuntimeError("boom")))

    controller.start_generation(THEME, "Olivia")

    state = controller.state
    assert state.current_step == GenerationStep.INPUT
    assert state.images == []
    assert state.is_generating is False
    assert state.error == GENERIC_ERROR


def test_failed_rerun_discards_previous_book():
    generator = RecordingGenerator()
    controller, _ = _controller(generator)
    controller.start_generation(THEME, "Olivia")

    generator.error = RuntimeError("service down")
    controller.start_generation("Robots", "Olivia")

    assert controller.state.images == []
    assert controller.state.current_step == GenerationStep.INPUT


def test_empty_result_is_treated_as_failure():
    controller, _ = _controller(RecordingGenerator(result=[]))

    controller.start_generation(THEME, "Olivia")

    assert controller.state.current_step == GenerationStep.INPUT
    assert controller.state.error == GENERIC_ERROR


def test_new_run_clears_previous_error():
    generator = RecordingGenerator(error=RuntimeError("boom"))
    controller, _ = _controller(generator)
    controller.start_generation(THEME, "Olivia")

    generator.error = None
    controller.start_generation(THEME, "Olivia")

    assert controller.state.error is None
    assert controller.state.current_step == GenerationStep.COMPLETE


def test_second_request_while_generating_is_ignored():
    controller, generator = _controller()

    assert controller.begin_generation(THEME, "Olivia") is True
    assert controller.state.current_step == GenerationStep.GENERATING
    assert controller.begin_generation(THEME, "Olivia") is False

    controller.run_generation()
    assert len(generator.calls) == 1


def test_reset_from_complete_restores_initial_state():
    controller, _ = _controller()
    controller.start_generation(THEME, "Olivia")

    controller.reset()

    assert controller.state == ApplicationState()
    assert controller.status_message == ""


def test_reset_outside_complete_is_rejected():
    controller, _ = _controller()

    with pytest.raises(InvalidStateError):
        controller.reset()


def test_download_delegates_to_builder_without_changing_state():
    received = []

    def builder(images, theme, child_name):
        received.append((images, theme, child_name))
        return BookDocument(filename="Olivia_Coloring_Book.pdf", content=b"%PDF", page_count=len(images))

    controller, _ = _controller(builder=builder)
    controller.start_generation(THEME, "Olivia")
    before = controller.state

    document = controller.request_download()

    assert document.page_count == 6
    assert received[0][1:] == (THEME, "Olivia")
    assert received[0][0] == before.images
    assert controller.state == before


def test_download_before_complete_is_rejected():
    controller, _ = _controller()

    with pytest.raises(InvalidStateError):
        controller.request_download()


def test_form_is_locked_once_book_is_complete():
    controller, _ = _controller()
    controller.update_form(theme=THEME, child_name="Olivia")
    assert controller.state.theme == THEME

    controller.start_generation()

    with pytest.raises(InvalidStateError):
        controller.update_form(theme="Robots")


def test_get_image_by_id():
    controller, _ = _controller()
    controller.start_generation(THEME, "Olivia")

    assert controller.get_image("page-2").id == "page-2"
    with pytest.raises(KeyError):
        controller.get_image("missing")


def test_refused_start_reports_the_reason():
    controller, _ = _controller()

    assert controller.try_begin_generation("", "Olivia") == ErrorCode.MISSING_FIELD
    assert controller.try_begin_generation(THEME, "Olivia") is None
    assert controller.try_begin_generation(THEME, "Olivia") == ErrorCode.GENERATION_IN_PROGRESS
    assert controller.try_begin_generation("", "") == ErrorCode.GENERATION_IN_PROGRESS
