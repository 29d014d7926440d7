"""
Coloring book PDF assembly.

Turns the ordered images of a finished run into an A4 document: an optional
full-bleed cover carrying the title, then one bordered page per line-art
image with a "Page <n>" footer. No network I/O happens here and the output
is byte-for-byte reproducible for identical inputs.
"""
import re
from dataclasses import dataclass
from io import BytesIO
from typing import List, Optional, Sequence

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from common.error_messages import DocumentAssemblyError
from common.models import GeneratedImage, ImageVariant
from utils.logger import get_logger

logger = get_logger("book.services")

FILENAME_SUFFIX = "_Coloring_Book.pdf"
ATTRIBUTION = "Created with DreamColor AI"

TITLE_COLOR = colors.Color(45 / 255, 52 / 255, 54 / 255)
THEME_COLOR = colors.Color(100 / 255, 100 / 255, 100 / 255)
FOOTER_COLOR = colors.Color(150 / 255, 150 / 255, 150 / 255)

# Offsets are measured from the top edge, as on the printed page
TITLE_BOX_X = 20 * mm
TITLE_BOX_TOP = 40 * mm
TITLE_BOX_HEIGHT = 60 * mm
TITLE_BOX_RADIUS = 5 * mm
NAME_LINE = (60 * mm, "Helvetica-Bold", 36)
SUBTITLE_LINE = (75 * mm, "Helvetica", 24)
THEME_LINE = (90 * mm, "Helvetica", 16)
ATTRIBUTION_BASELINE = 10 * mm

BORDER_INSET = 10 * mm
BORDER_WIDTH = 1 * mm
IMAGE_MARGIN = 20 * mm
CAPTION_SPACE = 20 * mm
PAGE_NUMBER_BASELINE = 15 * mm


@dataclass(frozen=True)
class BookPage:
    """One planned page. page_number is None for the cover."""
    image: GeneratedImage
    page_number: Optional[int] = None

    @property
    def is_cover(self) -> bool:
        return self.page_number is None


@dataclass(frozen=True)
class BookDocument:
    filename: str
    content: bytes
    page_count: int
    media_type: str = "application/pdf"


def book_filename(child_name: str) -> str:
    """'Olivia Rose' -> 'Olivia_Rose_Coloring_Book.pdf'."""
    return re.sub(r"\s+", "_", child_name) + FILENAME_SUFFIX


def plan_book_pages(images: Sequence[GeneratedImage]) -> List[BookPage]:
    """Cover first (when present), then content pages numbered from 1."""
    plan: List[BookPage] = []
    cover = next((img for img in images if img.type == ImageVariant.COVER), None)
    if cover is not None:
        plan.append(BookPage(image=cover))

    pages = [img for img in images if img.type == ImageVariant.PAGE]
    for index, page in enumerate(pages, start=1):
        plan.append(BookPage(image=page, page_number=index))
    return plan


def _reader(image: GeneratedImage) -> ImageReader:
    return ImageReader(BytesIO(image.image_bytes()))


def _draw_cover(pdf: canvas.Canvas, page: BookPage, theme: str, child_name: str, width: float, height: float) -> None:
    pdf.drawImage(_reader(page.image), 0, 0, width, height)

    pdf.setFillColor(colors.white)
    pdf.roundRect(
        TITLE_BOX_X,
        height - TITLE_BOX_TOP - TITLE_BOX_HEIGHT,
        width - 2 * TITLE_BOX_X,
        TITLE_BOX_HEIGHT,
        TITLE_BOX_RADIUS,
        stroke=0,
        fill=1,
    )

    lines = (
        (NAME_LINE, TITLE_COLOR, f"{child_name}'s"),
        (SUBTITLE_LINE, TITLE_COLOR, "Coloring Book"),
        (THEME_LINE, THEME_COLOR, theme.upper()),
    )
    for (offset, font, size), color, text in lines:
        pdf.setFillColor(color)
        pdf.setFont(font, size)
        pdf.drawCentredString(width / 2, height - offset, text)

    pdf.setFillColor(colors.white)
    pdf.setFont("Helvetica", 10)
    pdf.drawCentredString(width / 2, ATTRIBUTION_BASELINE, ATTRIBUTION)


def _draw_content_page(pdf: canvas.Canvas, page: BookPage, width: float, height: float) -> None:
    pdf.setStrokeColor(colors.black)
    pdf.setLineWidth(BORDER_WIDTH)
    pdf.rect(BORDER_INSET, BORDER_INSET, width - 2 * BORDER_INSET, height - 2 * BORDER_INSET, stroke=1, fill=0)

    max_width = width - 2 * IMAGE_MARGIN
    max_height = height - 2 * IMAGE_MARGIN - CAPTION_SPACE
    pdf.drawImage(
        _reader(page.image),
        IMAGE_MARGIN,
        height - IMAGE_MARGIN - max_height,
        max_width,
        max_height,
        preserveAspectRatio=True,
        anchor="c",
    )

    pdf.setFillColor(FOOTER_COLOR)
    pdf.setFont("Helvetica", 12)
    pdf.drawCentredString(width / 2, PAGE_NUMBER_BASELINE, f"Page {page.page_number}")


def build_coloring_book(images: Sequence[GeneratedImage], theme: str, child_name: str) -> BookDocument:
    """
    Render the coloring book PDF.

    Raises:
        DocumentAssemblyError: if an image cannot be decoded or drawn
    """
    plan = plan_book_pages(images)
    filename = book_filename(child_name)
    width, height = A4

    try:
        buffer = BytesIO()
        pdf = canvas.Canvas(buffer, pagesize=A4, invariant=1)
        pdf.setTitle(f"{child_name}'s Coloring Book")
        pdf.setAuthor("DreamColor")

        for page in plan:
            if page.is_cover:
                _draw_cover(pdf, page, theme, child_name, width, height)
            else:
                _draw_content_page(pdf, page, width, height)
            pdf.showPage()

        pdf.save()
    except Exception as e:
        logger.error(f"Failed to assemble {filename}: {e}")
        raise DocumentAssemblyError(f"Failed to assemble coloring book: {e}") from e

    logger.info(f"Assembled {filename}: {len(plan)} page(s)")
    return BookDocument(filename=filename, content=buffer.getvalue(), page_count=len(plan))
