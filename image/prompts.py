"""Prompt templates for the three image stages."""

COVER_PROMPT = (
    "A vibrant, colorful, cute cartoon style children's book cover illustration about {theme}. "
    "High quality, happy atmosphere, vivid colors. No text, empty space in center for title."
)

PAGE_BATCH_PROMPT = (
    "A set of diverse coloring book pages about {theme}. "
    "Black and white outline art, thick lines, white background, no shading."
)

FINALE_PAGE_PROMPT = (
    "A single detailed coloring book page about {theme}, finale scene. "
    "Black and white outline art, thick lines, white background."
)

# Status lines reported before each stage
COVER_STATUS = "Designing a magical cover..."
PAGES_STATUS = "Drawing the first few pages..."
FINALE_STATUS = "Adding final touches..."


def cover_prompt(theme: str) -> str:
    return COVER_PROMPT.format(theme=theme)


def page_batch_prompt(theme: str) -> str:
    return PAGE_BATCH_PROMPT.format(theme=theme)


def finale_page_prompt(theme: str) -> str:
    return FINALE_PAGE_PROMPT.format(theme=theme)
