"""Image generation services - Imagen integration."""
from uuid import uuid4
from typing import Optional, List, Callable, Any

from google.genai import types

from config import Config
from common.genai_client import get_genai_client
from common.models import GeneratedImage, ImageVariant
from image.prompts import (
    cover_prompt,
    page_batch_prompt,
    finale_page_prompt,
    COVER_STATUS,
    PAGES_STATUS,
    FINALE_STATUS,
)
from utils.logger import get_logger

logger = get_logger("image.services")

ProgressCallback = Callable[[str], None]


def _report(on_progress: Optional[ProgressCallback], message: str) -> None:
    logger.info(message)
    if on_progress:
        on_progress(message)


def request_images(client: Any, prompt: str, number_of_images: int) -> List[bytes]:
    """
    Issue one Imagen request and return the image payloads it carried.

    Entries without image bytes are dropped. Service errors propagate.
    """
    config = types.GenerateImagesConfig(
        number_of_images=number_of_images,
        output_mime_type=Config.IMAGE_MIME_TYPE,
        aspect_ratio=Config.IMAGE_ASPECT_RATIO,
    )
    response = client.models.generate_images(
        model=Config.IMAGE_MODEL,
        prompt=prompt,
        config=config,
    )

    payloads = []
    for generated in getattr(response, "generated_images", None) or []:
        image = getattr(generated, "image", None)
        data = getattr(image, "image_bytes", None) if image else None
        if data:
            payloads.append(data)
    return payloads


def generate_coloring_book_images(
    theme: str,
    child_name: str,
    on_progress: Optional[ProgressCallback] = None,
    client: Any = None,
) -> List[GeneratedImage]:
    """
    Generate a coloring book cover and pages in three sequential requests.

    Stages:
      1. one colorful cover
      2. one batch of PAGE_BATCH_SIZE line-art pages sharing a prompt
      3. one finale page

    Args:
        theme: Theme idea typed by the parent
        child_name: Child's name (only used for logging)
        on_progress: Called with a status line before each stage
        client: Gemini client; built from the configured API key when omitted

    Returns:
        Cover first (if the service returned one), then batch pages in
        response order, then the finale page.

    Raises:
        RuntimeError: on any service failure. No partial result is returned.
    """
    try:
        if client is None:
            client = get_genai_client()

        images: List[GeneratedImage] = []
        logger.info(f"Generating coloring book for {child_name!r} with theme {theme!r}")

        # 1. Cover
        _report(on_progress, COVER_STATUS)
        prompt = cover_prompt(theme)
        cover = request_images(client, prompt, 1)
        if cover:
            images.append(GeneratedImage.from_bytes(f"cover-{uuid4().hex}", cover[0], ImageVariant.COVER, prompt))
        else:
            logger.warning("Cover request returned no image data")

        # 2. Page batch
        _report(on_progress, PAGES_STATUS)
        batch_size = Config.PAGE_BATCH_SIZE
        pages = request_images(client, page_batch_prompt(theme), batch_size)
        if len(pages) < batch_size:
            logger.warning(f"Page batch returned {len(pages)} of {batch_size} requested images")
        for idx, data in enumerate(pages):
            images.append(GeneratedImage.from_bytes(f"page-b1-{idx}", data, ImageVariant.PAGE, "Batch 1 generated page"))

        # 3. Finale
        _report(on_progress, FINALE_STATUS)
        finale = request_images(client, finale_page_prompt(theme), 1)
        if finale:
            images.append(GeneratedImage.from_bytes("page-final", finale[0], ImageVariant.PAGE, "Final page"))
        else:
            logger.warning("Finale request returned no image data")

        logger.info(f"Generation complete: {len(images)} image(s)")
        return images
    except RuntimeError:
        raise
    except Exception as e:
        logger.error(f"Error generating images: {e}")
        raise RuntimeError(f"Image generation failed: {str(e)}") from e
