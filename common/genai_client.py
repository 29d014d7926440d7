"""Gemini client factory shared by the image and chat services."""
from google import genai

from config import Config
from utils.logger import get_logger

logger = get_logger("genai_client")


def get_genai_client() -> genai.Client:
    """
    Build a Gemini client from the configured API key.

    Raises:
        ValueError: if GEMINI_API_KEY is not set
    """
    api_key = Config.get_gemini_api_key()
    logger.debug("Creating Gemini client")
    return genai.Client(api_key=api_key)
