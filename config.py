"""
Configuration module - loads all settings from environment variables.
"""
import os
from dotenv import load_dotenv

# Load environment variables from .env file
try:
    load_dotenv()
except Exception as e:
    print(f"Warning: Failed to load .env file: {e}")
    print("Continuing with environment variables or defaults...")


class Config:
    """Application configuration loaded from environment variables."""

    @staticmethod
    def _get_int(key: str, default: int) -> int:
        """Safely parse integer environment variable."""
        try:
            return int(os.getenv(key, str(default)))
        except (ValueError, TypeError) as e:
            print(f"Warning: Invalid integer for {key}, using default {default}: {e}")
            return default

    @staticmethod
    def _get_bool(key: str, default: bool) -> bool:
        """Safely parse boolean environment variable."""
        try:
            value = os.getenv(key, str(default)).lower()
            return value in ("true", "1", "yes", "on")
        except Exception as e:
            print(f"Warning: Invalid boolean for {key}, using default {default}: {e}")
            return default

    # Gemini API (API_KEY kept for older deployments)
    GEMINI_API_KEY: str = os.getenv("GEMINI_API_KEY", "") or os.getenv("API_KEY", "")
    IMAGE_MODEL: str = os.getenv("IMAGE_MODEL", "imagen-4.0-generate-001")
    CHAT_MODEL: str = os.getenv("CHAT_MODEL", "gemini-3-pro-preview")

    # Book generation
    PAGE_BATCH_SIZE: int = _get_int.__func__("PAGE_BATCH_SIZE", 4)
    IMAGE_ASPECT_RATIO: str = os.getenv("IMAGE_ASPECT_RATIO", "3:4")
    IMAGE_MIME_TYPE: str = "image/jpeg"

    # Logging
    LOG_DIR: str = os.getenv("LOG_DIR", os.path.join(os.path.dirname(os.path.abspath(__file__)), "logs"))
    LOG_RETENTION_DAYS: int = _get_int.__func__("LOG_RETENTION_DAYS", 10)
    LOG_REQUEST_DETAILS: bool = _get_bool.__func__("LOG_REQUEST_DETAILS", True)

    # Server
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = _get_int.__func__("PORT", 8000)

    @classmethod
    def validate(cls) -> None:
        """Validate required configuration."""
        if not cls.GEMINI_API_KEY:
            raise ValueError("GEMINI_API_KEY environment variable is required")

    @classmethod
    def get_gemini_api_key(cls) -> str:
        """Get GEMINI_API_KEY, raise error if not set."""
        if not cls.GEMINI_API_KEY:
            raise ValueError("API Key is missing. Please set GEMINI_API_KEY in environment variables")
        return cls.GEMINI_API_KEY
