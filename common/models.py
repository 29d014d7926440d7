"""Shared book and chat models."""
import base64
from enum import Enum, IntEnum
from typing import Optional, List
from pydantic import BaseModel, ConfigDict, Field


DATA_URL_PREFIX = "data:image/jpeg;base64,"


class ImageVariant(str, Enum):
    """Where a generated picture goes in the book."""
    COVER = "cover"
    PAGE = "page"


class GenerationStep(IntEnum):
    """Book wizard steps."""
    INPUT = 0
    GENERATING = 1
    COMPLETE = 2


class GeneratedImage(BaseModel):
    """A single picture returned by the image service for one run."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Identifier, unique within a run")
    url: str = Field(..., description="Base64 data URL of the JPEG payload")
    type: ImageVariant = Field(..., description="Cover or content page")
    prompt: str = Field("", description="Prompt that produced the image (diagnostic only)")

    @classmethod
    def from_bytes(cls, image_id: str, data: bytes, variant: ImageVariant, prompt: str) -> "GeneratedImage":
        encoded = base64.b64encode(data).decode("ascii")
        return cls(id=image_id, url=f"{DATA_URL_PREFIX}{encoded}", type=variant, prompt=prompt)

    def image_bytes(self) -> bytes:
        """Decode the JPEG payload."""
        _, _, encoded = self.url.partition(",")
        return base64.b64decode(encoded)


class ApplicationState(BaseModel):
    """State of one book session. Only the controller mutates it."""
    theme: str = ""
    child_name: str = ""
    is_generating: bool = False
    current_step: GenerationStep = GenerationStep.INPUT
    images: List[GeneratedImage] = Field(default_factory=list)
    error: Optional[str] = None


class ChatRole(str, Enum):
    """Chat participants. The assistant side is called 'model' by Gemini."""
    USER = "user"
    MODEL = "model"


class ChatMessage(BaseModel):
    """One entry of the Idea Helper transcript."""
    id: str
    role: ChatRole
    text: str
    timestamp: int = Field(..., description="Creation time in epoch milliseconds")


# ---------- API payloads ----------
class BookForm(BaseModel):
    theme: Optional[str] = Field(None, description="Theme idea, e.g. 'Space Dinosaurs eating Pizza'")
    child_name: Optional[str] = Field(None, description="Child's name shown on the cover")


class GalleryItem(BaseModel):
    id: str
    type: ImageVariant
    label: str = Field(..., description="'Cover Art' or 'Page <n>'")
    image_url: str = Field(..., description="API path serving the JPEG bytes")


class StateResponse(BaseModel):
    session_id: str
    theme: str
    child_name: str
    is_generating: bool
    current_step: GenerationStep
    status_message: str = ""
    error: Optional[str] = None
    gallery: List[GalleryItem] = Field(default_factory=list)


class ChatSendRequest(BaseModel):
    text: str = Field("", description="Message typed into the Idea Helper")


class ChatMessagesResponse(BaseModel):
    available: bool = Field(..., description="Whether a chat session could be created")
    is_loading: bool = False
    messages: List[ChatMessage] = Field(default_factory=list)
