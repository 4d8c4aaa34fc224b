from __future__ import annotations
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import List, Optional, Literal


class CamelModel(BaseModel):
    """JSON bodies use camelCase keys; Python code uses snake_case."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Size(CamelModel):
    width: int
    height: int


class EnhanceRequest(CamelModel):
    image: Optional[str] = None  # base64 image, data-URI header optional
    upscale_factor: float = 1
    denoise: bool = False
    enhance_colors: bool = False


class EnhanceMetadata(CamelModel):
    original_size: Size
    enhanced_size: Size


class EnhanceResponse(CamelModel):
    enhanced_image: str
    detected_items: List[str]
    metadata: EnhanceMetadata


class VideoRequest(CamelModel):
    image: Optional[str] = None
    detected_items: List[str] = Field(default_factory=list)
    duration: int = 15
    # Free string on purpose: unknown styles fall back to "authentic"
    style: str = "tiktok"
    add_narration: bool = True
    format: Literal["html", "mp4"] = "html"


class VideoEffects(CamelModel):
    transition: str
    speed: str
    filters: List[str]


class VideoMetadata(CamelModel):
    duration: int
    style: str
    detected_items: List[str]
    effects: VideoEffects
    format: str


class VideoResponse(CamelModel):
    video_url: str
    narration: str
    metadata: VideoMetadata


class ErrorResponse(BaseModel):
    error: str
