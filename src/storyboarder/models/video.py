"""Video request and response models."""

from typing import List, Optional

from pydantic import Field

from .scenario import CamelModel


class VideoScene(CamelModel):
    """A scene submitted for video generation."""

    image_prompt: str = Field(default="", description="Prompt the seed image was made from")
    video_prompt: str = Field(default="", description="Motion prompt for Veo")
    description: str = Field(default="", description="Scene description")
    voiceover: str = Field(default="", description="Narrator line")
    image_base64: Optional[str] = Field(None, description="Seed image, base64 encoded")


class VideoUrl(CamelModel):
    """A generated video."""

    file_name: str = Field(..., description="Object path in the bucket, mirrored under the public dir")
    url: str = Field(..., description="Time-limited signed URL")


class VideoResponse(CamelModel):
    """Result of a video batch."""

    success: bool
    video_urls: Optional[List[VideoUrl]] = None
    error: Optional[str] = None
