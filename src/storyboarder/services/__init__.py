"""External service integrations."""

from .anthropic import AnthropicClient
from .imagen import ImagenClient, ImageResult
from .storage import StorageClient, parse_gcs_uri
from .veo import VeoClient, video_uri_from_operation

__all__ = [
    "AnthropicClient",
    "ImagenClient",
    "ImageResult",
    "StorageClient",
    "parse_gcs_uri",
    "VeoClient",
    "video_uri_from_operation",
]
