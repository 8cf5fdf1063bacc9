"""Configuration management."""

import os
from pathlib import Path
from pydantic import BaseModel, Field
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Config(BaseModel):
    """Application configuration."""

    # API Keys
    anthropic_api_key: str = Field(
        default_factory=lambda: os.getenv("ANTHROPIC_API_KEY", ""),
        description="Anthropic API key"
    )
    google_application_credentials: str = Field(
        default_factory=lambda: os.getenv("GOOGLE_APPLICATION_CREDENTIALS", ""),
        description="Path to Google Cloud service account JSON"
    )
    google_cloud_project: str = Field(
        default_factory=lambda: os.getenv("GOOGLE_CLOUD_PROJECT", ""),
        description="Google Cloud project ID"
    )
    google_cloud_location: str = Field(
        default_factory=lambda: os.getenv("GOOGLE_CLOUD_LOCATION", "us-central1"),
        description="Vertex AI region"
    )
    output_storage_uri: str = Field(
        default_factory=lambda: os.getenv("GCS_OUTPUT_STORAGE_URI", ""),
        description="GCS prefix where Imagen and Veo write their output"
    )

    # Paths
    public_dir: Path = Field(
        default_factory=lambda: Path(os.getenv("STORYBOARDER_PUBLIC_DIR", "public")),
        description="Local directory mirroring generated videos"
    )

    # Model settings
    text_model: str = Field(
        default_factory=lambda: os.getenv("STORYBOARDER_TEXT_MODEL", "claude-sonnet-4-20250514"),
        description="Claude model used for scenario and storyboard text"
    )
    imagen_model: str = Field(
        default_factory=lambda: os.getenv("IMAGEN_MODEL", "imagen-3.0-generate-002"),
        description="Imagen model for text-to-image"
    )
    imagen_customization_model: str = Field(
        default_factory=lambda: os.getenv("IMAGEN_CUSTOMIZATION_MODEL", "imagen-3.0-capability-001"),
        description="Imagen model for subject-referenced images"
    )
    veo_model: str = Field(
        default_factory=lambda: os.getenv("VEO_MODEL", "veo-2.0-generate-001"),
        description="Veo model for image-to-video"
    )

    # Generation settings
    scene_aspect_ratio: str = Field(default="16:9", description="Aspect ratio of scene images")
    use_character_references: bool = Field(
        default_factory=lambda: _env_bool("STORYBOARDER_CHARACTER_REFERENCES"),
        description="Render scene images with the present characters' images as subject references"
    )
    max_concurrency: int = Field(
        default_factory=lambda: int(os.getenv("STORYBOARDER_MAX_CONCURRENCY", "4")),
        description="Maximum in-flight remote calls per fan-out",
        ge=1,
    )
    signed_url_expiry_hours: float = Field(
        default_factory=lambda: float(os.getenv("SIGNED_URL_EXPIRY_HOURS", "100")),
        description="Lifetime of signed video URLs",
        gt=0,
    )
    veo_poll_interval: float = Field(
        default_factory=lambda: float(os.getenv("VEO_POLL_INTERVAL", "10")),
        description="Seconds between Veo operation polls",
        gt=0,
    )
    veo_max_poll_time: float = Field(
        default_factory=lambda: float(os.getenv("VEO_MAX_POLL_TIME", "600")),
        description="Deadline in seconds for a single Veo operation",
        gt=0,
    )

    class Config:
        """Pydantic config."""
        frozen = False

    def validate_required(self) -> None:
        """Validate that required credentials are set."""
        if not self.anthropic_api_key:
            raise ValueError("ANTHROPIC_API_KEY not set")

    def validate_google_required(self) -> None:
        """Validate that Google Cloud settings are present.

        Raises:
            ValueError: If any required Google Cloud configuration is missing.
        """
        missing: list[str] = []

        if not self.google_cloud_project:
            missing.append("GOOGLE_CLOUD_PROJECT")
        if not self.output_storage_uri:
            missing.append("GCS_OUTPUT_STORAGE_URI")

        if missing:
            raise ValueError(
                f"Missing required Google Cloud configuration: {', '.join(missing)}. "
                "Set the corresponding environment variables."
            )

        # Validate bucket format
        if not self.output_storage_uri.startswith("gs://"):
            raise ValueError(
                f"GCS_OUTPUT_STORAGE_URI must be a GCS URI starting with 'gs://'. "
                f"Got: {self.output_storage_uri}"
            )


# Global config instance
config = Config()
