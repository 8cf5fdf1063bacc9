"""Google Imagen API client wrapper via Vertex AI."""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Sequence

from ..config import config
from ..errors import ContentFilteredError, RemoteCallError
from ..models import Character
from .vertex import VertexRestClient

logger = logging.getLogger(__name__)


@dataclass
class ImageResult:
    """Result of an Imagen generation call."""

    prompt: str
    gcs_uri: str
    created_at: Optional[datetime] = None
    metadata: dict = field(default_factory=dict)


class ImagenClient(VertexRestClient):
    """Client wrapper for Google Imagen image generation via Vertex AI.

    Images are written by the service to ``storage_uri``; callers only get
    the ``gs://`` URI back.
    """

    DEFAULT_MODEL = "imagen-3.0-generate-002"
    DEFAULT_CUSTOMIZATION_MODEL = "imagen-3.0-capability-001"

    def __init__(
        self,
        project_id: Optional[str] = None,
        location: Optional[str] = None,
        model: Optional[str] = None,
        customization_model: Optional[str] = None,
        storage_uri: Optional[str] = None,
    ) -> None:
        """Initialize the Imagen client.

        Args:
            project_id: Google Cloud project ID.
            location: GCP region for Vertex AI.
            model: Imagen model name for text-to-image.
            customization_model: Imagen model for subject-referenced images.
            storage_uri: GCS prefix the service writes images to.
        """
        super().__init__(project_id=project_id, location=location)
        self._model = model or config.imagen_model or self.DEFAULT_MODEL
        self._customization_model = (
            customization_model or config.imagen_customization_model or self.DEFAULT_CUSTOMIZATION_MODEL
        )
        self._storage_uri = storage_uri or config.output_storage_uri

        if not self._storage_uri.startswith("gs://"):
            raise ValueError(
                f"Imagen storage URI must start with 'gs://'. Got: {self._storage_uri!r}"
            )

    @property
    def model(self) -> str:
        return self._model

    def generate_image(self, prompt: str, aspect_ratio: Optional[str] = None) -> ImageResult:
        """Generate an image from a text prompt.

        Args:
            prompt: Text description of the image to generate.
            aspect_ratio: '1:1', '16:9', '9:16', '4:3' or '3:4'. The model
                default is used when omitted.

        Returns:
            ImageResult pointing at the stored image.

        Raises:
            ContentFilteredError: If the prompt or image was filtered.
            RemoteCallError: If the API call failed.
        """
        parameters = self._parameters()
        if aspect_ratio:
            parameters["aspectRatio"] = aspect_ratio

        body = {"instances": [{"prompt": prompt}], "parameters": parameters}

        logger.info(f"Generating image with Imagen: {prompt[:50]}...")
        data = self._post(self._model_url(self._model, "predict"), body)
        return self._to_result(prompt, data, model=self._model, aspect_ratio=aspect_ratio)

    def customize_image(self, prompt: str, subjects: Sequence[Character]) -> ImageResult:
        """Generate an image that reuses characters' stored images as subjects.

        Each character is tagged ``[n]`` in the prompt, matching its
        reference id.

        Raises:
            ValueError: If a subject has no stored image.
            ContentFilteredError: If the prompt or image was filtered.
            RemoteCallError: If the API call failed.
        """
        reference_images = []
        tags = []
        for reference_id, character in enumerate(subjects, start=1):
            if not character.image_gcs_uri:
                raise ValueError(f"Character {character.name!r} has no reference image")
            reference_images.append({
                "referenceType": "REFERENCE_TYPE_SUBJECT",
                "referenceId": reference_id,
                "referenceImage": {"gcsUri": character.image_gcs_uri},
                "subjectImageConfig": {
                    "subjectDescription": character.description,
                    "subjectType": "SUBJECT_TYPE_PERSON",
                },
            })
            tags.append(f"{character.name} [{reference_id}]")

        tagged_prompt = f"{prompt}\nCharacters: {', '.join(tags)}."
        body = {
            "instances": [{"prompt": tagged_prompt, "referenceImages": reference_images}],
            "parameters": self._parameters(),
        }

        logger.info(f"Generating customized image with {len(reference_images)} subject(s)")
        data = self._post(self._model_url(self._customization_model, "predict"), body)
        return self._to_result(tagged_prompt, data, model=self._customization_model)

    def _parameters(self) -> dict:
        return {
            "sampleCount": 1,
            "storageUri": self._storage_uri,
            "includeRaiReason": True,
            "personGeneration": "allow_adult",
        }

    def _to_result(self, prompt: str, data: dict, **metadata) -> ImageResult:
        predictions = data.get("predictions") or []
        if not predictions:
            # Imagen drops filtered samples instead of explaining them
            raise ContentFilteredError("No image returned")

        prediction = predictions[0]
        if prediction.get("raiFilteredReason"):
            raise ContentFilteredError(prediction["raiFilteredReason"])

        gcs_uri = prediction.get("gcsUri")
        if not gcs_uri:
            raise RemoteCallError("Imagen response has no gcsUri")

        logger.info(f"Generated image: {gcs_uri}")
        return ImageResult(
            prompt=prompt,
            gcs_uri=gcs_uri,
            created_at=datetime.now(),
            metadata=metadata,
        )
