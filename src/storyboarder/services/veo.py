"""Google Veo API client wrapper via Vertex AI."""

import asyncio
import logging
import time
from typing import Optional

from ..config import config
from ..errors import ContentFilteredError, RemoteCallError
from .vertex import VertexRestClient

logger = logging.getLogger(__name__)


def split_image_payload(image_base64: str) -> tuple[str, str]:
    """Return ``(mime_type, base64_data)`` for a bare or data-URL payload."""
    if image_base64.startswith("data:") and "," in image_base64:
        header, data = image_base64.split(",", 1)
        mime_type = header[5:].split(";", 1)[0] or "image/png"
        return mime_type, data

    if image_base64.startswith("/9j/"):
        return "image/jpeg", image_base64
    return "image/png", image_base64


def video_uri_from_operation(operation: dict) -> str:
    """Extract the first generated video's GCS URI from a finished operation.

    Raises:
        RemoteCallError: If the operation failed or carries no video.
        ContentFilteredError: If every sample was filtered.
    """
    if operation.get("error"):
        error = operation["error"]
        raise RemoteCallError(f"Video generation failed: {error.get('message', error)}")

    response = operation.get("response") or {}

    samples = response.get("generatedSamples") or []
    if samples and samples[0].get("video", {}).get("uri"):
        return samples[0]["video"]["uri"]

    videos = response.get("videos") or []
    if videos and videos[0].get("gcsUri"):
        return videos[0]["gcsUri"]

    if response.get("raiMediaFilteredCount"):
        reasons = response.get("raiMediaFilteredReasons") or ["unspecified"]
        raise ContentFilteredError("; ".join(reasons))

    raise RemoteCallError("Video generation finished without a video")


class VeoClient(VertexRestClient):
    """Client wrapper for Google Veo image-to-video generation via Vertex AI.

    This client handles:
    - Submitting long-running generation requests
    - Polling the operation until it finishes or a deadline passes
    """

    # Default configuration
    DEFAULT_MODEL = "veo-2.0-generate-001"
    DEFAULT_DURATION = 8
    DEFAULT_MAX_RETRIES = 3

    def __init__(
        self,
        project_id: Optional[str] = None,
        location: Optional[str] = None,
        model: Optional[str] = None,
        storage_uri: Optional[str] = None,
        poll_interval: Optional[float] = None,
        max_poll_time: Optional[float] = None,
        max_retries: int = DEFAULT_MAX_RETRIES,
    ) -> None:
        """Initialize the Veo client.

        Args:
            project_id: Google Cloud project ID. Defaults to GOOGLE_CLOUD_PROJECT env var.
            location: GCP region for Vertex AI.
            model: Veo model name.
            storage_uri: GCS prefix for output videos. Defaults to GCS_OUTPUT_STORAGE_URI.
            poll_interval: Seconds between polling checks.
            max_poll_time: Maximum seconds to wait for one operation.
            max_retries: Consecutive polling failures tolerated before giving up.
        """
        super().__init__(project_id=project_id, location=location)
        self._model = model or config.veo_model or self.DEFAULT_MODEL
        self._storage_uri = storage_uri or config.output_storage_uri
        self._poll_interval = poll_interval or config.veo_poll_interval
        self._max_poll_time = max_poll_time or config.veo_max_poll_time
        self._max_retries = max_retries

        # Validate bucket format
        if not self._storage_uri.startswith("gs://"):
            raise ValueError(
                f"Veo storage URI must be a GCS URI starting with 'gs://'. "
                f"Got: {self._storage_uri!r}"
            )

    @property
    def model(self) -> str:
        return self._model

    def generate_scene_video(
        self,
        prompt: str,
        image_base64: str,
        aspect_ratio: str = "16:9",
        duration: int = DEFAULT_DURATION,
    ) -> str:
        """Submit an image-to-video request.

        Returns:
            The operation name to poll.

        Raises:
            ValueError: If the prompt is empty.
            RemoteCallError: If the request was rejected.
        """
        if not prompt or not prompt.strip():
            raise ValueError("Prompt cannot be empty")

        mime_type, data = split_image_payload(image_base64)
        body = {
            "instances": [
                {
                    "prompt": prompt,
                    "image": {"bytesBase64Encoded": data, "mimeType": mime_type},
                }
            ],
            "parameters": {
                "storageUri": self._storage_uri,
                "sampleCount": 1,
                "aspectRatio": aspect_ratio,
                "durationSeconds": duration,
            },
        }

        logger.info(f"Starting Veo generation: {prompt[:60]}...")
        data = self._post(self._model_url(self._model, "predictLongRunning"), body)

        operation_name = data.get("name")
        if not operation_name:
            raise RemoteCallError("Veo did not return an operation name")
        return operation_name

    def fetch_operation(self, operation_name: str) -> dict:
        """Fetch the current state of an operation."""
        return self._post(
            self._model_url(self._model, "fetchPredictOperation"),
            {"operationName": operation_name},
        )

    async def wait_for_operation(self, operation_name: str) -> dict:
        """Poll an operation until it is done.

        Cancelling the awaiting task stops polling.

        Returns:
            The finished operation.

        Raises:
            RemoteCallError: On timeout or repeated polling failures.
        """
        start_time = time.monotonic()
        poll_count = 0
        failures = 0

        while True:
            elapsed = time.monotonic() - start_time
            if elapsed > self._max_poll_time:
                logger.warning(f"Operation {operation_name} timed out after {elapsed:.1f}s")
                raise RemoteCallError(f"Operation timed out after {self._max_poll_time}s")

            poll_count += 1
            logger.debug(f"Polling operation (attempt {poll_count}): {operation_name}")

            try:
                operation = await asyncio.to_thread(self.fetch_operation, operation_name)
                failures = 0
                if operation.get("done"):
                    logger.info(f"Operation {operation_name} finished")
                    return operation

            except RemoteCallError as e:
                failures += 1
                logger.warning(f"Error checking operation status: {e}")
                if failures >= self._max_retries:
                    raise

            await asyncio.sleep(self._poll_interval)
