"""Google Cloud Storage helpers."""

import base64
import logging
import time
from datetime import timedelta
from pathlib import Path
from typing import Optional

from google.api_core import exceptions as google_exceptions
from google.cloud import storage

from ..config import config

logger = logging.getLogger(__name__)


def parse_gcs_uri(gcs_uri: str) -> tuple[str, str]:
    """Split ``gs://bucket/path/to/object`` into ``(bucket, path)``.

    Raises:
        ValueError: If the URI is not a GCS object URI.
    """
    if not gcs_uri.startswith("gs://"):
        raise ValueError(f"Invalid GCS URI: {gcs_uri}")

    uri_parts = gcs_uri[5:].split("/", 1)
    if len(uri_parts) != 2 or not uri_parts[0] or not uri_parts[1]:
        raise ValueError(f"Invalid GCS URI format: {gcs_uri}")

    return uri_parts[0], uri_parts[1]


class StorageClient:
    """Signed URLs and downloads for objects written by Imagen and Veo."""

    DEFAULT_MAX_RETRIES = 3
    DEFAULT_RETRY_DELAY = 2.0

    def __init__(
        self,
        project_id: Optional[str] = None,
        client: Optional[storage.Client] = None,
        max_retries: int = DEFAULT_MAX_RETRIES,
        retry_delay: float = DEFAULT_RETRY_DELAY,
    ) -> None:
        self._client = client or storage.Client(project=project_id or config.google_cloud_project or None)
        self._max_retries = max_retries
        self._retry_delay = retry_delay

    def signed_url(self, bucket_name: str, blob_name: str, expires_in: timedelta) -> str:
        """Mint a read-only v4 signed URL for an object."""
        blob = self._client.bucket(bucket_name).blob(blob_name)
        return blob.generate_signed_url(
            version="v4",
            expiration=expires_in,
            method="GET",
        )

    def download(self, bucket_name: str, blob_name: str, local_path: Path) -> None:
        """Download an object to a local path.

        The parent directory must already exist.
        """
        for attempt in range(self._max_retries):
            try:
                blob = self._client.bucket(bucket_name).blob(blob_name)
                blob.download_to_filename(str(local_path))
                logger.debug(f"Downloaded gs://{bucket_name}/{blob_name} to {local_path}")
                return

            except google_exceptions.NotFound:
                logger.error(f"File not found in GCS: gs://{bucket_name}/{blob_name}")
                raise

            except Exception as e:
                if attempt == self._max_retries - 1:
                    raise
                delay = self._retry_delay * (2**attempt)
                logger.warning(f"Download failed (attempt {attempt + 1}): {e}. Retrying in {delay}s...")
                time.sleep(delay)

    def read_base64(self, gcs_uri: str) -> str:
        """Fetch an object and return its bytes base64 encoded."""
        bucket_name, blob_name = parse_gcs_uri(gcs_uri)
        data = self._client.bucket(bucket_name).blob(blob_name).download_as_bytes()
        return base64.b64encode(data).decode("ascii")
