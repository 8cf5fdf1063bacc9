"""Shared plumbing for Vertex AI REST endpoints."""

import logging
from typing import Optional

import google.auth
import google.auth.transport.requests
import requests

from ..config import config
from ..errors import RemoteCallError

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/cloud-platform"]


class VertexRestClient:
    """Base for clients that call Vertex AI publisher models over REST."""

    DEFAULT_TIMEOUT = 120.0

    def __init__(
        self,
        project_id: Optional[str] = None,
        location: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self._project_id = project_id or config.google_cloud_project
        self._location = location or config.google_cloud_location
        self._timeout = timeout
        self._credentials = None

        if not self._project_id:
            raise ValueError("GOOGLE_CLOUD_PROJECT not set")

    @property
    def project_id(self) -> str:
        return self._project_id

    @property
    def location(self) -> str:
        return self._location

    def _model_url(self, model: str, method: str) -> str:
        return (
            f"https://{self._location}-aiplatform.googleapis.com/v1/"
            f"projects/{self._project_id}/locations/{self._location}/"
            f"publishers/google/models/{model}:{method}"
        )

    def _token(self) -> str:
        if self._credentials is None:
            self._credentials, _ = google.auth.default(scopes=SCOPES)
        if not self._credentials.valid:
            self._credentials.refresh(google.auth.transport.requests.Request())
        return self._credentials.token

    def _post(self, url: str, body: dict) -> dict:
        """POST a JSON body and return the decoded response.

        Raises:
            RemoteCallError: On transport errors and non-200 responses.
        """
        headers = {
            "Authorization": f"Bearer {self._token()}",
            "Content-Type": "application/json",
        }

        try:
            response = requests.post(url, json=body, headers=headers, timeout=self._timeout)
        except requests.RequestException as e:
            raise RemoteCallError(f"Request to {url} failed: {e}") from e

        if response.status_code != 200:
            error_msg = f"{response.status_code}: {response.text[:500]}"
            logger.error(f"Vertex AI error: {error_msg}")
            raise RemoteCallError(error_msg)

        return response.json()
