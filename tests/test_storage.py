"""Tests for the storage helpers."""

import base64
from datetime import timedelta
from unittest.mock import MagicMock

import pytest
from google.api_core import exceptions as google_exceptions

from storyboarder.services.storage import StorageClient, parse_gcs_uri


@pytest.mark.parametrize("uri,expected", [
    ("gs://bucket/video.mp4", ("bucket", "video.mp4")),
    ("gs://bucket/a/b/c/sample_0.mp4", ("bucket", "a/b/c/sample_0.mp4")),
])
def test_parse_gcs_uri(uri, expected):
    assert parse_gcs_uri(uri) == expected


@pytest.mark.parametrize("uri", ["https://bucket/video.mp4", "gs://bucket", "gs://bucket/", "gs:///path"])
def test_parse_gcs_uri_rejects(uri):
    with pytest.raises(ValueError):
        parse_gcs_uri(uri)


def test_signed_url_is_v4_read_only():
    gcs = MagicMock()
    blob = gcs.bucket.return_value.blob.return_value
    blob.generate_signed_url.return_value = "https://signed"
    client = StorageClient(client=gcs)

    url = client.signed_url("bucket", "a/b.mp4", timedelta(hours=100))

    assert url == "https://signed"
    gcs.bucket.assert_called_with("bucket")
    gcs.bucket.return_value.blob.assert_called_with("a/b.mp4")
    blob.generate_signed_url.assert_called_once_with(
        version="v4", expiration=timedelta(hours=100), method="GET"
    )


def test_download_retries_transient_errors(tmp_path):
    gcs = MagicMock()
    blob = gcs.bucket.return_value.blob.return_value
    blob.download_to_filename.side_effect = [ConnectionError("reset"), None]
    client = StorageClient(client=gcs, retry_delay=0)

    client.download("bucket", "a/b.mp4", tmp_path / "b.mp4")

    assert blob.download_to_filename.call_count == 2


def test_download_not_found_is_not_retried(tmp_path):
    gcs = MagicMock()
    blob = gcs.bucket.return_value.blob.return_value
    blob.download_to_filename.side_effect = google_exceptions.NotFound("gone")
    client = StorageClient(client=gcs, retry_delay=0)

    with pytest.raises(google_exceptions.NotFound):
        client.download("bucket", "a/b.mp4", tmp_path / "b.mp4")

    assert blob.download_to_filename.call_count == 1


def test_read_base64():
    gcs = MagicMock()
    gcs.bucket.return_value.blob.return_value.download_as_bytes.return_value = b"\x89PNG"
    client = StorageClient(client=gcs)

    assert base64.b64decode(client.read_base64("gs://bucket/img.png")) == b"\x89PNG"
