"""Tests for the Imagen client."""

from unittest.mock import MagicMock

import pytest

from storyboarder.errors import ContentFilteredError, RemoteCallError
from storyboarder.models import Character
from storyboarder.services import vertex
from storyboarder.services.imagen import ImagenClient


@pytest.fixture
def client(monkeypatch):
    imagen = ImagenClient(
        project_id="demo-project",
        location="europe-west4",
        model="imagen-test",
        customization_model="imagen-custom",
        storage_uri="gs://images/out/",
    )
    monkeypatch.setattr(imagen, "_token", lambda: "token")
    return imagen


def mock_post(monkeypatch, status_code=200, payload=None, text=""):
    response = MagicMock(status_code=status_code, text=text)
    response.json.return_value = payload or {}
    post = MagicMock(return_value=response)
    monkeypatch.setattr(vertex.requests, "post", post)
    return post


def test_generate_image(client, monkeypatch):
    post = mock_post(monkeypatch, payload={"predictions": [{"gcsUri": "gs://images/out/1.png"}]})

    result = client.generate_image("cinematic: a robot", "1:1")

    assert result.gcs_uri == "gs://images/out/1.png"
    url = post.call_args.args[0]
    assert url == (
        "https://europe-west4-aiplatform.googleapis.com/v1/projects/demo-project/"
        "locations/europe-west4/publishers/google/models/imagen-test:predict"
    )
    body = post.call_args.kwargs["json"]
    assert body["instances"] == [{"prompt": "cinematic: a robot"}]
    assert body["parameters"]["aspectRatio"] == "1:1"
    assert body["parameters"]["storageUri"] == "gs://images/out/"
    assert post.call_args.kwargs["headers"]["Authorization"] == "Bearer token"


def test_default_aspect_ratio_is_omitted(client, monkeypatch):
    post = mock_post(monkeypatch, payload={"predictions": [{"gcsUri": "gs://images/out/1.png"}]})

    client.generate_image("a robot")

    assert "aspectRatio" not in post.call_args.kwargs["json"]["parameters"]


def test_rai_filtered(client, monkeypatch):
    mock_post(monkeypatch, payload={"predictions": [{"raiFilteredReason": "Blocked: celebrity"}]})

    with pytest.raises(ContentFilteredError) as exc_info:
        client.generate_image("a robot")

    assert exc_info.value.reason == "Blocked: celebrity"


def test_no_predictions_is_filtered(client, monkeypatch):
    mock_post(monkeypatch, payload={})

    with pytest.raises(ContentFilteredError):
        client.generate_image("a robot")


def test_http_error(client, monkeypatch):
    mock_post(monkeypatch, status_code=429, text="Quota exceeded")

    with pytest.raises(RemoteCallError, match="429"):
        client.generate_image("a robot")


def test_customize_image_tags_subjects(client, monkeypatch):
    post = mock_post(monkeypatch, payload={"predictions": [{"gcsUri": "gs://images/out/2.png"}]})
    subjects = [
        Character(name="Bolt", description="a tall robot", image_gcs_uri="gs://images/bolt.png"),
        Character(name="Mud", description="a small dog", image_gcs_uri="gs://images/mud.png"),
    ]

    result = client.customize_image("two friends on a roof", subjects)

    assert result.gcs_uri == "gs://images/out/2.png"
    assert post.call_args.args[0].endswith("/models/imagen-custom:predict")
    instance = post.call_args.kwargs["json"]["instances"][0]
    assert instance["prompt"].endswith("Characters: Bolt [1], Mud [2].")
    assert [ref["referenceId"] for ref in instance["referenceImages"]] == [1, 2]
    assert instance["referenceImages"][1]["referenceImage"] == {"gcsUri": "gs://images/mud.png"}


def test_customize_requires_reference_images(client):
    with pytest.raises(ValueError):
        client.customize_image("a roof", [Character(name="Mud", description="a dog")])


def test_requires_gcs_storage():
    with pytest.raises(ValueError):
        ImagenClient(project_id="demo-project", storage_uri="images/out")
