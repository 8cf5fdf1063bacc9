"""
Pytest Configuration and Fixtures

Fake clients for the text, image, video and storage services.
"""

import asyncio
import json
from datetime import timedelta
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

from storyboarder.errors import ContentFilteredError, RemoteCallError
from storyboarder.models import Character, Language, Scenario, Scene, Setting
from storyboarder.services.imagen import ImageResult


class FakeTextClient:
    """Stands in for AnthropicClient."""

    def __init__(self, text: Optional[str] = ""):
        self.text = text
        self.calls: List[Dict[str, Any]] = []

    def create_message(self, **kwargs) -> str:
        self.calls.append(kwargs)
        return self.text


class FakeImagen:
    """Stands in for ImagenClient.

    Prompts containing a key of ``failures`` raise the mapped exception.
    """

    def __init__(self, failures: Optional[Dict[str, Exception]] = None):
        self.failures = failures or {}
        self.generate_calls: List[tuple] = []
        self.customize_calls: List[tuple] = []

    def _check(self, prompt: str) -> None:
        for needle, error in self.failures.items():
            if needle in prompt:
                raise error

    def generate_image(self, prompt: str, aspect_ratio: Optional[str] = None) -> ImageResult:
        self.generate_calls.append((prompt, aspect_ratio))
        self._check(prompt)
        return ImageResult(prompt=prompt, gcs_uri=f"gs://bucket/images/{len(self.generate_calls)}.png")

    def customize_image(self, prompt: str, subjects) -> ImageResult:
        self.customize_calls.append((prompt, [s.name for s in subjects]))
        self._check(prompt)
        return ImageResult(prompt=prompt, gcs_uri=f"gs://bucket/custom/{len(self.customize_calls)}.png")


class FakeVeo:
    """Stands in for VeoClient.

    Operations finish after ``delay`` seconds; operations for prompts in
    ``fail_prompts`` fail shortly after submission.
    """

    def __init__(self, fail_prompts: tuple = (), delay: float = 0.0):
        self.fail_prompts = fail_prompts
        self.delay = delay
        self.submitted: List[tuple] = []
        self.prompts: Dict[str, str] = {}
        self.cancelled = 0

    def generate_scene_video(self, prompt: str, image_base64: str) -> str:
        self.submitted.append((prompt, image_base64))
        operation_name = f"operations/{len(self.submitted)}"
        self.prompts[operation_name] = prompt
        return operation_name

    async def wait_for_operation(self, operation_name: str) -> dict:
        prompt = self.prompts[operation_name]
        if prompt in self.fail_prompts:
            await asyncio.sleep(0.05)
            raise RemoteCallError(f"quota exceeded for {prompt}")
        try:
            await asyncio.sleep(self.delay)
        except asyncio.CancelledError:
            self.cancelled += 1
            raise
        number = operation_name.split("/")[-1]
        return {
            "name": operation_name,
            "done": True,
            "response": {
                "generatedSamples": [{"video": {"uri": f"gs://videos/run/{number}/sample_0.mp4"}}]
            },
        }


class FakeStorage:
    """Stands in for StorageClient; downloads write a small file."""

    def __init__(self, fail_downloads: bool = False):
        self.fail_downloads = fail_downloads
        self.signed: List[tuple] = []
        self.downloads: List[tuple] = []

    def signed_url(self, bucket_name: str, blob_name: str, expires_in: timedelta) -> str:
        self.signed.append((bucket_name, blob_name, expires_in))
        return f"https://storage.googleapis.com/{bucket_name}/{blob_name}?X-Goog-Signature=abc"

    def download(self, bucket_name: str, blob_name: str, local_path: Path) -> None:
        self.downloads.append((bucket_name, blob_name, local_path))
        if self.fail_downloads:
            raise RemoteCallError("download failed")
        Path(local_path).write_bytes(b"video")


@pytest.fixture
def english() -> Language:
    return Language(name="English", code="en-US")


@pytest.fixture
def french() -> Language:
    return Language(name="French", code="fr-FR")


def scene_dict(i: int, characters_present: Optional[list] = None) -> dict:
    return {
        "imagePrompt": f"image prompt {i}",
        "videoPrompt": f"video prompt {i}",
        "description": f"description {i}",
        "voiceover": f"voiceover {i}",
        "charactersPresent": characters_present if characters_present is not None else ["Bolt"],
    }


def scenario_dict(num_scenes: int = 3) -> dict:
    return {
        "scenario": "A rusty robot and a stray dog cross a flooded city.",
        "genre": "Cinematic",
        "mood": "Inspirational",
        "music": "Slow strings building to a warm brass finale",
        "language": {"name": "Klingon", "code": "tlh"},
        "characters": [
            {"name": "Bolt", "description": "a tall rusty robot with one blue eye"},
            {"name": "Mud", "description": "a small scruffy brown dog"},
        ],
        "settings": [
            {"name": "Flooded avenue", "description": "a drowned avenue between glass towers"},
        ],
        "scenes": [scene_dict(i) for i in range(num_scenes)],
    }


def fenced(payload: dict) -> str:
    return "```json\n" + json.dumps(payload) + "\n```"


@pytest.fixture
def sample_scenario(english) -> Scenario:
    return Scenario(
        scenario="A rusty robot and a stray dog cross a flooded city.",
        genre="Cinematic",
        mood="Inspirational",
        music="Slow strings",
        language=english,
        characters=[
            Character(name="Bolt", description="a tall rusty robot", image_gcs_uri="gs://bucket/bolt.png"),
            Character(name="Mud", description="a small scruffy dog"),
        ],
        settings=[Setting(name="Avenue", description="a drowned avenue")],
        scenes=[
            Scene(
                image_prompt="a robot on a roof",
                video_prompt="the robot waves",
                description="Bolt waits",
                voiceover="Bolt waited.",
                characters_present=["Bolt"],
                image_gcs_uri="gs://bucket/scene.png",
            )
        ],
    )


@pytest.fixture
def filtered_error() -> ContentFilteredError:
    return ContentFilteredError("Image was filtered by the safety policy")
