"""Tests for the video assembler."""

from datetime import timedelta

import pytest

from conftest import FakeStorage, FakeVeo
from storyboarder.errors import RemoteCallError
from storyboarder.models import VideoScene
from storyboarder.videos import VideoAssembler


def video_scene(name, image=True):
    return VideoScene(
        image_prompt=f"image {name}",
        video_prompt=f"motion {name}",
        description=f"description {name}",
        voiceover=f"voiceover {name}",
        image_base64="iVBORw0KGgo=" if image else None,
    )


def make_assembler(tmp_path, veo=None, storage=None):
    veo = veo or FakeVeo()
    storage = storage or FakeStorage()
    assembler = VideoAssembler(
        veo=veo,
        storage=storage,
        public_dir=tmp_path / "public",
        max_concurrency=4,
        signed_url_expiry=timedelta(hours=100),
    )
    return assembler, veo, storage


class TestVideoAssembler:
    @pytest.mark.asyncio
    async def test_scenes_without_image_are_skipped(self, tmp_path):
        assembler, veo, _ = make_assembler(tmp_path)
        scenes = [video_scene("a"), video_scene("b", image=False), video_scene("c")]

        videos = await assembler.generate_videos(scenes)

        assert len(videos) == 2
        assert sorted(prompt for prompt, _ in veo.submitted) == ["motion a", "motion c"]

    @pytest.mark.asyncio
    async def test_signed_url_and_local_mirror(self, tmp_path):
        assembler, _, storage = make_assembler(tmp_path)

        [video] = await assembler.generate_videos([video_scene("a")])

        assert video.file_name == "run/1/sample_0.mp4"
        assert video.url.startswith("https://storage.googleapis.com/videos/run/1/sample_0.mp4")
        assert storage.signed == [("videos", "run/1/sample_0.mp4", timedelta(hours=100))]
        mirrored = tmp_path / "public" / "run" / "1" / "sample_0.mp4"
        assert mirrored.read_bytes() == b"video"

    @pytest.mark.asyncio
    async def test_download_failure_keeps_url(self, tmp_path):
        assembler, _, _ = make_assembler(tmp_path, storage=FakeStorage(fail_downloads=True))

        videos = await assembler.generate_videos([video_scene("a"), video_scene("b")])

        assert len(videos) == 2
        assert all(video.url for video in videos)

    @pytest.mark.asyncio
    async def test_one_failure_aborts_the_batch(self, tmp_path):
        veo = FakeVeo(fail_prompts=("motion b",), delay=0.5)
        assembler, _, storage = make_assembler(tmp_path, veo=veo)

        with pytest.raises(RemoteCallError, match="quota exceeded"):
            await assembler.generate_videos([video_scene("a"), video_scene("b"), video_scene("c")])

        assert veo.cancelled == 2
        assert storage.signed == []

    @pytest.mark.asyncio
    async def test_no_qualifying_scenes(self, tmp_path):
        assembler, veo, _ = make_assembler(tmp_path)

        assert await assembler.generate_videos([video_scene("a", image=False)]) == []
        assert veo.submitted == []

    @pytest.mark.asyncio
    async def test_object_outside_public_dir_is_not_mirrored(self, tmp_path):
        class EscapingVeo(FakeVeo):
            async def wait_for_operation(self, operation_name):
                return {
                    "done": True,
                    "response": {"generatedSamples": [{"video": {"uri": "gs://videos/../../escape.mp4"}}]},
                }

        assembler, _, storage = make_assembler(tmp_path, veo=EscapingVeo())

        [video] = await assembler.generate_videos([video_scene("a")])

        assert video.file_name == "../../escape.mp4"
        assert video.url.startswith("https://")
        assert storage.downloads == []
        assert not (tmp_path / "escape.mp4").exists()
        assert not (tmp_path.parent / "escape.mp4").exists()
