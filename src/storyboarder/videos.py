"""Video assembly: seed images to signed video URLs and local copies."""

import asyncio
import logging
from datetime import timedelta
from pathlib import Path
from typing import Optional, Sequence

from .concurrency import gather_bounded
from .config import config
from .models import VideoScene, VideoUrl
from .services.storage import StorageClient, parse_gcs_uri
from .services.veo import VeoClient, video_uri_from_operation

logger = logging.getLogger(__name__)


class VideoAssembler:
    """Generates one video per scene that carries a seed image.

    Scenes without ``image_base64`` are skipped. The batch is all or
    nothing: an error in any scene cancels the others and propagates.
    A failed local download is logged and does not fail the scene.
    """

    def __init__(
        self,
        veo: Optional[VeoClient] = None,
        storage: Optional[StorageClient] = None,
        public_dir: Optional[Path] = None,
        max_concurrency: Optional[int] = None,
        signed_url_expiry: Optional[timedelta] = None,
    ) -> None:
        self._veo = veo or VeoClient()
        self._storage = storage or StorageClient()
        self._public_dir = Path(public_dir or config.public_dir)
        self._max_concurrency = max_concurrency or config.max_concurrency
        self._expiry = signed_url_expiry or timedelta(hours=config.signed_url_expiry_hours)

    @property
    def public_dir(self) -> Path:
        return self._public_dir

    async def generate_videos(self, scenes: Sequence[VideoScene]) -> list[VideoUrl]:
        """Generate videos for every scene with a seed image.

        Returns:
            One VideoUrl per qualifying scene, in input order.
        """
        qualifying = [scene for scene in scenes if scene.image_base64]
        logger.info(
            f"Generating {len(qualifying)} video(s) in parallel "
            f"({len(scenes) - len(qualifying)} scene(s) without image skipped)"
        )

        return await gather_bounded(
            [
                lambda index=index, scene=scene: self._generate_one(index, scene)
                for index, scene in enumerate(qualifying)
            ],
            self._max_concurrency,
        )

    async def _generate_one(self, index: int, scene: VideoScene) -> VideoUrl:
        logger.info(f"Starting video generation for scene {index + 1}")
        operation_name = await asyncio.to_thread(
            self._veo.generate_scene_video, scene.video_prompt, scene.image_base64
        )
        logger.info(f"Operation started for scene {index + 1}: {operation_name}")

        operation = await self._veo.wait_for_operation(operation_name)
        gcs_uri = video_uri_from_operation(operation)
        logger.info(f"Video generation completed for scene {index + 1}: {gcs_uri}")

        bucket_name, file_name = parse_gcs_uri(gcs_uri)
        url = await asyncio.to_thread(self._storage.signed_url, bucket_name, file_name, self._expiry)

        local_path = self._local_path(file_name)
        if local_path is None:
            logger.error(f"Refusing to mirror {gcs_uri} outside {self._public_dir}")
            return VideoUrl(file_name=file_name, url=url)

        local_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            await asyncio.to_thread(self._storage.download, bucket_name, file_name, local_path)
            logger.info(f"File downloaded to {local_path}")
        except Exception as e:
            logger.error(f"Error downloading {gcs_uri} to {local_path}: {e}")

        return VideoUrl(file_name=file_name, url=url)

    def _local_path(self, file_name: str) -> Optional[Path]:
        """Mirror path for an object, or None if it would land outside public_dir."""
        root = self._public_dir.resolve()
        local_path = (root / file_name).resolve()
        if local_path == root or root not in local_path.parents:
            return None
        return local_path
