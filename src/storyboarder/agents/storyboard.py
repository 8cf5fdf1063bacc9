"""Storyboard agent: scenario to illustrated scenes."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

from pydantic import ValidationError

from ..concurrency import gather_bounded
from ..config import config
from ..errors import ContentFilteredError, InvalidShapeError
from ..models import Language, Scenario, Scene
from .base import BaseAgent
from .parsing import parse_model_json
from .prompts import storyboard_prompt

logger = logging.getLogger(__name__)


@dataclass
class StoryboardInput:
    """Input data for the storyboard agent."""

    scenario: Scenario
    num_scenes: int
    style: str
    language: Language


class StoryboardAgent(BaseAgent[StoryboardInput, Scenario]):
    """Agent for generating a fresh set of scenes for an existing scenario.

    The scene count is whatever the model returned. The input scenario is
    never modified; a deep copy with the new scenes and the caller's
    language is returned.

    With ``use_character_references`` on, scenes listing characters that
    already have images are rendered with Imagen subject customization,
    using those images as references.
    """

    def __init__(
        self,
        *args,
        use_character_references: Optional[bool] = None,
        scene_aspect_ratio: Optional[str] = None,
        **kwargs,
    ) -> None:
        super().__init__(*args, **kwargs)
        if use_character_references is None:
            use_character_references = config.use_character_references
        self._use_character_references = use_character_references
        self._aspect_ratio = scene_aspect_ratio or config.scene_aspect_ratio

    @property
    def name(self) -> str:
        """Return the agent's name."""
        return "StoryboardAgent"

    @property
    def stage(self) -> str:
        return "Failed to generate storyboard"

    async def _execute(self, input_data: StoryboardInput) -> Scenario:
        scenario = input_data.scenario.model_copy(deep=True)
        scenario.language = input_data.language.model_copy()
        self._logger.info(f"Creating storyboard for: {scenario.scenario[:80]}")

        prompt = storyboard_prompt(
            scenario,
            input_data.num_scenes,
            input_data.style,
            input_data.language,
        )
        response = await self._create_message(prompt=prompt, temperature=1.0)
        scenes = self._parse_response(response)
        self._logger.info(f"Parsed {len(scenes)} scenes")

        scenario.scenes = await gather_bounded(
            [
                lambda index=index, scene=scene: self._with_image(index, scene, scenario)
                for index, scene in enumerate(scenes)
            ],
            self._max_concurrency,
        )
        return scenario

    def _parse_response(self, response: str) -> list[Scene]:
        data = parse_model_json(response)
        scenes_data = data.get("scenes") if isinstance(data, dict) else None
        if not isinstance(scenes_data, list):
            raise InvalidShapeError("Invalid scene data structure: expected an array")

        try:
            return [Scene.model_validate(scene_data) for scene_data in scenes_data]
        except ValidationError as e:
            raise InvalidShapeError(f"Invalid scene data structure: {e}") from e

    async def _with_image(self, index: int, scene: Scene, scenario: Scenario) -> Scene:
        """Return a copy of the scene with its storyboard image, if one could be made."""
        try:
            self._logger.info(f"Generating image for scene {index + 1}")
            result = await self._render(index, scene, scenario)
            return scene.model_copy(update={"image_gcs_uri": result.gcs_uri})

        except ContentFilteredError as e:
            self._logger.warning(f"Image for scene {index + 1} was filtered: {e.reason}")
        except Exception as e:
            self._logger.error(f"Error generating image for scene {index + 1}: {e}")

        return scene.model_copy(update={"image_gcs_uri": None})

    async def _render(self, index: int, scene: Scene, scenario: Scenario):
        if self._use_character_references and scene.characters_present:
            present = [
                character for character in scenario.characters
                if character.name in scene.characters_present and character.image_gcs_uri
            ]
            if present:
                names = ", ".join(character.name for character in present)
                self._logger.info(f"Using character references for: {names}")
                return await asyncio.to_thread(self._imagen.customize_image, scene.image_prompt, present)

            self._logger.warning(
                f"Scene {index + 1} lists characters [{', '.join(scene.characters_present)}] "
                "but none has a reference image. Falling back to standard generation."
            )

        return await asyncio.to_thread(self._imagen.generate_image, scene.image_prompt, self._aspect_ratio)
