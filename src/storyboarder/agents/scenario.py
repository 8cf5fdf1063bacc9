"""Scenario agent: pitch to scenario with character images."""

import asyncio
import logging
from dataclasses import dataclass

from pydantic import ValidationError

from ..concurrency import gather_bounded
from ..errors import ContentFilteredError, InvalidInputError, InvalidShapeError
from ..models import Character, Language, Scenario, placeholder_scene
from .base import BaseAgent
from .parsing import parse_model_json
from .prompts import scenario_prompt

logger = logging.getLogger(__name__)

CHARACTER_ASPECT_RATIO = "1:1"


@dataclass
class ScenarioInput:
    """Input data for the scenario agent."""

    pitch: str
    num_scenes: int
    style: str
    language: Language


class ScenarioAgent(BaseAgent[ScenarioInput, Scenario]):
    """Agent for turning a story pitch into a scenario.

    The returned scenario always has exactly ``num_scenes`` scenes and the
    caller's language. Characters whose image could not be generated come
    back without ``image_gcs_uri``.
    """

    @property
    def name(self) -> str:
        """Return the agent's name."""
        return "ScenarioAgent"

    @property
    def stage(self) -> str:
        return "Failed to generate scenes"

    async def _execute(self, input_data: ScenarioInput) -> Scenario:
        if input_data.num_scenes < 0:
            raise InvalidInputError(f"num_scenes must be >= 0, got {input_data.num_scenes}")

        self._logger.info(f"Creating scenario for: '{input_data.pitch}' ({input_data.num_scenes} scenes)")

        prompt = scenario_prompt(
            input_data.pitch,
            input_data.num_scenes,
            input_data.style,
            input_data.language,
        )
        response = await self._create_message(prompt=prompt, temperature=1.0)
        scenario = self._parse_response(response, input_data.language)

        self._logger.info(
            f"Parsed scenario with {len(scenario.characters)} characters, "
            f"{len(scenario.settings)} settings, {len(scenario.scenes)} scenes"
        )

        scenario.characters = await gather_bounded(
            [
                lambda character=character: self._with_image(character, input_data.style)
                for character in scenario.characters
            ],
            self._max_concurrency,
        )

        scenario.scenes = self._fit_scene_count(scenario.scenes, input_data.num_scenes)
        return scenario

    def _parse_response(self, response: str, language: Language) -> Scenario:
        """Parse Claude's response into a Scenario.

        Raises:
            EmptyResponseError: If the response is empty.
            ResponseParseError: If the response is not JSON.
            InvalidShapeError: If the JSON is not a scenario.
        """
        data = parse_model_json(response)
        if not isinstance(data, dict):
            raise InvalidShapeError("Invalid scenario data structure: expected an object")

        # Whatever language the model reported, the caller's wins
        data["language"] = language.model_dump()

        if not isinstance(data.get("scenes"), list):
            raise InvalidShapeError("Invalid scene data structure: expected an array")

        try:
            return Scenario.model_validate(data)
        except ValidationError as e:
            raise InvalidShapeError(f"Invalid scenario data structure: {e}") from e

    async def _with_image(self, character: Character, style: str) -> Character:
        """Return a copy of the character with its portrait, if one could be made."""
        try:
            self._logger.info(f"Generating image for character {character.name}")
            result = await asyncio.to_thread(
                self._imagen.generate_image,
                f"{style}: {character.description}",
                CHARACTER_ASPECT_RATIO,
            )
            return character.model_copy(update={"image_gcs_uri": result.gcs_uri})

        except ContentFilteredError as e:
            self._logger.warning(f"Image for character {character.name} was filtered: {e.reason}")
        except Exception as e:
            self._logger.error(f"Error generating image for character {character.name}: {e}")

        return character.model_copy(update={"image_gcs_uri": None})

    @staticmethod
    def _fit_scene_count(scenes: list, num_scenes: int) -> list:
        """Pad with placeholder scenes or trim to exactly ``num_scenes``."""
        scenes = list(scenes[:num_scenes])
        while len(scenes) < num_scenes:
            scenes.append(placeholder_scene())
        return scenes
