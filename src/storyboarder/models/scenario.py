"""Scenario data models."""

from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, Field, model_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model whose serialized keys are camelCase."""

    class Config:
        """Pydantic config."""
        frozen = False
        alias_generator = to_camel
        populate_by_name = True

    @model_validator(mode="before")
    @classmethod
    def drop_nulls(cls, data):
        """Treat `null` like a missing key so field defaults apply."""
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data


class Language(CamelModel):
    """Output language of the generated text."""

    name: str = Field(..., description="Display name, e.g. 'French'")
    code: str = Field(..., description="Language code, e.g. 'fr-FR'")


class Character(CamelModel):
    """A character of the scenario."""

    name: str = Field(default="", description="Character name")
    description: str = Field(default="", description="Visual and narrative description")
    image_gcs_uri: Optional[str] = Field(None, description="Reference image in GCS")


class Setting(CamelModel):
    """A location of the scenario."""

    name: str = Field(default="", description="Setting name")
    description: str = Field(default="", description="Setting description")


class Scene(CamelModel):
    """One storyboard beat."""

    image_prompt: str = Field(default="", description="Prompt for the storyboard image")
    video_prompt: str = Field(default="", description="Motion prompt for video generation")
    description: str = Field(default="", description="What happens in the scene")
    voiceover: str = Field(default="", description="One narrator sentence")
    characters_present: List[str] = Field(default_factory=list, description="Names of visible characters")
    image_gcs_uri: Optional[str] = Field(None, description="Generated storyboard image in GCS")
    video_url: Optional[str] = Field(None, description="Signed URL of the generated video")
    file_name: Optional[str] = Field(None, description="Object path of the generated video")


def placeholder_scene() -> Scene:
    """Filler used when the model returns fewer scenes than requested."""
    return Scene(
        image_prompt="A blank canvas waiting to be filled with imagination",
        video_prompt="Describe what is happening in the video",
        description="This scene is yet to be created. Let your imagination run wild!",
        voiceover="What happens next? The story is yours to continue...",
        characters_present=[],
    )


class Scenario(CamelModel):
    """Generated story bundle."""

    scenario: str = Field(default="", description="Narrative description")
    genre: str = Field(default="", description="Music genre")
    mood: str = Field(default="", description="Mood of the video")
    music: str = Field(default="", description="Music description, English only")
    language: Language = Field(..., description="Language of the generated text")
    characters: List[Character] = Field(default_factory=list)
    settings: List[Setting] = Field(default_factory=list)
    scenes: List[Scene] = Field(default_factory=list)

    def to_dict(self) -> dict:
        """Wire representation: camelCase keys, absent fields omitted."""
        return self.model_dump(by_alias=True, exclude_none=True)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True)

    @classmethod
    def from_json(cls, text: str) -> "Scenario":
        return cls.model_validate_json(text)

    @classmethod
    def from_yaml(cls, path: Path) -> "Scenario":
        """Load scenario from YAML file."""
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
        return cls.model_validate(data)

    def to_yaml(self, path: Path) -> None:
        """Save scenario to YAML file."""
        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump(
                self.to_dict(),
                f,
                default_flow_style=False,
                allow_unicode=True,
                sort_keys=False,
            )
