"""Data models for the storyboard generator."""

from .scenario import Character, Language, Scenario, Scene, Setting, placeholder_scene
from .video import VideoResponse, VideoScene, VideoUrl

__all__ = [
    "Character",
    "Language",
    "Scenario",
    "Scene",
    "Setting",
    "placeholder_scene",
    "VideoResponse",
    "VideoScene",
    "VideoUrl",
]
