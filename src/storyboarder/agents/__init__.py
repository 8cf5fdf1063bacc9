"""AI agents for scenario and storyboard generation."""

from .base import BaseAgent
from .scenario import ScenarioAgent, ScenarioInput
from .storyboard import StoryboardAgent, StoryboardInput

__all__ = [
    "BaseAgent",
    "ScenarioAgent",
    "ScenarioInput",
    "StoryboardAgent",
    "StoryboardInput",
]
