"""Exceptions raised while building storyboards."""

from typing import Optional


class StoryboarderError(Exception):
    """Base class for storyboard generation failures.

    ``stage`` is filled in by the stage that gave up on the request and
    becomes the message prefix, e.g. ``"Failed to generate scenes: ..."``.
    """

    def __init__(self, message: str, stage: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.stage = stage

    def __str__(self) -> str:
        if self.stage:
            return f"{self.stage}: {self.message}"
        return self.message


class InvalidInputError(StoryboarderError):
    """The caller asked for something the pipeline cannot produce."""


class EmptyResponseError(StoryboarderError):
    """The text model returned no text."""


class ResponseParseError(StoryboarderError):
    """The text model returned something that is not JSON."""

    def __init__(self, message: str, raw_text: str, stage: Optional[str] = None) -> None:
        super().__init__(message, stage=stage)
        self.raw_text = raw_text


class InvalidShapeError(StoryboarderError):
    """Parsed JSON does not have the expected structure."""


class ContentFilteredError(StoryboarderError):
    """The provider declined to produce media for policy reasons."""

    def __init__(self, reason: str, stage: Optional[str] = None) -> None:
        super().__init__(f"Content filtered: {reason}", stage=stage)
        self.reason = reason


class RemoteCallError(StoryboarderError):
    """Transport or provider failure while calling a remote API."""
