"""Storyboard generation from story pitches with Claude, Imagen and Veo."""

__version__ = "0.1.0"
