"""Branching interactive stories: branch tree model, authoring and viewer navigation."""

__version__ = "0.1.0"
