"""Service-layer exceptions."""


class StoryServiceError(Exception):
    """Raised when a story operation cannot be carried out."""
