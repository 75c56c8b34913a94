"""Custom exceptions for the data layer."""


class DataError(Exception):
    """Base exception for the data layer."""


class DataLoadError(DataError):
    """Raised when a JSON file is missing, unreadable or not valid JSON."""


class StoryStoreError(DataError):
    """Raised when the story store cannot read or write a record."""


class StoryNotFoundError(StoryStoreError):
    """Raised when a story id has no stored record."""
