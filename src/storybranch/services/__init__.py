"""Service layer exports."""

from .builder_service import StoryBuilderService, option_target_name
from .claims_service import UnsubstantiatedClaim, detect_green_claims, find_unsubstantiated_claims
from .errors import StoryServiceError
from .navigation_service import (
    BranchEnteredEvent,
    BranchReturnedEvent,
    NavigationEvent,
    NavigationResult,
    NavigationService,
    NavigationView,
    OptionInertEvent,
    ProgressView,
)
from .story_graph_validator import Issue, format_issue, validate_story, validate_story_graph
from .story_service import StoryService

__all__ = [
    "BranchEnteredEvent",
    "BranchReturnedEvent",
    "Issue",
    "NavigationEvent",
    "NavigationResult",
    "NavigationService",
    "NavigationView",
    "OptionInertEvent",
    "ProgressView",
    "StoryBuilderService",
    "StoryService",
    "StoryServiceError",
    "UnsubstantiatedClaim",
    "detect_green_claims",
    "find_unsubstantiated_claims",
    "format_issue",
    "option_target_name",
    "validate_story",
    "validate_story_graph",
]
