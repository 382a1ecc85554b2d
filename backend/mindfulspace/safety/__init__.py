"""Safety module - crisis phrase detection and crisis resources."""

from .crisis import (
    CRISIS_MESSAGE,
    CRISIS_PHRASES,
    CRISIS_RESOURCES,
    contains_crisis_language,
    latest_user_content,
)

__all__ = [
    "CRISIS_MESSAGE",
    "CRISIS_PHRASES",
    "CRISIS_RESOURCES",
    "contains_crisis_language",
    "latest_user_content",
]
