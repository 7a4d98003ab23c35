"""Slack message formatting for pull-request events."""

from .blocks import (
    build_comment_blocks,
    build_fallback_text,
    build_review_blocks,
    build_review_request_blocks,
    review_state_label,
)
from .images import DEFAULT_ALT_TEXT, extract_images
from .mentions import process_mentions

__all__ = [
    "DEFAULT_ALT_TEXT",
    "build_comment_blocks",
    "build_fallback_text",
    "build_review_blocks",
    "build_review_request_blocks",
    "extract_images",
    "process_mentions",
    "review_state_label",
]
