"""Rewrite GitHub ``@username`` mentions as Slack user mentions."""

from __future__ import annotations

import re
from typing import Callable

import structlog

from ..users.models import SlackIdentity

MENTION_PATTERN = re.compile(r"@([A-Za-z0-9-]+)")

Resolve = Callable[[str], SlackIdentity | None]


def _literal_mention_pattern(username: str) -> re.Pattern[str]:
    # Not preceded by a word char or "<" (already a Slack mention), not followed by a handle char.
    return re.compile(rf"(?<![\w<])@{re.escape(username)}(?![\w-])")


def process_mentions(text: str, resolve: Resolve) -> str:
    """Replace every resolvable ``@username`` in *text* with ``<@SLACK_ID>``.

    Mentions are visited in order of appearance in the original text and each
    occurrence triggers its own lookup. Unresolved mentions stay literal.
    """

    if not text:
        return text

    log = structlog.get_logger()
    result = text
    for match in MENTION_PATTERN.finditer(text):
        username = match.group(1)
        identity = resolve(username)
        if identity is None:
            log.info("mention_unresolved", github_username=username)
            continue
        result = _literal_mention_pattern(username).sub(f"<@{identity.id}>", result)
    return result
