"""Block Kit message builders for pull-request notifications.

Every builder returns the same shape: at most one text section, then the
extracted image blocks, then exactly one context footer. The review-request
and review builders always emit their section. Builders are pure;
mentions must already be rewritten by the caller.
"""

from __future__ import annotations

from typing import Any, Dict, List, Sequence

from .images import extract_images

FOOTER_SEPARATOR = " • "

_REVIEW_STATES = {
    "approved": (":white_check_mark:", "Approved"),
    "changes_requested": (":x:", "Changes requested"),
    "commented": (":speech_balloon:", "Commented"),
    "dismissed": (":no_entry_sign:", "Dismissed"),
}
_DEFAULT_REVIEW_STATE = (":eyes:", "Reviewed")


def _section(text: str) -> Dict[str, Any]:
    return {"type": "section", "text": {"type": "mrkdwn", "text": text}}


def _context(*parts: str) -> Dict[str, Any]:
    return {
        "type": "context",
        "elements": [{"type": "mrkdwn", "text": FOOTER_SEPARATOR.join(parts)}],
    }


def _link(url: str, label: str) -> str:
    return f"<{url}|{label}>" if url else label


def _assemble(text: str, images: List[Dict[str, Any]], footer: Dict[str, Any]) -> List[Dict[str, Any]]:
    blocks: List[Dict[str, Any]] = []
    if text:
        blocks.append(_section(text))
    blocks.extend(images)
    blocks.append(footer)
    return blocks


def build_comment_blocks(
    *,
    body: str,
    pr_title: str,
    pr_url: str,
    comment_url: str,
    author: str,
) -> List[Dict[str, Any]]:
    """Blocks for a new pull request or issue comment."""

    text, images = extract_images(body)
    footer = _context(_link(pr_url, pr_title), _link(comment_url, "View comment"), author)
    return _assemble(text, images, footer)


def build_review_request_blocks(
    *,
    pr_number: int,
    pr_title: str,
    pr_url: str,
    body: str,
    sender: str,
    reviewer: str,
) -> List[Dict[str, Any]]:
    """Blocks for a review request; the lead-in section is always present."""

    description, images = extract_images(body)
    text = f"New PR review requested to {reviewer}\n*{_link(pr_url, pr_title)}*"
    if description:
        text = f"{text}\n\n{description}"
    footer = _context(_link(pr_url, f"#{pr_number}"), f"{sender} requested review from {reviewer}")
    return _assemble(text, images, footer)


def review_state_label(state: str | None) -> str:
    """Return the emoji and bold action shown for a review *state*."""

    emoji, action = _REVIEW_STATES.get((state or "").lower(), _DEFAULT_REVIEW_STATE)
    return f"{emoji} *{action}*"


def build_review_blocks(
    *,
    body: str,
    review_state: str | None,
    pr_title: str,
    pr_url: str,
    review_url: str,
    reviewer: str,
    comments: Sequence[str] = (),
) -> List[Dict[str, Any]]:
    """Blocks for a submitted review; the review state section is always present."""

    parts = [part for part in [body or "", *comments] if part and part.strip()]
    description, images = extract_images("\n\n".join(parts))
    text = review_state_label(review_state)
    if description:
        text = f"{text}\n\n{description}"
    footer = _context(_link(pr_url, pr_title), _link(review_url, "View review"), reviewer)
    return _assemble(text, images, footer)


def build_fallback_text(blocks: Sequence[Dict[str, Any]]) -> str:
    """Return plain notification text for clients that cannot render blocks."""

    for block in blocks:
        if block.get("type") == "section":
            return block["text"]["text"]
    for block in blocks:
        if block.get("type") == "context":
            return block["elements"][0]["text"]
    return ""
