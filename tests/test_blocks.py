"""Tests for pull-request notification block builders."""

import pytest

from slack_pr_notifier.messages import (
    build_comment_blocks,
    build_fallback_text,
    build_review_blocks,
    build_review_request_blocks,
    review_state_label,
)

PR_URL = "https://github.com/acme/widgets/pull/42"


def _types(blocks):
    return [block["type"] for block in blocks]


def _footer_text(blocks):
    return blocks[-1]["elements"][0]["text"]


def test_comment_blocks_layout():
    blocks = build_comment_blocks(
        body='Nice work <@U1>!\n<img src="https://img/a.png" alt="diff">',
        pr_title="Add widgets",
        pr_url=PR_URL,
        comment_url=f"{PR_URL}#issuecomment-1",
        author="<@U2>",
    )

    assert _types(blocks) == ["section", "image", "context"]
    assert blocks[0]["text"] == {"type": "mrkdwn", "text": "Nice work <@U1>!"}
    assert blocks[1] == {"type": "image", "image_url": "https://img/a.png", "alt_text": "diff"}
    assert _footer_text(blocks) == f"<{PR_URL}|Add widgets> • <{PR_URL}#issuecomment-1|View comment> • <@U2>"


def test_comment_with_only_images_has_no_section():
    blocks = build_comment_blocks(
        body='<img src="https://img/a.png">',
        pr_title="Add widgets",
        pr_url=PR_URL,
        comment_url=f"{PR_URL}#issuecomment-1",
        author="octocat",
    )

    assert _types(blocks) == ["image", "context"]


def test_review_request_always_has_lead_in_section():
    blocks = build_review_request_blocks(
        pr_number=42,
        pr_title="Add widgets",
        pr_url=PR_URL,
        body="",
        sender="octocat",
        reviewer="<@U3>",
    )

    assert _types(blocks) == ["section", "context"]
    assert blocks[0]["text"]["text"] == f"New PR review requested to <@U3>\n*<{PR_URL}|Add widgets>*"
    assert _footer_text(blocks) == f"<{PR_URL}|#42> • octocat requested review from <@U3>"


def test_review_request_appends_description_and_images():
    blocks = build_review_request_blocks(
        pr_number=7,
        pr_title="Fix bug",
        pr_url=PR_URL,
        body='Fixes the crash.\n\n\n\n<img src="https://img/b.png" alt="before">',
        sender="octocat",
        reviewer="hubot",
    )

    assert _types(blocks) == ["section", "image", "context"]
    assert blocks[0]["text"]["text"].endswith("\n\nFixes the crash.")


def test_review_blocks_include_state_and_inline_comments():
    blocks = build_review_blocks(
        body="Please rework.",
        review_state="changes_requested",
        pr_title="Add widgets",
        pr_url=PR_URL,
        review_url=f"{PR_URL}#pullrequestreview-9",
        reviewer="<@U4>",
        comments=["Rename this.", "", '<img src="https://img/c.png">'],
    )

    assert _types(blocks) == ["section", "image", "context"]
    assert blocks[0]["text"]["text"] == ":x: *Changes requested*\n\nPlease rework.\n\nRename this."
    assert _footer_text(blocks) == f"<{PR_URL}|Add widgets> • <{PR_URL}#pullrequestreview-9|View review> • <@U4>"


def test_approval_without_body_still_shows_state():
    blocks = build_review_blocks(
        body="",
        review_state="APPROVED",
        pr_title="Add widgets",
        pr_url=PR_URL,
        review_url=f"{PR_URL}#pullrequestreview-9",
        reviewer="octocat",
    )

    assert _types(blocks) == ["section", "context"]
    assert blocks[0]["text"]["text"] == ":white_check_mark: *Approved*"


@pytest.mark.parametrize(
    "state, expected",
    [
        ("approved", ":white_check_mark: *Approved*"),
        ("commented", ":speech_balloon: *Commented*"),
        ("dismissed", ":no_entry_sign: *Dismissed*"),
        (None, ":eyes: *Reviewed*"),
        ("pending", ":eyes: *Reviewed*"),
    ],
)
def test_review_state_label(state, expected):
    assert review_state_label(state) == expected


@pytest.mark.parametrize(
    "blocks",
    [
        build_comment_blocks(body="hi", pr_title="t", pr_url="u", comment_url="c", author="a"),
        build_review_request_blocks(pr_number=1, pr_title="t", pr_url="u", body="b", sender="s", reviewer="r"),
        build_review_blocks(
            body="hi", review_state="commented", pr_title="t", pr_url="u", review_url="r", reviewer="a", comments=["x"]
        ),
    ],
)
def test_every_builder_ends_with_single_footer(blocks):
    types = _types(blocks)

    assert types[-1] == "context"
    assert types.count("context") == 1
    assert types.count("section") <= 1


def test_fallback_text_prefers_section_then_footer():
    with_section = build_comment_blocks(body="hi", pr_title="t", pr_url="u", comment_url="c", author="a")
    footer_only = build_comment_blocks(body="", pr_title="t", pr_url="u", comment_url="c", author="a")

    assert build_fallback_text(with_section) == "hi"
    assert build_fallback_text(footer_only) == "<u|t> • <c|View comment> • a"
    assert build_fallback_text([]) == ""
