"""Turn GitHub pull-request events into Slack notifications."""

from __future__ import annotations

from typing import Any, Dict, List, Mapping

import structlog
from slack_sdk.errors import SlackApiError

from .config import NotifierSettings
from .github_client import GitHubClient, fetch_review_comments
from .messages import (
    build_comment_blocks,
    build_fallback_text,
    build_review_blocks,
    build_review_request_blocks,
    process_mentions,
)
from .slack_client import SlackClient
from .users import UserResolver, get_slack_user_profile

COMMENT_EVENTS = {"issue_comment", "pull_request_review_comment"}


class PullRequestNotifier:
    """Build and post one Slack message per supported GitHub event."""

    def __init__(
        self,
        settings: NotifierSettings,
        *,
        slack: SlackClient | None = None,
        github: GitHubClient | None = None,
        resolver: UserResolver | None = None,
    ) -> None:
        self._settings = settings
        self._slack = slack or SlackClient(token=settings.bot_token)
        self._github = github or GitHubClient(
            token=settings.github_token,
            base_url=settings.github_api_url,
            timeout=settings.http_timeout,
        )
        self._resolver = resolver or UserResolver(
            slack=self._slack,
            github=self._github,
            user_mapping=settings.user_mapping,
        )

    def _mention(self, login: str) -> str:
        identity = self._resolver.resolve(login)
        return f"<@{identity.id}>" if identity else login

    def _mentions(self, text: str | None) -> str:
        return process_mentions(text or "", self._resolver.resolve)

    def build(self, event_name: str, payload: Mapping[str, Any]) -> tuple[str, List[Dict[str, Any]]] | None:
        """Return ``(acting_login, blocks)`` for *payload*, or None when unsupported."""

        action = payload.get("action")

        if event_name in COMMENT_EVENTS and action == "created":
            comment = payload["comment"]
            parent = payload.get("pull_request") or payload.get("issue") or {}
            author = comment["user"]["login"]
            blocks = build_comment_blocks(
                body=self._mentions(comment.get("body")),
                pr_title=parent.get("title", ""),
                pr_url=parent.get("html_url", ""),
                comment_url=comment.get("html_url", ""),
                author=self._mention(author),
            )
            return author, blocks

        if event_name == "pull_request" and action == "review_requested":
            pull = payload["pull_request"]
            sender = payload["sender"]["login"]
            if payload.get("requested_reviewer"):
                reviewer = self._mention(payload["requested_reviewer"]["login"])
            else:
                reviewer = (payload.get("requested_team") or {}).get("name", "")
            blocks = build_review_request_blocks(
                pr_number=pull["number"],
                pr_title=pull.get("title", ""),
                pr_url=pull.get("html_url", ""),
                body=self._mentions(pull.get("body")),
                sender=sender,
                reviewer=reviewer,
            )
            return sender, blocks

        if event_name == "pull_request_review" and action == "submitted":
            review = payload["review"]
            pull = payload["pull_request"]
            reviewer = review["user"]["login"]
            comments = fetch_review_comments(
                self._github,
                repository=payload["repository"]["full_name"],
                pull_number=pull["number"],
                review_id=review["id"],
            )
            blocks = build_review_blocks(
                body=self._mentions(review.get("body")),
                review_state=review.get("state"),
                pr_title=pull.get("title", ""),
                pr_url=pull.get("html_url", ""),
                review_url=review.get("html_url", ""),
                reviewer=self._mention(reviewer),
                comments=[self._mentions(body) for body in comments],
            )
            return reviewer, blocks

        return None

    def notify(self, event_name: str, payload: Mapping[str, Any], *, channel: str | None = None) -> Mapping[str, Any] | None:
        """Post the notification for *payload* to *channel* (or the configured channel)."""

        target = channel or self._settings.channel
        log = structlog.get_logger().bind(event_name=event_name, action=payload.get("action"), channel=target)

        if not target:
            log.warning("channel_missing")
            return None

        built = self.build(event_name, payload)
        if built is None:
            log.info("event_ignored")
            return None

        actor, blocks = built
        profile = get_slack_user_profile(self._resolver.resolve(actor))

        try:
            response = self._slack.post_message(
                channel=target,
                text=build_fallback_text(blocks),
                blocks=blocks,
                username=profile.username if profile.matched else None,
                icon_url=profile.icon_url if profile.matched else None,
            )
        except SlackApiError as exc:
            status_code = getattr(exc.response, "status_code", None) if getattr(exc, "response", None) else None
            error_code = exc.response.get("error") if getattr(exc, "response", None) else str(exc)
            log.error("notification_failed", error=error_code, status_code=status_code)
            return None

        log.info("notification_posted", actor=actor, matched=profile.matched, block_count=len(blocks))
        return response
