"""Resolve GitHub actors to Slack workspace members.

Resolution runs an ordered chain of strategies and stops at the first one that
produces an identity:

1. the static username -> Slack id mapping supplied by the workflow,
2. the actor's public GitHub email looked up in Slack,
3. the actor's GitHub display name matched against every active member.

A strategy that fails logs a warning and yields ``None``; nothing is raised to
the caller.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Mapping, Sequence

import structlog
from pydantic import ValidationError
from slack_sdk.errors import SlackApiError, SlackRequestError

from ..errors import GitHubApiError
from ..slack_client import SlackClient
from .models import GithubActor, SlackIdentity, SlackUserProfile

if TYPE_CHECKING:  # pragma: no cover
    from ..github_client import GitHubClient

SLACKBOT_ID = "USLACKBOT"

_LOOKUP_ERRORS = (SlackApiError, SlackRequestError, GitHubApiError, OSError)
_NOT_FOUND_ERRORS = {"users_not_found", "user_not_found"}


def _slack_error_code(exc: Exception) -> str:
    response = getattr(exc, "response", None)
    if response is not None and hasattr(response, "get"):
        return response.get("error") or str(exc)
    return str(exc)


class ResolutionRequest:
    """Per-call state shared between strategies.

    The GitHub actor is fetched at most once per resolution, whichever
    strategy asks for it first.
    """

    def __init__(self, username: str, github: "GitHubClient", log) -> None:
        self.username = username
        self.log = log
        self._github = github
        self._actor: GithubActor | None = None
        self._actor_fetched = False

    def actor(self) -> GithubActor | None:
        if not self._actor_fetched:
            self._actor_fetched = True
            try:
                self._actor = self._github.get_user(self.username)
            except _LOOKUP_ERRORS as exc:
                self.log.warning("github_user_fetch_failed", error=str(exc))
        return self._actor


Strategy = Callable[[ResolutionRequest], SlackIdentity | None]


def _to_identity(member: Mapping[str, Any] | None, request: ResolutionRequest, tier: str) -> SlackIdentity | None:
    if not member:
        return None
    try:
        return SlackIdentity.from_member(member)
    except (ValidationError, KeyError) as exc:
        request.log.warning("slack_member_invalid", tier=tier, slack_id=member.get("id"), error=str(exc))
        return None


class StaticMappingStrategy:
    """Look the username up in the static mapping, then fetch that Slack user."""

    tier = "static_mapping"

    def __init__(self, slack: SlackClient, user_mapping: Mapping[str, str] | None) -> None:
        self._slack = slack
        self._mapping = dict(user_mapping or {})

    def __call__(self, request: ResolutionRequest) -> SlackIdentity | None:
        slack_id = self._mapping.get(request.username)
        if not slack_id:
            return None

        try:
            member = self._slack.get_user(slack_id)
        except _LOOKUP_ERRORS as exc:
            request.log.warning("slack_lookup_failed", tier=self.tier, slack_id=slack_id, error=_slack_error_code(exc))
            return None

        return _to_identity(member, request, self.tier)


class EmailStrategy:
    """Match the actor's public GitHub email against Slack accounts."""

    tier = "email"

    def __init__(self, slack: SlackClient) -> None:
        self._slack = slack

    def __call__(self, request: ResolutionRequest) -> SlackIdentity | None:
        actor = request.actor()
        if actor is None or not actor.email:
            return None

        try:
            member = self._slack.lookup_user_by_email(actor.email)
        except _LOOKUP_ERRORS as exc:
            error = _slack_error_code(exc)
            if error in _NOT_FOUND_ERRORS:
                request.log.info("slack_user_not_found", tier=self.tier)
            else:
                request.log.warning("slack_lookup_failed", tier=self.tier, error=error)
            return None

        return _to_identity(member, request, self.tier)


class NameStrategy:
    """Search active human members by GitHub display name or handle.

    Without a GitHub display name the login is used for the name search.
    """

    tier = "name"

    def __init__(self, slack: SlackClient) -> None:
        self._slack = slack

    def __call__(self, request: ResolutionRequest) -> SlackIdentity | None:
        actor = request.actor()
        login = request.username.lower()
        github_name = ((actor.name if actor else None) or "").strip().lower() or login

        try:
            members = self._slack.list_users()
        except _LOOKUP_ERRORS as exc:
            request.log.warning("slack_lookup_failed", tier=self.tier, error=_slack_error_code(exc))
            return None

        for member in members:
            if _is_candidate(member) and _matches(member, github_name, login):
                identity = _to_identity(member, request, self.tier)
                if identity is not None:
                    return identity
        return None


def _is_candidate(member: Mapping[str, Any]) -> bool:
    return not member.get("deleted") and not member.get("is_bot") and member.get("id") != SLACKBOT_ID


def _matches(member: Mapping[str, Any], github_name: str, login: str) -> bool:
    profile = member.get("profile") or {}
    if github_name:
        real_name = (profile.get("real_name") or member.get("real_name") or "").lower()
        display_name = (profile.get("display_name") or "").lower()
        if github_name in real_name or github_name in display_name:
            return True
    return (member.get("name") or "").lower() == login


class UserResolver:
    """Evaluate resolution strategies in order, first match wins."""

    def __init__(
        self,
        *,
        slack: SlackClient,
        github: "GitHubClient",
        user_mapping: Mapping[str, str] | None = None,
        strategies: Sequence[Strategy] | None = None,
    ) -> None:
        self._github = github
        self._strategies = tuple(
            strategies
            if strategies is not None
            else (
                StaticMappingStrategy(slack, user_mapping),
                EmailStrategy(slack),
                NameStrategy(slack),
            )
        )

    @property
    def strategies(self) -> tuple:
        return self._strategies

    def resolve(self, username: str) -> SlackIdentity | None:
        """Return the Slack identity for *username*, or None when nothing matches."""

        username = (username or "").strip()
        if not username:
            return None

        log = structlog.get_logger().bind(github_username=username)
        request = ResolutionRequest(username, self._github, log)

        for strategy in self._strategies:
            tier = getattr(strategy, "tier", type(strategy).__name__)
            identity = strategy(request)
            if identity is not None:
                log.info("slack_user_matched", tier=tier, slack_id=identity.id)
                return identity
            log.info("slack_user_tier_missed", tier=tier)

        log.info("slack_user_unresolved")
        return None


def find_slack_user(
    username: str,
    *,
    slack: SlackClient,
    github: "GitHubClient",
    user_mapping: Mapping[str, str] | None = None,
) -> SlackIdentity | None:
    """Resolve a single GitHub username with the default strategy chain."""

    resolver = UserResolver(slack=slack, github=github, user_mapping=user_mapping)
    return resolver.resolve(username)


def get_slack_user_profile(identity: SlackIdentity | None) -> SlackUserProfile:
    """Return the username/icon pair for posting as *identity*."""

    if identity is None:
        return SlackUserProfile()
    return SlackUserProfile(username=identity.display_name, icon_url=identity.avatar_url, matched=True)
