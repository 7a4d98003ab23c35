"""Shared fakes for the Slack and GitHub clients."""

from __future__ import annotations

from pathlib import Path
import sys

import pytest
from slack_sdk.errors import SlackApiError

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:  # pragma: no cover - import-time guard
    sys.path.insert(0, str(ROOT))

from slack_pr_notifier.errors import GitHubApiError  # noqa: E402
from slack_pr_notifier.slack_client import SlackClient  # noqa: E402
from slack_pr_notifier.users.models import GithubActor  # noqa: E402


class DummyResponse(dict):
    """Minimal Slack response stub for error handling tests."""

    def __init__(self, error: str = "invalid_arguments", status_code: int = 400) -> None:
        super().__init__({"ok": False, "error": error})
        self.status_code = status_code

    @property
    def data(self) -> dict:
        return dict(self)


def slack_error(error: str) -> SlackApiError:
    return SlackApiError(error, DummyResponse(error))


class FakeWebClient:
    """In-memory stand-in for ``slack_sdk.WebClient`` user and chat methods."""

    def __init__(self, *, users=None, emails=None, members=None, errors=None):
        self.users = users or {}
        self.emails = emails or {}
        self.members = members or []
        self.errors = errors or {}
        self.calls = []
        self.posted = []

    def _record(self, method, **kwargs):
        self.calls.append((method, kwargs))
        if method in self.errors:
            raise self.errors[method]

    def users_info(self, *, user):
        self._record("users_info", user=user)
        if user not in self.users:
            raise slack_error("user_not_found")
        return {"ok": True, "user": self.users[user]}

    def users_lookupByEmail(self, *, email):
        self._record("users_lookupByEmail", email=email)
        if email not in self.emails:
            raise slack_error("users_not_found")
        return {"ok": True, "user": self.emails[email]}

    def users_list(self, **kwargs):
        self._record("users_list", **kwargs)
        return {"ok": True, "members": list(self.members), "response_metadata": {"next_cursor": ""}}

    def chat_postMessage(self, **kwargs):
        self._record("chat_postMessage", **kwargs)
        self.posted.append(kwargs)
        return {"ok": True, "channel": kwargs["channel"], "ts": "1700000000.000100"}

    def method_names(self):
        return [method for method, _ in self.calls]


class FakeGitHub:
    """Stand-in for ``GitHubClient`` backed by dictionaries."""

    def __init__(self, *, actors=None, review_comments=None, error=None):
        self.actors = actors or {}
        self.review_comments = review_comments or {}
        self.error = error
        self.user_requests = []
        self.comment_requests = []

    def get_user(self, username):
        self.user_requests.append(username)
        if self.error is not None:
            raise self.error
        if username not in self.actors:
            raise GitHubApiError(f"GET /users/{username} -> 404: Not Found", status_code=404)
        return GithubActor(login=username, **self.actors[username])

    def list_review_comments(self, repository, pull_number, review_id):
        self.comment_requests.append((repository, pull_number, review_id))
        if self.error is not None:
            raise self.error
        return self.review_comments.get(review_id, [])


def member(user_id, *, name="", real_name="", display_name="", deleted=False, is_bot=False, **images):
    return {
        "id": user_id,
        "name": name,
        "deleted": deleted,
        "is_bot": is_bot,
        "profile": {"real_name": real_name, "display_name": display_name, **images},
    }


@pytest.fixture
def make_slack():
    def factory(**kwargs):
        web_client = FakeWebClient(**kwargs)
        return SlackClient(client=web_client), web_client

    return factory


@pytest.fixture
def make_github():
    return FakeGitHub


@pytest.fixture
def make_member():
    return member


@pytest.fixture
def make_slack_error():
    return slack_error
