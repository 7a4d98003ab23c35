"""Slack notifications for GitHub pull requests."""

from .config import NotifierSettings, get_settings, parse_user_mapping  # noqa: F401
from .errors import GitHubApiError, NotifierError  # noqa: F401
from .logging_config import configure_logging  # noqa: F401
from .slack_client import SlackClient  # noqa: F401
from .users import SlackIdentity, UserResolver, find_slack_user, get_slack_user_profile  # noqa: F401

__all__ = [
    "NotifierSettings",
    "get_settings",
    "parse_user_mapping",
    "GitHubApiError",
    "NotifierError",
    "configure_logging",
    "SlackClient",
    "SlackIdentity",
    "UserResolver",
    "find_slack_user",
    "get_slack_user_profile",
]
