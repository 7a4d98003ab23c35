"""GitHub actor to Slack user resolution."""

from .models import GithubActor, SlackIdentity, SlackUserProfile
from .resolver import (
    EmailStrategy,
    NameStrategy,
    StaticMappingStrategy,
    UserResolver,
    find_slack_user,
    get_slack_user_profile,
)

__all__ = [
    "GithubActor",
    "SlackIdentity",
    "SlackUserProfile",
    "EmailStrategy",
    "NameStrategy",
    "StaticMappingStrategy",
    "UserResolver",
    "find_slack_user",
    "get_slack_user_profile",
]
