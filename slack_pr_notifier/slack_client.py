"""Thin wrapper utilities around the Slack WebClient."""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Sequence

from slack_sdk import WebClient

USERS_PAGE_SIZE = 200


class SlackClient:
    """Encapsulate Slack WebClient interactions for easier testing."""

    def __init__(self, *, token: str | None = None, client: WebClient | None = None) -> None:
        if client is None and token is None:
            raise ValueError("Either an instantiated client or a bot token must be provided.")

        self._client = client or WebClient(token=token)

    @property
    def client(self) -> WebClient:
        """Expose the underlying WebClient for advanced use cases."""

        return self._client

    def post_message(
        self,
        *,
        channel: str,
        text: str,
        blocks: Sequence[Mapping[str, Any]],
        username: str | None = None,
        icon_url: str | None = None,
    ) -> Mapping[str, Any]:
        """Post a message with Block Kit content to a Slack channel.

        *username* and *icon_url* let the bot post on behalf of the matched
        Slack user; they are omitted from the call when empty.
        """

        kwargs: Dict[str, Any] = {"channel": channel, "text": text, "blocks": list(blocks)}
        if username:
            kwargs["username"] = username
        if icon_url:
            kwargs["icon_url"] = icon_url
        return self._client.chat_postMessage(**kwargs)

    def get_user(self, user_id: str) -> Mapping[str, Any] | None:
        """Return the member record for *user_id*."""

        response = self._client.users_info(user=user_id)
        return response.get("user")

    def lookup_user_by_email(self, email: str) -> Mapping[str, Any] | None:
        """Return the member record registered with *email*."""

        response = self._client.users_lookupByEmail(email=email)
        return response.get("user")

    def list_users(self) -> List[Mapping[str, Any]]:
        """Return every workspace member, following cursor pagination."""

        members: List[Mapping[str, Any]] = []
        cursor: str | None = None
        while True:
            kwargs: Dict[str, Any] = {"limit": USERS_PAGE_SIZE}
            if cursor:
                kwargs["cursor"] = cursor
            response = self._client.users_list(**kwargs)
            members.extend(response.get("members") or [])
            cursor = (response.get("response_metadata") or {}).get("next_cursor")
            if not cursor:
                return members
