"""Pydantic models describing GitHub actors and Slack identities."""

from __future__ import annotations

from typing import Any, Mapping

from pydantic import BaseModel, field_validator

_AVATAR_KEYS = ("image_original", "image_512", "image_192", "image_72")


def _clean(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


class GithubActor(BaseModel):
    login: str
    email: str | None = None
    name: str | None = None


class SlackIdentity(BaseModel):
    """A Slack workspace member matched to a GitHub actor."""

    id: str
    display_name: str
    avatar_url: str = ""
    name: str = ""

    @field_validator("display_name")
    @classmethod
    def validate_display_name(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("display_name must be non-empty")
        return value

    @classmethod
    def from_member(cls, member: Mapping[str, Any]) -> "SlackIdentity":
        """Build an identity from a ``users.*`` member record.

        Display name priority: profile display name, real name, handle.
        Avatar priority: original, 512px, 192px, 72px.
        """

        profile = member.get("profile") or {}
        handle = (member.get("name") or "").strip()
        display_name = (
            _clean(profile.get("display_name"))
            or _clean(profile.get("real_name"))
            or _clean(member.get("real_name"))
            or handle
            or member["id"]
        )
        avatar_url = next((profile[key] for key in _AVATAR_KEYS if profile.get(key)), "")
        return cls(id=member["id"], display_name=display_name, avatar_url=avatar_url, name=handle)


class SlackUserProfile(BaseModel):
    """Username and icon used when posting on behalf of a matched user."""

    username: str = ""
    icon_url: str = ""
    matched: bool = False
