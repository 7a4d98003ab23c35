"""Pydantic-based configuration helpers for the pull-request notifier."""

from __future__ import annotations

import json
import os
from functools import lru_cache
from typing import Dict, Iterable, List

import structlog
from pydantic import BaseModel, Field, ValidationError, field_validator

DEFAULT_GITHUB_API_URL = "https://api.github.com"


class NotifierSettings(BaseModel):
    """Settings supplied by the calling workflow step."""

    bot_token: str = Field(..., alias="SLACK_BOT_TOKEN")
    github_token: str = Field(..., alias="GITHUB_TOKEN")
    user_mapping_json: str | None = Field(None, alias="SLACK_USER_MAPPING")
    channel: str | None = Field(None, alias="SLACK_CHANNEL")
    github_api_url: str = Field(DEFAULT_GITHUB_API_URL, alias="GITHUB_API_URL")
    http_timeout: float = Field(10.0, alias="HTTP_TIMEOUT")

    @field_validator("github_api_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/") or DEFAULT_GITHUB_API_URL

    @field_validator("http_timeout")
    @classmethod
    def _ensure_positive(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("HTTP timeout must be greater than zero")
        return value

    @property
    def user_mapping(self) -> Dict[str, str]:
        return parse_user_mapping(self.user_mapping_json)


def parse_user_mapping(raw: str | None) -> Dict[str, str]:
    """Decode the static GitHub username -> Slack user id mapping.

    A malformed value is logged and treated as an empty mapping so that the
    dynamic lookups still run.
    """

    if raw is None or not raw.strip():
        return {}

    log = structlog.get_logger()
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        log.warning("user_mapping_invalid", error=str(exc))
        return {}

    if not isinstance(data, dict):
        log.warning("user_mapping_invalid", error=f"expected an object, got {type(data).__name__}")
        return {}

    mapping: Dict[str, str] = {}
    for username, slack_id in data.items():
        key = str(username).strip()
        value = "" if slack_id is None else str(slack_id).strip()
        if key and value:
            mapping[key] = value
    return mapping


def _format_missing(fields: Iterable[str]) -> str:
    """Return a human-friendly comma-separated list of missing env vars."""

    unique: List[str] = []
    for field in fields:
        if field not in unique:
            unique.append(field)
    return ", ".join(unique)


@lru_cache()
def get_settings() -> NotifierSettings:
    """Fetch and cache settings from environment variables."""

    try:
        return NotifierSettings.model_validate(os.environ)
    except ValidationError as exc:
        missing = [str(error["loc"][0]) for error in exc.errors()]
        message = (
            "Missing or invalid environment variables: "
            f"{_format_missing(missing)}"
        )
        raise RuntimeError(message) from exc
