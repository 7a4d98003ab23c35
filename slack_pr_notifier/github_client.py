"""Minimal GitHub REST client for actor and review-comment lookups."""

from __future__ import annotations

from typing import Any, Dict, List, Mapping

import requests
import structlog

from .config import DEFAULT_GITHUB_API_URL
from .errors import GitHubApiError
from .users.models import GithubActor

ACCEPT_HEADER = "application/vnd.github+json"
API_VERSION = "2022-11-28"
COMMENTS_PAGE_SIZE = 100


class GitHubClient:
    """Issue authenticated GET requests against the GitHub REST API."""

    def __init__(
        self,
        *,
        token: str,
        base_url: str = DEFAULT_GITHUB_API_URL,
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "Authorization": f"Bearer {token}",
                "Accept": ACCEPT_HEADER,
                "X-GitHub-Api-Version": API_VERSION,
            }
        )

    def _request(self, url: str, params: Mapping[str, Any] | None) -> requests.Response:
        try:
            response = self._session.get(url, params=params or None, timeout=self._timeout)
        except requests.RequestException as exc:
            raise GitHubApiError(f"GET {url} failed: {exc}") from exc

        if response.status_code >= 300:
            raise GitHubApiError(
                f"GET {url} -> {response.status_code}: {response.text}",
                status_code=response.status_code,
            )
        return response

    def _get(self, path: str, **params: Any) -> Any:
        response = self._request(f"{self._base_url}{path}", params)
        return response.json() if response.text else {}

    def _get_all(self, path: str, **params: Any) -> List[Any]:
        """Collect a list endpoint across every page of its ``Link: rel="next"`` chain."""

        items: List[Any] = []
        url: str | None = f"{self._base_url}{path}"
        page_params: Mapping[str, Any] | None = params
        while url:
            response = self._request(url, page_params)
            items.extend(response.json() if response.text else [])
            url = (getattr(response, "links", None) or {}).get("next", {}).get("url")
            page_params = None
        return items

    def get_user(self, username: str) -> GithubActor:
        """Return the public profile of *username*."""

        data = self._get(f"/users/{username}")
        return GithubActor(
            login=data.get("login") or username,
            email=data.get("email"),
            name=data.get("name"),
        )

    def list_review_comments(self, repository: str, pull_number: int, review_id: int) -> List[Dict[str, Any]]:
        """Return the inline comments attached to a pull request review."""

        return self._get_all(
            f"/repos/{repository}/pulls/{pull_number}/reviews/{review_id}/comments",
            per_page=COMMENTS_PAGE_SIZE,
        )


def fetch_review_comments(
    client: GitHubClient,
    *,
    repository: str,
    pull_number: int,
    review_id: int,
) -> List[str]:
    """Return the bodies of a review's inline comments, in API order.

    Failures are logged and produce an empty list.
    """

    log = structlog.get_logger().bind(
        repository=repository,
        pull_number=pull_number,
        review_id=review_id,
    )
    try:
        comments = client.list_review_comments(repository, pull_number, review_id)
    except GitHubApiError as exc:
        log.warning("review_comments_fetch_failed", error=str(exc), status_code=exc.status_code)
        return []

    bodies = [comment["body"] for comment in comments if comment.get("body")]
    log.info("review_comments_fetched", count=len(bodies))
    return bodies
