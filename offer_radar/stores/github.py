from __future__ import annotations

import base64
from typing import Any, Dict, List, Optional

import httpx
from loguru import logger

from offer_radar.config import Settings
from offer_radar.stores.base import ContentStore, RecordSource, StoredContent

ISSUES_PER_PAGE = 100


class GitHubError(Exception):
    """Raised when a GitHub REST call fails."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class GitHubClient:
    """Thin wrapper over the GitHub REST API for one repository."""

    def __init__(self, settings: Settings):
        self.owner = settings.github_owner
        self.repo = settings.github_repo_name
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if settings.github_token:
            headers["Authorization"] = f"Bearer {settings.github_token}"
        self.client = httpx.Client(
            base_url=settings.github_api_url,
            headers=headers,
            timeout=settings.http_timeout,
        )

    def close(self) -> None:
        self.client.close()

    def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            response = self.client.request(method, url, **kwargs)
            response.raise_for_status()
            return response
        except httpx.HTTPStatusError as e:
            raise GitHubError(
                f"GitHub API error: {e.response.status_code} - {e.response.text}",
                status_code=e.response.status_code,
            ) from e
        except httpx.RequestError as e:
            raise GitHubError(f"GitHub request failed: {e}") from e

    def list_issues(self, labels: str, state: str) -> List[Dict[str, Any]]:
        """List issues with the given labels, following pagination links."""
        url: Optional[str] = f"/repos/{self.owner}/{self.repo}/issues"
        params: Optional[Dict[str, Any]] = {
            "labels": labels,
            "state": state,
            "per_page": ISSUES_PER_PAGE,
        }
        issues: List[Dict[str, Any]] = []
        while url:
            response = self._request("GET", url, params=params)
            issues.extend(response.json())
            url = response.links.get("next", {}).get("url")
            # next link already carries the query string
            params = None
        return issues

    def get_content(self, path: str) -> Optional[Dict[str, Any]]:
        """Return the contents payload for a file, or None when it does not exist."""
        try:
            response = self._request(
                "GET", f"/repos/{self.owner}/{self.repo}/contents/{path}"
            )
        except GitHubError as e:
            if e.status_code == 404:
                return None
            raise
        return response.json()

    def put_content(
        self, path: str, content: bytes, message: str, sha: Optional[str] = None
    ) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "message": message,
            "content": base64.b64encode(content).decode("ascii"),
        }
        if sha:
            payload["sha"] = sha
        response = self._request(
            "PUT", f"/repos/{self.owner}/{self.repo}/contents/{path}", json=payload
        )
        return response.json()


class GitHubContentStore(ContentStore):
    """Repository files used as a key-value store; the blob sha is the version."""

    def __init__(self, client: GitHubClient):
        self.client = client

    def get(self, path: str) -> Optional[StoredContent]:
        data = self.client.get_content(path)
        if data is None:
            return None
        raw = data.get("content") or ""
        try:
            body = base64.b64decode(raw).decode("utf-8")
        except (ValueError, UnicodeDecodeError) as e:
            logger.warning(f"Undecodable content at {path}: {e}")
            body = ""
        return StoredContent(body=body, version=data.get("sha"))

    def put(
        self, path: str, body: str, message: str, version: Optional[str] = None
    ) -> None:
        self.client.put_content(path, body.encode("utf-8"), message, sha=version)
        logger.debug(f"Wrote {path} (previous version: {version or 'none'})")


class GitHubIssueSource(RecordSource):
    """Issues of the repository used as a labeled record list."""

    def __init__(self, client: GitHubClient):
        self.client = client

    def list_bodies(self, label: str, state: str) -> List[str]:
        bodies = []
        for issue in self.client.list_issues(labels=label, state=state):
            # the issues endpoint also returns pull requests
            if "pull_request" in issue:
                continue
            bodies.append(issue.get("body") or "")
        return bodies
