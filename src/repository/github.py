"""GitHub API client for formula tap history and raw file content.

Provides a lightweight REST client over the commits endpoint and the raw
content host. The optional bearer token is passed in explicitly by the
caller; this module never reads the environment itself.
"""
from __future__ import annotations

import logging
from typing import Dict, Iterator, Optional
from urllib.parse import urlencode

from constants import Constants
from common.errors import ProtocolError
from common.http_client import get_json, safe_get
from versioning.models import CommitRecord

logger = logging.getLogger(__name__)


class GitHubClient:
    """Lightweight REST client for one GitHub repository (the formula tap).

    Supports optional authentication via a bearer token.
    """

    def __init__(
        self,
        owner: Optional[str] = None,
        repo: Optional[str] = None,
        token: Optional[str] = None,
        *,
        api_base: Optional[str] = None,
        raw_base: Optional[str] = None,
        user_agent: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        """Initialize GitHub client.

        Args:
            owner: Repository owner (defaults to Constants.TAP_OWNER)
            repo: Repository name (defaults to Constants.TAP_REPO)
            token: GitHub personal access token, or None for anonymous access
            api_base: Base URL for the REST API
            raw_base: Base URL for raw file content
            user_agent: User-Agent header sent with every request
            timeout: Per-request timeout in seconds
        """
        self.owner = owner or Constants.TAP_OWNER
        self.repo = repo or Constants.TAP_REPO
        self.token = token
        self.api_base = (api_base or Constants.GITHUB_API_BASE).rstrip("/")
        self.raw_base = (raw_base or Constants.GITHUB_RAW_BASE).rstrip("/")
        self.user_agent = user_agent or Constants.USER_AGENT
        self.timeout = timeout

    def _get_headers(self) -> Dict[str, str]:
        """Get request headers including authorization if token is available."""
        headers = {"User-Agent": self.user_agent}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def commits_url(self, path: str, per_page: int = Constants.REPO_API_PER_PAGE) -> str:
        """URL of the commit history for a single file path."""
        query = urlencode({"path": path, "per_page": per_page}, safe="/")
        return f"{self.api_base}/repos/{self.owner}/{self.repo}/commits?{query}"

    def raw_url(self, commit_id: str, path: str) -> str:
        """URL of a file's raw content at a given commit; ``path`` starts with '/'."""
        return f"{self.raw_base}/{self.owner}/{self.repo}/{commit_id}{path}"

    def iter_commits(
        self,
        path: str,
        *,
        per_page: int = Constants.REPO_API_PER_PAGE,
        max_pages: int = 1,
    ) -> Iterator[CommitRecord]:
        """Yield the commit history touching ``path``, newest first.

        Only the first page is requested unless ``max_pages`` is raised, in
        which case the ``Link: rel="next"`` header is followed. Pages are
        requested lazily, so a caller that stops iterating early never
        triggers the next request.

        Args:
            path: Repository file path, e.g. "/Formula/w/wget.rb"
            per_page: Page size requested from the API
            max_pages: Upper bound on pages fetched

        Yields:
            Commit records in response order

        Raises:
            TransportError: On network or HTTP failures.
            ProtocolError: If a page is not a JSON array.
        """
        url: Optional[str] = self.commits_url(path, per_page)
        pages = 0

        while url and pages < max(1, max_pages):
            logger.debug("URL: %s", url)
            response, data = get_json(
                url, context="history", headers=self._get_headers(), timeout=self.timeout
            )
            if not isinstance(data, list):
                raise ProtocolError(
                    f"Expected a JSON array of commits for {path}, got {type(data).__name__}"
                )
            for item in data:
                record = CommitRecord.from_api(item)
                if record is None:
                    logger.debug("Skipping commit entry without sha for %s", path)
                    continue
                yield record

            pages += 1
            url = self._next_page_url(response)

    def get_raw(self, url: str) -> bytes:
        """Fetch raw file bytes from ``url`` with the client's headers."""
        response = safe_get(
            url, context="formula", headers=self._get_headers(), timeout=self.timeout
        )
        return response.content

    @staticmethod
    def _next_page_url(response) -> Optional[str]:
        links = getattr(response, "links", None) or {}
        nxt = links.get("next") if isinstance(links, dict) else None
        if isinstance(nxt, dict):
            return nxt.get("url")
        return None
