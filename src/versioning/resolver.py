"""Formula revision resolver.

Finds the tap commit that published a given formula version by scanning the
history of each candidate formula path for the conventional bottle-update
commit message. The message match is a plain substring check; it breaks if
upstream changes its commit message format.
"""
from __future__ import annotations

import logging
from typing import Iterable, Optional, Tuple

from constants import Constants
from common.errors import NotFoundError
from common.logging_utils import extra_context, is_debug_enabled
from repository.github import GitHubClient
from versioning.models import CommitRecord, ResolutionRequest, ResolutionResult

logger = logging.getLogger(__name__)


def candidate_paths(package_name: str) -> Tuple[str, ...]:
    """Return formula paths to search, in priority order.

    The sharded layout (``/Formula/<first letter>/<name>.rb``) is tried
    before the legacy flat layout (``/Formula/<name>.rb``).
    """
    if not package_name:
        raise ValueError("package name must be non-empty")
    base = Constants.FORMULA_DIR
    suffix = Constants.FORMULA_SUFFIX
    return (
        f"{base}/{package_name[0]}/{package_name}{suffix}",
        f"{base}/{package_name}{suffix}",
    )


def commit_message(package_name: str, version: str) -> str:
    """Commit message fragment that marks a published bottle for a version."""
    return Constants.COMMIT_MESSAGE_TEMPLATE.format(name=package_name, version=version)


def is_matching_commit(record: CommitRecord, expected: str) -> bool:
    """Case-sensitive substring match of ``expected`` in the commit message."""
    return expected in record.message


def find_matching_commit(
    records: Iterable[CommitRecord], expected: str
) -> Optional[CommitRecord]:
    """First record, in the given order, whose message matches."""
    for record in records:
        if is_matching_commit(record, expected):
            return record
    return None


class FormulaResolver:
    """Resolve a formula version to the commit and raw URL that published it."""

    def __init__(self, client: GitHubClient, max_pages: int = Constants.HISTORY_MAX_PAGES):
        self.client = client
        self.max_pages = max_pages

    def resolve(self, request: ResolutionRequest) -> ResolutionResult:
        """Search candidate paths in order and stop at the first match.

        Raises:
            NotFoundError: If no candidate path history contains a matching commit.
            TransportError: On network failures while querying history.
            ProtocolError: If a history response is not a JSON array.
        """
        logger.info("Looking for %s@%s", request.package_name, request.version)
        expected = commit_message(request.package_name, request.version)

        for path in candidate_paths(request.package_name):
            records = self.client.iter_commits(
                path,
                per_page=Constants.REPO_API_PER_PAGE,
                max_pages=self.max_pages,
            )
            match = find_matching_commit(records, expected)
            if is_debug_enabled(logger):
                logger.debug(
                    "Scanned history",
                    extra=extra_context(
                        event="decision",
                        component="resolver",
                        action="scan_history",
                        outcome="match" if match else "no_match",
                        target=path
                    )
                )
            if match is None:
                continue

            logger.info("Found commit: %s", match.sha)
            return ResolutionResult(
                commit_id=match.sha,
                source_path=path,
                content_url=self.client.raw_url(match.sha, path),
            )

        raise NotFoundError(request.package_name, request.version)
