"""Data models for formula version resolution and installation."""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional


@dataclass(frozen=True)
class ResolutionRequest:
    """Formula name and version requested on the command line."""
    package_name: str
    version: str

    def __post_init__(self):
        if not self.package_name or not self.package_name.strip():
            raise ValueError("package name must be non-empty")
        if not self.version or not self.version.strip():
            raise ValueError("version must be non-empty")

    @property
    def bucket(self) -> str:
        """First character of the name; the sharded Formula/ subdirectory."""
        return self.package_name[0]


@dataclass(frozen=True)
class CommitRecord:
    """One entry of a commit history page."""
    sha: str
    message: str

    @classmethod
    def from_api(cls, item: Any) -> Optional["CommitRecord"]:
        """Decode a GitHub commits API element; None when it carries no sha."""
        if not isinstance(item, dict):
            return None
        sha = item.get("sha")
        if not isinstance(sha, str) or not sha:
            return None
        commit = item.get("commit")
        message = commit.get("message") if isinstance(commit, dict) else None
        return cls(sha=sha, message=message if isinstance(message, str) else "")


@dataclass(frozen=True)
class ResolutionResult:
    """Commit that published the requested version and where its formula lives."""
    commit_id: str
    source_path: str
    content_url: str


@dataclass(frozen=True)
class StagedArtifact:
    """Downloaded formula written to a scoped temporary file."""
    directory: Path
    file: Path
    content: bytes


@dataclass(frozen=True)
class InstallOutcome:
    """Result of handing the staged formula to the package manager."""
    package_name: str
    version: str
    staged_path: Path
    returncode: int
