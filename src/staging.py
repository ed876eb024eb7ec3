"""Download a resolved formula and stage it in a scoped temporary file.

The staged file lives inside its own temporary directory; both are removed
when the ``with`` block that created them exits, whatever the outcome.
"""

from __future__ import annotations

import logging
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from constants import Constants
from common.errors import ProtocolError, StagingError
from repository.github import GitHubClient
from versioning.models import StagedArtifact

logger = logging.getLogger(__name__)


def fetch_artifact(client: GitHubClient, content_url: str) -> bytes:
    """Download the formula source and check that it is UTF-8 text.

    Returns the undecoded body so the staged copy is byte-identical.
    """
    content = client.get_raw(content_url)
    try:
        content.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise ProtocolError(f"Formula at {content_url} is not valid UTF-8 text") from exc
    return content


@contextmanager
def stage_artifact(content: bytes, name_hint: str) -> Iterator[StagedArtifact]:
    """Write ``content`` to ``<tmpdir>/<name_hint>-XXXXXXXX.rb`` for the block's duration."""
    try:
        tmp_dir = tempfile.TemporaryDirectory(prefix="brewver-")
    except OSError as exc:
        raise StagingError(f"Could not create temporary directory: {exc}") from exc

    with tmp_dir as dir_name:
        try:
            with tempfile.NamedTemporaryFile(
                mode="wb",
                prefix=f"{name_hint}-",
                suffix=Constants.FORMULA_SUFFIX,
                dir=dir_name,
                delete=False,
            ) as handle:
                handle.write(content)
                handle.flush()
                file_path = Path(handle.name)
        except OSError as exc:
            raise StagingError(f"Could not write formula to temporary file: {exc}") from exc

        logger.debug("Temp File: %s", file_path)
        yield StagedArtifact(directory=Path(dir_name), file=file_path, content=content)


@contextmanager
def fetch_and_stage(
    client: GitHubClient, content_url: str, name_hint: str
) -> Iterator[StagedArtifact]:
    """Download ``content_url`` and stage it; cleanup happens when the block exits."""
    content = fetch_artifact(client, content_url)
    with stage_artifact(content, name_hint) as staged:
        yield staged
