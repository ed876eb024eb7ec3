"""Hand a staged formula file to the Homebrew CLI.

Runs ``brew remove <name>`` followed by ``brew install <staged file>``.
"""

from __future__ import annotations

import logging
import subprocess
from typing import List

from constants import Constants
from common.errors import InstallError
from common.logging_utils import is_debug_enabled
from versioning.models import InstallOutcome, StagedArtifact

logger = logging.getLogger(__name__)


def run_command(command: List[str]) -> subprocess.CompletedProcess:
    """Run ``command`` capturing output; a missing binary raises InstallError."""
    logger.info("Running: %s", " ".join(command))
    try:
        result = subprocess.run(  # noqa: S603
            command,
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError as exc:  # includes FileNotFoundError
        raise InstallError(f"Could not run {command[0]}: {exc}") from exc
    logger.debug("Command output: %s", result)
    return result


def install_formula(
    package_name: str,
    version: str,
    staged: StagedArtifact,
    brew_binary: str = Constants.BREW_BINARY,
) -> InstallOutcome:
    """Replace any installed copy of ``package_name`` with the staged formula.

    Args:
        package_name: Formula name, used for the remove step.
        version: Requested version, carried into the outcome.
        staged: Formula file to install; must still be inside its scope.
        brew_binary: Package manager executable.

    Returns:
        InstallOutcome with the install step's return code.

    Raises:
        InstallError: If the binary is missing or the install step fails.
    """
    removed = run_command([brew_binary, "remove", package_name])
    if removed.returncode != 0:
        logger.warning(
            "%s remove %s exited with %s; continuing with install",
            brew_binary,
            package_name,
            removed.returncode,
        )

    logger.debug("Install from File: %s", staged.file)
    if is_debug_enabled(logger):
        logger.debug("Formula File Content: %s", staged.file.read_text(encoding="utf-8"))

    installed = run_command([brew_binary, "install", str(staged.file)])
    if installed.returncode != 0:
        detail = (installed.stderr or "").strip()
        raise InstallError(
            f"{brew_binary} install exited with {installed.returncode}"
            + (f": {detail}" if detail else "")
        )

    return InstallOutcome(
        package_name=package_name,
        version=version,
        staged_path=staged.file,
        returncode=installed.returncode,
    )
