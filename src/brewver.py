"""brewver - install a specific historical version of a Homebrew formula

    Resolves the homebrew-core commit that published the requested version,
    stages the formula source from that commit, and installs it with brew.

    Returns:
        int: Exit code
"""
import logging
import sys

from constants import ExitCodes
from common.errors import (
    BrewverError,
    InstallError,
    NotFoundError,
    ProtocolError,
    StagingError,
    TransportError,
)
from common.logging_utils import configure_logging, extra_context, is_debug_enabled
from args import parse_args
from cli_config import BrewverConfig, load_config, show_github_token_info
from installer import install_formula
from repository.github import GitHubClient
from staging import fetch_and_stage
from versioning.models import InstallOutcome, ResolutionRequest
from versioning.resolver import FormulaResolver

logger = logging.getLogger(__name__)


def build_client(config: BrewverConfig) -> GitHubClient:
    """Create the tap client from the loaded configuration."""
    return GitHubClient(
        config.owner,
        config.repo,
        config.token,
        api_base=config.api_base,
        raw_base=config.raw_base,
        user_agent=config.user_agent,
        timeout=config.request_timeout,
    )


def install_version(request: ResolutionRequest, config: BrewverConfig) -> InstallOutcome:
    """Resolve, fetch, stage, and install one formula version.

    The staged file and its directory are removed before this returns,
    whether or not the install step succeeded.
    """
    client = build_client(config)
    result = FormulaResolver(client, max_pages=config.max_pages).resolve(request)
    if is_debug_enabled(logger):
        logger.debug(
            "Resolved formula",
            extra=extra_context(
                event="decision",
                component="cli",
                action="resolve",
                outcome="found",
                target=result.content_url
            )
        )
    logger.debug("Commit: %s URL: %s", result.commit_id, result.content_url)

    with fetch_and_stage(client, result.content_url, request.package_name) as staged:
        return install_formula(
            request.package_name,
            request.version,
            staged,
            brew_binary=config.brew_binary,
        )


def describe_error(exc: BrewverError) -> str:
    """Human-readable message for a failed run."""
    if isinstance(exc, NotFoundError):
        return f"Failed to get commit hash: no commit found for {exc.package_name}@{exc.version}"
    if isinstance(exc, TransportError):
        return f"Network error: {exc}"
    if isinstance(exc, ProtocolError):
        return f"Unexpected response: {exc}"
    if isinstance(exc, StagingError):
        return f"Failed to download: {exc}"
    if isinstance(exc, InstallError):
        return f"Failed to install: {exc}"
    return str(exc)


def run(argv=None) -> int:
    """Run the CLI and return the process exit code."""
    args = parse_args(argv)
    configure_logging(args.LOG_LEVEL, args.LOG_FILE)

    try:
        config = load_config(args.CONFIG)
    except BrewverError as exc:
        logger.error("%s", exc)
        return exc.exit_code.value
    show_github_token_info(config)

    try:
        request = ResolutionRequest(args.formula_name, args.formula_version)
    except ValueError as exc:
        logger.error("Invalid arguments: %s", exc)
        return ExitCodes.INVALID_INPUT.value

    try:
        outcome = install_version(request, config)
    except BrewverError as exc:
        logger.error("%s", describe_error(exc))
        return exc.exit_code.value

    logger.info(
        "Formula %s@%s was installed successfully", outcome.package_name, outcome.version
    )
    return ExitCodes.SUCCESS.value


def main():
    """Main function of the program."""
    sys.exit(run())


if __name__ == "__main__":
    main()
