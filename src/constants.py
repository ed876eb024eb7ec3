"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1
    CONNECTION_ERROR = 2
    NOT_FOUND = 4
    PROTOCOL_ERROR = 5
    INSTALL_ERROR = 6
    INVALID_INPUT = 7


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    VERSION = "0.1"
    USER_AGENT = f"BrewVer/{VERSION}"
    LOG_FORMAT = "[%(levelname)s] %(message)s"
    LOG_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
    ENV_LOG_LEVEL = "BREWVER_LOG_LEVEL"
    REQUEST_TIMEOUT = 30  # Timeout in seconds for all HTTP requests

    # Formula tap on GitHub
    GITHUB_API_BASE = "https://api.github.com"
    GITHUB_RAW_BASE = "https://raw.githubusercontent.com"
    ENV_GITHUB_TOKEN = "GITHUB_TOKEN"
    GITHUB_TOKEN_URL = "https://github.com/settings/tokens"
    TAP_OWNER = "Homebrew"
    TAP_REPO = "homebrew-core"
    REPO_API_PER_PAGE = 100
    HISTORY_MAX_PAGES = 1

    # Formula source layout
    FORMULA_DIR = "/Formula"
    FORMULA_SUFFIX = ".rb"
    COMMIT_MESSAGE_TEMPLATE = "{name}: update {version} bottle"

    BREW_BINARY = "brew"
