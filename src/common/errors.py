"""Error hierarchy shared by the resolver, fetcher, and installer."""

from __future__ import annotations

from typing import Optional

from constants import ExitCodes


class BrewverError(Exception):
    """Base class for failures that terminate a run."""

    exit_code = ExitCodes.FILE_ERROR


class NotFoundError(BrewverError):
    """Raised when no commit in the searched history matches the version."""

    exit_code = ExitCodes.NOT_FOUND

    def __init__(self, package_name: str, version: str):
        self.package_name = package_name
        self.version = version
        super().__init__(f"No commit found for {package_name}@{version}")


class TransportError(BrewverError):
    """Raised on connection failures, timeouts, and HTTP error statuses."""

    exit_code = ExitCodes.CONNECTION_ERROR

    def __init__(self, message: str, *, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class ProtocolError(BrewverError):
    """Raised when a response body does not have the expected shape."""

    exit_code = ExitCodes.PROTOCOL_ERROR


class StagingError(BrewverError):
    """Raised when the temporary directory or file cannot be prepared."""

    exit_code = ExitCodes.FILE_ERROR


class InstallError(BrewverError):
    """Raised when the package manager fails to install the staged formula."""

    exit_code = ExitCodes.INSTALL_ERROR


class ConfigError(BrewverError):
    """Raised when a configuration file cannot be loaded or is invalid."""

    exit_code = ExitCodes.FILE_ERROR
