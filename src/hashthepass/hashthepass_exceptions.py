"""
This module contains the exceptions raised by hashthepass.
"""

from typing import Optional


class HashThePassException(Exception):
    """
    Exceptions raised by hashthepass.
    """

    def __init__(self, message: str):
        super().__init__(message)


class InvalidPackageError(HashThePassException):
    """Raised when a package name or version is missing or malformed."""

    pass


class FetchError(HashThePassException):
    """Raised when a remote resource could not be fetched."""

    def __init__(self, url: str, status_code: Optional[int] = None, reason: str = ""):
        message = f"failed to fetch {url}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class ManifestError(HashThePassException):
    """Raised when a component.json cannot be read or parsed."""

    pass


class DependencyInstallError(HashThePassException):
    """Raised when one of a package's dependencies failed to install."""

    def __init__(self, package: str, cause: BaseException):
        super().__init__(f"dependency {package} failed: {cause}")
        self.package = package
        self.cause = cause


class ConfigurationError(HashThePassException):
    """Raised when installer configuration is invalid."""

    pass


class MCPToolError(HashThePassException):
    """Base exception for MCP tool errors."""

    pass
