"""
Component installer.

This package handles:
1. Checking whether a component is already installed
2. Fetching component.json and the files it lists
3. Installing declared dependencies, recursively and concurrently
4. Reporting the outcome of each install
"""

from .fetcher import ComponentFetcher
from .outcome import (
    AlreadyExists,
    Failed,
    InstallListener,
    InstallOutcome,
    InstallStatus,
    Installed,
    LoggingInstallListener,
)
from .package import Package, install_component

__all__ = [
    "AlreadyExists",
    "ComponentFetcher",
    "Failed",
    "InstallListener",
    "InstallOutcome",
    "InstallStatus",
    "Installed",
    "LoggingInstallListener",
    "Package",
    "install_component",
]
