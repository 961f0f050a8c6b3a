"""
Install outcomes and lifecycle listeners.

Every call to Package.install() ends in exactly one of AlreadyExists,
Installed or Failed. Intermediate progress is reported to an InstallListener.
"""

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List, Optional, Union

from hashthepass.hashthepass_logger import HashThePassLogger

if TYPE_CHECKING:
    from hashthepass.component_installer.package import Package


class InstallStatus:
    """Enumeration of install outcomes."""

    EXISTS = "exists"
    INSTALLED = "installed"
    FAILED = "failed"


@dataclass(frozen=True)
class AlreadyExists:
    """The component was installed before and force was not set."""

    name: str
    version: str
    status: str = field(default=InstallStatus.EXISTS, init=False)

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Installed:
    """The component, its files and its dependencies were written."""

    name: str
    version: str
    files: List[str] = field(default_factory=list)
    dependencies: List["InstallOutcome"] = field(default_factory=list)
    status: str = field(default=InstallStatus.INSTALLED, init=False)

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failed:
    """The install stopped on an error. Files already written are left in place."""

    name: str
    version: str
    error: BaseException
    status: str = field(default=InstallStatus.FAILED, init=False)

    @property
    def ok(self) -> bool:
        return False


InstallOutcome = Union[AlreadyExists, Installed, Failed]


class InstallListener:
    """
    Receives lifecycle signals from packages being installed.

    All methods are no-ops; subclass and override the ones you need. A
    listener is shared by a package and every dependency it discovers.
    """

    def on_dependency(self, parent: "Package", dependency: "Package") -> None:
        pass

    def on_file(self, package: "Package", file: str, url: str) -> None:
        pass

    def on_exists(self, package: "Package") -> None:
        pass

    def on_error(self, package: "Package", error: BaseException) -> None:
        pass

    def on_end(self, package: "Package") -> None:
        pass


class LoggingInstallListener(InstallListener):
    """Reports lifecycle signals through HashThePassLogger."""

    def __init__(self, logger: Optional[HashThePassLogger] = None):
        self.logger = logger or HashThePassLogger()

    def on_dependency(self, parent: "Package", dependency: "Package") -> None:
        self.logger.log(f"dep {parent.name} -> {dependency.slug}", logging.INFO)

    def on_file(self, package: "Package", file: str, url: str) -> None:
        self.logger.log(f"fetch {package.slug}:{file}", logging.INFO)

    def on_exists(self, package: "Package") -> None:
        self.logger.log(f"exists {package.slug}", logging.INFO)

    def on_error(self, package: "Package", error: BaseException) -> None:
        self.logger.log(f"error {package.slug}: {error}", logging.ERROR)

    def on_end(self, package: "Package") -> None:
        self.logger.log(f"complete {package.slug}", logging.INFO)
