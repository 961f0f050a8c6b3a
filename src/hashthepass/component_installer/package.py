"""
Component package installer.

A Package is one owner/repo component at one version. Installing it fetches
its component.json, then concurrently installs its dependencies, writes the
manifest and fetches its files into ``<dest>/<owner>-<repo>``.

Dependencies are not deduplicated and cycles are not detected: a component
reached through two paths is fetched twice, and both installs may write the
same files at the same time.
"""

import asyncio
import logging
import os
import pathlib
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, List, Optional, Sequence

import httpx

from hashthepass.component_installer.fetcher import ComponentFetcher
from hashthepass.component_installer.outcome import (
    AlreadyExists,
    Failed,
    InstallListener,
    InstallOutcome,
    Installed,
    LoggingInstallListener,
)
from hashthepass.component_models.manifest import MANIFEST_FILE, WILDCARD_VERSION, Manifest
from hashthepass.hashthepass_config import InstallerConfig
from hashthepass.hashthepass_exceptions import (
    DependencyInstallError,
    InvalidPackageError,
    ManifestError,
)
from hashthepass.hashthepass_logger import HashThePassLogger


def _first_error(results: Sequence[object]) -> Optional[Exception]:
    """
    Return the first exception among gathered results.

    Cancellation and other non-Exception errors are re-raised.
    """
    for result in results:
        if isinstance(result, Exception):
            return result
        if isinstance(result, BaseException):
            raise result
    return None


def _write_text(path: pathlib.Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


class Package:
    """
    An installable component.

    Args:
        name: "owner/repo"
        version: Git ref to fetch from
        config: Installer configuration
        dest: Destination directory, defaults to config.dest
        force: Reinstall when already installed, defaults to config.force
        fetcher: Fetcher shared with the rest of the install
        listener: Receives lifecycle signals
        logger: Logger for progress and error messages

    Raises:
        InvalidPackageError: If name or version is missing, or name is not "owner/repo"
    """

    def __init__(
        self,
        name: str,
        version: str,
        config: Optional[InstallerConfig] = None,
        *,
        dest: Optional[str] = None,
        force: Optional[bool] = None,
        fetcher: Optional[ComponentFetcher] = None,
        listener: Optional[InstallListener] = None,
        logger: Optional[HashThePassLogger] = None,
    ):
        if not name:
            raise InvalidPackageError("pkg required")
        if not version:
            raise InvalidPackageError("version required")

        owner, sep, repo = name.partition("/")
        if not sep or not owner or not repo:
            raise InvalidPackageError(f'invalid component name "{name}"')

        self.config = config or InstallerConfig()
        self.name = name
        self.version = version
        self.dest = dest if dest is not None else self.config.dest
        self.force = bool(force) if force is not None else self.config.force
        self.fetcher = fetcher
        self.logger = logger or HashThePassLogger()
        self.listener = listener or LoggingInstallListener(self.logger)

        self.logger.log(
            f"installing {self.slug} dest={self.dest} force={self.force}", logging.DEBUG
        )

    @property
    def slug(self) -> str:
        return f"{self.name}@{self.version}"

    def dirname(self) -> pathlib.Path:
        """
        Directory of this package, e.g. "component/dialog" becomes
        "<dest>/component-dialog".
        """
        return pathlib.Path(self.dest) / "-".join(self.name.split("/"))

    def join(self, path: str) -> pathlib.Path:
        """
        Join a manifest path to this package's directory.

        Leading separators are dropped, so absolute paths stay inside the package.

        Raises:
            ManifestError: If the path climbs out of the package directory
        """
        root = self.dirname()
        joined = root / path.lstrip("/\\")
        relative = os.path.relpath(os.path.normpath(joined), os.path.normpath(root))
        if relative == os.pardir or relative.startswith(os.pardir + os.sep):
            raise ManifestError(f"path {path!r} escapes {root}")
        return joined

    def url(self, file: str) -> str:
        return f"{self.config.raw_base_url}/{self.name}/{self.version}/{file}"

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[ComponentFetcher]:
        """Provide a fetcher, opening one for the duration if none was given."""
        if self.fetcher is not None:
            yield self.fetcher
            return

        async with ComponentFetcher(self.config, self.logger) as fetcher:
            self.fetcher = fetcher
            try:
                yield fetcher
            finally:
                self.fetcher = None

    def _fail(self, error: BaseException) -> Failed:
        self.listener.on_error(self, error)
        return Failed(self.name, self.version, error)

    async def get_local_json(self) -> Manifest:
        """
        Read the installed component.json.

        Raises:
            FileNotFoundError: If the package is not installed
            ManifestError: If the file is not a valid manifest
        """
        path = self.join(MANIFEST_FILE)
        text = await asyncio.to_thread(path.read_text, encoding="utf-8")
        return Manifest.from_json(text, str(path))

    async def get_json(self) -> Manifest:
        """
        Fetch the remote component.json.

        Raises:
            FetchError: If the request fails
            ManifestError: If the body is not a valid manifest
        """
        url = self.url(MANIFEST_FILE)
        text = await self.fetcher.fetch_text(url)
        return Manifest.from_json(text, url)

    async def write_file(self, file: str, text: str) -> pathlib.Path:
        path = self.join(file)
        self.logger.log(f"write {path}", logging.DEBUG)
        await asyncio.to_thread(_write_text, path, text)
        return path

    async def get_files(self, files: Sequence[str]) -> List[pathlib.Path]:
        """
        Fetch ``files`` concurrently and write them under this package's directory.

        Every fetch is allowed to settle before the first failure is raised.

        Returns:
            The written paths, in the order of ``files``
        """

        async def get_file(file: str) -> pathlib.Path:
            self.join(file)
            url = self.url(file)
            self.listener.on_file(self, file, url)
            text = await self.fetcher.fetch_text(url)
            return await self.write_file(file, text)

        results = await asyncio.gather(*(get_file(f) for f in files), return_exceptions=True)
        error = _first_error(results)
        if error is not None:
            raise error
        return list(results)

    async def get_dependencies(self, deps: Dict[str, str]) -> List[InstallOutcome]:
        """
        Install ``deps`` concurrently into the same destination.

        A "*" version resolves to the configured default branch. Returns once
        every dependency has finished.

        Raises:
            DependencyInstallError: For the first dependency (in declaration
                order) that failed
        """

        async def install_dependency(name: str, version: str) -> InstallOutcome:
            if version == WILDCARD_VERSION:
                version = self.config.default_branch
            self.logger.log(f"dep {name}@{version}", logging.DEBUG)
            pkg = Package(
                name,
                version,
                self.config,
                dest=self.dest,
                force=self.force,
                fetcher=self.fetcher,
                listener=self.listener,
                logger=self.logger,
            )
            self.listener.on_dependency(self, pkg)
            return await pkg.install()

        names = list(deps)
        results = await asyncio.gather(
            *(install_dependency(name, deps[name]) for name in names),
            return_exceptions=True,
        )

        for name, result in zip(names, results):
            if isinstance(result, Failed):
                raise DependencyInstallError(name, result.error)
            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    raise result
                raise DependencyInstallError(name, result) from result
        return list(results)

    async def install(self) -> InstallOutcome:
        """
        Install unless a local component.json already exists.

        Returns:
            AlreadyExists, Installed or Failed. I/O errors never propagate.
        """
        async with self._session():
            try:
                await self.get_local_json()
            except FileNotFoundError:
                return await self.really_install()
            except (OSError, ValueError, ManifestError) as e:
                return self._fail(e)

            if not self.force:
                self.listener.on_exists(self)
                return AlreadyExists(self.name, self.version)

            return await self.really_install()

    async def really_install(self) -> InstallOutcome:
        """
        Fetch the manifest, then install dependencies, write the manifest and
        fetch the files concurrently.
        """
        async with self._session():
            try:
                manifest = await self.get_json()
            except Exception as e:
                return self._fail(e)

            files = manifest.files()
            if not manifest.repo:
                manifest.repo = f"{self.config.repo_base_url}/{self.name}"

            tasks = []
            if manifest.has_dependencies():
                tasks.append(self.get_dependencies(manifest.dependencies))
            tasks.append(self.write_file(MANIFEST_FILE, manifest.to_json()))
            tasks.append(self.get_files(files))

            results = await asyncio.gather(*tasks, return_exceptions=True)
            error = _first_error(results)
            if error is not None:
                return self._fail(error)

            dependencies = results[0] if manifest.has_dependencies() else []
            self.listener.on_end(self)
            return Installed(self.name, self.version, files=files, dependencies=dependencies)


async def install_component(
    name: str,
    version: str = WILDCARD_VERSION,
    config: Optional[InstallerConfig] = None,
    *,
    force: Optional[bool] = None,
    listener: Optional[InstallListener] = None,
    logger: Optional[HashThePassLogger] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> InstallOutcome:
    """
    Install ``name`` and its dependencies.

    Args:
        name: "owner/repo"
        version: Git ref, "*" for the default branch
        config: Installer configuration
        force: Override config.force
        listener: Receives lifecycle signals
        logger: Logger for progress and error messages
        client: httpx client to fetch with

    Raises:
        InvalidPackageError: If name or version is invalid
    """
    config = config or InstallerConfig()
    logger = logger or HashThePassLogger()
    if version == WILDCARD_VERSION:
        version = config.default_branch

    async with ComponentFetcher(config, logger, client=client) as fetcher:
        pkg = Package(
            name, version, config, force=force, fetcher=fetcher, listener=listener, logger=logger
        )
        return await pkg.install()
