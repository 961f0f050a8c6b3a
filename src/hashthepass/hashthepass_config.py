"""
Configuration parameters for the component installer.
"""

import pathlib
from dataclasses import dataclass, asdict, fields
from typing import Any, Dict, Optional, Union

try:
    import tomllib
except ModuleNotFoundError:
    # Python < 3.11
    import tomli as tomllib

from hashthepass.hashthepass_exceptions import ConfigurationError

CONFIG_FILE_NAME = "hashthepass.toml"

CONFIG_TOML_SCHEMA = """
# hashthepass configuration

[installer]
# Directory components are installed into
dest = "components"

# Reinstall components that are already present
force = false

# Branch used for dependencies declared with the "*" version
default_branch = "master"

# Where raw files are fetched from
raw_base_url = "https://raw.github.com"

# Used to fill in "repo" when a component.json does not declare one
repo_base_url = "https://github.com"

# HTTP timeout in seconds
timeout = 30.0

# Upper bound on concurrent HTTP connections (optional)
# max_connections = 10
"""


@dataclass
class InstallerConfig:
    """
    Configuration parameters
    """

    dest: str = "components"
    force: bool = False
    default_branch: str = "master"
    raw_base_url: str = "https://raw.github.com"
    repo_base_url: str = "https://github.com"
    timeout: float = 30.0
    max_connections: Optional[int] = None

    def __post_init__(self) -> None:
        for name in ("dest", "default_branch", "raw_base_url", "repo_base_url"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value:
                raise ConfigurationError(f"'{name}' must be a non-empty string")
        if not isinstance(self.force, bool):
            raise ConfigurationError("'force' must be a boolean")
        if isinstance(self.timeout, bool) or not isinstance(self.timeout, (int, float)) or self.timeout <= 0:
            raise ConfigurationError("'timeout' must be a positive number")
        if self.max_connections is not None and (
            isinstance(self.max_connections, bool)
            or not isinstance(self.max_connections, int)
            or self.max_connections < 1
        ):
            raise ConfigurationError("'max_connections' must be a positive integer")

        self.raw_base_url = self.raw_base_url.rstrip("/")
        self.repo_base_url = self.repo_base_url.rstrip("/")

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "InstallerConfig":
        """
        Create an InstallerConfig from a dictionary. Unknown keys are ignored.

        Raises:
            ConfigurationError: If a known key holds an invalid value
        """
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in d.items() if k in known})

    @classmethod
    def from_toml(cls, path: Union[str, pathlib.Path]) -> "InstallerConfig":
        """
        Load the [installer] table of a TOML file.

        Args:
            path: Path to the TOML file

        Returns:
            InstallerConfig instance

        Raises:
            ConfigurationError: If the file cannot be parsed or holds invalid values
        """
        try:
            with open(path, "rb") as f:
                toml_dict = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigurationError(f"Invalid TOML in {path}: {e}") from e

        section = toml_dict.get("installer", {})
        if not isinstance(section, dict):
            raise ConfigurationError("[installer] must be a table")
        return cls.from_dict(section)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
