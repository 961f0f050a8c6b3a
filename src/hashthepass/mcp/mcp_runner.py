"""
MCP (Model Context Protocol) runner for hashthepass.

Exposes the password hasher and the component installer as MCP tools using
the fastmcp framework. Installer settings come from a `hashthepass.toml` in
the workspace root; without one, defaults are used.

Workflow:
- If hashthepass.toml exists at startup: config is loaded immediately
- If it is missing at startup: each tool checks for it again at call time
- If it is invalid: tools report the configuration error instead of running
"""

import json
import logging
import os
from typing import Any, Dict, Optional

import httpx
from fastmcp import FastMCP

from hashthepass.component_installer import Failed, install_component
from hashthepass.hashthepass_config import CONFIG_FILE_NAME, CONFIG_TOML_SCHEMA, InstallerConfig
from hashthepass.hashthepass_exceptions import ConfigurationError, HashThePassException, MCPToolError
from hashthepass.hashthepass_logger import HashThePassLogger
from hashthepass.password import hash_password


class MCPRunner:
    """
    MCP runner that exposes hashthepass operations as fastmcp tools.

    Example usage:
    ```python
    runner = MCPRunner("/path/to/workspace")
    server = runner.create_mcp_server()
    server.run()
    ```
    """

    def __init__(
        self,
        workspace_root: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize the MCP runner.

        Args:
            workspace_root: Root directory of the workspace. If None, uses current directory.
            client: httpx client used for installs, mainly for tests
        """
        self.workspace_root = workspace_root or os.getcwd()
        self.logger = HashThePassLogger()
        self.config: Optional[InstallerConfig] = None
        self.config_error: Optional[str] = None
        self._client = client

        self._try_load_config()

    @property
    def config_path(self) -> str:
        return os.path.join(self.workspace_root, CONFIG_FILE_NAME)

    def _try_load_config(self) -> None:
        """
        Attempt to load hashthepass.toml, but don't fail if missing or invalid.

        Errors are kept and reported when a tool is called.
        """
        if not os.path.exists(self.config_path):
            self.config = None
            self.config_error = None
            return

        try:
            self.config = InstallerConfig.from_toml(self.config_path)
            self.config_error = None
            self.logger.log(
                f"Loaded installer configuration from {self.config_path}", logging.INFO
            )
        except (OSError, ConfigurationError) as e:
            self.config_error = str(e)
            self.logger.log(
                f"Failed to load {self.config_path}: {str(e)}", logging.ERROR
            )

    def get_config(self) -> InstallerConfig:
        """
        Return the installer configuration, with dest resolved against the workspace.

        Raises:
            MCPToolError: If hashthepass.toml exists but is invalid
        """
        if self.config is None:
            self._try_load_config()

        if self.config_error is not None:
            raise MCPToolError(self.get_configuration_error_message())

        config = self.config or InstallerConfig()
        if not os.path.isabs(config.dest):
            config = InstallerConfig.from_dict(
                {**config.to_dict(), "dest": os.path.join(self.workspace_root, config.dest)}
            )
        return config

    def get_configuration_error_message(self) -> str:
        return (
            f"Invalid {CONFIG_FILE_NAME}: {self.config_error}\n\n"
            f"Expected schema:\n{CONFIG_TOML_SCHEMA}"
        )

    def hash_password(self, site: str, secret: str) -> str:
        """Derive the password for a site. Returns a JSON payload."""
        result = hash_password(site, secret)
        if result is None:
            return json.dumps(
                {"status": "error", "message": "A site with a domain and a non-empty secret are required"}
            )
        return json.dumps({"status": "success", "hash": result})

    async def install_component(
        self, name: str, version: str = "*", force: bool = False
    ) -> str:
        """Install a component and its dependencies. Returns a JSON payload."""
        try:
            config = self.get_config()
        except MCPToolError as e:
            return json.dumps({"status": "error", "message": str(e)})

        try:
            outcome = await install_component(
                name,
                version,
                config,
                force=force or config.force,
                logger=self.logger,
                client=self._client,
            )
        except HashThePassException as e:
            return json.dumps({"status": "error", "message": str(e)})

        payload: Dict[str, Any] = {
            "status": "error" if isinstance(outcome, Failed) else "success",
            "outcome": outcome.status,
            "package": f"{outcome.name}@{outcome.version}",
        }
        if isinstance(outcome, Failed):
            payload["message"] = str(outcome.error)
        return json.dumps(payload)

    def create_mcp_server(self) -> FastMCP:
        """
        Create and configure a fastmcp server with the hashthepass tools.
        """
        server = FastMCP("hashthepass-mcp")
        self._register_tools(server)
        return server

    def _register_tools(self, server: FastMCP) -> None:
        """
        Register all tools with the fastmcp server.

        Args:
            server: The fastmcp server instance
        """

        def hash_site_password(site: str, secret: str) -> str:
            """Derive the deterministic password for a site.

            Args:
                site: URL or host name of the site
                secret: The master password
            """
            return self.hash_password(site, secret)

        async def install(name: str, version: str = "*", force: bool = False) -> str:
            """Install a GitHub-hosted component and its dependencies.

            Args:
                name: Component name as "owner/repo"
                version: Git ref, "*" for the default branch
                force: Reinstall even if already installed
            """
            return await self.install_component(name, version, force)

        server.tool(hash_site_password, name="hash_password")
        server.tool(install, name="install_component")


__all__ = [
    "MCPRunner",
]
