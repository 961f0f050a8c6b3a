"""
Tests for the MCP runner.
"""

import json

import pytest
from fastmcp import FastMCP

from hashthepass.mcp import MCPRunner
from tests.test_utils import RAW_BASE_URL, FakeRawHost

pytest_plugins = ("pytest_asyncio",)


def write_config(root, body):
    (root / "hashthepass.toml").write_text(body)


class TestMCPRunner:
    """Tests for MCPRunner."""

    def test_defaults_without_config(self, tmp_path):
        """Test that a missing hashthepass.toml means defaults under the workspace."""
        runner = MCPRunner(str(tmp_path))

        config = runner.get_config()

        assert runner.config is None
        assert config.dest == str(tmp_path / "components")
        assert config.default_branch == "master"

    def test_loads_config(self, tmp_path):
        """Test that hashthepass.toml is loaded at startup."""
        write_config(tmp_path, '[installer]\ndest = "vendor"\ndefault_branch = "main"\n')

        runner = MCPRunner(str(tmp_path))

        assert runner.config is not None
        assert runner.get_config().dest == str(tmp_path / "vendor")
        assert runner.get_config().default_branch == "main"

    def test_config_created_later(self, tmp_path):
        """Test that a config written after startup is picked up at call time."""
        runner = MCPRunner(str(tmp_path))
        write_config(tmp_path, '[installer]\ndefault_branch = "main"\n')

        assert runner.get_config().default_branch == "main"

    def test_hash_password_tool(self, tmp_path):
        """Test the hash_password tool payload."""
        runner = MCPRunner(str(tmp_path))

        assert json.loads(runner.hash_password("google.com", "P@$$W0RD")) == {
            "status": "success",
            "hash": "$RU7S2Gdu7pA=",
        }
        assert json.loads(runner.hash_password("google.com", ""))["status"] == "error"

    @pytest.mark.asyncio
    async def test_install_component_tool(self, tmp_path):
        """Test the install_component tool payload."""
        write_config(tmp_path, f'[installer]\nraw_base_url = "{RAW_BASE_URL}"\n')
        host = FakeRawHost()
        host.add_component("component/dialog", "master", {"scripts": ["index.js"]})

        async with host.client() as client:
            runner = MCPRunner(str(tmp_path), client=client)
            first = json.loads(await runner.install_component("component/dialog"))
            second = json.loads(await runner.install_component("component/dialog"))

        assert first == {
            "status": "success",
            "outcome": "installed",
            "package": "component/dialog@master",
        }
        assert second["outcome"] == "exists"
        assert (tmp_path / "components" / "component-dialog" / "index.js").exists()

    @pytest.mark.asyncio
    async def test_install_component_tool_errors(self, tmp_path):
        """Test that invalid names and failed installs are reported as errors."""
        write_config(tmp_path, f'[installer]\nraw_base_url = "{RAW_BASE_URL}"\n')
        host = FakeRawHost()

        async with host.client() as client:
            runner = MCPRunner(str(tmp_path), client=client)
            invalid = json.loads(await runner.install_component("lodash"))
            missing = json.loads(await runner.install_component("component/missing"))

        assert invalid["status"] == "error"
        assert "invalid component name" in invalid["message"]
        assert missing["status"] == "error"
        assert missing["outcome"] == "failed"
        assert "failed to fetch" in missing["message"]

    @pytest.mark.asyncio
    async def test_invalid_config_reported(self, tmp_path):
        """Test that an invalid hashthepass.toml is reported by the tools."""
        write_config(tmp_path, "[installer]\ntimeout = -1\n")

        runner = MCPRunner(str(tmp_path))
        result = json.loads(await runner.install_component("component/dialog"))

        assert runner.config is None
        assert result["status"] == "error"
        assert "timeout" in result["message"]

    def test_removed_invalid_config_clears_error(self, tmp_path):
        """Test that deleting an invalid hashthepass.toml restores the defaults."""
        write_config(tmp_path, "[installer]\ntimeout = -1\n")
        runner = MCPRunner(str(tmp_path))
        assert runner.config_error is not None

        (tmp_path / "hashthepass.toml").unlink()

        assert runner.get_config().dest == str(tmp_path / "components")
        assert runner.config_error is None

    def test_create_mcp_server(self, tmp_path):
        """Test that the fastmcp server is created."""
        server = MCPRunner(str(tmp_path)).create_mcp_server()
        assert isinstance(server, FastMCP)
        assert server.name == "hashthepass-mcp"
