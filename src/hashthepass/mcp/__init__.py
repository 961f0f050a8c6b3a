"""
MCP tool surface for hashthepass.
"""

from .mcp_runner import MCPRunner

__all__ = ["MCPRunner"]
