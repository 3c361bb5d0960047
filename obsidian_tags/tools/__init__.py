"""MCP tool definitions for Obsidian tag management.

This module imports all tool submodules to register them with the MCP server.
Each tool module uses the @mcp.tool() decorator to auto-register its tools.
"""

# Import all tool modules to register their @mcp.tool() decorated functions
from obsidian_tags.tools import vault_tools
from obsidian_tags.tools import tag_tools

__all__ = [
    "vault_tools",
    "tag_tools",
]
