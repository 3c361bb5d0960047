"""Obsidian Tag Manager MCP Server

Hierarchical tag management for Obsidian vaults via Model Context Protocol.
"""

from obsidian_tags.data_models import VaultMetadata, VaultConfiguration, OperationReport
from obsidian_tags.session import resolve_vault, set_active_vault, get_active_vault
from obsidian_tags.server import mcp, run_server

# Import tools to register them with the MCP server
from obsidian_tags import tools  # noqa: F401

__version__ = "1.0.0"
__all__ = [
    "VaultMetadata",
    "VaultConfiguration",
    "OperationReport",
    "resolve_vault",
    "set_active_vault",
    "get_active_vault",
    "mcp",
    "run_server",
]
