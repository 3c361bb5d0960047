"""Core tag management logic, independent of the MCP transport."""
