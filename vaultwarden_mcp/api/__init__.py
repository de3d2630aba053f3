"""Inbound surfaces (MCP stdio server)."""
